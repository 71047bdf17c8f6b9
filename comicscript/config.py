from typing import ClassVar
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


def _split_comma_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    app_name: ClassVar[str] = "Comicscript"
    version: ClassVar[str] = "0.1.0"

    database_url: str = "sqlite:///./storage/database/comicscript.db"

    # --- BASE URL ---
    # Default to "/" for root, or "/scripts" for subpath
    base_url: str = "/"

    # --- ALLOWED ORIGINS ---
    # Comma-separated list of domains (e.g., "http://localhost:3000,http://localhost:8000")
    allowed_origins_raw: str = Field(default="*", alias="ALLOWED_ORIGINS")

    @property
    def allowed_origins(self) -> list[str]:
        return _split_comma_list(self.allowed_origins_raw)

    # Logging
    log_dir: Path = Path("storage/logs")
    log_level: str = "INFO"

    # --- SCRIPT FORMATTING ---
    # "standard" numbers speaker lines, "compact" drops the numbers and tightens indents
    default_format: str = "standard"
    standard_indent: int = 4
    compact_indent: int = 2

    # --- PDF EXPORT ---
    pdf_page_format: str = "letter"
    pdf_margin_pt: float = 54.0

    model_config = SettingsConfigDict(env_file=".env",
                                      extra="ignore",
                                      env_ignore_empty=True,
                                      case_sensitive=False,
                                      populate_by_name=True,
                                      )

    # Helper to clean up the URL (ensure it starts with / and no trailing /)
    @property
    def clean_base_url(self):
        url = self.base_url.strip()
        if not url.startswith("/"):
            url = f"/{url}"
        return url.rstrip("/")


settings = Settings()

from pathlib import Path
from fastapi.templating import Jinja2Templates
from comicscript.config import settings

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


# URL Helper for Jinja
def url_builder(path: str) -> str:
    """
    Jinja helper to prefix paths with BASE_URL.
    Usage: {{ url('/api/issues/1/export.pdf') }}
    """
    base = settings.clean_base_url
    clean_path = path.lstrip("/")
    return f"{base}/{clean_path}" if base else f"/{clean_path}"


templates.env.globals["app_name"] = settings.app_name
templates.env.globals["url"] = url_builder


# --- Filters ---
def pluralize(count: int, singular: str, plural: str = None) -> str:
    if count == 1:
        return singular
    return plural if plural else singular + "s"


templates.env.filters["pluralize"] = pluralize

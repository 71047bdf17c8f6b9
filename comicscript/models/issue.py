import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, LargeBinary, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from comicscript.database import Base


class CoverStyle(str, enum.Enum):
    CLASSIC = "classic"
    MODERN = "modern"
    MINIMAL = "minimal"
    CUSTOM = "custom"


class Issue(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, index=True)
    series_id = Column(Integer, ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    # User editable, defaults to the next free number in the series but never renumbered
    issue_number = Column(Integer, nullable=False, default=1)
    synopsis = Column(Text, nullable=False, default="")
    writer = Column(String, nullable=True)  # Byline on the title page

    # Cover
    cover_image = Column(LargeBinary, nullable=True)
    cover_style = Column(String, nullable=False, default=CoverStyle.CLASSIC.value)
    cover_title_position = Column(String, nullable=False, default="bottom")
    show_cover_title = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Parent lookup is derived from series_id, only Series.issues is ever written
    series = relationship("Series", viewonly=True)
    pages = relationship("Page", cascade="all, delete-orphan", order_by="Page.page_number")

    @property
    def has_cover(self) -> bool:
        return self.cover_image is not None

import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, LargeBinary
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from comicscript.database import Base


class CoverCategory(str, enum.Enum):
    """Genre tag shown on the series shelf"""
    SUPERHERO = "superhero"
    HORROR = "horror"
    SCI_FI = "sci-fi"
    FANTASY = "fantasy"
    ACTION = "action"
    DRAMA = "drama"
    COMEDY = "comedy"
    WESTERN = "western"
    INDIE = "indie"
    CRIME = "crime"
    OTHER = "other"


class Series(Base):
    __tablename__ = "series"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    synopsis = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default=CoverCategory.SUPERHERO.value, index=True)

    # Opaque image blob, never decoded server side
    cover_image = Column(LargeBinary, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    issues = relationship("Issue", cascade="all, delete-orphan", order_by="Issue.issue_number")

    @property
    def has_cover(self) -> bool:
        return self.cover_image is not None

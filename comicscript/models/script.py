from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from comicscript.database import Base

CAPTION = "CAPTION"
SFX = "SFX"


class Page(Base):
    __tablename__ = "pages"

    __table_args__ = (
        Index('idx_page_issue_number', 'issue_id', 'page_number'),
    )

    id = Column(Integer, primary_key=True, index=True)
    issue_id = Column(Integer, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)

    # 1-based and contiguous within the issue
    page_number = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", viewonly=True)
    panels = relationship("Panel", cascade="all, delete-orphan", order_by="Panel.panel_number")


class Panel(Base):
    __tablename__ = "panels"

    __table_args__ = (
        Index('idx_panel_page_number', 'page_id', 'panel_number'),
    )

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False)

    # 1-based and contiguous within the page
    panel_number = Column(Integer, nullable=False)
    details = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    page = relationship("Page", viewonly=True)
    characters = relationship("Character", cascade="all, delete-orphan", order_by="Character.sequence")


class Character(Base):
    """A dialogue element: a speaker's line, a caption or a sound effect"""
    __tablename__ = "characters"

    __table_args__ = (
        Index('idx_character_panel_sequence', 'panel_id', 'sequence'),
    )

    id = Column(Integer, primary_key=True, index=True)
    panel_id = Column(Integer, ForeignKey("panels.id", ondelete="CASCADE"), nullable=False)

    name = Column(String, nullable=False)
    dialogue = Column(Text, nullable=False, default="")

    # Sole ordering key inside a panel. Rewritten as 1..n whenever elements are moved.
    sequence = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    panel = relationship("Panel", viewonly=True)

    @property
    def is_caption(self) -> bool:
        return self.name == CAPTION

    @property
    def is_sfx(self) -> bool:
        return self.name == SFX

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from comicscript.models import CoverCategory, CoverStyle


# --- Series ---
class SeriesCreate(BaseModel):
    title: str = Field(min_length=1)
    synopsis: str = ""
    category: CoverCategory = CoverCategory.SUPERHERO


class SeriesUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    synopsis: Optional[str] = None
    category: Optional[CoverCategory] = None


class SeriesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    synopsis: str
    category: CoverCategory
    has_cover: bool
    created_at: datetime
    updated_at: datetime


# --- Issues ---
class IssueCreate(BaseModel):
    title: str = Field(min_length=1)
    # Defaults to the next number in the series
    issue_number: Optional[int] = Field(default=None, ge=0)
    synopsis: str = ""
    writer: Optional[str] = None
    cover_style: CoverStyle = CoverStyle.CLASSIC


class IssueUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    issue_number: Optional[int] = Field(default=None, ge=0)
    synopsis: Optional[str] = None
    writer: Optional[str] = None
    cover_style: Optional[CoverStyle] = None
    cover_title_position: Optional[str] = None
    show_cover_title: Optional[bool] = None


class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    series_id: int
    title: str
    issue_number: int
    synopsis: str
    writer: Optional[str] = None
    cover_style: CoverStyle
    cover_title_position: str
    show_cover_title: bool
    has_cover: bool
    created_at: datetime
    updated_at: datetime

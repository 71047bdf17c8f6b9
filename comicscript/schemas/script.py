from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from comicscript.schemas.series import IssueResponse
from comicscript.services.formatter import ScriptFormat, LineKind, LineStyle


# --- Requests ---
class PageCreate(BaseModel):
    # Omit to append, set to insert and shift later pages
    page_number: Optional[int] = Field(default=None, ge=1)


class PanelCreate(BaseModel):
    panel_number: Optional[int] = Field(default=None, ge=1)


class PanelUpdate(BaseModel):
    details: str


class CharacterCreate(BaseModel):
    name: str = Field(min_length=1)
    dialogue: str = ""


class CharacterUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    dialogue: Optional[str] = None


class MoveRequest(BaseModel):
    # Positions in the panel's current order, 0-based
    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


# --- Tree ---
class CharacterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    panel_id: int
    name: str
    dialogue: str
    sequence: int


class PanelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    page_id: int
    panel_number: int
    details: str
    characters: List[CharacterResponse] = []


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    issue_id: int
    page_number: int
    panels: List[PanelResponse] = []


class IssueScriptResponse(BaseModel):
    issue: IssueResponse
    pages: List[PageResponse]


# --- Rendering ---
class ScriptLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: LineKind
    style: LineStyle
    label: str
    number: Optional[int] = None
    indent: int
    text: str


class ScriptBlockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    number: Optional[int] = None
    lines: List[ScriptLineResponse]


class RenderResponse(BaseModel):
    format: ScriptFormat
    blocks: List[ScriptBlockResponse]
    text: str

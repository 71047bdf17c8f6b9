from pydantic import BaseModel, Field
from typing import Optional

from comicscript.services.commands import CommandKind


class ReturnEvent(BaseModel):
    """Return key pressed inside a panel description or dialogue field"""
    issue_id: int
    page_id: Optional[int] = None
    panel_id: Optional[int] = None
    text: str = ""
    cursor: int = Field(ge=0)


class ReturnResponse(BaseModel):
    command: CommandKind
    name: Optional[str] = None
    handled: bool
    # New field contents and caret position
    text: str
    cursor: int
    created_id: Optional[int] = None
    selected_page_id: Optional[int] = None
    selected_panel_id: Optional[int] = None


class BackspaceEvent(BaseModel):
    """Backspace pressed inside a dialogue field"""
    issue_id: int
    character_id: int
    text: str = ""
    cursor: int = Field(ge=0)


class BackspaceResponse(BaseModel):
    deleted: bool
    selected_page_id: Optional[int] = None
    selected_panel_id: Optional[int] = None

from fastapi import APIRouter, HTTPException

from comicscript.api.deps import SessionDep, TreeServiceDep, saving
from comicscript.models import Issue, Page, Panel, Character
from comicscript.schemas.editor import ReturnEvent, ReturnResponse, BackspaceEvent, BackspaceResponse
from comicscript.services.session import EditorSession

router = APIRouter()


def _load_issue(db, issue_id: int) -> Issue:
    issue = db.get(Issue, issue_id)
    if issue is None:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue


def _in_issue(panel, issue: Issue) -> bool:
    return panel is not None and panel.page is not None and panel.page.issue_id == issue.id


@router.post("/return", response_model=ReturnResponse)
def handle_return(event: ReturnEvent, db: SessionDep, service: TreeServiceDep):
    """
    Return key pressed in a script field. Lines reading "page", "panel" or
    "NAME:" edit the script and clear the field; anything else comes back
    with a newline inserted at the cursor.
    """
    issue = _load_issue(db, event.issue_id)

    # Context that does not belong to this issue is treated as absent
    page = db.get(Page, event.page_id) if event.page_id else None
    if page is not None and page.issue_id != issue.id:
        page = None
    panel = db.get(Panel, event.panel_id) if event.panel_id else None
    if not _in_issue(panel, issue):
        panel = None

    session = EditorSession(service, issue)
    session.select_page(page or (panel.page if panel else None))
    with saving(db):
        result = session.handle_return(event.text, event.cursor, panel=panel)

    return ReturnResponse(
        command=result.command.kind,
        name=result.command.name,
        handled=result.handled,
        text=result.text,
        cursor=result.cursor,
        created_id=result.created.id if result.created is not None else None,
        selected_page_id=session.page.id if session.page is not None else None,
        selected_panel_id=session.panel.id if session.panel is not None else None,
    )


@router.post("/backspace", response_model=BackspaceResponse)
def handle_backspace(event: BackspaceEvent, db: SessionDep, service: TreeServiceDep):
    """Backspace in a dialogue field. An already empty field deletes its element."""
    issue = _load_issue(db, event.issue_id)

    character = db.get(Character, event.character_id)
    if character is not None and not _in_issue(character.panel, issue):
        character = None

    session = EditorSession(service, issue)
    with saving(db):
        deleted = session.handle_backspace(event.text, event.cursor, character)

    return BackspaceResponse(
        deleted=deleted,
        selected_page_id=session.page.id if session.page is not None else None,
        selected_panel_id=session.panel.id if session.panel is not None else None,
    )

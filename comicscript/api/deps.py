import logging
from contextlib import contextmanager
from typing import Generator, Annotated
from fastapi import Depends, HTTPException, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from comicscript.database import SessionLocal
from comicscript.models import Series, Issue, Page, Panel, Character
from comicscript.services.script_tree import ScriptTreeService

logger = logging.getLogger(__name__)


# 1. DATABASE DEPENDENCY
def get_db() -> Generator:
    try:
        db = SessionLocal()
        yield db
    finally:
        db.close()


SessionDep = Annotated[Session, Depends(get_db)]


# 2. SERVICE DEPENDENCY
def get_tree_service(db: SessionDep) -> ScriptTreeService:
    return ScriptTreeService(db)


TreeServiceDep = Annotated[ScriptTreeService, Depends(get_tree_service)]


# 3. TRANSACTIONS
@contextmanager
def saving(db: Session):
    """
    Run the request's edits and commit them. A storage failure at any flush
    or at commit rolls back and surfaces as a 503 the client can show as a
    notification; nothing is retried.

    Usage:
        with saving(db):
            service.add_page(issue)
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save script changes: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Your changes could not be saved. Please try again."
        )


# 4. TREE NODE DEPENDENCIES
def _get_or_404(db: Session, model, item_id: int, label: str):
    item = db.get(model, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return item


async def get_series(
        series_id: Annotated[int, Path(title="The ID of the series")],
        db: SessionDep
) -> Series:
    return _get_or_404(db, Series, series_id, "Series")


async def get_issue(
        issue_id: Annotated[int, Path(title="The ID of the issue")],
        db: SessionDep
) -> Issue:
    return _get_or_404(db, Issue, issue_id, "Issue")


async def get_page(
        page_id: Annotated[int, Path(title="The ID of the page")],
        db: SessionDep
) -> Page:
    return _get_or_404(db, Page, page_id, "Page")


async def get_panel(
        panel_id: Annotated[int, Path(title="The ID of the panel")],
        db: SessionDep
) -> Panel:
    return _get_or_404(db, Panel, panel_id, "Panel")


async def get_character(
        character_id: Annotated[int, Path(title="The ID of the dialogue element")],
        db: SessionDep
) -> Character:
    return _get_or_404(db, Character, character_id, "Dialogue element")


SeriesDep = Annotated[Series, Depends(get_series)]
IssueDep = Annotated[Issue, Depends(get_issue)]
PageDep = Annotated[Page, Depends(get_page)]
PanelDep = Annotated[Panel, Depends(get_panel)]
CharacterDep = Annotated[Character, Depends(get_character)]

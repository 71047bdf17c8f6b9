from fastapi import APIRouter
from typing import Optional

from comicscript.api.deps import SessionDep, TreeServiceDep, PageDep, saving
from comicscript.schemas.script import PanelCreate, PanelResponse

router = APIRouter()


@router.delete("/{page_id}")
def delete_page(page: PageDep, db: SessionDep, service: TreeServiceDep):
    """Delete a page with its panels and dialogue, then close the numbering gap."""
    with saving(db):
        service.delete_page(page)
    return {"message": "Page deleted"}


@router.post("/{page_id}/panels", response_model=PanelResponse)
def add_panel(page: PageDep, db: SessionDep, service: TreeServiceDep, panel_data: Optional[PanelCreate] = None):
    """Append a panel, or insert one at panel_number."""
    with saving(db):
        if panel_data is None or panel_data.panel_number is None:
            panel = service.add_panel(page)
        else:
            panel = service.insert_panel(page, panel_data.panel_number)

    db.refresh(panel)
    return panel

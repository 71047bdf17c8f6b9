from fastapi import APIRouter, HTTPException
from typing import List

from comicscript.api.deps import SessionDep, TreeServiceDep, PanelDep, saving
from comicscript.schemas.script import (PanelUpdate, PanelResponse, CharacterCreate,
                                        CharacterResponse, MoveRequest)

router = APIRouter()


@router.put("/{panel_id}", response_model=PanelResponse)
def update_panel(panel: PanelDep, update_data: PanelUpdate, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        service.update_panel_details(panel, update_data.details)
    db.refresh(panel)
    return panel


@router.delete("/{panel_id}")
def delete_panel(panel: PanelDep, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        service.delete_panel(panel)
    return {"message": "Panel deleted"}


@router.post("/{panel_id}/duplicate", response_model=PanelResponse)
def duplicate_panel(panel: PanelDep, db: SessionDep, service: TreeServiceDep):
    """Copy the panel and its dialogue to the end of the same page."""
    with saving(db):
        copy = service.duplicate_panel(panel)
    if copy is None:
        raise HTTPException(status_code=404, detail="Page not found")

    db.refresh(copy)
    return copy


@router.post("/{panel_id}/characters", response_model=CharacterResponse)
def add_character(panel: PanelDep, character_data: CharacterCreate, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        character = service.add_character(panel, character_data.name, character_data.dialogue)
    if character is None:
        raise HTTPException(status_code=400, detail="Name is required")

    db.refresh(character)
    return character


@router.post("/{panel_id}/characters/move", response_model=List[CharacterResponse])
def move_character(panel: PanelDep, move: MoveRequest, db: SessionDep, service: TreeServiceDep):
    """
    Drag-and-drop reorder: relocate one element and rewrite every
    sequence in the panel.
    """
    with saving(db):
        ordered = service.move_character(panel, move.from_index, move.to_index)
    if ordered is None:
        raise HTTPException(status_code=400, detail="Position out of range")

    return ordered

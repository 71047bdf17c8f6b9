from fastapi import APIRouter, HTTPException

from comicscript.api.deps import SessionDep, TreeServiceDep, CharacterDep, saving
from comicscript.schemas.script import CharacterUpdate, CharacterResponse

router = APIRouter()


@router.put("/{character_id}", response_model=CharacterResponse)
def update_character(character: CharacterDep, update_data: CharacterUpdate,
                     db: SessionDep, service: TreeServiceDep):
    with saving(db):
        updated = service.update_character(character, **update_data.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(status_code=400, detail="Name is required")

    db.refresh(character)
    return character


@router.delete("/{character_id}")
def delete_character(character: CharacterDep, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        service.delete_character(character)
    return {"message": "Dialogue element deleted"}

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.models.user import User
from larder.schemas.pantry import (
    PantryItemCreate, PantryItemUpdate, PantryItemResponse,
    BatchAddRequest, BatchAddResponse, ConsumeRequest, ConsumeResponse,
)
from larder.services import pantry as pantry_service
from larder.services.catalog import detect_location, resolve_ingredient
from larder.utils.auth import get_current_user, get_household_id

router = APIRouter()


@router.get("/", response_model=list[PantryItemResponse])
def list_items(
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return pantry_service.list_items(db, household_id)


@router.get("/expiring", response_model=list[PantryItemResponse])
def expiring_soon(
    days: int | None = Query(None, ge=0),
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return pantry_service.expiring_soon(db, household_id, days)


@router.post("/", response_model=PantryItemResponse, status_code=201)
def add_item(
    body: PantryItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
):
    ingredient = resolve_ingredient(db, body.name, body.category, body.unit)
    return pantry_service.add_item(
        db,
        household_id,
        ingredient.id,
        body.quantity,
        body.unit,
        expiration_date=body.expiration_date,
        location=body.location or detect_location(ingredient.category),
        notes=body.notes,
        added_by=current_user.id,
    )


@router.post("/batch", response_model=BatchAddResponse)
def add_batch(
    body: BatchAddRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
):
    results = pantry_service.add_batch(db, household_id, body.items, added_by=current_user.id)
    added = sum(1 for r in results if r["success"])
    return {"results": results, "added": added, "failed": len(results) - added}


@router.patch("/{item_id}", response_model=PantryItemResponse)
def update_item(
    item_id: UUID,
    body: PantryItemUpdate,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return pantry_service.update_item(db, item_id, household_id, body.model_dump(exclude_unset=True))


@router.delete("/{item_id}", status_code=204)
def delete_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    pantry_service.remove_item(db, item_id, household_id)


@router.post("/consume", response_model=ConsumeResponse)
def consume_recipe(
    body: ConsumeRequest,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    results = pantry_service.consume_for_recipe(db, household_id, body.recipe_id, body.servings_multiplier)
    return {"results": results}

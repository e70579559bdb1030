from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.models.user import User
from larder.schemas.shopping import (
    ShoppingListCreate, ShoppingListItemCreate, ShoppingListItemUpdate,
    ShoppingListItemResponse, ShoppingListResponse,
    TogglePurchasedRequest, TogglePurchasedResponse, ClearedResponse,
)
from larder.services import shopping as shopping_service
from larder.utils.auth import get_current_user, get_household_id

router = APIRouter()


@router.get("/active", response_model=ShoppingListResponse | None)
def active_list(
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return shopping_service.get_active_list(db, household_id)


@router.get("/history", response_model=list[ShoppingListResponse])
def history(
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return shopping_service.list_history(db, household_id)


@router.post("/", response_model=ShoppingListResponse, status_code=201)
def create_list(
    body: ShoppingListCreate,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return shopping_service.create_list(db, household_id, body.name)


@router.post("/items", response_model=ShoppingListItemResponse, status_code=201)
def add_item(
    body: ShoppingListItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
):
    return shopping_service.add_item(
        db,
        household_id,
        body.ingredient_name,
        body.quantity,
        body.unit,
        category=body.category,
        notes=body.notes,
        added_by=current_user.id,
    )


@router.patch("/items/{item_id}", response_model=ShoppingListItemResponse)
def update_item(
    item_id: UUID,
    body: ShoppingListItemUpdate,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return shopping_service.update_item(db, item_id, household_id, body.model_dump(exclude_unset=True))


@router.delete("/items/{item_id}", status_code=204)
def delete_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    shopping_service.remove_item(db, item_id, household_id)


@router.post("/items/{item_id}/toggle", response_model=TogglePurchasedResponse)
def toggle_purchased(
    item_id: UUID,
    body: TogglePurchasedRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
):
    add_to_pantry = body.add_to_pantry if body else True
    is_purchased = shopping_service.toggle_purchased(
        db, item_id, household_id, user_id=current_user.id, add_to_pantry=add_to_pantry,
    )
    return {"is_purchased": is_purchased}


@router.post("/{list_id}/clear-purchased", response_model=ClearedResponse)
def clear_purchased(
    list_id: UUID,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return {"removed": shopping_service.clear_purchased(db, list_id, household_id)}


@router.post("/{list_id}/clear", response_model=ClearedResponse)
def clear_list(
    list_id: UUID,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return {"removed": shopping_service.clear_list(db, list_id, household_id)}

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from larder.schemas.ingredient import IngredientResponse


class ShoppingListCreate(BaseModel):
    name: str | None = None


class ShoppingListItemCreate(BaseModel):
    ingredient_name: str = Field(min_length=1)
    category: str | None = None
    quantity: float = Field(gt=0)
    unit: str
    notes: str | None = None


class ShoppingListItemUpdate(BaseModel):
    quantity: float | None = Field(default=None, gt=0)
    unit: str | None = None
    notes: str | None = None


class TogglePurchasedRequest(BaseModel):
    add_to_pantry: bool = True


class TogglePurchasedResponse(BaseModel):
    is_purchased: bool


class ShoppingListItemResponse(BaseModel):
    id: UUID
    list_id: UUID
    ingredient_id: UUID
    quantity: float
    unit: str
    is_purchased: bool
    notes: str | None
    added_by: UUID | None
    created_at: datetime
    updated_at: datetime
    ingredient: IngredientResponse | None = None

    model_config = {"from_attributes": True}


class ShoppingListResponse(BaseModel):
    id: UUID
    household_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    items: list[ShoppingListItemResponse] = []

    model_config = {"from_attributes": True}


class ClearedResponse(BaseModel):
    removed: int

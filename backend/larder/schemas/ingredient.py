from datetime import datetime
from uuid import UUID
from pydantic import BaseModel


class IngredientCreate(BaseModel):
    name: str
    category: str = "other"
    default_unit: str | None = None


class IngredientResponse(BaseModel):
    id: UUID
    name: str
    category: str
    default_unit: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class DedupReport(BaseModel):
    groups_merged: int
    ingredients_removed: int
    pantry_rows_merged: int
    shopping_rows_merged: int
    recipe_rows_merged: int

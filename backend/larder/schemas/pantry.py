from datetime import datetime
from typing import Literal
from uuid import UUID
from pydantic import BaseModel, Field

from larder.schemas.ingredient import IngredientResponse


class PantryItemCreate(BaseModel):
    """Manual add: the ingredient is resolved by name through the catalog."""
    name: str = Field(min_length=1)
    category: str | None = None
    quantity: float = Field(gt=0)
    unit: str
    expiration_date: datetime | None = None
    location: str | None = None
    notes: str | None = None


class PantryItemUpdate(BaseModel):
    quantity: float | None = Field(default=None, ge=0)
    unit: str | None = None
    expiration_date: datetime | None = None
    location: str | None = None
    notes: str | None = None


class PantryItemResponse(BaseModel):
    id: UUID
    household_id: UUID
    ingredient_id: UUID
    quantity: float
    unit: str
    expiration_date: datetime | None
    location: str | None
    notes: str | None
    added_by: UUID | None
    created_at: datetime
    updated_at: datetime
    ingredient: IngredientResponse | None = None

    model_config = {"from_attributes": True}


class BatchItem(BaseModel):
    # Quantity is checked per item by the service so one bad row cannot reject the batch.
    name: str
    quantity: float
    unit: str
    category: str = "other"
    estimated_expiration_days: float | None = None
    location: str | None = None
    notes: str | None = None


class BatchAddRequest(BaseModel):
    items: list[BatchItem]


class BatchItemResult(BaseModel):
    success: bool
    name: str
    id: UUID | None = None
    error: str | None = None


class BatchAddResponse(BaseModel):
    results: list[BatchItemResult]
    added: int
    failed: int


class ConsumeRequest(BaseModel):
    recipe_id: UUID
    servings_multiplier: float = Field(default=1, gt=0)


class ConsumptionResult(BaseModel):
    ingredient_name: str
    status: Literal["consumed", "insufficient", "not-found"]
    requested: float
    available: float | None = None
    consumed: float
    unit: str


class ConsumeResponse(BaseModel):
    results: list[ConsumptionResult]

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from larder.schemas.ingredient import IngredientResponse


class RecipeCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    instructions: list[str] = []
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    servings: int | None = None
    difficulty: str | None = None
    cuisine: str | None = None
    image_url: str | None = None
    is_public: bool = False


class RecipeIngredientCreate(BaseModel):
    """Either an existing ingredient id or a free-text name resolved through the catalog."""
    ingredient_id: UUID | None = None
    name: str | None = None
    category: str | None = None
    quantity: float = Field(gt=0)
    unit: str
    notes: str | None = None


class RecipeIngredientResponse(BaseModel):
    id: UUID
    recipe_id: UUID
    ingredient_id: UUID
    quantity: float
    unit: str
    notes: str | None
    ingredient: IngredientResponse | None = None

    model_config = {"from_attributes": True}


class RecipeListResponse(BaseModel):
    id: UUID
    household_id: UUID | None
    title: str
    description: str | None
    prep_time_minutes: int | None
    cook_time_minutes: int | None
    servings: int | None
    difficulty: str | None
    cuisine: str | None
    image_url: str | None
    is_public: bool
    added_by: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RecipeResponse(RecipeListResponse):
    instructions: list[str] = []
    ingredients: list[RecipeIngredientResponse] = []


class MissingIngredient(BaseModel):
    name: str
    needed: float
    unit: str


class InsufficientIngredient(BaseModel):
    name: str
    needed: float
    have: float
    unit: str


class RecipeAvailability(RecipeListResponse):
    match_percentage: int
    total_ingredients: int
    sufficient_count: int
    available_count: int
    can_make: bool
    missing_ingredients: list[MissingIngredient] = []
    insufficient_ingredients: list[InsufficientIngredient] = []

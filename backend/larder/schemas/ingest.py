"""Shapes returned by the ingestion adapters. Anything that does not validate is a hard failure."""

from pydantic import BaseModel, Field

from larder.schemas.pantry import BatchItem, BatchItemResult


class ExtractedItem(BaseModel):
    name: str = Field(min_length=1)
    quantity: float
    unit: str
    estimated_expiration_days: float = Field(alias="estimatedExpirationDays")
    category: str
    price: float | None = None

    model_config = {"populate_by_name": True}

    def to_batch_item(self) -> BatchItem:
        return BatchItem(
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            category=self.category,
            estimated_expiration_days=self.estimated_expiration_days,
        )


class DraftIngredient(BaseModel):
    name: str = Field(min_length=1)
    quantity: float
    unit: str
    notes: str | None = None


class RecipeDraft(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    prep_time_minutes: int | None = Field(default=None, alias="prepTime")
    cook_time_minutes: int | None = Field(default=None, alias="cookTime")
    servings: int | None = None
    difficulty: str | None = None
    cuisine: str | None = None
    ingredients: list[DraftIngredient] = []
    instructions: list[str] = []

    model_config = {"populate_by_name": True}


class RecipeSuggestion(RecipeDraft):
    can_make_with_pantry: bool = Field(default=False, alias="canMakeWithPantry")
    match_percentage: float = Field(default=0, alias="matchPercentage")
    missing_ingredients: list[str] = Field(default_factory=list, alias="missingIngredients")


class ParseTextRequest(BaseModel):
    text: str = Field(min_length=1)


class ExtractRecipeRequest(BaseModel):
    image_url: str


class RecipeSearchRequest(BaseModel):
    query: str = Field(min_length=1)


class IngestResponse(BaseModel):
    """Parsed items, plus batch results when the user's auto-add preference is on."""
    items: list[ExtractedItem]
    auto_added: bool = False
    results: list[BatchItemResult] | None = None

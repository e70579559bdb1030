from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.models.user import User
from larder.schemas.ingest import (
    ExtractRecipeRequest, RecipeDraft, RecipeSearchRequest, RecipeSuggestion,
)
from larder.schemas.recipe import (
    RecipeCreate, RecipeIngredientCreate, RecipeIngredientResponse,
    RecipeListResponse, RecipeResponse, RecipeAvailability,
)
from larder.services import pantry as pantry_service
from larder.services import recipes as recipe_service
from larder.services.availability import recipes_you_can_make
from larder.services.kitchen_ai import KitchenAI, get_kitchen_ai
from larder.utils.auth import get_current_user, get_household_id

router = APIRouter()


def _availability(assessment: dict) -> RecipeAvailability:
    fields = RecipeListResponse.model_validate(assessment["recipe"]).model_dump()
    fields.update({k: v for k, v in assessment.items() if k != "recipe"})
    return RecipeAvailability(**fields)


@router.get("/", response_model=list[RecipeListResponse])
def list_recipes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return recipe_service.list_recipes(db, current_user.household_id)


@router.get("/can-make", response_model=list[RecipeAvailability])
def can_make(
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return [_availability(a) for a in recipes_you_can_make(db, household_id)]


@router.post("/", response_model=RecipeResponse, status_code=201)
def create_recipe(
    body: RecipeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
):
    return recipe_service.create_recipe(db, household_id, body.model_dump(), added_by=current_user.id)


# ── AI ───────────────────────────────────────────────────────────

@router.post("/ai/extract", response_model=RecipeDraft)
async def extract_recipe(
    body: ExtractRecipeRequest,
    current_user: User = Depends(get_current_user),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    return await ai.extract_recipe_from_image(body.image_url)


@router.post("/ai/search", response_model=list[RecipeSuggestion])
async def search_recipes(
    body: RecipeSearchRequest,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    pantry_names = [
        item.ingredient.name
        for item in pantry_service.list_items(db, household_id)
        if item.ingredient
    ]
    return await ai.search_recipes_with_ai(body.query, pantry_names)


@router.post("/ai/save", response_model=RecipeResponse, status_code=201)
def save_ai_recipe(
    body: RecipeDraft,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
):
    return recipe_service.save_ai_recipe(db, household_id, body, added_by=current_user.id)


# ── Single recipe ────────────────────────────────────────────────

@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return recipe_service.get_recipe(db, recipe_id, current_user.household_id)


@router.post("/{recipe_id}/ingredients", response_model=RecipeIngredientResponse, status_code=201)
def add_ingredient(
    recipe_id: UUID,
    body: RecipeIngredientCreate,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    return recipe_service.add_recipe_ingredient(
        db,
        recipe_id,
        household_id,
        body.quantity,
        body.unit,
        ingredient_id=body.ingredient_id,
        name=body.name,
        category=body.category,
        notes=body.notes,
    )


@router.delete("/{recipe_id}", status_code=204)
def delete_recipe(
    recipe_id: UUID,
    db: Session = Depends(get_db),
    household_id: UUID = Depends(get_household_id),
):
    recipe_service.remove_recipe(db, recipe_id, household_id)

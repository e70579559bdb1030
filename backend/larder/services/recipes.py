"""
Recipe Catalog: household-private and public recipes with their ingredient rows.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from larder.errors import InvariantError, NotFoundError
from larder.models.recipe import Recipe, RecipeIngredient
from larder.schemas.ingest import RecipeDraft
from larder.services.catalog import get_ingredient, resolve_ingredient

logger = logging.getLogger(__name__)


def _visible(recipe: Recipe, household_id: UUID | None) -> bool:
    return recipe.is_public or recipe.household_id is None or recipe.household_id == household_id


def list_recipes(db: Session, household_id: UUID | None) -> list[Recipe]:
    """Household recipes followed by public ones, deduplicated by id."""
    public = db.query(Recipe).filter(Recipe.is_public.is_(True)).order_by(Recipe.created_at.asc()).all()
    if household_id is None:
        return public

    own = db.query(Recipe).filter(
        Recipe.household_id == household_id
    ).order_by(Recipe.created_at.asc()).all()
    by_id = {r.id: r for r in own + public}
    return list(by_id.values())


def get_recipe(db: Session, recipe_id: UUID, household_id: UUID | None) -> Recipe:
    recipe = db.query(Recipe).options(
        joinedload(Recipe.ingredients),
    ).filter(Recipe.id == recipe_id).first()
    if not recipe or not _visible(recipe, household_id):
        raise NotFoundError("Recipe not found")
    return recipe


def create_recipe(
    db: Session,
    household_id: UUID | None,
    data: dict,
    added_by: UUID | None = None,
) -> Recipe:
    recipe = Recipe(**data, household_id=household_id, added_by=added_by)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


def add_recipe_ingredient(
    db: Session,
    recipe_id: UUID,
    household_id: UUID,
    quantity: float,
    unit: str,
    ingredient_id: UUID | None = None,
    name: str | None = None,
    category: str | None = None,
    notes: str | None = None,
) -> RecipeIngredient:
    recipe = get_recipe(db, recipe_id, household_id)
    if recipe.household_id != household_id:
        raise NotFoundError("Recipe not found")

    if ingredient_id is not None:
        ingredient = get_ingredient(db, ingredient_id)
        if not ingredient:
            raise NotFoundError("Ingredient not found")
    elif name:
        ingredient = resolve_ingredient(db, name, category, unit)
    else:
        raise InvariantError("Either ingredient_id or name is required")

    ri = RecipeIngredient(
        recipe_id=recipe.id,
        ingredient_id=ingredient.id,
        quantity=quantity,
        unit=unit,
        notes=notes,
    )
    db.add(ri)
    db.commit()
    db.refresh(ri)
    return ri


def remove_recipe(db: Session, recipe_id: UUID, household_id: UUID) -> None:
    """Delete a household's recipe; its ingredient rows go with it."""
    recipe = db.get(Recipe, recipe_id)
    if not recipe or recipe.household_id != household_id:
        raise NotFoundError("Recipe not found")
    db.delete(recipe)
    db.commit()


def save_ai_recipe(
    db: Session,
    household_id: UUID,
    draft: RecipeDraft,
    added_by: UUID | None = None,
) -> Recipe:
    """Store an AI-produced draft as a private household recipe."""
    recipe = Recipe(
        household_id=household_id,
        added_by=added_by,
        title=draft.title,
        description=draft.description,
        instructions=list(draft.instructions),
        prep_time_minutes=draft.prep_time_minutes,
        cook_time_minutes=draft.cook_time_minutes,
        servings=draft.servings,
        difficulty=draft.difficulty,
        cuisine=draft.cuisine,
        is_public=False,
    )
    db.add(recipe)
    db.flush()
    for ing in draft.ingredients:
        ingredient = resolve_ingredient(db, ing.name, "other", ing.unit)
        db.add(RecipeIngredient(
            recipe_id=recipe.id,
            ingredient_id=ingredient.id,
            quantity=ing.quantity,
            unit=ing.unit,
            notes=ing.notes,
        ))
        db.flush()
    db.commit()
    logger.info(f"Saved AI recipe {recipe.title!r} with {len(draft.ingredients)} ingredients")
    return get_recipe(db, recipe.id, household_id)

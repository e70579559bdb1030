"""
Recipe Availability Engine: which recipes a household can make from its pantry.

Quantities are compared as stored; no unit conversion is attempted.
"""

import math
from uuid import UUID

from sqlalchemy.orm import Session

from larder.models.pantry import PantryItem
from larder.models.recipe import Recipe, RecipeIngredient
from larder.services.recipes import list_recipes


def match_percentage(sufficient: int, total: int) -> int:
    # Half-up, so 12.5 -> 13 rather than Python's banker's rounding
    return int(math.floor(100 * sufficient / total + 0.5))


def pantry_quantities(db: Session, household_id: UUID) -> dict[UUID, float]:
    rows = db.query(PantryItem.ingredient_id, PantryItem.quantity).filter(
        PantryItem.household_id == household_id
    ).all()
    return {ingredient_id: quantity for ingredient_id, quantity in rows}


def assess_recipe(recipe: Recipe, ingredients: list[RecipeIngredient], stock: dict[UUID, float]) -> dict:
    """Classify every ingredient of one recipe against the stock map."""
    sufficient = 0
    available = 0
    missing = []
    insufficient = []

    for ri in ingredients:
        have = stock.get(ri.ingredient_id, 0)
        name = ri.ingredient.name if ri.ingredient else "Unknown"
        if have == 0:
            missing.append({"name": name, "needed": ri.quantity, "unit": ri.unit})
        elif have < ri.quantity:
            available += 1
            insufficient.append({"name": name, "needed": ri.quantity, "have": have, "unit": ri.unit})
        else:
            available += 1
            sufficient += 1

    total = len(ingredients)
    return {
        "recipe": recipe,
        "match_percentage": match_percentage(sufficient, total),
        "total_ingredients": total,
        "sufficient_count": sufficient,
        "available_count": available,
        "can_make": sufficient == total,
        "missing_ingredients": missing,
        "insufficient_ingredients": insufficient,
    }


def recipes_you_can_make(db: Session, household_id: UUID) -> list[dict]:
    """
    Candidate recipes (household's own plus public) annotated with match info.

    Recipes without ingredient rows, and recipes where nothing at all is in
    stock, are left out. Sorted by match percentage, best first; ties keep
    enumeration order.
    """
    stock = pantry_quantities(db, household_id)
    candidates = list_recipes(db, household_id)
    if not candidates:
        return []

    rows = db.query(RecipeIngredient).filter(
        RecipeIngredient.recipe_id.in_([r.id for r in candidates])
    ).order_by(RecipeIngredient.created_at.asc()).all()
    by_recipe: dict[UUID, list[RecipeIngredient]] = {}
    for ri in rows:
        by_recipe.setdefault(ri.recipe_id, []).append(ri)

    results = []
    for recipe in candidates:
        ingredients = by_recipe.get(recipe.id)
        if not ingredients:
            continue
        assessment = assess_recipe(recipe, ingredients, stock)
        if assessment["available_count"] > 0:
            results.append(assessment)

    return sorted(results, key=lambda a: a["match_percentage"], reverse=True)

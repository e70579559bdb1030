"""
Offline merge of duplicate ingredients.

``resolve_ingredient`` has no unique index behind it, so two concurrent
resolutions of a new name can each insert a row. This task folds every
case-insensitive group into its oldest member:

  1. pantry rows and shopping-list rows pointing at a duplicate are moved to
     the kept ingredient, summing quantities where the household (or list)
     already has a row for it
  2. recipe ingredient rows are folded the same way, per recipe
  3. the duplicates are deleted

Run with ``python -m larder.tasks.ingredient_dedup`` or via
``POST /api/v1/ingredients/dedup``.
"""

import logging
from collections import defaultdict

from sqlalchemy.orm import Session

from larder.database import SessionLocal, utcnow
from larder.models.ingredient import Ingredient
from larder.models.pantry import PantryItem
from larder.models.recipe import RecipeIngredient
from larder.models.shopping import ShoppingListItem

logger = logging.getLogger(__name__)


def find_duplicate_groups(db: Session) -> list[list[Ingredient]]:
    """Groups of two or more ingredients sharing a case-insensitive name, oldest first."""
    groups: dict[str, list[Ingredient]] = defaultdict(list)
    for ing in db.query(Ingredient).order_by(Ingredient.created_at.asc(), Ingredient.id.asc()).all():
        groups[ing.name.strip().lower()].append(ing)
    return [g for g in groups.values() if len(g) > 1]


def _fold_rows(db: Session, model, owner_column: str, keep_id, dup_id) -> int:
    """Move ``model`` rows from dup_id to keep_id, merging into an existing row per owner."""
    merged = 0
    owner = getattr(model, owner_column)
    for row in db.query(model).filter(model.ingredient_id == dup_id).all():
        target = db.query(model).filter(
            owner == getattr(row, owner_column),
            model.ingredient_id == keep_id,
        ).first()
        if target:
            target.quantity = target.quantity + row.quantity
            target.updated_at = utcnow()
            db.delete(row)
            merged += 1
        else:
            row.ingredient_id = keep_id
        db.flush()
    return merged


def merge_duplicate_ingredients(db: Session) -> dict:
    report = {
        "groups_merged": 0,
        "ingredients_removed": 0,
        "pantry_rows_merged": 0,
        "shopping_rows_merged": 0,
        "recipe_rows_merged": 0,
    }
    for group in find_duplicate_groups(db):
        keep, duplicates = group[0], group[1:]
        for dup in duplicates:
            report["pantry_rows_merged"] += _fold_rows(db, PantryItem, "household_id", keep.id, dup.id)
            report["shopping_rows_merged"] += _fold_rows(db, ShoppingListItem, "list_id", keep.id, dup.id)
            report["recipe_rows_merged"] += _fold_rows(db, RecipeIngredient, "recipe_id", keep.id, dup.id)
            db.delete(dup)
            db.flush()
            report["ingredients_removed"] += 1
        report["groups_merged"] += 1
        logger.info(f"Merged {len(duplicates)} duplicate(s) of {keep.name!r} into {keep.id}")

    db.commit()
    return report


def run() -> dict:
    db = SessionLocal()
    try:
        return merge_duplicate_ingredients(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print(run())

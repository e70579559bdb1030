"""
Pantry Store: per-household quantity ledger keyed by ingredient.

Invariants:
  * at most one PantryItem per (household, ingredient); adds merge by summing
    quantity and leave unit/expiration/location of the existing row alone
  * quantities never go negative; consumption deletes a row that lands on
    exactly zero, additions never delete

Concurrent writes to the same row are read-modify-write at the application
level and the last commit wins.
"""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from larder.config import get_settings
from larder.database import utcnow
from larder.errors import InvariantError, NotFoundError, PartialConsumptionError
from larder.models.pantry import PantryItem
from larder.models.recipe import Recipe, RecipeIngredient
from larder.schemas.pantry import BatchItem
from larder.services.catalog import detect_location, resolve_ingredient

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("quantity", "unit", "expiration_date", "location", "notes")
# NOT NULL columns: an explicit null leaves them untouched
REQUIRED_FIELDS = ("quantity", "unit")


def find_item(db: Session, household_id: UUID, ingredient_id: UUID) -> PantryItem | None:
    return db.query(PantryItem).filter(
        PantryItem.household_id == household_id,
        PantryItem.ingredient_id == ingredient_id,
    ).first()


def get_item(db: Session, item_id: UUID, household_id: UUID) -> PantryItem:
    item = db.query(PantryItem).filter(
        PantryItem.id == item_id, PantryItem.household_id == household_id
    ).first()
    if not item:
        raise NotFoundError("Pantry item not found")
    return item


def list_items(db: Session, household_id: UUID) -> list[PantryItem]:
    return db.query(PantryItem).filter(
        PantryItem.household_id == household_id
    ).order_by(PantryItem.created_at.asc()).all()


def expiring_soon(db: Session, household_id: UUID, days: int | None = None) -> list[PantryItem]:
    window = days if days is not None else get_settings().EXPIRING_SOON_DAYS
    cutoff = utcnow() + timedelta(days=window)
    return db.query(PantryItem).filter(
        PantryItem.household_id == household_id,
        PantryItem.expiration_date.isnot(None),
        PantryItem.expiration_date <= cutoff,
    ).order_by(PantryItem.expiration_date.asc()).all()


def _merge_or_insert(
    db: Session,
    household_id: UUID,
    ingredient_id: UUID,
    quantity: float,
    unit: str,
    expiration_date: datetime | None = None,
    location: str | None = None,
    notes: str | None = None,
    added_by: UUID | None = None,
) -> PantryItem:
    if quantity is None or quantity <= 0:
        raise InvariantError("Quantity must be greater than zero")

    existing = find_item(db, household_id, ingredient_id)
    if existing:
        existing.quantity = existing.quantity + quantity
        existing.updated_at = utcnow()
        db.flush()
        return existing

    item = PantryItem(
        household_id=household_id,
        ingredient_id=ingredient_id,
        quantity=quantity,
        unit=unit,
        expiration_date=expiration_date,
        location=location,
        notes=notes,
        added_by=added_by,
    )
    db.add(item)
    db.flush()
    return item


def add_item(
    db: Session,
    household_id: UUID,
    ingredient_id: UUID,
    quantity: float,
    unit: str,
    expiration_date: datetime | None = None,
    location: str | None = None,
    notes: str | None = None,
    added_by: UUID | None = None,
    commit: bool = True,
) -> PantryItem:
    """Merge ``quantity`` into the household's row for the ingredient, or insert one."""
    item = _merge_or_insert(
        db, household_id, ingredient_id, quantity, unit,
        expiration_date=expiration_date, location=location, notes=notes, added_by=added_by,
    )
    if commit:
        db.commit()
        db.refresh(item)
    return item


def add_batch(
    db: Session,
    household_id: UUID,
    items: list[BatchItem],
    added_by: UUID | None = None,
) -> list[dict]:
    """
    Resolve and add each item independently.

    Every item runs in its own savepoint: a failure is recorded in its result
    and rolls back only that item. Results keep the input order.
    """
    results = []
    for entry in items:
        savepoint = db.begin_nested()
        try:
            ingredient = resolve_ingredient(db, entry.name, entry.category, entry.unit)
            expiration = None
            if entry.estimated_expiration_days:
                expiration = utcnow() + timedelta(days=entry.estimated_expiration_days)
            item = _merge_or_insert(
                db,
                household_id,
                ingredient.id,
                entry.quantity,
                entry.unit,
                expiration_date=expiration,
                location=entry.location or detect_location(entry.category),
                notes=entry.notes,
                added_by=added_by,
            )
            savepoint.commit()
            results.append({"success": True, "name": entry.name, "id": item.id})
        except Exception as e:
            savepoint.rollback()
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            logger.warning(f"Batch add failed for {entry.name!r} in household {household_id}: {message}")
            results.append({"success": False, "name": entry.name, "error": message})

    db.commit()
    return results


def update_item(db: Session, item_id: UUID, household_id: UUID, changes: dict) -> PantryItem:
    """Partial patch. Only keys present in ``changes`` are written; ``updated_at`` always moves.

    ``None`` clears the optional fields but is ignored for quantity and unit.
    """
    item = get_item(db, item_id, household_id)
    for k, v in changes.items():
        if k not in UPDATABLE_FIELDS:
            continue
        if v is None and k in REQUIRED_FIELDS:
            continue
        setattr(item, k, v)
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, item_id: UUID, household_id: UUID) -> None:
    item = get_item(db, item_id, household_id)
    db.delete(item)
    db.commit()


def _consume_one(db: Session, household_id: UUID, ri: RecipeIngredient, multiplier: float) -> dict:
    name = ri.ingredient.name if ri.ingredient else "Unknown"
    requested = ri.quantity * multiplier

    item = find_item(db, household_id, ri.ingredient_id)
    if not item:
        return {
            "ingredient_name": name,
            "status": "not-found",
            "requested": requested,
            "consumed": 0,
            "unit": ri.unit,
        }

    available = item.quantity
    if available < requested:
        # Use what there is; the emptied row stays so the household can see it ran out.
        item.quantity = 0
        item.updated_at = utcnow()
        return {
            "ingredient_name": name,
            "status": "insufficient",
            "requested": requested,
            "available": available,
            "consumed": available,
            "unit": item.unit,
        }

    remaining = available - requested
    if remaining == 0:
        db.delete(item)
    else:
        item.quantity = remaining
        item.updated_at = utcnow()
    return {
        "ingredient_name": name,
        "status": "consumed",
        "requested": requested,
        "available": available,
        "consumed": requested,
        "unit": item.unit,
    }


def consume_for_recipe(
    db: Session,
    household_id: UUID,
    recipe_id: UUID,
    servings_multiplier: float = 1,
) -> list[dict]:
    """
    Deduct a recipe's ingredients from the pantry.

    Not atomic across ingredients: each deduction is committed on its own.
    If ingredient k fails, 1..k-1 stay consumed and a PartialConsumptionError
    carrying their results is raised.
    """
    recipe = db.get(Recipe, recipe_id)
    if not recipe:
        raise NotFoundError("Recipe not found")
    if recipe.household_id is not None and recipe.household_id != household_id and not recipe.is_public:
        raise NotFoundError("Recipe not found")

    multiplier = servings_multiplier or 1
    recipe_ingredients = db.query(RecipeIngredient).filter(
        RecipeIngredient.recipe_id == recipe_id
    ).order_by(RecipeIngredient.created_at.asc()).all()

    results = []
    for ri in recipe_ingredients:
        try:
            result = _consume_one(db, household_id, ri, multiplier)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                f"Consumption of recipe {recipe_id} stopped after {len(results)} of "
                f"{len(recipe_ingredients)} ingredients: {e}"
            )
            raise PartialConsumptionError(
                f"Stopped after {len(results)} of {len(recipe_ingredients)} ingredients: {e}",
                results,
            ) from e
        results.append(result)

    logger.info(
        f"Consumed recipe {recipe_id} x{multiplier} for household {household_id}: "
        f"{sum(1 for r in results if r['status'] == 'consumed')} consumed, "
        f"{sum(1 for r in results if r['status'] == 'insufficient')} insufficient, "
        f"{sum(1 for r in results if r['status'] == 'not-found')} not found"
    )
    return results

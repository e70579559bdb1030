"""
Shopping List: one active list per household, with a one-way transfer into the pantry.

Marking an item purchased credits its quantity to the pantry. Un-marking it
does not take the quantity back out, so toggling twice credits twice.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from larder.database import utcnow
from larder.errors import NotFoundError
from larder.models.shopping import ShoppingList, ShoppingListItem
from larder.services import pantry
from larder.services.catalog import detect_location, resolve_ingredient

logger = logging.getLogger(__name__)


def _default_list_name() -> str:
    return f"Shopping List {date.today().isoformat()}"


def _find_active(db: Session, household_id: UUID) -> ShoppingList | None:
    return db.query(ShoppingList).filter(
        ShoppingList.household_id == household_id,
        ShoppingList.is_active.is_(True),
    ).order_by(ShoppingList.created_at.desc()).first()


def _get_list(db: Session, list_id: UUID, household_id: UUID) -> ShoppingList:
    sl = db.query(ShoppingList).filter(
        ShoppingList.id == list_id, ShoppingList.household_id == household_id
    ).first()
    if not sl:
        raise NotFoundError("Shopping list not found")
    return sl


def _get_item(db: Session, item_id: UUID, household_id: UUID) -> ShoppingListItem:
    item = db.query(ShoppingListItem).join(ShoppingList).filter(
        ShoppingListItem.id == item_id,
        ShoppingList.household_id == household_id,
    ).first()
    if not item:
        raise NotFoundError("Item not found")
    return item


def get_active_list(db: Session, household_id: UUID) -> ShoppingList | None:
    """The household's active list with its items (ingredients are eager-loaded), or None."""
    return _find_active(db, household_id)


def list_history(db: Session, household_id: UUID) -> list[ShoppingList]:
    return db.query(ShoppingList).filter(
        ShoppingList.household_id == household_id
    ).order_by(ShoppingList.created_at.desc()).all()


def _start_list(db: Session, household_id: UUID, name: str | None) -> ShoppingList:
    sl = ShoppingList(household_id=household_id, name=name or _default_list_name(), is_active=True)
    db.add(sl)
    db.flush()
    return sl


def create_list(db: Session, household_id: UUID, name: str | None = None) -> ShoppingList:
    """Start a new active list. The previous active list is kept as inactive history."""
    previous = db.query(ShoppingList).filter(
        ShoppingList.household_id == household_id,
        ShoppingList.is_active.is_(True),
    ).all()
    for sl in previous:
        sl.is_active = False
        sl.updated_at = utcnow()
    sl = _start_list(db, household_id, name)
    db.commit()
    db.refresh(sl)
    return sl


def add_item(
    db: Session,
    household_id: UUID,
    ingredient_name: str,
    quantity: float,
    unit: str,
    category: str | None = None,
    notes: str | None = None,
    added_by: UUID | None = None,
) -> ShoppingListItem:
    """Add to the active list (created on demand); re-adding an ingredient sums the quantity."""
    sl = _find_active(db, household_id) or _start_list(db, household_id, None)
    ingredient = resolve_ingredient(db, ingredient_name, category or "other", unit)

    existing = db.query(ShoppingListItem).filter(
        ShoppingListItem.list_id == sl.id,
        ShoppingListItem.ingredient_id == ingredient.id,
    ).first()
    if existing:
        existing.quantity = existing.quantity + quantity
        existing.updated_at = utcnow()
        db.commit()
        db.refresh(existing)
        return existing

    item = ShoppingListItem(
        list_id=sl.id,
        ingredient_id=ingredient.id,
        quantity=quantity,
        unit=unit,
        is_purchased=False,
        notes=notes,
        added_by=added_by,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, item_id: UUID, household_id: UUID, changes: dict) -> ShoppingListItem:
    item = _get_item(db, item_id, household_id)
    for k in ("quantity", "unit", "notes"):
        if k in changes and changes[k] is not None:
            setattr(item, k, changes[k])
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, item_id: UUID, household_id: UUID) -> None:
    item = _get_item(db, item_id, household_id)
    db.delete(item)
    db.commit()


def toggle_purchased(
    db: Session,
    item_id: UUID,
    household_id: UUID,
    user_id: UUID | None = None,
    add_to_pantry: bool = True,
) -> bool:
    """
    Flip the purchased flag and return the new value.

    On false -> true with ``add_to_pantry``, the item's quantity is merged into
    the pantry exactly like a manual add, placed by the ingredient's category.
    true -> false leaves the pantry untouched.
    """
    item = _get_item(db, item_id, household_id)
    item.is_purchased = not item.is_purchased
    item.updated_at = utcnow()

    if item.is_purchased and add_to_pantry:
        category = item.ingredient.category if item.ingredient else None
        pantry.add_item(
            db,
            household_id,
            item.ingredient_id,
            item.quantity,
            item.unit,
            location=detect_location(category),
            added_by=user_id,
            commit=False,
        )
        logger.info(f"Credited {item.quantity} {item.unit} of ingredient {item.ingredient_id} to household {household_id}")

    db.commit()
    return item.is_purchased


def clear_purchased(db: Session, list_id: UUID, household_id: UUID) -> int:
    _get_list(db, list_id, household_id)
    items = db.query(ShoppingListItem).filter(
        ShoppingListItem.list_id == list_id,
        ShoppingListItem.is_purchased.is_(True),
    ).all()
    for item in items:
        db.delete(item)
    db.commit()
    return len(items)


def clear_list(db: Session, list_id: UUID, household_id: UUID) -> int:
    _get_list(db, list_id, household_id)
    items = db.query(ShoppingListItem).filter(ShoppingListItem.list_id == list_id).all()
    for item in items:
        db.delete(item)
    db.commit()
    return len(items)

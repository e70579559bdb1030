"""
Ingredient Catalog: canonical ingredient names and categories.

Every ingestion path (manual add, batch add, shopping list, AI recipe save)
goes through ``resolve_ingredient``. Names are matched case-insensitively;
there is no unique index, so two concurrent resolutions of a brand-new name
can both insert. ``resolve_ingredient`` always returns the oldest match so
such duplicates converge, and ``larder.tasks.ingredient_dedup`` merges them.
"""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from larder.errors import InvariantError
from larder.models.ingredient import Ingredient

logger = logging.getLogger(__name__)

CATEGORIES = (
    "vegetables", "fruits", "proteins", "dairy", "grains",
    "spices", "condiments", "frozen", "other",
)

# category -> storage location
LOCATION_BY_CATEGORY = {
    "dairy": "fridge",
    "proteins": "fridge",
    "meat": "fridge",
    "fish": "fridge",
    "seafood": "fridge",
    "vegetables": "fridge",
    "fruits": "fridge",
    "frozen": "freezer",
    "ice cream": "freezer",
    "grains": "pantry",
    "spices": "pantry",
    "condiments": "pantry",
    "other": "pantry",
}
DEFAULT_LOCATION = "pantry"

STARTER_INGREDIENTS = [
    ("Tomatoes", "vegetables", "pieces"),
    ("Onions", "vegetables", "pieces"),
    ("Garlic", "vegetables", "cloves"),
    ("Carrots", "vegetables", "pieces"),
    ("Potatoes", "vegetables", "pieces"),
    ("Bell Peppers", "vegetables", "pieces"),
    ("Spinach", "vegetables", "grams"),
    ("Lettuce", "vegetables", "pieces"),
    ("Chicken Breast", "proteins", "grams"),
    ("Ground Beef", "proteins", "grams"),
    ("Salmon", "proteins", "grams"),
    ("Eggs", "proteins", "pieces"),
    ("Tofu", "proteins", "grams"),
    ("Milk", "dairy", "ml"),
    ("Cheese", "dairy", "grams"),
    ("Butter", "dairy", "grams"),
    ("Yogurt", "dairy", "ml"),
    ("Rice", "grains", "grams"),
    ("Pasta", "grains", "grams"),
    ("Bread", "grains", "slices"),
    ("Flour", "grains", "grams"),
    ("Salt", "spices", "grams"),
    ("Pepper", "spices", "grams"),
    ("Olive Oil", "condiments", "ml"),
    ("Soy Sauce", "condiments", "ml"),
]


def detect_location(category: str | None) -> str:
    """Default storage location for a category. Unknown categories go to the pantry."""
    return LOCATION_BY_CATEGORY.get((category or "").strip().lower(), DEFAULT_LOCATION)


def find_by_name(db: Session, name: str) -> Ingredient | None:
    return db.query(Ingredient).filter(
        func.lower(Ingredient.name) == name.strip().lower()
    ).order_by(Ingredient.created_at.asc(), Ingredient.id.asc()).first()


def resolve_ingredient(
    db: Session,
    name: str,
    category: str | None = None,
    unit: str | None = None,
) -> Ingredient:
    """
    Return the ingredient matching ``name`` case-insensitively, creating it if absent.

    An existing record is returned untouched (its category and unit are not
    overwritten). A new record keeps the name as given, minus surrounding
    whitespace. The caller owns the transaction; the new row is flushed so
    later lookups in the same session can see it.
    """
    clean = name.strip()
    if not clean:
        raise InvariantError("Ingredient name must not be empty")

    existing = find_by_name(db, clean)
    if existing:
        return existing

    ingredient = Ingredient(name=clean, category=category or "other", default_unit=unit)
    db.add(ingredient)
    db.flush()
    logger.debug(f"Created ingredient {ingredient.name!r} ({ingredient.category})")
    return ingredient


def get_ingredient(db: Session, ingredient_id: UUID) -> Ingredient | None:
    return db.get(Ingredient, ingredient_id)


def list_ingredients(db: Session):
    return db.query(Ingredient).order_by(Ingredient.name.asc())


def search_ingredients(db: Session, term: str) -> list[Ingredient]:
    q = list_ingredients(db)
    if term:
        q = q.filter(Ingredient.name.ilike(f"%{term.strip()}%"))
    return q.all()


def ingredients_by_category(db: Session, category: str) -> list[Ingredient]:
    return list_ingredients(db).filter(Ingredient.category == category).all()


def add_ingredient(db: Session, name: str, category: str, default_unit: str | None) -> Ingredient:
    """Explicit create. Does not check for an existing name; use ``resolve_ingredient`` for that."""
    ingredient = Ingredient(name=name.strip(), category=category, default_unit=default_unit)
    db.add(ingredient)
    db.commit()
    db.refresh(ingredient)
    return ingredient


def seed_ingredients(db: Session) -> dict:
    """Insert the starter catalog. No-op once any ingredient exists."""
    if db.query(Ingredient).first():
        return {"message": "Ingredients already seeded", "created": 0}

    for name, category, unit in STARTER_INGREDIENTS:
        db.add(Ingredient(name=name, category=category, default_unit=unit))
    db.commit()
    logger.info(f"Seeded {len(STARTER_INGREDIENTS)} ingredients")
    return {"message": f"Seeded {len(STARTER_INGREDIENTS)} ingredients", "created": len(STARTER_INGREDIENTS)}

import pytest

from larder.errors import InvariantError
from larder.models import Ingredient
from larder.services import catalog


def test_resolve_is_case_insensitive(db_session):
    first = catalog.resolve_ingredient(db_session, "Milk", "dairy", "liters")
    db_session.commit()
    second = catalog.resolve_ingredient(db_session, "milk")
    assert first.id == second.id


def test_resolve_keeps_name_verbatim_and_does_not_overwrite(db_session):
    created = catalog.resolve_ingredient(db_session, "  Greek Yogurt ", "dairy", "grams")
    db_session.commit()
    assert created.name == "Greek Yogurt"

    again = catalog.resolve_ingredient(db_session, "GREEK YOGURT", "other", "cups")
    assert again.id == created.id
    assert again.category == "dairy"
    assert again.default_unit == "grams"


def test_resolve_defaults_category_to_other(db_session):
    ing = catalog.resolve_ingredient(db_session, "Mystery Sauce")
    assert ing.category == "other"


def test_resolve_rejects_blank_name(db_session):
    with pytest.raises(InvariantError):
        catalog.resolve_ingredient(db_session, "   ")


def test_resolve_returns_oldest_duplicate(db_session):
    from datetime import datetime, timedelta, timezone

    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    newer = Ingredient(name="basil", category="spices", created_at=base + timedelta(days=1))
    older = Ingredient(name="Basil", category="spices", created_at=base)
    db_session.add_all([newer, older])
    db_session.commit()

    assert catalog.resolve_ingredient(db_session, "BASIL").id == older.id


@pytest.mark.parametrize("category,location", [
    ("dairy", "fridge"),
    ("proteins", "fridge"),
    ("vegetables", "fridge"),
    ("Fruits", "fridge"),
    ("frozen", "freezer"),
    ("grains", "pantry"),
    ("spices", "pantry"),
    ("condiments", "pantry"),
    ("other", "pantry"),
    ("snacks", "pantry"),
    (None, "pantry"),
])
def test_detect_location(category, location):
    assert catalog.detect_location(category) == location


def test_seed_is_idempotent(db_session):
    first = catalog.seed_ingredients(db_session)
    assert first["created"] == len(catalog.STARTER_INGREDIENTS)
    second = catalog.seed_ingredients(db_session)
    assert second["created"] == 0
    assert db_session.query(Ingredient).count() == len(catalog.STARTER_INGREDIENTS)


def test_search_and_category(db_session):
    catalog.seed_ingredients(db_session)
    names = [i.name for i in catalog.search_ingredients(db_session, "oil")]
    assert names == ["Olive Oil"]
    dairy = {i.name for i in catalog.ingredients_by_category(db_session, "dairy")}
    assert {"Milk", "Cheese", "Butter", "Yogurt"} <= dairy


def test_ingredient_endpoints(client, user, auth_headers):
    resp = client.post("/api/v1/ingredients/seed", headers=auth_headers)
    assert resp.status_code == 200

    resp = client.get("/api/v1/ingredients/?limit=10", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == len(catalog.STARTER_INGREDIENTS)
    assert len(body["items"]) == 10

    resp = client.get("/api/v1/ingredients/search", params={"q": "rice"}, headers=auth_headers)
    assert [i["name"] for i in resp.json()] == ["Rice"]

    resp = client.post(
        "/api/v1/ingredients/",
        json={"name": "Saffron", "category": "spices", "default_unit": "grams"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["name"] == "Saffron"

import pytest

from larder.errors import InvariantError, NotFoundError, PartialConsumptionError
from larder.models import Ingredient, PantryItem, Recipe, RecipeIngredient
from larder.schemas.pantry import BatchItem
from larder.services import pantry as pantry_service
from larder.services.catalog import resolve_ingredient


def _ingredient(db, name, category="other"):
    ing = resolve_ingredient(db, name, category)
    db.commit()
    return ing


def _recipe(db, household_id, needs: dict):
    recipe = Recipe(household_id=household_id, title="Test Recipe", instructions=[])
    db.add(recipe)
    db.flush()
    for name, qty in needs.items():
        ing = resolve_ingredient(db, name)
        db.add(RecipeIngredient(recipe_id=recipe.id, ingredient_id=ing.id, quantity=qty, unit="pieces"))
        db.flush()
    db.commit()
    return recipe


def _quantity(db, household_id, name):
    db.expire_all()
    row = db.query(PantryItem).join(Ingredient).filter(
        PantryItem.household_id == household_id, Ingredient.name == name
    ).first()
    return row.quantity if row else None


# --- add / merge ---

def test_add_merges_into_one_row(db_session, household):
    milk = _ingredient(db_session, "Milk", "dairy")
    first = pantry_service.add_item(db_session, household.id, milk.id, 1, "liters", location="fridge")
    second = pantry_service.add_item(db_session, household.id, milk.id, 2.5, "ml", location="pantry")

    assert first.id == second.id
    assert db_session.query(PantryItem).count() == 1
    # Existing unit and location win on merge
    assert second.quantity == 3.5
    assert second.unit == "liters"
    assert second.location == "fridge"


def test_add_rejects_non_positive_quantity(db_session, household):
    milk = _ingredient(db_session, "Milk", "dairy")
    with pytest.raises(InvariantError):
        pantry_service.add_item(db_session, household.id, milk.id, 0, "liters")
    with pytest.raises(InvariantError):
        pantry_service.add_item(db_session, household.id, milk.id, -2, "liters")


def test_update_patches_only_given_fields(db_session, household):
    milk = _ingredient(db_session, "Milk", "dairy")
    item = pantry_service.add_item(db_session, household.id, milk.id, 1, "liters", location="fridge", notes="2%")
    before = item.updated_at

    updated = pantry_service.update_item(db_session, item.id, household.id, {"quantity": 4})
    assert updated.quantity == 4
    assert updated.notes == "2%"
    assert updated.location == "fridge"
    assert updated.updated_at >= before


def test_update_null_keeps_required_fields_and_clears_optional(db_session, household):
    milk = _ingredient(db_session, "Milk", "dairy")
    item = pantry_service.add_item(db_session, household.id, milk.id, 2, "liters", location="fridge", notes="2%")

    updated = pantry_service.update_item(
        db_session, item.id, household.id, {"quantity": None, "unit": None, "notes": None},
    )
    assert updated.quantity == 2
    assert updated.unit == "liters"
    assert updated.notes is None
    assert updated.location == "fridge"


def test_patch_endpoint_accepts_null_quantity(client, household, auth_headers):
    created = client.post(
        "/api/v1/pantry/", json={"name": "Milk", "quantity": 1, "unit": "liters"}, headers=auth_headers,
    ).json()

    resp = client.patch(
        f"/api/v1/pantry/{created['id']}", json={"quantity": None, "unit": None}, headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["quantity"] == 1
    assert resp.json()["unit"] == "liters"


def test_remove_and_not_found(db_session, household):
    milk = _ingredient(db_session, "Milk", "dairy")
    item = pantry_service.add_item(db_session, household.id, milk.id, 1, "liters")
    pantry_service.remove_item(db_session, item.id, household.id)
    assert db_session.query(PantryItem).count() == 0
    with pytest.raises(NotFoundError):
        pantry_service.remove_item(db_session, item.id, household.id)


# --- batch ---

def test_batch_records_per_item_outcomes(db_session, household, user):
    items = [
        BatchItem(name="Eggs", quantity=12, unit="pieces", category="proteins", estimated_expiration_days=21),
        BatchItem(name="BadItem", quantity=-1, unit="pieces", category="other"),
    ]
    results = pantry_service.add_batch(db_session, household.id, items, added_by=user.id)

    assert len(results) == 2
    assert results[0]["success"] is True
    assert results[0]["name"] == "Eggs"
    assert results[1]["success"] is False
    assert results[1]["error"]

    eggs = db_session.query(PantryItem).one()
    assert eggs.quantity == 12
    assert eggs.location == "fridge"
    assert eggs.expiration_date is not None
    # The failed item's ingredient insert was rolled back with it
    assert db_session.query(Ingredient).filter(Ingredient.name == "BadItem").count() == 0


def test_batch_merges_repeated_names(db_session, household):
    items = [
        BatchItem(name="Rice", quantity=500, unit="grams", category="grains"),
        BatchItem(name="rice", quantity=250, unit="grams", category="grains"),
    ]
    results = pantry_service.add_batch(db_session, household.id, items)
    assert all(r["success"] for r in results)
    assert results[0]["id"] == results[1]["id"]
    assert _quantity(db_session, household.id, "Rice") == 750


def test_batch_respects_explicit_location(db_session, household):
    items = [BatchItem(name="Peas", quantity=1, unit="bags", category="vegetables", location="freezer")]
    pantry_service.add_batch(db_session, household.id, items)
    assert db_session.query(PantryItem).one().location == "freezer"


# --- consume ---

def test_consume_subtracts_and_deletes_on_exact_zero(db_session, household):
    tomato = _ingredient(db_session, "Tomato", "vegetables")
    onion = _ingredient(db_session, "Onion", "vegetables")
    pantry_service.add_item(db_session, household.id, tomato.id, 5, "pieces")
    pantry_service.add_item(db_session, household.id, onion.id, 1, "pieces")
    recipe = _recipe(db_session, household.id, {"Tomato": 2, "Onion": 1})

    results = pantry_service.consume_for_recipe(db_session, household.id, recipe.id)

    assert [r["status"] for r in results] == ["consumed", "consumed"]
    assert _quantity(db_session, household.id, "Tomato") == 3
    assert _quantity(db_session, household.id, "Onion") is None


def test_consume_insufficient_zeroes_without_deleting(db_session, household):
    tomato = _ingredient(db_session, "Tomato", "vegetables")
    pantry_service.add_item(db_session, household.id, tomato.id, 1, "pieces")
    recipe = _recipe(db_session, household.id, {"Tomato": 2})

    results = pantry_service.consume_for_recipe(db_session, household.id, recipe.id, servings_multiplier=2)

    assert results[0]["status"] == "insufficient"
    assert results[0]["requested"] == 4
    assert results[0]["consumed"] == 1
    assert _quantity(db_session, household.id, "Tomato") == 0


def test_consume_reports_not_found(db_session, household):
    recipe = _recipe(db_session, household.id, {"Saffron": 1})
    results = pantry_service.consume_for_recipe(db_session, household.id, recipe.id)
    assert results == [{
        "ingredient_name": "Saffron",
        "status": "not-found",
        "requested": 1,
        "consumed": 0,
        "unit": "pieces",
    }]


def test_consume_never_goes_negative(db_session, household):
    flour = _ingredient(db_session, "Flour", "grains")
    pantry_service.add_item(db_session, household.id, flour.id, 100, "grams")
    recipe = _recipe(db_session, household.id, {"Flour": 30})

    for _ in range(5):
        pantry_service.consume_for_recipe(db_session, household.id, recipe.id)
        remaining = _quantity(db_session, household.id, "Flour")
        assert remaining is None or remaining >= 0
    assert _quantity(db_session, household.id, "Flour") == 0


def test_consume_partial_failure_keeps_earlier_steps(db_session, household, monkeypatch):
    tomato = _ingredient(db_session, "Tomato", "vegetables")
    onion = _ingredient(db_session, "Onion", "vegetables")
    pantry_service.add_item(db_session, household.id, tomato.id, 5, "pieces")
    pantry_service.add_item(db_session, household.id, onion.id, 5, "pieces")
    recipe = _recipe(db_session, household.id, {"Tomato": 2, "Onion": 1})

    real_consume_one = pantry_service._consume_one

    def flaky(db, household_id, ri, multiplier):
        if ri.ingredient.name == "Onion":
            raise RuntimeError("store unavailable")
        return real_consume_one(db, household_id, ri, multiplier)

    monkeypatch.setattr(pantry_service, "_consume_one", flaky)

    with pytest.raises(PartialConsumptionError) as exc_info:
        pantry_service.consume_for_recipe(db_session, household.id, recipe.id)

    assert [r["ingredient_name"] for r in exc_info.value.results] == ["Tomato"]
    assert _quantity(db_session, household.id, "Tomato") == 3
    assert _quantity(db_session, household.id, "Onion") == 5


def test_consume_hides_other_households_private_recipe(db_session, household, make_member):
    from larder.services import households as household_service

    other = make_member("user-2", "bob@example.com", "Bob")
    created = household_service.create_household(db_session, other.id, "Joneses")
    recipe = _recipe(db_session, created["household_id"], {"Tomato": 1})

    with pytest.raises(NotFoundError):
        pantry_service.consume_for_recipe(db_session, household.id, recipe.id)


# --- API ---

def test_pantry_endpoints(client, household, auth_headers):
    resp = client.post(
        "/api/v1/pantry/",
        json={"name": "Milk", "category": "dairy", "quantity": 1, "unit": "liters"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    item = resp.json()
    assert item["location"] == "fridge"
    assert item["ingredient"]["name"] == "Milk"

    resp = client.post(
        "/api/v1/pantry/batch",
        json={"items": [
            {"name": "milk", "quantity": 2, "unit": "liters", "category": "dairy"},
            {"name": "Ghost", "quantity": 0, "unit": "pieces"},
        ]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["added"] == 1
    assert body["failed"] == 1

    resp = client.get("/api/v1/pantry/", headers=auth_headers)
    rows = resp.json()
    assert len(rows) == 1
    assert rows[0]["quantity"] == 3

    resp = client.patch(f"/api/v1/pantry/{item['id']}", json={"notes": "oat"}, headers=auth_headers)
    assert resp.json()["notes"] == "oat"

    resp = client.delete(f"/api/v1/pantry/{item['id']}", headers=auth_headers)
    assert resp.status_code == 204
    resp = client.delete(f"/api/v1/pantry/{item['id']}", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Pantry item not found"


def test_manual_add_rejects_zero_quantity(client, household, auth_headers):
    resp = client.post(
        "/api/v1/pantry/",
        json={"name": "Milk", "quantity": 0, "unit": "liters"},
        headers=auth_headers,
    )
    assert resp.status_code == 422


def test_pantry_requires_household(client, user, auth_headers):
    resp = client.get("/api/v1/pantry/", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "You are not in a household"


def test_consume_endpoint(client, db_session, household, auth_headers):
    tomato = _ingredient(db_session, "Tomato", "vegetables")
    pantry_service.add_item(db_session, household.id, tomato.id, 2, "pieces")
    recipe = _recipe(db_session, household.id, {"Tomato": 2, "Basil": 1})
    recipe_id = str(recipe.id)

    resp = client.post("/api/v1/pantry/consume", json={"recipe_id": recipe_id}, headers=auth_headers)
    assert resp.status_code == 200
    statuses = {r["ingredient_name"]: r["status"] for r in resp.json()["results"]}
    assert statuses == {"Tomato": "consumed", "Basil": "not-found"}

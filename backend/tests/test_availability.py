from larder.models import Recipe, RecipeIngredient
from larder.services import pantry as pantry_service
from larder.services.availability import match_percentage, recipes_you_can_make
from larder.services.catalog import resolve_ingredient


def _recipe(db, household_id, title, needs: dict, is_public=False):
    recipe = Recipe(household_id=household_id, title=title, instructions=[], is_public=is_public)
    db.add(recipe)
    db.flush()
    for name, qty in needs.items():
        ing = resolve_ingredient(db, name)
        db.add(RecipeIngredient(recipe_id=recipe.id, ingredient_id=ing.id, quantity=qty, unit="pieces"))
        db.flush()
    db.commit()
    return recipe


def _stock(db, household_id, name, qty):
    ing = resolve_ingredient(db, name)
    pantry_service.add_item(db, household_id, ing.id, qty, "pieces")


def test_match_percentage_rounds_half_up():
    assert match_percentage(1, 2) == 50
    assert match_percentage(1, 3) == 33
    assert match_percentage(2, 3) == 67
    assert match_percentage(1, 8) == 13
    assert match_percentage(0, 4) == 0


def test_half_stocked_recipe_is_listed(db_session, household):
    _recipe(db_session, household.id, "Salsa", {"tomato": 2, "onion": 1})
    _stock(db_session, household.id, "tomato", 2)

    [result] = recipes_you_can_make(db_session, household.id)
    assert result["recipe"].title == "Salsa"
    assert result["match_percentage"] == 50
    assert result["can_make"] is False
    assert result["available_count"] == 1
    assert result["missing_ingredients"] == [{"name": "onion", "needed": 1, "unit": "pieces"}]


def test_recipe_without_overlap_is_excluded(db_session, household):
    _recipe(db_session, household.id, "Salsa", {"tomato": 2, "onion": 1})
    assert recipes_you_can_make(db_session, household.id) == []


def test_insufficient_counts_as_available_but_not_sufficient(db_session, household):
    _recipe(db_session, household.id, "Salsa", {"tomato": 2, "onion": 1})
    _stock(db_session, household.id, "tomato", 1)

    [result] = recipes_you_can_make(db_session, household.id)
    assert result["match_percentage"] == 0
    assert result["available_count"] == 1
    assert result["insufficient_ingredients"] == [
        {"name": "tomato", "needed": 2, "have": 1, "unit": "pieces"}
    ]


def test_recipe_without_ingredients_is_never_returned(db_session, household):
    _recipe(db_session, household.id, "Air", {})
    _stock(db_session, household.id, "tomato", 2)
    assert recipes_you_can_make(db_session, household.id) == []


def test_sorted_by_match_and_includes_public(db_session, household, make_member):
    from larder.services import households as household_service

    other = make_member("user-2", "bob@example.com", "Bob")
    other_hh = household_service.create_household(db_session, other.id, "Joneses")["household_id"]

    _recipe(db_session, household.id, "Salsa", {"tomato": 2, "onion": 1})
    _recipe(db_session, household.id, "Toast", {"bread": 1})
    _recipe(db_session, other_hh, "Shared Soup", {"tomato": 1, "bread": 1, "leek": 1, "stock": 1}, is_public=True)
    _recipe(db_session, other_hh, "Secret Stew", {"tomato": 1})
    _stock(db_session, household.id, "tomato", 2)
    _stock(db_session, household.id, "bread", 4)

    results = recipes_you_can_make(db_session, household.id)
    assert [(r["recipe"].title, r["match_percentage"]) for r in results] == [
        ("Toast", 100),
        ("Salsa", 50),
        ("Shared Soup", 50),
    ]
    assert results[0]["can_make"] is True


def test_can_make_endpoint(client, db_session, household, auth_headers):
    _recipe(db_session, household.id, "Salsa", {"tomato": 2, "onion": 1})
    _stock(db_session, household.id, "tomato", 2)

    resp = client.get("/api/v1/recipes/can-make", headers=auth_headers)
    assert resp.status_code == 200
    [row] = resp.json()
    assert row["title"] == "Salsa"
    assert row["match_percentage"] == 50
    assert row["can_make"] is False
    assert row["missing_ingredients"][0]["name"] == "onion"

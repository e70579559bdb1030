from larder.models.household import Household
from larder.models.user import User
from larder.models.ingredient import Ingredient
from larder.models.pantry import PantryItem
from larder.models.recipe import Recipe, RecipeIngredient
from larder.models.shopping import ShoppingList, ShoppingListItem

__all__ = [
    "Household", "User", "Ingredient", "PantryItem",
    "Recipe", "RecipeIngredient", "ShoppingList", "ShoppingListItem",
]

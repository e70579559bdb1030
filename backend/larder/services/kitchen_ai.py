"""
KitchenAI: Claude API integration service.

The ingestion adapters live here: free text or receipt photos in, candidate
pantry items out; recipe photos in, recipe drafts out; and pantry-aware recipe
search. Callers treat every method as a slow remote call that may fail. Any
failure (missing key, API error, output that does not match the expected
shape) is raised as IngestionError for the whole call. Nothing is retried.
"""

import json
import logging
import re
from functools import lru_cache

import anthropic
from pydantic import ValidationError

from larder.config import get_settings
from larder.errors import IngestionError
from larder.schemas.ingest import ExtractedItem, RecipeDraft, RecipeSuggestion

logger = logging.getLogger(__name__)

ITEM_FIELDS = """\
For each item, provide:
- name: the ingredient/item name (standardized, e.g., "Milk" not "MLKWHL2%")
- quantity: numeric quantity (default to 1 if not clear)
- unit: measurement unit (pieces, kg, grams, liters, ml, etc.)
- estimatedExpirationDays: estimate shelf life in days based on item type
- category: one of: vegetables, fruits, proteins, dairy, grains, spices, condiments, frozen, other

Guidelines for expiration estimates:
- Fresh produce: 5-10 days
- Dairy: 7-14 days
- Fresh meat/fish: 3-5 days
- Frozen items: 90 days
- Canned goods: 365 days
- Dry goods (pasta, rice): 365 days
- Bread: 5-7 days
- Eggs: 21 days

Return ONLY a JSON object with this structure:
{"items": [{"name": "Milk", "quantity": 1, "unit": "liters", "estimatedExpirationDays": 10, "category": "dairy"}]}"""

RECIPE_JSON_SCHEMA = """\
Return a JSON object with this structure:
{
  "title": "Recipe name",
  "description": "Brief description",
  "prepTime": number (in minutes),
  "cookTime": number (in minutes),
  "servings": number,
  "difficulty": "easy" | "medium" | "hard",
  "cuisine": "cuisine type",
  "ingredients": [{"name": "ingredient name", "quantity": number, "unit": "unit", "notes": "optional notes like 'diced'"}],
  "instructions": ["step 1", "step 2", ...]
}
Only return the JSON, no markdown fences or extra text."""


def _extract_json(text: str):
    """Extract JSON from Claude response, handling markdown fences."""
    text = text.strip()
    m = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if m:
        text = m.group(1).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise IngestionError(f"AI response was not valid JSON: {e}") from e


def _validate_items(data) -> list[ExtractedItem]:
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise IngestionError("AI response did not contain an 'items' list")
    try:
        return [ExtractedItem.model_validate(i) for i in data["items"]]
    except ValidationError as e:
        raise IngestionError(f"AI returned malformed items: {e.error_count()} validation errors") from e


class KitchenAI:
    """All AI features powered by the Anthropic Claude API."""

    def __init__(self):
        settings = get_settings()
        self.model = settings.CLAUDE_MODEL
        self.api_key = settings.ANTHROPIC_API_KEY
        self.max_tokens = settings.AI_MAX_TOKENS
        self._client = None

    @property
    def client(self):
        if self._client is None and self.api_key:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def _send(self, content, max_tokens: int | None = None) -> str:
        if not self.client:
            raise IngestionError("ANTHROPIC_API_KEY is not configured")
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens or self.max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise IngestionError(f"Anthropic API error: {e}") from e
        if not response.content:
            raise IngestionError("Anthropic API returned an empty response")
        return response.content[0].text

    async def _call_claude(self, user_message: str, max_tokens: int | None = None) -> str:
        """Make a text-only call to the Claude API. Returns the text response."""
        return await self._send(user_message, max_tokens)

    async def _call_claude_with_image(self, text: str, source: dict, max_tokens: int | None = None) -> str:
        """Call Claude with an image (vision). ``source`` is a base64 or url image source."""
        return await self._send(
            [
                {"type": "image", "source": source},
                {"type": "text", "text": text},
            ],
            max_tokens,
        )

    # ── Pantry ingestion ──────────────────────────────────────────────

    async def parse_text_list(self, text: str) -> list[ExtractedItem]:
        """Parse a free-text shopping list into structured items."""
        prompt = (
            f"Parse this shopping list into individual items with quantities and units:\n\n"
            f"\"{text}\"\n\n{ITEM_FIELDS}"
        )
        try:
            return _validate_items(_extract_json(await self._call_claude(prompt)))
        except IngestionError as e:
            logger.error(f"Failed to parse text list: {e.message}")
            raise

    async def extract_items_from_receipt(self, image_base64: str, media_type: str = "image/jpeg") -> list[ExtractedItem]:
        """Extract grocery items from a receipt photo."""
        prompt = (
            "Analyze this grocery receipt image and extract all food/grocery items.\n\n"
            f"{ITEM_FIELDS}\nYou may add a numeric \"price\" per item when it is visible."
        )
        source = {"type": "base64", "media_type": media_type, "data": image_base64}
        try:
            return _validate_items(_extract_json(await self._call_claude_with_image(prompt, source)))
        except IngestionError as e:
            logger.error(f"Failed to extract receipt items: {e.message}")
            raise

    # ── Recipes ───────────────────────────────────────────────────────

    async def extract_recipe_from_image(self, image_url: str) -> RecipeDraft:
        """OCR and parse a recipe from a photo reachable at ``image_url``."""
        prompt = "Extract the recipe from this image. " + RECIPE_JSON_SCHEMA
        try:
            data = _extract_json(
                await self._call_claude_with_image(prompt, {"type": "url", "url": image_url})
            )
            return RecipeDraft.model_validate(data)
        except ValidationError as e:
            logger.error(f"Failed to extract recipe from {image_url}: malformed draft")
            raise IngestionError(f"AI returned a malformed recipe: {e.error_count()} validation errors") from e
        except IngestionError as e:
            logger.error(f"Failed to extract recipe from {image_url}: {e.message}")
            raise

    async def search_recipes_with_ai(self, query: str, pantry_names: list[str]) -> list[RecipeSuggestion]:
        """Suggest recipes matching ``query``, ranked by what the pantry already holds."""
        prompt = (
            f"I'm looking for recipe ideas. Here's what I'm interested in: \"{query}\"\n\n"
            f"Here are the ingredients I currently have in my pantry:\n"
            f"{', '.join(pantry_names) or 'Pantry is empty.'}\n\n"
            "Please suggest 5 recipes that:\n"
            f"1. Match my search query \"{query}\"\n"
            "2. Prioritize recipes I can make with my available ingredients\n"
            "3. If I don't have all ingredients, show me what I'm missing\n\n"
            "Return a JSON array of recipe objects. Each has the fields of this structure:\n"
            f"{RECIPE_JSON_SCHEMA}\n"
            "plus \"canMakeWithPantry\": boolean, \"matchPercentage\": number (0-100) and "
            "\"missingIngredients\": [\"ingredient1\", ...]. Only return the JSON array."
        )
        try:
            data = _extract_json(await self._call_claude(prompt, max_tokens=4096))
            if not isinstance(data, list):
                raise IngestionError("AI response was not a JSON array")
            suggestions = [RecipeSuggestion.model_validate(s) for s in data]
        except ValidationError as e:
            logger.error(f"Recipe search for {query!r} returned malformed suggestions")
            raise IngestionError(f"AI returned malformed suggestions: {e.error_count()} validation errors") from e
        except IngestionError as e:
            logger.error(f"Recipe search for {query!r} failed: {e.message}")
            raise
        return sorted(suggestions, key=lambda s: s.match_percentage, reverse=True)


@lru_cache
def get_kitchen_ai() -> KitchenAI:
    return KitchenAI()

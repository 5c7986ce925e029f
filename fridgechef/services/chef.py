"""FridgeChef service: the inbound entry points of the core.

Wires RequestBuilder → Transport → ResponseExtractor for the two tasks:

    chef = FridgeChef(load_config())
    ingredients = await chef.analyze_image(photo_bytes)
    recipes = await chef.generate_recipes([i.name for i in ingredients])

Each call either returns the complete list of records or raises exactly one
FridgeChefError. Calls share no mutable state and can run concurrently with
asyncio.gather; cancelling the awaiting task cancels the HTTP request.
"""

import asyncio
from typing import Optional, Sequence

from fridgechef.models.errors import MissingCredentialError
from fridgechef.models.models import Ingredient, Recipe, TaskKind
from fridgechef.prompts.prompts import format_ingredient_clause
from fridgechef.services.extractor import ResponseExtractor
from fridgechef.services.fallback import FALLBACK_INGREDIENTS, FALLBACK_RECIPES
from fridgechef.services.request_builder import RequestBuilder
from fridgechef.services.transport import Transport
from fridgechef.utils.config import Config
from fridgechef.utils.logger import logger


class FridgeChef:
    """Photo → ingredients → recipes, backed by a remote multimodal model.

    Args:
        config: Immutable application configuration.
        transport: Optional Transport (e.g. one with a shared session, or a stub in tests).
        request_builder: Optional RequestBuilder.
        extractor: Optional ResponseExtractor.
    """

    def __init__(
        self,
        config: Config,
        transport: Optional[Transport] = None,
        request_builder: Optional[RequestBuilder] = None,
        extractor: Optional[ResponseExtractor] = None,
    ) -> None:
        self.config = config
        self.transport = transport or Transport(config)
        self.request_builder = request_builder or RequestBuilder(config)
        self.extractor = extractor or ResponseExtractor()

    def _require_credential(self, task: TaskKind) -> None:
        # Fallback mode needs a key too
        if not self.config.is_openai_configured:
            logger.error("OpenAI API key is missing; set OPENAI_API_KEY", extra={"task": task.value})
            raise MissingCredentialError()

    async def _serve_fallback(self, records: Sequence, task: TaskKind) -> list:
        logger.info(
            f"Real AI analysis disabled, serving fallback data after {self.config.MOCK_ANALYSIS_DELAY}s",
            extra={"task": task.value},
        )
        await asyncio.sleep(self.config.MOCK_ANALYSIS_DELAY)
        return list(records)

    async def analyze_image(self, image_bytes: bytes) -> list[Ingredient]:
        """Recognize food items in a photo.

        Args:
            image_bytes: Raw photo bytes.

        Returns:
            Ingredients in the order the model listed them.

        Raises:
            MissingCredentialError, InvalidImageError, TransportError, ExtractionError
        """
        task = TaskKind.IMAGE_ANALYSIS
        self._require_credential(task)

        if not self.config.ENABLE_REAL_AI_ANALYSIS:
            return await self._serve_fallback(FALLBACK_INGREDIENTS, task)

        # Pillow decode/resize/encode runs off the event loop
        envelope = await asyncio.to_thread(self.request_builder.build_image_analysis_request, image_bytes)
        raw_text = await self.transport.send(envelope)
        ingredients = self.extractor.extract(raw_text, task)

        logger.info(
            f"Detected {len(ingredients)} ingredient(s): {[ingredient.name for ingredient in ingredients]}",
            extra={"task": task.value},
        )
        return ingredients

    async def generate_recipes(self, ingredient_names: Sequence[str]) -> list[Recipe]:
        """Suggest recipes for a list of available ingredients.

        Args:
            ingredient_names: Ingredient names, e.g. ["Tomatoes", "Garlic"].

        Returns:
            Recipes in the order the model returned them.

        Raises:
            MissingCredentialError, ValueError (no ingredient names), TransportError, ExtractionError
        """
        task = TaskKind.RECIPE_GENERATION
        self._require_credential(task)

        if isinstance(ingredient_names, str) or not format_ingredient_clause(ingredient_names):
            raise ValueError("At least one ingredient name is required to generate recipes")

        if not (self.config.ENABLE_REAL_AI_ANALYSIS and self.config.ENABLE_RECIPE_GENERATION):
            return await self._serve_fallback(FALLBACK_RECIPES, task)

        envelope = self.request_builder.build_recipe_generation_request(ingredient_names)
        raw_text = await self.transport.send(envelope)
        recipes = self.extractor.extract(raw_text, task)

        logger.info(
            f"Generated {len(recipes)} recipe(s): {[recipe.name for recipe in recipes]}",
            extra={"task": task.value},
        )
        return recipes

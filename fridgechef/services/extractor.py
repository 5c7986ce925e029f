"""Structured payload extraction from free-text model replies.

The model is asked for a JSON array but usually wraps it in prose. The
candidate payload is the substring from the first "[" to the last "]",
inclusive. There is no balanced-bracket scan: a reply with two sibling
arrays decodes as invalid JSON and raises SchemaMismatchError.

Decoding is all-or-nothing. A single record missing a required field, or
with a field of the wrong type, rejects the whole array. Unknown fields are
ignored. Out-of-range numbers (confidence outside [0, 1], negative amounts)
are kept as decoded and reported with a warning.
"""

from typing import Union

from pydantic import TypeAdapter, ValidationError

from fridgechef.models.errors import NoStructuredPayloadError, SchemaMismatchError
from fridgechef.models.models import Ingredient, Recipe, TaskKind
from fridgechef.utils.logger import logger

_INGREDIENT_LIST = TypeAdapter(list[Ingredient])
_RECIPE_LIST = TypeAdapter(list[Recipe])


def locate_json_array(raw_text: str) -> str:
    """Return the substring between the first '[' and the last ']', inclusive.

    Raises:
        NoStructuredPayloadError: If either bracket is missing, or the last
            ']' comes before the first '['.
    """
    start = raw_text.find("[")
    end = raw_text.rfind("]")
    if start == -1 or end == -1 or end < start:
        raise NoStructuredPayloadError()
    return raw_text[start : end + 1]


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{error.error_count()} error(s), first at {location}: {first['msg']}"


def _warn_on_ingredient_ranges(ingredients: list[Ingredient]) -> None:
    for index, ingredient in enumerate(ingredients):
        if not 0.0 <= ingredient.confidence <= 1.0:
            logger.warning(
                f"Ingredient {index} ({ingredient.name!r}) has confidence {ingredient.confidence} outside [0, 1]",
                extra={"task": TaskKind.IMAGE_ANALYSIS.value},
            )


def _warn_on_recipe_ranges(recipes: list[Recipe]) -> None:
    for index, recipe in enumerate(recipes):
        problems = []
        if recipe.cooking_time_minutes < 0:
            problems.append(f"cookingTime={recipe.cooking_time_minutes}")
        if recipe.servings < 1:
            problems.append(f"servings={recipe.servings}")
        nutrition = recipe.nutrition
        if nutrition is not None:
            amounts = {
                "calories": nutrition.calories,
                "protein": nutrition.protein_grams,
                "carbs": nutrition.carbs_grams,
                "fat": nutrition.fat_grams,
                "fiber": nutrition.fiber_grams,
            }
            problems.extend(f"{key}={value}" for key, value in amounts.items() if value is not None and value < 0)
        if problems:
            logger.warning(
                f"Recipe {index} ({recipe.name!r}) has out-of-range values: {', '.join(problems)}",
                extra={"task": TaskKind.RECIPE_GENERATION.value},
            )


class ResponseExtractor:
    """Decode model replies into Ingredient or Recipe lists. Stateless."""

    def extract(self, raw_text: str, task_kind: TaskKind) -> Union[list[Ingredient], list[Recipe]]:
        """Locate and decode the JSON array for the given task.

        Args:
            raw_text: Message content returned by the transport.
            task_kind: Selects the record schema.

        Returns:
            Full list of records in payload order (may be empty for "[]").

        Raises:
            NoStructuredPayloadError: No bracketed payload in the text.
            SchemaMismatchError: Payload is not valid JSON or does not match the schema.
        """
        candidate = locate_json_array(raw_text)

        if task_kind is TaskKind.IMAGE_ANALYSIS:
            adapter = _INGREDIENT_LIST
        elif task_kind is TaskKind.RECIPE_GENERATION:
            adapter = _RECIPE_LIST
        else:
            raise ValueError(f"Unknown task kind: {task_kind!r}")

        try:
            records = adapter.validate_json(candidate)
        except ValidationError as e:
            logger.warning(
                f"Model payload rejected: {_describe_validation_error(e)}",
                extra={"task": task_kind.value},
            )
            raise SchemaMismatchError(
                f"Payload does not match the {task_kind.value} schema: {_describe_validation_error(e)}"
            ) from e

        if task_kind is TaskKind.IMAGE_ANALYSIS:
            _warn_on_ingredient_ranges(records)
        else:
            _warn_on_recipe_ranges(records)

        logger.debug(f"Extracted {len(records)} record(s)", extra={"task": task_kind.value})
        return records

    def extract_ingredients(self, raw_text: str) -> list[Ingredient]:
        return self.extract(raw_text, TaskKind.IMAGE_ANALYSIS)

    def extract_recipes(self, raw_text: str) -> list[Recipe]:
        return self.extract(raw_text, TaskKind.RECIPE_GENERATION)

"""Prompts for the two model tasks.

Provides factory functions that generate the instruction text sent with each
request. Both prompts describe the JSON array the extractor expects, so the
schema text here and the models in fridgechef.models.models must stay in step.
"""

from typing import Sequence

MIN_RECIPES = 3
MAX_RECIPES = 5

INGREDIENT_SCHEMA = """{
    "name": "ingredient name",
    "confidence": 0.95,
    "category": "category (Vegetables, Protein, Dairy, Pantry, etc.)"
}"""

RECIPE_SCHEMA = """{
    "name": "Recipe Name",
    "description": "Brief description",
    "ingredients": ["ingredient1", "ingredient2"],
    "instructions": ["step1", "step2"],
    "cookingTime": 30,
    "difficulty": "Easy/Medium/Hard",
    "servings": 4,
    "tags": ["tag1", "tag2"],
    "nutritionInfo": {
        "calories": 350,
        "protein": 25.5,
        "carbs": 30.2,
        "fat": 15.8,
        "fiber": 8.5
    }
}"""


def get_image_analysis_prompt() -> str:
    """Instruction text sent alongside the fridge photo.

    Returns:
        str: Prompt asking for a JSON array of {name, confidence, category}.
    """
    return f"""Analyze this image of a refrigerator/fridge contents and identify all food items visible.
Return a JSON array of objects with the following structure:
{INGREDIENT_SCHEMA}

Be specific with ingredient names and provide confidence scores between 0.0 and 1.0.
Only include items that are clearly visible and identifiable."""


def format_ingredient_clause(ingredient_names: Sequence[str]) -> str:
    """Join ingredient names into a comma-separated clause, skipping blanks."""
    return ", ".join(name.strip() for name in ingredient_names if name and name.strip())


def get_recipe_generation_prompt(
    ingredient_names: Sequence[str],
    min_recipes: int = MIN_RECIPES,
    max_recipes: int = MAX_RECIPES,
) -> str:
    """Instruction text for recipe generation.

    Args:
        ingredient_names: Available ingredients, in the order the user sees them.
        min_recipes: Lower bound on the number of recipes requested.
        max_recipes: Upper bound on the number of recipes requested.

    Returns:
        str: Prompt with the ingredient clause, the recipe count, permission to
        use pantry staples, and the recipe JSON schema.
    """
    return f"""Based on these available ingredients: {format_ingredient_clause(ingredient_names)}

Generate {min_recipes}-{max_recipes} delicious recipes that can be made with these ingredients.
You may suggest a few additional common pantry items if needed.

Return a JSON array of recipe objects with this structure:
{RECIPE_SCHEMA}

Make recipes practical, delicious, and suitable for home cooking."""

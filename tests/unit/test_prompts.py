"""Unit tests for prompt construction."""

from fridgechef.prompts.prompts import (
    format_ingredient_clause,
    get_image_analysis_prompt,
    get_recipe_generation_prompt,
)


class TestImageAnalysisPrompt:
    def test_prompt_describes_ingredient_schema(self):
        prompt = get_image_analysis_prompt()

        assert "JSON array" in prompt
        for field in ('"name"', '"confidence"', '"category"'):
            assert field in prompt
        assert "between 0.0 and 1.0" in prompt


class TestRecipeGenerationPrompt:
    def test_clause_joins_with_comma(self):
        assert format_ingredient_clause(["Tomatoes", "Garlic"]) == "Tomatoes, Garlic"

    def test_clause_strips_and_skips_blanks(self):
        assert format_ingredient_clause([" Rice ", "", "   ", "Beans"]) == "Rice, Beans"

    def test_clause_of_nothing_is_empty(self):
        assert format_ingredient_clause([]) == ""

    def test_prompt_lists_ingredients_in_order(self):
        prompt = get_recipe_generation_prompt(["Tomatoes", "Garlic", "Pasta"])
        assert prompt.startswith("Based on these available ingredients: Tomatoes, Garlic, Pasta\n")

    def test_prompt_allows_pantry_items(self):
        assert "additional common pantry items" in get_recipe_generation_prompt(["Eggs"])

    def test_prompt_describes_recipe_schema(self):
        prompt = get_recipe_generation_prompt(["Eggs"])
        for field in ("cookingTime", "nutritionInfo", "instructions", "servings"):
            assert field in prompt

    def test_recipe_count_range(self):
        assert "Generate 3-5 delicious recipes" in get_recipe_generation_prompt(["Eggs"])
        assert "Generate 1-2 delicious recipes" in get_recipe_generation_prompt(["Eggs"], 1, 2)

"""Fixed fallback dataset served when ENABLE_REAL_AI_ANALYSIS is false.

Lets the rest of the application be exercised without spending API calls.
"""

from fridgechef.models.models import Ingredient, NutritionInfo, Recipe

FALLBACK_INGREDIENTS: tuple[Ingredient, ...] = (
    Ingredient(name="Tomatoes", confidence=0.95, category="Vegetables"),
    Ingredient(name="Chicken Breast", confidence=0.88, category="Protein"),
    Ingredient(name="Onions", confidence=0.92, category="Vegetables"),
    Ingredient(name="Bell Peppers", confidence=0.87, category="Vegetables"),
    Ingredient(name="Garlic", confidence=0.78, category="Vegetables"),
    Ingredient(name="Olive Oil", confidence=0.85, category="Pantry"),
)

FALLBACK_RECIPES: tuple[Recipe, ...] = (
    Recipe(
        name="Chicken Stir Fry",
        description="A quick and healthy stir fry with vegetables",
        ingredients=["Chicken Breast", "Bell Peppers", "Onions", "Garlic", "Olive Oil"],
        instructions=[
            "Cut chicken into bite-sized pieces",
            "Chop vegetables",
            "Heat oil in a large pan",
            "Cook chicken until golden",
            "Add vegetables and stir fry",
            "Season with salt and pepper",
        ],
        cooking_time_minutes=25,
        difficulty="Easy",
        servings=4,
        tags=["Quick", "Healthy", "Asian"],
        nutrition=NutritionInfo(calories=350, protein_grams=35, carbs_grams=15, fat_grams=12, fiber_grams=5),
    ),
    Recipe(
        name="Tomato Basil Pasta",
        description="Simple and delicious pasta with fresh tomatoes",
        ingredients=["Tomatoes", "Garlic", "Olive Oil", "Pasta"],
        instructions=[
            "Cook pasta according to package",
            "Dice tomatoes",
            "Sauté garlic in olive oil",
            "Add tomatoes and cook",
            "Toss with pasta",
            "Garnish with basil",
        ],
        cooking_time_minutes=20,
        difficulty="Easy",
        servings=2,
        tags=["Italian", "Vegetarian", "Quick"],
        nutrition=NutritionInfo(calories=400, protein_grams=12, carbs_grams=65, fat_grams=8, fiber_grams=4),
    ),
    Recipe(
        name="Vegetable Curry",
        description="Aromatic and spicy vegetable curry",
        ingredients=["Onions", "Garlic", "Bell Peppers", "Tomatoes", "Coconut Milk"],
        instructions=[
            "Sauté onions and garlic",
            "Add spices and cook",
            "Add vegetables",
            "Pour in coconut milk",
            "Simmer until vegetables are tender",
            "Serve with rice",
        ],
        cooking_time_minutes=45,
        difficulty="Medium",
        servings=6,
        tags=["Vegetarian", "Healthy", "Spicy"],
        nutrition=NutritionInfo(calories=280, protein_grams=8, carbs_grams=25, fat_grams=18, fiber_grams=8),
    ),
)

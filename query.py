#!/usr/bin/env python3
"""Ad hoc query runner for FridgeChef.

Analyze a fridge photo and/or generate recipes directly from the terminal.

Usage:
    python query.py --image images/fridge.jpg                 # Detect ingredients
    python query.py --recipes "Tomatoes, Garlic, Pasta"       # Generate recipes
    python query.py --image images/fridge.jpg --recipes       # Photo → ingredients → recipes
    python query.py --recipes "Eggs, Spinach" --save "Spinach Omelette"
    python query.py --favorites                               # List saved favorites
    python query.py --debug --image images/fridge.jpg         # Show full JSON

Features:
- Direct calls to the FridgeChef service, no server needed
- Rich tables for ingredients, panels with numbered steps for recipes
- Debug mode to print the decoded records as JSON
- Favorites stored in DATABASE_URL (SQLite by default)
- Clean exit status: 0 on success, 1 on any error
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from fridgechef.models.errors import FridgeChefError
from fridgechef.models.models import Ingredient, Recipe
from fridgechef.services.chef import FridgeChef
from fridgechef.storage.favorites import FavoritesStore
from fridgechef.utils.config import Config, load_config
from fridgechef.utils.logger import logger

console = Console()

TIER_STYLES = {"high": "green", "medium": "yellow", "low": "red"}


def render_ingredients(ingredients: Sequence[Ingredient]) -> None:
    """Print detected ingredients as a table, colored by confidence tier."""
    if not ingredients:
        console.print("[yellow]No ingredients detected. Try taking a clearer photo of your fridge contents.[/yellow]")
        return

    table = Table(title="Detected Ingredients")
    table.add_column("Ingredient", style="bold")
    table.add_column("Category", style="dim")
    table.add_column("Confidence", justify="right")
    for ingredient in ingredients:
        style = TIER_STYLES[ingredient.confidence_tier]
        confidence = f"[{style}]{ingredient.confidence_percentage}%[/{style}]"
        table.add_row(escape(ingredient.name), escape(ingredient.category), confidence)
    console.print(table)


def recipe_markdown(recipe: Recipe) -> str:
    """Markdown body for one recipe; steps numbered in execution order."""
    lines = [
        f"*{recipe.description}*",
        "",
        f"**Time:** {recipe.formatted_cooking_time} · **Difficulty:** {recipe.difficulty} · "
        f"**Servings:** {recipe.servings}",
    ]
    if recipe.tags:
        lines.append(f"**Tags:** {', '.join(recipe.tags)}")
    lines += ["", "**Ingredients**", ""]
    lines += [f"- {item}" for item in recipe.ingredients]
    lines += ["", "**Instructions**", ""]
    lines += [f"{number}. {step}" for number, step in enumerate(recipe.instructions, start=1)]
    if recipe.nutrition:
        nutrition = recipe.nutrition
        fiber = f" · fiber {nutrition.fiber_grams:g}g" if nutrition.fiber_grams is not None else ""
        lines += [
            "",
            f"**Nutrition:** {nutrition.calories} kcal · protein {nutrition.protein_grams:g}g · "
            f"carbs {nutrition.carbs_grams:g}g · fat {nutrition.fat_grams:g}g{fiber}",
        ]
    return "\n".join(lines)


def render_recipes(recipes: Sequence[Recipe]) -> None:
    if not recipes:
        console.print("[yellow]No recipes returned.[/yellow]")
        return
    for recipe in recipes:
        console.print(Panel(Markdown(recipe_markdown(recipe)), title=escape(recipe.name), border_style="green"))


def print_debug(records: Sequence) -> None:
    console.print("[bold cyan]Debug Mode: Decoded Records[/bold cyan]")
    console.print("[dim]" + "=" * 60 + "[/dim]")
    console.print_json(data=[record.model_dump(mode="json", by_alias=True) for record in records])
    console.print("[dim]" + "=" * 60 + "[/dim]")


def parse_ingredient_list(text: str) -> list[str]:
    """Split a comma-separated ingredient string, dropping blanks."""
    return [name.strip() for name in text.split(",") if name.strip()]


async def run_query(
    config: Config,
    image_path: Optional[str] = None,
    recipes_for: Optional[str] = None,
    save_name: Optional[str] = None,
    debug: bool = False,
) -> None:
    """Execute the requested steps and print the results.

    Args:
        config: Loaded configuration.
        image_path: Photo to analyze, if any.
        recipes_for: Comma-separated ingredients, "" to reuse detected ingredients, None to skip.
        save_name: Name of a generated recipe to store as favorite.
        debug: Print decoded records as JSON.
    """
    chef = FridgeChef(config)
    ingredient_names: list[str] = []

    if image_path:
        image_file = Path(image_path)
        if not image_file.exists():
            raise FileNotFoundError(f"Image file not found: {image_path}")

        logger.info(f"Analyzing image: {image_file.name} ({image_file.stat().st_size / 1024:.1f} KB)")
        ingredients = await chef.analyze_image(image_file.read_bytes())
        if debug:
            print_debug(ingredients)
        render_ingredients(ingredients)
        ingredient_names = [ingredient.name for ingredient in ingredients]

    if recipes_for is None:
        return

    if recipes_for.strip():
        ingredient_names = parse_ingredient_list(recipes_for)
    if not ingredient_names:
        raise ValueError("No ingredients to generate recipes from. Pass --recipes \"a, b\" or --image PATH.")

    logger.info(f"Generating recipes for: {', '.join(ingredient_names)}")
    recipes = await chef.generate_recipes(ingredient_names)
    if debug:
        print_debug(recipes)
    render_recipes(recipes)

    if save_name:
        match = next((recipe for recipe in recipes if recipe.name.lower() == save_name.lower()), None)
        if match is None:
            raise ValueError(f"No generated recipe named {save_name!r}")
        if not config.ENABLE_FAVORITES:
            raise ValueError("Favorites are disabled (ENABLE_FAVORITES=false)")
        FavoritesStore(config.DATABASE_URL).add(match)
        console.print(f"[green]✓ Saved {match.name!r} to favorites[/green]")


def list_favorites(config: Config) -> None:
    if not config.ENABLE_FAVORITES:
        raise ValueError("Favorites are disabled (ENABLE_FAVORITES=false)")
    recipes = FavoritesStore(config.DATABASE_URL).list_favorites()
    if not recipes:
        console.print("[dim]No favorite recipes yet.[/dim]")
        return
    render_recipes(recipes)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect fridge ingredients and get recipe ideas.")
    parser.add_argument("--image", metavar="PATH", help="Photo of fridge contents to analyze")
    parser.add_argument(
        "--recipes",
        nargs="?",
        const="",
        metavar="INGREDIENTS",
        help='Generate recipes; comma-separated ingredients, or none to reuse those detected by --image',
    )
    parser.add_argument("--save", metavar="NAME", help="Save the generated recipe with this name as favorite")
    parser.add_argument("--favorites", action="store_true", help="List favorite recipes and exit")
    parser.add_argument("--debug", action="store_true", help="Print decoded records as JSON")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.image or args.recipes is not None or args.favorites):
        parser.print_help()
        return 1

    try:
        config = load_config()
        if args.favorites:
            list_favorites(config)
            return 0
        asyncio.run(
            run_query(
                config,
                image_path=args.image,
                recipes_for=args.recipes,
                save_name=args.save,
                debug=args.debug,
            )
        )
        return 0
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        return 0
    except FridgeChefError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        console.print(f"[red]✗ {e.user_message}[/red]")
        console.print(f"[dim]{type(e).__name__}: {escape(str(e))}[/dim]")
        return 1
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]✗ Error: {escape(str(e))}[/red]")
        return 1
    except (SQLAlchemyError, OSError) as e:
        logger.debug(f"Favorites store failure: {e!r}")
        console.print(f"[red]✗ Favorites database error: {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())

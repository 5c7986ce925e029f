"""Shared fixtures for FridgeChef tests."""

import copy
import json
from io import BytesIO

import pytest
from PIL import Image

from fridgechef.utils.config import Config

TEST_API_KEY = "sk-test-0123456789abcdef"

RECIPE_PAYLOAD = [
    {
        "name": "Garlic Tomato Bruschetta",
        "description": "Toasted bread topped with garlicky tomatoes",
        "ingredients": ["Tomatoes", "Garlic", "Bread", "Olive Oil"],
        "instructions": ["Toast the bread", "Dice tomatoes", "Rub bread with garlic", "Top and drizzle with oil"],
        "cookingTime": 15,
        "difficulty": "Easy",
        "servings": 4,
        "tags": ["Quick", "Vegetarian"],
        "nutritionInfo": {"calories": 180, "protein": 5.0, "carbs": 28.5, "fat": 6.2, "fiber": 2.1},
    },
    {
        "name": "Roasted Garlic Tomato Soup",
        "description": "Creamy soup from roasted tomatoes",
        "ingredients": ["Tomatoes", "Garlic", "Onion", "Vegetable Stock"],
        "instructions": ["Roast tomatoes and garlic", "Saute onion", "Simmer with stock", "Blend until smooth"],
        "cookingTime": 75,
        "difficulty": "Medium",
        "servings": 6,
        "tags": ["Comfort", "Vegetarian"],
    },
]


def _completion_body(content) -> str:
    return json.dumps({"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture
def completion_body():
    """Factory for a chat-completion response body with the given message content."""
    return _completion_body


@pytest.fixture
def recipe_payload() -> list[dict]:
    return copy.deepcopy(RECIPE_PAYLOAD)


@pytest.fixture
def config() -> Config:
    """Configured for real calls, no fallback delay."""
    return Config(OPENAI_API_KEY=TEST_API_KEY, OPENAI_BASE_URL="https://api.test/v1", MOCK_ANALYSIS_DELAY=0)


@pytest.fixture
def unconfigured_config() -> Config:
    return Config(OPENAI_API_KEY="", MOCK_ANALYSIS_DELAY=0)


@pytest.fixture
def jpeg_bytes() -> bytes:
    output = BytesIO()
    Image.new("RGB", (64, 48), (200, 40, 40)).save(output, format="JPEG")
    return output.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    output = BytesIO()
    Image.new("RGBA", (64, 48), (40, 200, 40, 128)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def recipe_reply() -> str:
    return f"Here are some ideas!\n\n{json.dumps(RECIPE_PAYLOAD, indent=2)}\n\nHappy cooking!"

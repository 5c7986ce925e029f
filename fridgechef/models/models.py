"""Data models and schemas for FridgeChef.

Defines Pydantic models for the domain records handed to callers
(Ingredient, Recipe, NutritionInfo) and for the chat-completion wire format
exchanged with the remote model. All models use Pydantic v2.

Domain records are frozen value objects. Recipe and NutritionInfo use the
model's camelCase wire names as aliases, so `model_dump(by_alias=True)` and
`model_validate` are inverse operations.
"""

import math
from enum import Enum
from typing import Annotated, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HIGH_CONFIDENCE_THRESHOLD = 0.9
MEDIUM_CONFIDENCE_THRESHOLD = 0.7


class TaskKind(str, Enum):
    """The two request pipelines served by the core."""

    IMAGE_ANALYSIS = "image_analysis"
    RECIPE_GENERATION = "recipe_generation"


# ============================================================================
# Domain Records
# ============================================================================


class Ingredient(BaseModel):
    """A food item recognized in a photo.

    Confidence is passed through as decoded; values outside [0.0, 1.0] are
    kept and only reported by the extractor.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Annotated[str, Field(description="Ingredient name, e.g. 'Tomatoes'")]
    confidence: Annotated[float, Field(description="Recognition confidence (expected 0.0-1.0)")]
    category: Annotated[str, Field(description="Category such as Vegetables, Protein, Dairy, Pantry")]

    @property
    def confidence_percentage(self) -> int:
        """Confidence as a whole percentage, rounding halves up (0.125 -> 13)."""
        return math.floor(self.confidence * 100 + 0.5)

    @property
    def confidence_tier(self) -> str:
        """'high' (>= 0.9), 'medium' (0.7 - 0.9) or 'low'."""
        if self.confidence >= HIGH_CONFIDENCE_THRESHOLD:
            return "high"
        if self.confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
            return "medium"
        return "low"


class NutritionInfo(BaseModel):
    """Per-serving nutrition estimate attached to a recipe."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    calories: Annotated[int, Field(description="Kilocalories per serving")]
    protein_grams: Annotated[float, Field(alias="protein")]
    carbs_grams: Annotated[float, Field(alias="carbs")]
    fat_grams: Annotated[float, Field(alias="fat")]
    fiber_grams: Annotated[Optional[float], Field(alias="fiber")] = None


class Recipe(BaseModel):
    """A recipe suggestion generated from a list of available ingredients.

    `instructions` is in execution order. `tags` behaves as a set: duplicates
    are dropped on construction, first occurrence wins.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    name: Annotated[str, Field(description="Recipe name; also its identity in the favorites store")]
    description: Annotated[str, Field(description="Brief description")]
    ingredients: Annotated[tuple[str, ...], Field(description="Ingredient lines in display order")]
    instructions: Annotated[tuple[str, ...], Field(description="Steps in execution order")]
    cooking_time_minutes: Annotated[int, Field(alias="cookingTime", description="Total time in minutes")]
    difficulty: Annotated[str, Field(description="Easy, Medium or Hard (not enforced)")]
    servings: Annotated[int, Field(description="Number of servings")]
    tags: Annotated[tuple[str, ...], Field(description="Free-form tags such as Quick or Vegetarian")]
    nutrition: Annotated[Optional[NutritionInfo], Field(alias="nutritionInfo")] = None
    image_url: Annotated[Optional[str], Field(alias="imageURL")] = None

    @field_validator("tags", mode="after")
    @classmethod
    def deduplicate_tags(cls, tags: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(tags))

    @property
    def formatted_cooking_time(self) -> str:
        """Human-readable cooking time: '25 min', '1h' or '1h 30m'."""
        if self.cooking_time_minutes < 60:
            return f"{self.cooking_time_minutes} min"
        hours, minutes = divmod(self.cooking_time_minutes, 60)
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"

    def to_wire(self) -> dict:
        """Serialize using the model's wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Chat-Completion Wire Format
# ============================================================================


class ImageURL(BaseModel):
    url: str


class ContentPart(BaseModel):
    """One typed part of a request message (text or image)."""

    type: Literal["text", "image_url"]
    text: Optional[str] = None
    image_url: Optional[ImageURL] = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def from_image_url(cls, url: str) -> "ContentPart":
        return cls(type="image_url", image_url=ImageURL(url=url))


class RequestMessage(BaseModel):
    """Request-side message: content is a list of typed parts."""

    role: str = "user"
    content: list[ContentPart]


class ChatCompletionRequest(BaseModel):
    """Request envelope sent to {base_url}/chat/completions."""

    task: ClassVar[TaskKind]

    model: str
    messages: list[RequestMessage]
    max_tokens: Annotated[int, Field(ge=1)]

    def to_wire(self) -> dict:
        """Body for the POST request; unset optional part fields are omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class ImageAnalysisRequest(ChatCompletionRequest):
    task: ClassVar[TaskKind] = TaskKind.IMAGE_ANALYSIS


class RecipeGenerationRequest(ChatCompletionRequest):
    task: ClassVar[TaskKind] = TaskKind.RECIPE_GENERATION


class ResponseMessage(BaseModel):
    """Response-side message: content is plain text, unlike the request side."""

    role: str = "assistant"
    content: Optional[str] = None


class Choice(BaseModel):
    message: ResponseMessage


class ChatCompletionResponse(BaseModel):
    """Subset of the chat-completion response the core relies on."""

    choices: list[Choice]

"""Request construction for the two model tasks.

RequestBuilder turns caller input into a chat-completion request envelope:
- Image analysis: instruction text part + JPEG data-URI image part
- Recipe generation: single text part with the ingredient clause

Building is a pure data transformation; nothing here touches the network.
"""

from typing import Sequence

from fridgechef.models.errors import MissingCredentialError
from fridgechef.models.models import (
    ContentPart,
    ImageAnalysisRequest,
    RecipeGenerationRequest,
    RequestMessage,
)
from fridgechef.prompts.prompts import (
    format_ingredient_clause,
    get_image_analysis_prompt,
    get_recipe_generation_prompt,
)
from fridgechef.services.images import encode_data_uri, prepare_image_for_upload
from fridgechef.utils.config import Config
from fridgechef.utils.logger import logger


class RequestBuilder:
    """Build task-specific request envelopes from an immutable Config."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def _require_credential(self) -> None:
        if not self.config.is_openai_configured:
            raise MissingCredentialError()

    def build_image_analysis_request(self, image_bytes: bytes) -> ImageAnalysisRequest:
        """Build the vision request for a fridge photo.

        Args:
            image_bytes: Raw image bytes (JPEG, PNG, WEBP, GIF, BMP or TIFF).

        Returns:
            ImageAnalysisRequest with one user message: prompt text, then image.

        Raises:
            MissingCredentialError: If no API key is configured.
            InvalidImageError: If the image cannot be normalized to JPEG.
        """
        self._require_credential()

        jpeg_bytes = prepare_image_for_upload(image_bytes, self.config)
        data_uri = encode_data_uri(jpeg_bytes)
        logger.debug(
            f"Built image analysis request ({len(jpeg_bytes) / 1024:.1f}KB JPEG)",
            extra={"task": ImageAnalysisRequest.task.value, "model": self.config.IMAGE_ANALYSIS_MODEL},
        )

        return ImageAnalysisRequest(
            model=self.config.IMAGE_ANALYSIS_MODEL,
            messages=[
                RequestMessage(
                    role="user",
                    content=[
                        ContentPart.from_text(get_image_analysis_prompt()),
                        ContentPart.from_image_url(data_uri),
                    ],
                )
            ],
            max_tokens=self.config.IMAGE_ANALYSIS_MAX_TOKENS,
        )

    def build_recipe_generation_request(self, ingredient_names: Sequence[str]) -> RecipeGenerationRequest:
        """Build the text request for recipe suggestions.

        Args:
            ingredient_names: Available ingredient names; order is kept.

        Returns:
            RecipeGenerationRequest with a single text part.

        Raises:
            MissingCredentialError: If no API key is configured.
            ValueError: If no non-blank ingredient name was given.
        """
        self._require_credential()

        if isinstance(ingredient_names, str):
            raise ValueError("ingredient_names must be a sequence of names, not a single string")
        if not format_ingredient_clause(ingredient_names):
            raise ValueError("At least one ingredient name is required to generate recipes")

        logger.debug(
            f"Built recipe generation request for {len(ingredient_names)} ingredient(s)",
            extra={"task": RecipeGenerationRequest.task.value, "model": self.config.RECIPE_MODEL},
        )

        return RecipeGenerationRequest(
            model=self.config.RECIPE_MODEL,
            messages=[
                RequestMessage(
                    role="user",
                    content=[ContentPart.from_text(get_recipe_generation_prompt(ingredient_names))],
                )
            ],
            max_tokens=self.config.RECIPE_MAX_TOKENS,
        )

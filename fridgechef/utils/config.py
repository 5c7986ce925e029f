"""Configuration management for FridgeChef.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

The configuration is read once at process start by load_config() and handed
explicitly to the components that need it. Config instances are frozen.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Placeholder shipped in example .env files; treated the same as an empty key
API_KEY_PLACEHOLDER = "your-openai-api-key-here"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config(BaseModel):
    """Application configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    # OpenAI Configuration
    # API key sent as bearer token; empty means every call fails with MissingCredentialError
    OPENAI_API_KEY: str = ""
    # Base URL of an OpenAI-compatible API; /chat/completions is appended
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    # Vision model used for fridge photo analysis
    IMAGE_ANALYSIS_MODEL: str = "gpt-4-vision-preview"
    # Text model used for recipe generation
    RECIPE_MODEL: str = "gpt-4"
    # Output token ceilings per task
    IMAGE_ANALYSIS_MAX_TOKENS: int = 1000
    RECIPE_MAX_TOKENS: int = 2000
    # Total time allowed for one HTTP round trip (seconds)
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    # Feature Flags
    # ENABLE_REAL_AI_ANALYSIS: false serves the fixed fallback dataset instead of calling the model
    ENABLE_REAL_AI_ANALYSIS: bool = True
    ENABLE_RECIPE_GENERATION: bool = True
    ENABLE_FAVORITES: bool = True
    # Simulated latency (seconds) for fallback mode
    MOCK_ANALYSIS_DELAY: float = 2.0

    # Image Normalization
    # Maximum image size (in MB) accepted for upload. Default: 5 MB
    MAX_IMAGE_SIZE_MB: int = 5
    # Images wider than this are downsized before upload
    MAX_IMAGE_WIDTH: int = 1024
    # JPEG quality used when re-encoding (1-95)
    JPEG_QUALITY: int = 80
    # Re-encode JPEG input only when it is larger than the threshold (in KB)
    COMPRESS_IMG: bool = True
    COMPRESS_IMG_THRESHOLD_KB: int = 300

    # Favorites persistence (SQLAlchemy URL)
    DATABASE_URL: str = "sqlite:///fridgechef.db"

    @classmethod
    def from_env(cls) -> "Config":
        """Build configuration from environment variables."""
        return cls(
            OPENAI_API_KEY=os.getenv("OPENAI_API_KEY", "").strip(),
            OPENAI_BASE_URL=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            IMAGE_ANALYSIS_MODEL=os.getenv("IMAGE_ANALYSIS_MODEL", "gpt-4-vision-preview"),
            RECIPE_MODEL=os.getenv("RECIPE_MODEL", "gpt-4"),
            IMAGE_ANALYSIS_MAX_TOKENS=int(os.getenv("IMAGE_ANALYSIS_MAX_TOKENS", "1000")),
            RECIPE_MAX_TOKENS=int(os.getenv("RECIPE_MAX_TOKENS", "2000")),
            REQUEST_TIMEOUT_SECONDS=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60")),
            ENABLE_REAL_AI_ANALYSIS=_env_bool("ENABLE_REAL_AI_ANALYSIS", "true"),
            ENABLE_RECIPE_GENERATION=_env_bool("ENABLE_RECIPE_GENERATION", "true"),
            ENABLE_FAVORITES=_env_bool("ENABLE_FAVORITES", "true"),
            MOCK_ANALYSIS_DELAY=float(os.getenv("MOCK_ANALYSIS_DELAY", "2.0")),
            MAX_IMAGE_SIZE_MB=int(os.getenv("MAX_IMAGE_SIZE_MB", "5")),
            MAX_IMAGE_WIDTH=int(os.getenv("MAX_IMAGE_WIDTH", "1024")),
            JPEG_QUALITY=int(os.getenv("JPEG_QUALITY", "80")),
            COMPRESS_IMG=_env_bool("COMPRESS_IMG", "true"),
            COMPRESS_IMG_THRESHOLD_KB=int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300")),
            DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///fridgechef.db"),
        )

    @property
    def is_openai_configured(self) -> bool:
        """True when a usable API key is present."""
        return bool(self.OPENAI_API_KEY) and self.OPENAI_API_KEY != API_KEY_PLACEHOLDER

    @property
    def chat_completions_url(self) -> str:
        return f"{self.OPENAI_BASE_URL.rstrip('/')}/chat/completions"

    def check_ranges(self) -> None:
        """Validate configuration values.

        A missing API key is not a configuration error: it is reported per call
        so that the application can still start and explain what is missing.

        Raises:
            ValueError: If a value is out of its allowed range.
        """
        if not self.OPENAI_BASE_URL.startswith(("http://", "https://")):
            raise ValueError(f"OPENAI_BASE_URL must be an http(s) URL, got: {self.OPENAI_BASE_URL}")
        if self.IMAGE_ANALYSIS_MAX_TOKENS < 1:
            raise ValueError(
                f"IMAGE_ANALYSIS_MAX_TOKENS must be at least 1, got: {self.IMAGE_ANALYSIS_MAX_TOKENS}"
            )
        if self.RECIPE_MAX_TOKENS < 1:
            raise ValueError(f"RECIPE_MAX_TOKENS must be at least 1, got: {self.RECIPE_MAX_TOKENS}")
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.MOCK_ANALYSIS_DELAY < 0:
            raise ValueError(f"MOCK_ANALYSIS_DELAY must not be negative, got: {self.MOCK_ANALYSIS_DELAY}")
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}")
        if self.MAX_IMAGE_WIDTH < 64:
            raise ValueError(f"MAX_IMAGE_WIDTH must be at least 64, got: {self.MAX_IMAGE_WIDTH}")
        if not (1 <= self.JPEG_QUALITY <= 95):
            raise ValueError(f"JPEG_QUALITY must be between 1 and 95, got: {self.JPEG_QUALITY}")


def load_config(env_file: Optional[str] = None) -> Config:
    """Load .env (if present), read the environment once and validate.

    Args:
        env_file: Optional explicit path to a .env file.

    Returns:
        Validated, immutable Config.

    Raises:
        ValueError: If a configured value is invalid.
    """
    # Silently continues if the file is missing
    load_dotenv(env_file)
    config = Config.from_env()
    config.check_ranges()
    return config

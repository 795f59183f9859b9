"""
Runtime configuration.

Settings are read from ``AUDIORANK_*`` environment variables or a local
``.env`` file via ``pydantic-settings``, with defaults matching the
documented behavior of the ranking engine.

Usage:
    settings = get_settings()
    vector = synthesize(descriptor, dimensions=settings.dimensions)
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from audiorank.core.models import EmbeddingModel


# Bounds on feature vector length
MIN_DIMENSIONS = 128
MAX_DIMENSIONS = 1536
DEFAULT_DIMENSIONS = 768

# Default number of batch jobs in flight at once
DEFAULT_CONCURRENCY_LIMIT = 5


class Settings(BaseSettings):
    """
    Engine-wide settings.

    Attributes:
        dimensions: Feature vector length used by the engine
        normalize: Whether synthesized vectors are L2-normalized
        default_model: Model preselected by the playground app; descriptors
                       and the engine do not read it
        concurrency_limit: Maximum batch jobs executing at once
        strict_dimensions: Raise on dimension mismatch instead of scoring 0.0
        log_level: Level passed to configure_logging()
        log_format: "console" or "json"
    """

    model_config = SettingsConfigDict(
        env_prefix="AUDIORANK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    dimensions: int = Field(default=DEFAULT_DIMENSIONS, ge=MIN_DIMENSIONS, le=MAX_DIMENSIONS)
    normalize: bool = True
    default_model: EmbeddingModel = EmbeddingModel.AUDIO_DOMAIN
    concurrency_limit: int = Field(default=DEFAULT_CONCURRENCY_LIMIT, ge=1)
    strict_dimensions: bool = False
    log_level: str = "INFO"
    log_format: str = "console"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()

"""
config.py — Environment configuration for the layout engine.

Uses pydantic-settings for type-safe environment variable handling.
Every setting can be overridden with a ``BOXLAYOUT_`` prefixed variable,
e.g. ``BOXLAYOUT_DEFAULT_ALGORITHM=grid``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_LABEL_MARGIN, DEFAULT_MARGIN, MAX_DEPTH_HOPS
from .models import Margins


class LayoutSettings(BaseSettings):
    """Layout engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="BOXLAYOUT_", env_file=".env", extra="ignore")

    # Algorithm used by a LayoutManager created without an explicit type
    default_algorithm: str = "mixed-flow"

    # Margins used when a caller passes none
    margin: float = Field(default=DEFAULT_MARGIN, ge=0)
    label_margin: float = Field(default=DEFAULT_LABEL_MARGIN, ge=0)

    # Parent hops walked before depth calculation gives up
    max_depth_hops: int = Field(default=MAX_DEPTH_HOPS, ge=1)

    def margins(self) -> Margins:
        """Default margins as a Margins value."""
        return Margins(margin=self.margin, label_margin=self.label_margin)


@lru_cache()
def get_settings() -> LayoutSettings:
    """Get cached settings instance."""
    return LayoutSettings()

"""Configuration and client construction for the generative AI gateway.

The gateway is any OpenAI-compatible chat-completions endpoint. By default it
is OpenRouter serving Gemini models, which covers text, JSON-schema replies,
image output and audio output through a single API.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, field_validator

from lyricsmith.models.constants import FEATURES

log = logging.getLogger(__name__)

# OpenRouter config — set OPENROUTER_API_KEY env var
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TEXT_MODEL = "google/gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "google/gemini-2.5-flash-image-preview"
DEFAULT_SPEECH_MODEL = "openai/gpt-4o-audio-preview"

_TRUTHY = {"1", "true", "yes", "on"}


class MissingCredentialError(ValueError):
    """Raised when a client is requested without an API key."""


class GatewayConfig(BaseModel):
    """Explicit settings for talking to the gateway."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(default=None, repr=False)
    base_url: str = OPENROUTER_BASE_URL
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    speech_model: str = DEFAULT_SPEECH_MODEL
    disabled_features: frozenset[str] = frozenset()
    debug: bool = False

    @field_validator("disabled_features", mode="after")
    @classmethod
    def _known_features(cls, value: frozenset[str]) -> frozenset[str]:
        unknown = value - FEATURES
        if unknown:
            raise ValueError(f"unknown features: {', '.join(sorted(unknown))}")
        return value

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "GatewayConfig":
        """Read settings from the process environment (or the given mapping)."""
        env = os.environ if environ is None else environ
        disabled = frozenset(
            name.strip()
            for name in env.get("LYRICSMITH_DISABLED_FEATURES", "").split(",")
            if name.strip()
        )
        return cls(
            api_key=env.get("OPENROUTER_API_KEY") or None,
            base_url=env.get("OPENROUTER_BASE_URL", OPENROUTER_BASE_URL),
            text_model=env.get("LYRICSMITH_TEXT_MODEL", DEFAULT_TEXT_MODEL),
            image_model=env.get("LYRICSMITH_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            speech_model=env.get("LYRICSMITH_SPEECH_MODEL", DEFAULT_SPEECH_MODEL),
            disabled_features=disabled,
            debug=env.get("LYRICSMITH_DEBUG", "").strip().lower() in _TRUTHY,
        )

    def feature_enabled(self, feature: str) -> bool:
        return feature not in self.disabled_features


def make_client(config: GatewayConfig) -> AsyncOpenAI:
    """Create an async OpenAI-compatible client pointing at the gateway."""
    if not config.api_key:
        raise MissingCredentialError("OPENROUTER_API_KEY is not set")
    log.debug("Creating gateway client for %s", config.base_url)
    return AsyncOpenAI(base_url=config.base_url, api_key=config.api_key)

"""Typed inputs and results exchanged between the songwriting UI and the AI gateway."""

from __future__ import annotations

from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _ordered_unique(values: list[str]) -> list[str]:
    """Drop duplicates, keeping the first occurrence of each label."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class _CamelModel(BaseModel):
    """Accepts both the camelCase JSON names and the snake_case attribute names."""

    model_config = ConfigDict(populate_by_name=True)


class PromptParams(_CamelModel):
    """Everything the UI knows about the song when asking for a Suno-style prompt."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vocal_x: float = Field(
        alias="vocalX", ge=-100, le=100, description="Male (-100) to female (100) axis"
    )
    vocal_y: float = Field(
        alias="vocalY", ge=-100, le=100, description="Low (-100) to high (100) pitch axis"
    )
    genres: list[str] = Field(default_factory=list)
    textures: list[str] = Field(default_factory=list)
    instruments: list[str] = Field(default_factory=list)
    artist: Optional[str] = Field(default=None, description="Reference artist, never named in output")

    @field_validator("genres", "textures", "instruments", mode="after")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _ordered_unique(value)

    @field_validator("textures", "instruments", mode="after")
    @classmethod
    def _at_most_two(cls, value: list[str]) -> list[str]:
        if len(value) > 2:
            raise ValueError(f"at most 2 selections allowed, got {len(value)}")
        return value


class ArtistAnalysisResult(_CamelModel):
    """Style profile of an artist as estimated by the model.

    Selection counts (genres <= 3, textures <= 2, instruments <= 2) and the
    -100..100 ranges are requested in the prompt; only the shape is checked here.
    """

    vocal_x: float = Field(alias="vocalX")
    vocal_y: float = Field(alias="vocalY")
    genres: list[str] = Field(default_factory=list)
    textures: list[str] = Field(default_factory=list)
    instruments: list[str] = Field(default_factory=list)


class AudioAnalysisResult(_CamelModel):
    """Vocal position and textures estimated from a recorded voice."""

    vocal_x: float = Field(alias="vocalX")
    vocal_y: float = Field(alias="vocalY")
    textures: list[str] = Field(default_factory=list)


class VisualPromptResult(_CamelModel):
    scene_description: str = Field(
        alias="sceneDescription", description="Short scene summary, about 30 characters"
    )
    image_prompt: str = Field(alias="imagePrompt", description="Detailed image generation prompt")


class VideoPromptReply(_CamelModel):
    """What the model is asked to return for a lyric section."""

    scene_description: str = Field(alias="sceneDescription")
    sora_prompt: str = Field(alias="soraPrompt", description="Detailed video generation prompt")


class VideoPromptResult(VideoPromptReply):
    """Video prompt for one lyric section, carrying the section text it was made from."""

    lyrics_part: str = Field(alias="lyricsPart")


class VoiceSample(BaseModel):
    """Decoded speech ready for playback."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    voice: str
    sample_rate: int
    samples: np.ndarray = Field(description="Mono float32 samples in [-1, 1]")

    @property
    def duration_seconds(self) -> float:
        return len(self.samples) / self.sample_rate

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

import numpy as np

log = logging.getLogger(__name__)


@runtime_checkable
class AudioPlayer(Protocol):
    """Interface for audio output devices.

    The only requirement is an async `play` method that takes float samples
    in [-1, 1] and returns once playback has finished.
    """

    async def play(self, samples: np.ndarray, sample_rate: int) -> None: ...


class SoundDevicePlayer:
    """Plays through the default output device using sounddevice."""

    async def play(self, samples: np.ndarray, sample_rate: int) -> None:
        # PortAudio is loaded on import, so keep it off the module import path.
        import sounddevice as sd

        log.info(
            "Playing %.2fs of audio at %d Hz", len(samples) / sample_rate, sample_rate
        )
        await asyncio.to_thread(_play_blocking, sd, samples, sample_rate)


def _play_blocking(sd, samples: np.ndarray, sample_rate: int) -> None:
    sd.play(samples, samplerate=sample_rate)
    sd.wait()

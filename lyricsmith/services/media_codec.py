"""Base64, data-URL and PCM conversions for media returned by the gateway."""

from __future__ import annotations

import base64
import re

import numpy as np

SPEECH_SAMPLE_RATE = 24000
PCM16_SCALE = 32768.0

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]+)?(?:;[^,]*)?;base64,(?P<data>.*)$", re.DOTALL)


def strip_data_url_prefix(payload: str) -> str:
    """Return the base64 body of ``payload``, dropping a ``data:...;base64,`` prefix."""
    match = _DATA_URL_RE.match(payload)
    if match:
        return match.group("data")
    return payload


def split_data_url(url: str) -> tuple[str, str] | None:
    """Split a data URL into ``(mime, base64 data)``; None if it is not one."""
    match = _DATA_URL_RE.match(url)
    if not match:
        return None
    return match.group("mime") or "application/octet-stream", match.group("data")


def to_data_uri(mime_type: str, data: str) -> str:
    return f"data:{mime_type};base64,{data}"


def encode_base64(raw: bytes) -> str:
    return base64.standard_b64encode(raw).decode("utf-8")


def decode_base64(payload: str) -> bytes:
    return base64.b64decode(strip_data_url_prefix(payload))


def decode_pcm16(raw: bytes, num_channels: int = 1) -> np.ndarray:
    """Decode 16-bit little-endian interleaved PCM into float32 frames.

    Returns an array of shape ``(frames, num_channels)`` where
    ``frames == len(raw) // 2 // num_channels`` and every value is
    ``int16 / 32768.0``. A trailing partial frame is dropped.
    """
    if num_channels < 1:
        raise ValueError("num_channels must be at least 1")
    frame_count = len(raw) // 2 // num_channels
    usable = frame_count * num_channels * 2
    ints = np.frombuffer(raw[:usable], dtype="<i2")
    return (ints.astype(np.float32) / PCM16_SCALE).reshape(frame_count, num_channels)


def encode_pcm16(samples: np.ndarray) -> bytes:
    """Inverse of decode_pcm16: float samples in [-1, 1] to 16-bit little-endian bytes."""
    scaled = np.clip(np.round(np.asarray(samples) * PCM16_SCALE), -32768, 32767)
    return scaled.astype("<i2").tobytes()

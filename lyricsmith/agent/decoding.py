"""Turn raw chat-completion replies into text, models and media payloads."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from lyricsmith.services.media_codec import decode_base64, split_data_url, to_data_uri

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Only a fence opening or closing the reply; backticks inside JSON strings stay
_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


class ResponseFormatError(ValueError):
    """Raised when a reply lacks the text, JSON or media payload that was requested."""


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a dict or an SDK object alike."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def first_message(response: Any) -> Any:
    """Return the assistant message of the first choice."""
    choices = _field(response, "choices") or []
    if not choices:
        raise ResponseFormatError("Reply has no choices")
    return _field(choices[0], "message")


def reply_text(response: Any) -> str:
    """Return the assistant text, trimmed. Missing content becomes ''."""
    content = _field(first_message(response), "content")
    if content is None:
        return ""
    if isinstance(content, list):
        # Some providers return content as a list of typed parts
        content = "".join(
            _field(part, "text") or "" for part in content if _field(part, "type") == "text"
        )
    return str(content).strip()


def strip_code_fences(text: str) -> str:
    """Remove the Markdown code fence (```json ... ```) wrapping a reply."""
    return _FENCE_RE.sub("", text).strip()


def parse_json_reply(text: str, model: type[ModelT]) -> ModelT:
    """Parse a (possibly fenced) JSON reply into ``model``.

    Raises json.JSONDecodeError, pydantic.ValidationError or ResponseFormatError.
    """
    cleaned = strip_code_fences(text)
    json_start = cleaned.find("{")
    json_end = cleaned.rfind("}") + 1
    if json_start < 0 or json_end <= json_start:
        raise ResponseFormatError("No JSON found in reply")
    data = json.loads(cleaned[json_start:json_end])
    return model.model_validate(data)


def find_inline_image(response: Any) -> Optional[str]:
    """Scan a reply for an inline image and return it as a data URI.

    Looks at the ``images`` list OpenRouter attaches to image-capable models
    and at typed content parts (``image_url`` or ``inline_data``).
    """
    message = first_message(response)
    parts: list[Any] = list(_field(message, "images") or [])
    content = _field(message, "content")
    if isinstance(content, list):
        parts.extend(content)

    for part in parts:
        image_url = _field(part, "image_url")
        url = _field(image_url, "url") if image_url is not None else None
        if isinstance(url, str):
            split = split_data_url(url)
            if split:
                mime_type, data = split
                return to_data_uri(mime_type, data)
            log.warning("Ignoring non-inline image URL in reply: %s", url[:80])
            continue

        inline = _field(part, "inline_data")
        if inline is not None and _field(inline, "data"):
            mime_type = _field(inline, "mime_type") or "image/png"
            return to_data_uri(mime_type, _field(inline, "data"))
    return None


async def collect_stream_audio(stream: Any) -> bytes:
    """Join the audio carried by a streamed reply into raw bytes.

    Each chunk's ``delta.audio.data`` is base64 on its own, so chunks are
    decoded one by one. Chunks without choices (usage) or without audio data
    (transcript only) are skipped.
    """
    pieces: list[bytes] = []
    async for chunk in stream:
        choices = _field(chunk, "choices") or []
        if not choices:
            continue
        audio = _field(_field(choices[0], "delta"), "audio")
        data = _field(audio, "data")
        if data:
            pieces.append(decode_base64(data))
    return b"".join(pieces)

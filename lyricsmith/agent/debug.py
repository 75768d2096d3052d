"""Debug tracing utilities for gateway requests."""

from __future__ import annotations

import json
import logging
from typing import Any

log = logging.getLogger(__name__)


def _format_value(value: Any, max_length: int | None = 300) -> str:
    """Format a value for display, truncating if needed."""
    if isinstance(value, str):
        s = value
    elif isinstance(value, bytes):
        s = f"<bytes {len(value)} bytes>"
    elif isinstance(value, (dict, list)):
        s = json.dumps(value, indent=2, default=str, ensure_ascii=False)
    else:
        s = str(value)

    if max_length is not None and len(s) > max_length:
        return s[:max_length] + f"\n... (truncated {len(s) - max_length} chars)"
    return s


def _format_content(content: Any) -> str:
    if isinstance(content, str):
        return _format_value(content)
    # Multimodal parts: never dump inline audio or image data
    parts = []
    for part in content:
        kind = part.get("type", "?")
        if kind == "text":
            parts.append(f"text: {_format_value(part.get('text', ''), max_length=200)}")
        else:
            parts.append(f"<{kind} part>")
    return "\n      ".join(parts)


def trace_request(function: str, model: str, messages: list[dict], **params: Any) -> None:
    """Log an outgoing request."""
    log.debug("=" * 80)
    log.debug(f"REQUEST: {function}")
    log.debug("=" * 80)
    log.debug(f"Model: {model}")
    for key, value in params.items():
        if value is not None:
            log.debug(f"{key}: {_format_value(value, max_length=200)}")
    for i, message in enumerate(messages):
        log.debug(f"  [{i}] {message['role'].upper()}")
        log.debug(f"      {_format_content(message['content'])}")
    log.debug("=" * 80)


def trace_reply(function: str, text: str) -> None:
    """Log the text of a reply."""
    log.debug("=" * 80)
    log.debug(f"REPLY: {function}")
    log.debug("=" * 80)
    log.debug(_format_value(text, max_length=None))
    log.debug("=" * 80)

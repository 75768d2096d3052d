"""Multi-turn conversation with the producer assistant."""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from lyricsmith.agent.debug import trace_reply, trace_request
from lyricsmith.agent.decoding import reply_text

log = logging.getLogger(__name__)


class ChatSession:
    """Handle to one conversation.

    Chat completions are stateless, so the handle keeps the transcript that is
    replayed on every turn. Only completed turns are recorded.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        system_instruction: str,
        debug: bool = False,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self.model = model
        self.system_instruction = system_instruction
        self._debug = debug
        self._owns_client = owns_client
        self._history: list[dict[str, Any]] = []

    @property
    def history(self) -> list[dict[str, Any]]:
        """Completed turns, oldest first (a copy)."""
        return list(self._history)

    async def send_message(self, text: str) -> Optional[str]:
        """Send one user message and return the assistant reply, or None on failure."""
        user_message = {"role": "user", "content": text}
        messages = [
            {"role": "system", "content": self.system_instruction},
            *self._history,
            user_message,
        ]
        if self._debug:
            trace_request("chat", self.model, messages)
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
            answer = reply_text(response)
        except Exception as e:
            log.error("Chat turn failed: %s", e, exc_info=True)
            return None

        if self._debug:
            trace_reply("chat", answer)
        self._history.extend([user_message, {"role": "assistant", "content": answer}])
        return answer

    async def close(self) -> None:
        """Release the client if this session created it."""
        if self._owns_client:
            await self._client.close()

import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from lyricsmith.services.gateway_client import GatewayConfig


def make_reply(content=None, images=None):
    """Build an object shaped like a chat-completions reply."""
    message = SimpleNamespace(role="assistant", content=content, images=images)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeAudioStream:
    """Async iterator shaped like a streamed audio reply.

    Each item of ``pieces`` is raw PCM bytes (sent as one base64 audio delta)
    or a str (sent as a transcript-only delta). A trailing usage chunk with
    no choices closes the stream.
    """

    def __init__(self, pieces):
        self._chunks = [self._chunk(piece) for piece in pieces]
        self._chunks.append(SimpleNamespace(choices=[], usage={"total_tokens": 42}))

    @staticmethod
    def _chunk(piece):
        if isinstance(piece, str):
            audio = {"transcript": piece}
        else:
            audio = {"id": "audio_1", "data": base64.b64encode(piece).decode("ascii")}
        delta = SimpleNamespace(role="assistant", content=None, audio=audio)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, delta=delta)])

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for chunk in self._chunks:
            yield chunk


@pytest.fixture
def config():
    return GatewayConfig(api_key="test-key")


@pytest.fixture
def fake_client():
    """OpenAI-like client whose chat.completions.create is an AsyncMock."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def failing_client(fake_client):
    fake_client.chat.completions.create.side_effect = ConnectionError("network down")
    return fake_client


@pytest.fixture
def reply():
    return make_reply


@pytest.fixture
def audio_stream():
    return FakeAudioStream

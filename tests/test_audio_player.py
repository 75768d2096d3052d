import logging
import sys
from unittest.mock import MagicMock

import numpy as np
import pytest

from lyricsmith.agent import songwriting_agent as agent
from lyricsmith.services.audio_player import AudioPlayer, SoundDevicePlayer
from lyricsmith.services.gateway_client import GatewayConfig


@pytest.fixture
def fake_sounddevice(monkeypatch):
    sd = MagicMock()
    monkeypatch.setitem(sys.modules, "sounddevice", sd)
    return sd


class TestSoundDevicePlayer:
    def test_satisfies_protocol(self):
        assert isinstance(SoundDevicePlayer(), AudioPlayer)

    @pytest.mark.asyncio
    async def test_plays_and_waits(self, fake_sounddevice):
        samples = np.zeros(2400, dtype=np.float32)

        await SoundDevicePlayer().play(samples, 24000)

        fake_sounddevice.play.assert_called_once()
        assert fake_sounddevice.play.call_args.kwargs == {"samplerate": 24000}
        assert fake_sounddevice.play.call_args.args[0] is samples
        fake_sounddevice.wait.assert_called_once()

    @pytest.mark.asyncio
    async def test_default_player_used_by_play_voice_sample(
        self, fake_sounddevice, fake_client, config, audio_stream
    ):
        fake_client.chat.completions.create.return_value = audio_stream([b"\x00\x00\x01\x00"])

        await agent.play_voice_sample("ラ", 0, 0, config=config, client=fake_client)

        played = fake_sounddevice.play.call_args.args[0]
        np.testing.assert_array_equal(played, [0.0, 1 / 32768.0])


class TestDebugTracing:
    @pytest.mark.asyncio
    async def test_requests_are_traced_without_audio_data(self, fake_client, reply, caplog):
        config = GatewayConfig(api_key="test-key", debug=True)
        fake_client.chat.completions.create.return_value = reply(
            '{"vocalX": 0, "vocalY": 0, "textures": []}'
        )
        caplog.set_level(logging.DEBUG, logger="lyricsmith.agent.debug")

        await agent.analyze_vocal_audio("SECRETAUDIO", "audio/wav", config=config, client=fake_client)

        assert "REQUEST: analyze_vocal_audio" in caplog.text
        assert "<input_audio part>" in caplog.text
        assert "SECRETAUDIO" not in caplog.text
        assert "REPLY: analyze_vocal_audio" in caplog.text

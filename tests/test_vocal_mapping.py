import pytest

from lyricsmith.agent.prompts import speech_request, vocal_descriptor
from lyricsmith.agent.songwriting_agent import select_voice


class TestVocalDescriptor:
    @pytest.mark.parametrize(
        "vocal_x, expected",
        [
            (-31, "Male vocals"),
            (-30, "Androgynous vocals"),
            (-29, "Androgynous vocals"),
            (0, "Androgynous vocals"),
            (29, "Androgynous vocals"),
            (30, "Androgynous vocals"),
            (31, "Female vocals"),
        ],
    )
    def test_gender_axis(self, vocal_x, expected):
        assert vocal_descriptor(vocal_x, 0) == expected

    @pytest.mark.parametrize(
        "vocal_y, suffix",
        [
            (-31, ", Low pitch"),
            (-30, ""),
            (-29, ""),
            (0, ""),
            (29, ""),
            (30, ""),
            (31, ", High pitch"),
        ],
    )
    def test_pitch_axis(self, vocal_y, suffix):
        assert vocal_descriptor(0, vocal_y) == "Androgynous vocals" + suffix

    def test_combined_corners(self):
        assert vocal_descriptor(-100, -100) == "Male vocals, Low pitch"
        assert vocal_descriptor(100, 100) == "Female vocals, High pitch"
        assert vocal_descriptor(-31, 31) == "Male vocals, High pitch"


class TestSelectVoice:
    @pytest.mark.parametrize(
        "vocal_x, voice",
        [
            (-21, "onyx"),
            (-20, "alloy"),
            (-19, "alloy"),
            (0, "alloy"),
            (19, "alloy"),
            (20, "alloy"),
            (21, "shimmer"),
        ],
    )
    def test_boundaries(self, vocal_x, voice):
        assert select_voice(vocal_x) == voice


class TestSpeechRequest:
    def test_register_follows_pitch_axis(self):
        assert "low" in speech_request("ラ", -60).system_instruction
        assert "high" in speech_request("ラ", 60).system_instruction
        assert "natural" in speech_request("ラ", 0).system_instruction

    def test_text_is_sent_verbatim(self):
        assert speech_request("こんにちは、世界", 0).to_messages()[-1] == {
            "role": "user",
            "content": "こんにちは、世界",
        }

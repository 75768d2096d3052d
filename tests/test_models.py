import numpy as np
import pytest
from pydantic import ValidationError

from lyricsmith.agent.prompts import artist_analysis_request, suno_prompt_request
from lyricsmith.models.results import (
    ArtistAnalysisResult,
    PromptParams,
    VideoPromptResult,
    VoiceSample,
)


class TestPromptParams:
    def test_camel_and_snake_names(self):
        camel = PromptParams(vocalX=10, vocalY=-10, genres=["Rock"])
        snake = PromptParams(vocal_x=10, vocal_y=-10, genres=["Rock"])
        assert camel == snake
        assert camel.model_dump(by_alias=True)["vocalX"] == 10

    def test_selections_are_ordered_sets(self):
        params = PromptParams(
            vocalX=0, vocalY=0, genres=["Rock", "Pop", "Rock"], textures=["Husky", "Husky"]
        )
        assert params.genres == ["Rock", "Pop"]
        assert params.textures == ["Husky"]

    def test_at_most_two_textures_and_instruments(self):
        with pytest.raises(ValidationError):
            PromptParams(vocalX=0, vocalY=0, textures=["Husky", "Clear", "Sweet"])
        with pytest.raises(ValidationError):
            PromptParams(vocalX=0, vocalY=0, instruments=["Bass", "Drums", "Piano"])

    def test_duplicates_do_not_count_against_limit(self):
        params = PromptParams(vocalX=0, vocalY=0, textures=["Husky", "Husky", "Clear"])
        assert params.textures == ["Husky", "Clear"]

    @pytest.mark.parametrize("field", ["vocalX", "vocalY"])
    @pytest.mark.parametrize("value", [-101, 101])
    def test_vocal_range(self, field, value):
        values = {"vocalX": 0, "vocalY": 0, field: value}
        with pytest.raises(ValidationError):
            PromptParams(**values)

    def test_frozen(self):
        params = PromptParams(vocalX=0, vocalY=0)
        with pytest.raises(ValidationError):
            params.vocal_x = 5

    def test_artist_is_optional(self):
        params = PromptParams(vocalX=0, vocalY=0)
        assert params.artist is None
        assert "参考アーティスト" not in suno_prompt_request(params).user_content


class TestResults:
    def test_artist_counts_are_not_enforced(self):
        result = ArtistAnalysisResult.model_validate(
            {"vocalX": 300, "vocalY": 0, "genres": ["a", "b", "c", "d"]}
        )
        assert len(result.genres) == 4
        assert result.textures == []

    def test_video_result_serializes_camel_case(self):
        result = VideoPromptResult(scene_description="s", sora_prompt="p", lyrics_part="l")
        assert result.model_dump(by_alias=True) == {
            "sceneDescription": "s",
            "soraPrompt": "p",
            "lyricsPart": "l",
        }

    def test_voice_sample_duration(self):
        sample = VoiceSample(voice="alloy", sample_rate=24000, samples=np.zeros(12000, dtype=np.float32))
        assert sample.duration_seconds == 0.5


class TestPromptRequest:
    def test_schema_request_renders_response_format(self):
        request = artist_analysis_request("Some Band")
        messages = request.to_messages()

        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[1]["content"] == "アーティスト: Some Band"
        fmt = request.response_format()
        assert fmt["json_schema"]["name"] == "ArtistAnalysisResult"
        assert set(fmt["json_schema"]["schema"]["required"]) == {"vocalX", "vocalY"}

    def test_plain_request_has_no_response_format(self):
        params = PromptParams(vocalX=0, vocalY=0)
        assert suno_prompt_request(params).response_format() is None

"""Instructions sent to the gateway and the request payloads built from them."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel

from lyricsmith.models.constants import EMPHASIS_INSTRUMENTS, GENRES, VOCAL_TEXTURES
from lyricsmith.models.results import (
    ArtistAnalysisResult,
    AudioAnalysisResult,
    PromptParams,
    VideoPromptReply,
    VisualPromptResult,
)

SUNO_PROMPT_LIMIT = 1000

PRODUCER_PERSONA = (
    "あなたはプロの音楽プロデューサー兼作詞家のアシスタントです。"
    "作曲、作詞、アレンジ、プロンプト作成について具体的にアドバイスしてください。"
    "必ず日本語で回答してください。"
)

HIRAGANA_INSTRUCTION = """\
あなたは日本語の歌詞変換アシスタントです。
与えられた歌詞を、元の改行構造を維持したまま、すべて「ひらがな」に変換してください。
漢字とカタカナは読みどおりにひらがなへ置き換えてください。
英語などの日本語以外の単語と、[Verse] や [Chorus] のような角括弧のタグはそのまま残してください。
変換後の歌詞だけを出力し、解説は書かないでください。
"""

LYRICS_INSTRUCTION = """\
あなたはプロの作詞家です。
与えられたキーワードやテーマに基づいて、日本語の歌詞を書いてください。
[Verse]、[Chorus]、[Bridge] のセクションタグを使い、感情的でリズムの良い構成にしてください。
歌詞だけを出力してください。
"""

ARTIST_ANALYSIS_INSTRUCTION = """\
あなたは音楽分析のエキスパートです。指定されたアーティストのボーカルと音楽スタイルを分析し、JSONだけで返してください。

- vocalX: 声の性別の印象。-100(男性的)〜100(女性的)の数値
- vocalY: 声の高さ。-100(低い)〜100(高い)の数値
- genres: 次のリストから最大3つ [{genres}]
- textures: 次のリストから最大2つ [{textures}]
- instruments: 次のリストから最大2つ [{instruments}]

リストにないラベルは使わないでください。

返却形式(JSONのみ):
{{
  "vocalX": 0,
  "vocalY": 0,
  "genres": ["ジャンル名"],
  "textures": ["質感名"],
  "instruments": ["楽器名"]
}}
"""

VOCAL_AUDIO_INSTRUCTION = """\
あなたはボーカル分析のエキスパートです。添付の歌声を聴いて、声の特徴をJSONだけで返してください。

- vocalX: 声の性別の印象。-100(男性的)〜100(女性的)の数値
- vocalY: 声の高さ。-100(低い)〜100(高い)の数値
- textures: 次のリストから最大2つ [{textures}]

返却形式(JSONのみ):
{{
  "vocalX": 0,
  "vocalY": 0,
  "textures": ["質感名"]
}}
"""

VISUAL_PROMPT_INSTRUCTION = """\
あなたはミュージックビデオのアートディレクターです。歌詞の世界観を一枚の絵にしてください。

- sceneDescription: 情景の短い説明(日本語、30文字以内)
- imagePrompt: 画像生成AI向けの詳細な英語プロンプト(構図、光、色彩、画風を含める)

返却形式(JSONのみ):
{
  "sceneDescription": "...",
  "imagePrompt": "..."
}
"""

VIDEO_PROMPT_INSTRUCTION = """\
あなたはミュージックビデオの映像監督です。与えられた歌詞の一節に合う数秒間のショットを設計してください。

- sceneDescription: 情景の短い説明(日本語、30文字以内)
- soraPrompt: 動画生成AI向けの詳細な英語プロンプト(被写体、動き、カメラワーク、光、雰囲気を含める)

返却形式(JSONのみ):
{
  "sceneDescription": "...",
  "soraPrompt": "..."
}
"""

SUNO_INSTRUCTION = f"""\
あなたはSuno AI用のスタイルプロンプトを作る専門家です。
与えられた情報を、カンマ区切りの英語タグの羅列1行に変換してください。

ルール:
- 出力はタグ文字列のみ。説明、改行、引用符は不要
- 全体で{SUNO_PROMPT_LIMIT}文字未満
- 参考アーティストが指定されていても、アーティスト名は絶対に含めず、そのサウンドの特徴だけをタグで表現する
"""


class PromptRequest(BaseModel):
    """A single request to the gateway before it is sent."""

    system_instruction: Optional[str] = None
    user_content: Union[str, list[dict[str, Any]]]
    response_schema: Optional[type[BaseModel]] = None

    def to_messages(self) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if self.system_instruction:
            messages.append({"role": "system", "content": self.system_instruction})
        messages.append({"role": "user", "content": self.user_content})
        return messages

    def response_format(self) -> Optional[dict[str, Any]]:
        """JSON-schema constraint for the reply, if a schema was given."""
        if self.response_schema is None:
            return None
        return {
            "type": "json_schema",
            "json_schema": {
                "name": self.response_schema.__name__,
                "schema": self.response_schema.model_json_schema(by_alias=True),
            },
        }


def vocal_descriptor(vocal_x: float, vocal_y: float) -> str:
    """Describe a point on the vocal map in Suno tag vocabulary."""
    if vocal_x < -30:
        descriptor = "Male vocals"
    elif vocal_x > 30:
        descriptor = "Female vocals"
    else:
        descriptor = "Androgynous vocals"

    if vocal_y < -30:
        descriptor += ", Low pitch"
    elif vocal_y > 30:
        descriptor += ", High pitch"
    return descriptor


def _join(labels: list[str]) -> str:
    return ", ".join(labels) if labels else "(指定なし)"


def hiragana_request(text: str) -> PromptRequest:
    return PromptRequest(system_instruction=HIRAGANA_INSTRUCTION, user_content=f"歌詞:\n{text}")


def lyrics_request(keywords: str) -> PromptRequest:
    return PromptRequest(system_instruction=LYRICS_INSTRUCTION, user_content=f"キーワード: {keywords}")


def artist_analysis_request(artist_name: str) -> PromptRequest:
    instruction = ARTIST_ANALYSIS_INSTRUCTION.format(
        genres=", ".join(GENRES),
        textures=", ".join(VOCAL_TEXTURES),
        instruments=", ".join(EMPHASIS_INSTRUMENTS),
    )
    return PromptRequest(
        system_instruction=instruction,
        user_content=f"アーティスト: {artist_name}",
        response_schema=ArtistAnalysisResult,
    )


def vocal_audio_request(audio_base64: str, audio_format: str) -> PromptRequest:
    instruction = VOCAL_AUDIO_INSTRUCTION.format(textures=", ".join(VOCAL_TEXTURES))
    return PromptRequest(
        system_instruction=instruction,
        user_content=[
            {"type": "text", "text": "この歌声を分析してください。"},
            {"type": "input_audio", "input_audio": {"data": audio_base64, "format": audio_format}},
        ],
        response_schema=AudioAnalysisResult,
    )


def visual_prompt_request(lyrics: str) -> PromptRequest:
    return PromptRequest(
        system_instruction=VISUAL_PROMPT_INSTRUCTION,
        user_content=f"歌詞:\n{lyrics}",
        response_schema=VisualPromptResult,
    )


def video_prompt_request(lyrics_part: str) -> PromptRequest:
    return PromptRequest(
        system_instruction=VIDEO_PROMPT_INSTRUCTION,
        user_content=f"歌詞の一節:\n{lyrics_part}",
        response_schema=VideoPromptReply,
    )


def suno_prompt_request(params: PromptParams) -> PromptRequest:
    lines = [
        "情報:",
        f"- ボーカル: {vocal_descriptor(params.vocal_x, params.vocal_y)}",
        f"- 声の質感: {_join(params.textures)}",
        f"- ジャンル: {_join(params.genres)}",
        f"- 強調する楽器: {_join(params.instruments)}",
    ]
    if params.artist:
        lines.append(f"- 参考アーティスト(名前は出力しない): {params.artist}")
    return PromptRequest(system_instruction=SUNO_INSTRUCTION, user_content="\n".join(lines))


def image_request(prompt: str) -> PromptRequest:
    return PromptRequest(user_content=f"Generate an image: {prompt}")


def speech_request(text: str, vocal_y: float) -> PromptRequest:
    if vocal_y < -30:
        register = "in a low, deep register"
    elif vocal_y > 30:
        register = "in a bright, high register"
    else:
        register = "in a natural register"
    return PromptRequest(
        system_instruction=(
            "You are a voice actor. Read the user's text aloud exactly as written, "
            f"{register}. Do not add anything."
        ),
        user_content=text,
    )

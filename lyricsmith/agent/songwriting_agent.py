"""Songwriting assistant functions backed by the generative AI gateway.

Each public function builds one request, sends it, and reshapes the reply into
the type the songwriting UI expects. None of them raise: failures are logged
and turned into the function's sentinel, which is ``None`` for most of them and
a fixed Japanese error string for ``convert_to_hiragana`` and
``generate_suno_prompt``.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from openai import AsyncOpenAI

from lyricsmith.agent.debug import trace_reply, trace_request
from lyricsmith.agent.decoding import (
    ResponseFormatError,
    collect_stream_audio,
    find_inline_image,
    parse_json_reply,
    reply_text,
)
from lyricsmith.agent.prompts import (
    PRODUCER_PERSONA,
    SUNO_PROMPT_LIMIT,
    PromptRequest,
    artist_analysis_request,
    hiragana_request,
    image_request,
    lyrics_request,
    speech_request,
    suno_prompt_request,
    video_prompt_request,
    visual_prompt_request,
    vocal_audio_request,
    vocal_descriptor,
)
from lyricsmith.models.results import (
    ArtistAnalysisResult,
    AudioAnalysisResult,
    PromptParams,
    VideoPromptReply,
    VideoPromptResult,
    VisualPromptResult,
    VoiceSample,
)
from lyricsmith.services.audio_player import AudioPlayer, SoundDevicePlayer
from lyricsmith.services.chat_session import ChatSession
from lyricsmith.services.gateway_client import GatewayConfig, make_client
from lyricsmith.services.media_codec import (
    SPEECH_SAMPLE_RATE,
    decode_pcm16,
    strip_data_url_prefix,
)

log = logging.getLogger(__name__)

HIRAGANA_ERROR = "変換エラー"
SUNO_PROMPT_ERROR = "エラーが発生しました"

MALE_VOICE = "onyx"
FEMALE_VOICE = "shimmer"
NEUTRAL_VOICE = "alloy"

_AUDIO_FORMATS = {
    "mpeg": "mp3",
    "mp3": "mp3",
    "x-wav": "wav",
    "wave": "wav",
    "vnd.wave": "wav",
    "x-m4a": "m4a",
    "mp4": "m4a",
}

__all__ = [
    "HIRAGANA_ERROR",
    "SUNO_PROMPT_ERROR",
    "analyze_artist_style",
    "analyze_vocal_audio",
    "convert_to_hiragana",
    "create_chat_session",
    "generate_image",
    "generate_lyrics",
    "generate_suno_prompt",
    "generate_video_prompt_for_section",
    "generate_visual_prompts",
    "play_voice_sample",
    "select_voice",
    "synthesize_voice_sample",
    "vocal_descriptor",
]


@asynccontextmanager
async def _gateway(
    config: Optional[GatewayConfig], client: Optional[AsyncOpenAI]
) -> AsyncIterator[tuple[GatewayConfig, AsyncOpenAI]]:
    """Yield the config and a client; a client built here is closed on exit."""
    config = config or GatewayConfig.from_env()
    if client is not None:
        yield config, client
        return
    async with make_client(config) as owned:
        yield config, owned


def _disabled(config: GatewayConfig, feature: str) -> bool:
    if config.feature_enabled(feature):
        return False
    log.info("Feature '%s' is disabled, skipping request", feature)
    return True


async def _send(
    client: AsyncOpenAI,
    config: GatewayConfig,
    request: PromptRequest,
    *,
    model: str,
    function: str,
    **params: Any,
) -> Any:
    """Issue one chat-completions call for ``request``."""
    messages = request.to_messages()
    response_format = request.response_format()
    if response_format is not None:
        params["response_format"] = response_format

    if config.debug:
        trace_request(function, model, messages, **params)

    start = time.time()
    response = await client.chat.completions.create(model=model, messages=messages, **params)
    log.info("%s: reply from %s in %.2fs", function, model, time.time() - start)
    return response


async def _send_for_text(
    client: AsyncOpenAI, config: GatewayConfig, request: PromptRequest, *, function: str
) -> str:
    response = await _send(client, config, request, model=config.text_model, function=function)
    text = reply_text(response)
    if config.debug:
        trace_reply(function, text)
    return text


def _audio_format(mime_type: str) -> str:
    """Map a MIME type such as ``audio/mpeg`` to an input_audio format name."""
    subtype = mime_type.split("/")[-1].split(";")[0].strip().lower()
    return _AUDIO_FORMATS.get(subtype, subtype or "wav")


def select_voice(vocal_x: float) -> str:
    """Pick a speech voice from the male/female axis of the vocal map."""
    if vocal_x < -20:
        return MALE_VOICE
    if vocal_x > 20:
        return FEMALE_VOICE
    return NEUTRAL_VOICE


async def convert_to_hiragana(
    text: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """Rewrite Japanese lyrics in hiragana, keeping line breaks, tags and foreign words."""
    if not text.strip():
        return ""
    try:
        async with _gateway(config, client) as (config, client):
            return await _send_for_text(
                client, config, hiragana_request(text), function="convert_to_hiragana"
            )
    except Exception as e:
        log.error("Error converting to hiragana: %s", e, exc_info=True)
        return HIRAGANA_ERROR


async def generate_lyrics(
    keywords: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[str]:
    """Write Japanese lyrics with section tags from keywords or a theme."""
    try:
        async with _gateway(config, client) as (config, client):
            lyrics = await _send_for_text(
                client, config, lyrics_request(keywords), function="generate_lyrics"
            )
            return lyrics or None
    except Exception as e:
        log.error("Error generating lyrics: %s", e, exc_info=True)
        return None


async def analyze_artist_style(
    artist_name: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[ArtistAnalysisResult]:
    """Place an artist on the vocal map and pick matching genres, textures and instruments."""
    try:
        async with _gateway(config, client) as (config, client):
            text = await _send_for_text(
                client,
                config,
                artist_analysis_request(artist_name),
                function="analyze_artist_style",
            )
            return parse_json_reply(text, ArtistAnalysisResult)
    except Exception as e:
        log.error("Error analyzing artist '%s': %s", artist_name, e, exc_info=True)
        return None


async def analyze_vocal_audio(
    base64_audio: str,
    mime_type: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[AudioAnalysisResult]:
    """Estimate vocal position and textures from a recorded voice.

    ``base64_audio`` may be bare base64 or a ``data:`` URL.
    """
    try:
        config = config or GatewayConfig.from_env()
        if _disabled(config, "vocal_audio"):
            return None
        async with _gateway(config, client) as (config, client):
            request = vocal_audio_request(
                strip_data_url_prefix(base64_audio), _audio_format(mime_type)
            )
            text = await _send_for_text(client, config, request, function="analyze_vocal_audio")
            return parse_json_reply(text, AudioAnalysisResult)
    except Exception as e:
        log.error("Error analyzing vocal audio: %s", e, exc_info=True)
        return None


async def generate_visual_prompts(
    lyrics: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[VisualPromptResult]:
    try:
        config = config or GatewayConfig.from_env()
        if _disabled(config, "visual_prompts"):
            return None
        async with _gateway(config, client) as (config, client):
            text = await _send_for_text(
                client, config, visual_prompt_request(lyrics), function="generate_visual_prompts"
            )
            return parse_json_reply(text, VisualPromptResult)
    except Exception as e:
        log.error("Error generating visual prompts: %s", e, exc_info=True)
        return None


async def generate_video_prompt_for_section(
    lyrics_part: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[VideoPromptResult]:
    """Design a short video shot for one lyric section.

    The model is not asked to echo the section back; it is attached here.
    """
    try:
        config = config or GatewayConfig.from_env()
        if _disabled(config, "video_prompts"):
            return None
        async with _gateway(config, client) as (config, client):
            text = await _send_for_text(
                client,
                config,
                video_prompt_request(lyrics_part),
                function="generate_video_prompt_for_section",
            )
            reply = parse_json_reply(text, VideoPromptReply)
            return VideoPromptResult(
                scene_description=reply.scene_description,
                sora_prompt=reply.sora_prompt,
                lyrics_part=lyrics_part,
            )
    except Exception as e:
        log.error("Error generating video prompt: %s", e, exc_info=True)
        return None


async def generate_suno_prompt(
    params: PromptParams,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """Build a comma-separated Suno style prompt, never longer than 1000 characters."""
    try:
        async with _gateway(config, client) as (config, client):
            log.info(
                "Suno prompt for %s (%d genres, %d textures, %d instruments)",
                vocal_descriptor(params.vocal_x, params.vocal_y),
                len(params.genres),
                len(params.textures),
                len(params.instruments),
            )
            text = await _send_for_text(
                client, config, suno_prompt_request(params), function="generate_suno_prompt"
            )
            if len(text) > SUNO_PROMPT_LIMIT:
                log.warning(
                    "Suno prompt was %d chars, truncating to %d", len(text), SUNO_PROMPT_LIMIT
                )
            return text[:SUNO_PROMPT_LIMIT]
    except Exception as e:
        log.error("Error generating Suno prompt: %s", e, exc_info=True)
        return SUNO_PROMPT_ERROR


async def generate_image(
    prompt: str,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[str]:
    """Generate an image and return it as a ``data:`` URI."""
    try:
        config = config or GatewayConfig.from_env()
        if _disabled(config, "image"):
            return None
        async with _gateway(config, client) as (config, client):
            response = await _send(
                client,
                config,
                image_request(prompt),
                model=config.image_model,
                function="generate_image",
                extra_body={"modalities": ["image", "text"]},
            )
            image = find_inline_image(response)
            if image is None:
                log.warning("Image reply contained no inline image")
            return image
    except Exception as e:
        log.error("Error generating image: %s", e, exc_info=True)
        return None


async def synthesize_voice_sample(
    text: str,
    vocal_x: float,
    vocal_y: float,
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[VoiceSample]:
    """Speak ``text`` in a voice chosen from the vocal map and decode the PCM reply."""
    try:
        config = config or GatewayConfig.from_env()
        if _disabled(config, "voice"):
            return None
        async with _gateway(config, client) as (config, client):
            voice = select_voice(vocal_x)
            # pcm16 output is only delivered on a streamed reply
            stream = await _send(
                client,
                config,
                speech_request(text, vocal_y),
                model=config.speech_model,
                function="synthesize_voice_sample",
                modalities=["text", "audio"],
                audio={"voice": voice, "format": "pcm16"},
                stream=True,
            )
            pcm = await collect_stream_audio(stream)
            if not pcm:
                raise ResponseFormatError("Speech reply contained no audio")
            frames = decode_pcm16(pcm, num_channels=1)
            return VoiceSample(voice=voice, sample_rate=SPEECH_SAMPLE_RATE, samples=frames[:, 0])
    except Exception as e:
        log.error("Error synthesizing voice sample: %s", e, exc_info=True)
        return None


async def play_voice_sample(
    text: str,
    vocal_x: float,
    vocal_y: float,
    *,
    player: Optional[AudioPlayer] = None,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> None:
    """Speak ``text`` through the audio output. Does nothing if no audio comes back."""
    sample = await synthesize_voice_sample(text, vocal_x, vocal_y, config=config, client=client)
    if sample is None:
        return
    try:
        await (player or SoundDevicePlayer()).play(sample.samples, sample.sample_rate)
    except Exception as e:
        log.error("Error playing voice sample: %s", e, exc_info=True)


def create_chat_session(
    *,
    config: Optional[GatewayConfig] = None,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[ChatSession]:
    """Open a conversation with the producer persona."""
    try:
        config = config or GatewayConfig.from_env()
        owns_client = client is None
        return ChatSession(
            client or make_client(config),
            config.text_model,
            PRODUCER_PERSONA,
            debug=config.debug,
            owns_client=owns_client,
        )
    except Exception as e:
        log.error("Failed to create chat session: %s", e, exc_info=True)
        return None

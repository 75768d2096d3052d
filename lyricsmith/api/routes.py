"""REST API routes for the songwriting assistant."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field

from lyricsmith.agent import songwriting_agent as agent
from lyricsmith.models.results import (
    ArtistAnalysisResult,
    AudioAnalysisResult,
    PromptParams,
    VideoPromptResult,
    VisualPromptResult,
)
from lyricsmith.services.chat_session import ChatSession
from lyricsmith.services.gateway_client import GatewayConfig, make_client
from lyricsmith.services.media_codec import encode_base64, encode_pcm16

log = logging.getLogger(__name__)


class TextRequest(BaseModel):
    text: str


class KeywordsRequest(BaseModel):
    keywords: str


class ArtistRequest(BaseModel):
    artist_name: str = Field(alias="artistName")


class VocalAudioRequest(BaseModel):
    base64_audio: str = Field(alias="base64Audio")
    mime_type: str = Field(alias="mimeType")


class LyricsRequest(BaseModel):
    lyrics: str


class LyricsPartRequest(BaseModel):
    lyrics_part: str = Field(alias="lyricsPart")


class ImageRequest(BaseModel):
    prompt: str


class VoiceRequest(BaseModel):
    text: str
    vocal_x: float = Field(alias="vocalX", ge=-100, le=100)
    vocal_y: float = Field(alias="vocalY", ge=-100, le=100)


class ChatMessageRequest(BaseModel):
    message: str


class TextResult(BaseModel):
    text: Optional[str]


class VoiceResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    voice: str
    sample_rate: int = Field(alias="sampleRate")
    pcm16_base64: str = Field(
        alias="pcm16Base64", description="Mono 16-bit little-endian PCM"
    )


class ChatReply(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    reply: Optional[str] = None


def create_app(
    config: Optional[GatewayConfig] = None, client: Optional[AsyncOpenAI] = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``config`` defaults to the process environment, read once here. Every
    request shares one gateway client; a client built here is closed on
    shutdown, a passed-in one is left to the caller.
    """
    config = config or GatewayConfig.from_env()
    owns_client = client is None and bool(config.api_key)
    if owns_client:
        client = make_client(config)
    # In-memory chat sessions; they live as long as the process
    sessions: dict[str, ChatSession] = {}

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        sessions.clear()
        if owns_client:
            log.info("Closing gateway client")
            await client.close()

    app = FastAPI(
        lifespan=lifespan,
        title="lyricsmith API",
        description="Songwriting assistant backed by a generative AI gateway",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/hiragana")
    async def hiragana(body: TextRequest) -> TextResult:
        """Convert lyrics to hiragana. Failure is reported as the error text."""
        text = await agent.convert_to_hiragana(body.text, config=config, client=client)
        return TextResult(text=text)

    @app.post("/api/lyrics")
    async def lyrics(body: KeywordsRequest) -> TextResult:
        text = await agent.generate_lyrics(body.keywords, config=config, client=client)
        return TextResult(text=text)

    @app.post("/api/artist-analysis")
    async def artist_analysis(body: ArtistRequest) -> Optional[ArtistAnalysisResult]:
        return await agent.analyze_artist_style(body.artist_name, config=config, client=client)

    @app.post("/api/vocal-analysis")
    async def vocal_analysis(body: VocalAudioRequest) -> Optional[AudioAnalysisResult]:
        return await agent.analyze_vocal_audio(
            body.base64_audio, body.mime_type, config=config, client=client
        )

    @app.post("/api/visual-prompts")
    async def visual_prompts(body: LyricsRequest) -> Optional[VisualPromptResult]:
        return await agent.generate_visual_prompts(body.lyrics, config=config, client=client)

    @app.post("/api/video-prompt")
    async def video_prompt(body: LyricsPartRequest) -> Optional[VideoPromptResult]:
        return await agent.generate_video_prompt_for_section(
            body.lyrics_part, config=config, client=client
        )

    @app.post("/api/suno-prompt")
    async def suno_prompt(body: PromptParams) -> TextResult:
        text = await agent.generate_suno_prompt(body, config=config, client=client)
        return TextResult(text=text)

    @app.post("/api/image")
    async def image(body: ImageRequest) -> TextResult:
        """Generate an image; ``text`` holds a data URI or null."""
        text = await agent.generate_image(body.prompt, config=config, client=client)
        return TextResult(text=text)

    @app.post("/api/voice-sample")
    async def voice_sample(body: VoiceRequest) -> Optional[VoiceResult]:
        """Synthesize speech for playback in the browser."""
        sample = await agent.synthesize_voice_sample(
            body.text, body.vocal_x, body.vocal_y, config=config, client=client
        )
        if sample is None:
            return None
        return VoiceResult(
            voice=sample.voice,
            sample_rate=sample.sample_rate,
            pcm16_base64=encode_base64(encode_pcm16(sample.samples)),
        )

    @app.post("/api/chat/sessions")
    async def open_chat() -> ChatReply:
        session = agent.create_chat_session(config=config, client=client)
        if session is None:
            raise HTTPException(status_code=503, detail="Chat is unavailable")
        session_id = str(uuid.uuid4())
        sessions[session_id] = session
        log.info("Opened chat session %s", session_id)
        return ChatReply(session_id=session_id)

    @app.post("/api/chat/sessions/{session_id}/messages")
    async def send_chat_message(session_id: str, body: ChatMessageRequest) -> ChatReply:
        session = sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Session not found")
        reply = await session.send_message(body.message)
        return ChatReply(session_id=session_id, reply=reply)

    @app.delete("/api/chat/sessions/{session_id}")
    async def close_chat(session_id: str) -> dict:
        session = sessions.pop(session_id, None)
        if session is None:
            raise HTTPException(status_code=404, detail="Session not found")
        await session.close()
        return {"status": "closed"}

    @app.get("/api/health")
    async def health_check() -> dict:
        return {
            "status": "ok",
            "text_model": config.text_model,
            "credential_configured": bool(config.api_key),
            "disabled_features": sorted(config.disabled_features),
        }

    return app

"""CLI entry point: run one songwriting assistant operation and print the result."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from lyricsmith.agent import songwriting_agent as agent
from lyricsmith.models.results import PromptParams
from lyricsmith.services.gateway_client import GatewayConfig


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Songwriting assistant backed by a generative AI gateway."
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log request details to stderr.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    hiragana = commands.add_parser("hiragana", help="Convert lyrics to hiragana.")
    hiragana.add_argument("text", help="Lyrics text, or '-' to read stdin.")

    lyrics = commands.add_parser("lyrics", help="Write lyrics from keywords.")
    lyrics.add_argument("keywords")

    artist = commands.add_parser("artist", help="Analyze an artist's style.")
    artist.add_argument("name")

    suno = commands.add_parser("suno", help="Build a Suno style prompt.")
    suno.add_argument("--vocal-x", type=float, default=0.0)
    suno.add_argument("--vocal-y", type=float, default=0.0)
    suno.add_argument("--genre", action="append", default=[], dest="genres")
    suno.add_argument("--texture", action="append", default=[], dest="textures")
    suno.add_argument("--instrument", action="append", default=[], dest="instruments")
    suno.add_argument("--artist", default=None)

    voice = commands.add_parser("voice", help="Speak a line through the speakers.")
    voice.add_argument("text")
    voice.add_argument("--vocal-x", type=float, default=0.0)
    voice.add_argument("--vocal-y", type=float, default=0.0)

    return parser.parse_args(argv)


async def run(args: argparse.Namespace, config: GatewayConfig) -> int:
    """Run the selected command; returns the process exit code."""
    if args.command == "hiragana":
        text = sys.stdin.read() if args.text == "-" else args.text
        result = await agent.convert_to_hiragana(text, config=config)
        print(result)
        return 1 if result == agent.HIRAGANA_ERROR else 0

    if args.command == "lyrics":
        lyrics = await agent.generate_lyrics(args.keywords, config=config)
        if lyrics is None:
            print("Lyrics generation failed", file=sys.stderr)
            return 1
        print(lyrics)
        return 0

    if args.command == "artist":
        analysis = await agent.analyze_artist_style(args.name, config=config)
        if analysis is None:
            print("Artist analysis failed", file=sys.stderr)
            return 1
        print(analysis.model_dump_json(indent=2, by_alias=True))
        return 0

    if args.command == "suno":
        try:
            params = PromptParams(
                vocal_x=args.vocal_x,
                vocal_y=args.vocal_y,
                genres=args.genres,
                textures=args.textures,
                instruments=args.instruments,
                artist=args.artist,
            )
        except ValidationError as e:
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"])
                print(f"Invalid suno option {field}: {error['msg']}", file=sys.stderr)
            return 2
        prompt = await agent.generate_suno_prompt(params, config=config)
        print(prompt)
        return 1 if prompt == agent.SUNO_PROMPT_ERROR else 0

    if args.command == "voice":
        await agent.play_voice_sample(args.text, args.vocal_x, args.vocal_y, config=config)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def cli(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    config = GatewayConfig.from_env()
    if args.verbose:
        config = config.model_copy(update={"debug": True})
    sys.exit(asyncio.run(run(args, config)))


if __name__ == "__main__":
    cli()

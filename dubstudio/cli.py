"""
CLI - Command-line interface.

Thin wrapper over the extractor, registry and orchestrator.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dubstudio",
        description="Clone speaker voices from a video and re-voice edited lines",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: from env or INFO)")
    parser.add_argument("--debug-log", help="Write the session debug log to this file on exit")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract a clip as 16-bit WAV")
    extract_parser.add_argument("media", help="Video or audio file")
    extract_parser.add_argument("start", type=float, help="Start time (seconds)")
    extract_parser.add_argument("end", type=float, help="End time (seconds)")
    extract_parser.add_argument("-o", "--output", default="clip.wav", help="Output WAV path")

    # clone command
    clone_parser = subparsers.add_parser("clone", help="Clone every speaker's voice")
    clone_parser.add_argument("media", help="Video or audio file")
    clone_parser.add_argument("analysis", help="Analysis result JSON")
    clone_parser.add_argument("--demo", action="store_true", help="Skip extraction and use placeholder voices")

    # speak command
    speak_parser = subparsers.add_parser("speak", help="Clone, then speak text as one speaker")
    speak_parser.add_argument("media", help="Video or audio file")
    speak_parser.add_argument("analysis", help="Analysis result JSON")
    speak_parser.add_argument("speaker", help="Speaker id (e.g., spk_1)")
    speak_parser.add_argument("text", help="Text to speak")
    speak_parser.add_argument("-o", "--output", default="speech.mp3", help="Output audio path")
    speak_parser.add_argument("--demo", action="store_true", help="Skip extraction and use placeholder voices")

    # version command
    subparsers.add_parser("version", help="Show version")

    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    if parsed.command == "version":
        from dubstudio import __version__
        print(f"dubstudio {__version__}")
        return 0

    from dubstudio.config import Config
    from dubstudio.monitoring import configure_logging

    config = Config.from_env()
    store = configure_logging(parsed.log_level or config.log_level)

    try:
        if parsed.command == "extract":
            return _cmd_extract(parsed)
        if parsed.command == "clone":
            return asyncio.run(_cmd_clone(parsed, config))
        if parsed.command == "speak":
            return asyncio.run(_cmd_speak(parsed, config))
    finally:
        if parsed.debug_log:
            store.save(parsed.debug_log)

    return 1


def _cmd_extract(args: argparse.Namespace) -> int:
    from dubstudio.audio import ClipExtractor
    from dubstudio.errors import DubStudioError

    try:
        blob = ClipExtractor().extract_wav(args.media, args.start, args.end)
    except (DubStudioError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    Path(args.output).write_bytes(blob)
    print(f"Wrote {len(blob)} bytes to {args.output}")
    return 0


def _build_orchestrator(config):
    from dubstudio.pipeline import CloningOrchestrator
    from dubstudio.voices import VoiceRegistry, load_voice_backend

    registry = VoiceRegistry(load_voice_backend(config))
    return CloningOrchestrator(registry, demo_delay=config.demo_delay)


async def _run_clone(args: argparse.Namespace, config):
    from dubstudio.models import load_analysis

    analysis = load_analysis(args.analysis)
    orchestrator = _build_orchestrator(config)
    orchestrator.subscribe(_print_progress())

    media = None if args.demo else args.media
    state = await orchestrator.start(analysis, media)

    for speaker in analysis.speakers:
        status = state.status_of(speaker.id)
        label = status.value if status else "SKIPPED"
        print(f"  {speaker.id:<12} {speaker.name:<24} {label}")

    return orchestrator, state


def _print_progress():
    last = {"progress": None}

    def listener(state) -> None:
        if state.progress and state.progress != last["progress"]:
            last["progress"] = state.progress
            print(state.progress)

    return listener


async def _cmd_clone(args: argparse.Namespace, config) -> int:
    from dubstudio.errors import DubStudioError

    try:
        orchestrator, state = await _run_clone(args, config)
    except (DubStudioError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    await orchestrator.registry.aclose()
    return 0 if state.is_ready else 1


async def _cmd_speak(args: argparse.Namespace, config) -> int:
    from dubstudio.audio import fallback_tone
    from dubstudio.errors import DubStudioError

    try:
        orchestrator, _ = await _run_clone(args, config)
        audio = await orchestrator.synthesize_segment(args.speaker, args.text)
    except (DubStudioError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = Path(args.output)
    if audio.is_mock:
        # No real audio in mock mode; write the fallback beep instead
        output = output.with_suffix(".wav")
        output.write_bytes(fallback_tone())
        print(f"Mock mode: wrote fallback tone to {output}")
    else:
        audio.save(output)
        print(f"Wrote {audio.size} bytes to {output}")

    await orchestrator.registry.aclose()
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Mockup CLI entrypoints."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from .config import EngineConfig
from .credentials import CredentialResolver, env_api_key
from .engine import MockupEngine
from .errors import MockupError
from .image import SourceImage
from .memory.settings_store import SettingsStore
from .options import (
    AnalysisVibe,
    AspectRatio,
    FrameStyle,
    LightingStyle,
    PrintSize,
    WallTexture,
    parse_option,
)
from .utils import load_dotenv

DEFAULT_RUN_DIR = "mockup-run"


def _option_type(enum_cls: type) -> Any:
    def _parse(value: str) -> Any:
        try:
            return parse_option(enum_cls, value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    _parse.__name__ = enum_cls.__name__
    return _parse


def _print_progress_safe(message: str) -> None:
    prefix = "\r\n" if getattr(sys.stdout, "isatty", lambda: False)() else ""
    print(f"{prefix}{message}")


def _print_event(event: dict[str, Any]) -> None:
    event_type = event.get("type")
    if event_type == "job_started":
        _print_progress_safe(str(event.get("message")))
    elif event_type == "retry_scheduled":
        _print_progress_safe(
            f"Transient error, retrying ({event.get('attempt')}/{event.get('max_attempts')}) "
            f"in {event.get('delay_ms')}ms: {event.get('error')}"
        )
    elif event_type == "job_failed":
        _print_progress_safe(f"Variation {int(event.get('index', 0)) + 1} failed: {event.get('error')}")
    elif event_type == "suggestions_fallback":
        _print_progress_safe("Analysis unavailable, using fallback suggestions.")
    elif event_type == "upscale_started":
        _print_progress_safe("Upscaling...")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--image", required=True, help="Path to the artwork image")
    parser.add_argument("--events", help="Path to events.jsonl")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", help="Use the offline provider")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mockup", description="Artwork mockup generator")
    sub = parser.add_subparsers(dest="command")

    suggest = sub.add_parser("suggest", help="Suggest scene prompts for an artwork")
    _add_common(suggest)
    suggest.add_argument("--out", default=DEFAULT_RUN_DIR, help="Run output directory")
    suggest.add_argument("--vibe", type=_option_type(AnalysisVibe))

    run = sub.add_parser("run", help="Generate a batch of mockups")
    _add_common(run)
    run.add_argument("--out", required=True, help="Run output directory")
    run.add_argument("--prompt", action="append", default=[], help="Scene prompt (repeatable)")
    run.add_argument("--frame", action="append", default=[], type=_option_type(FrameStyle))
    run.add_argument("--lighting", action="append", default=[], type=_option_type(LightingStyle))
    run.add_argument("--texture", action="append", default=[], type=_option_type(WallTexture))
    run.add_argument("--vibe", type=_option_type(AnalysisVibe))
    run.add_argument("--negative", help="Things to keep out of the scene")
    run.add_argument("--aspect-ratio", dest="aspect_ratio", type=_option_type(AspectRatio))
    run.add_argument("--print-size", dest="print_size", type=_option_type(PrintSize))

    upscale = sub.add_parser("upscale", help="Re-render a result at high resolution")
    _add_common(upscale)
    upscale.add_argument("--run", required=True, help="Run directory holding results.json")
    upscale.add_argument("--result", required=True, help="Result id to upscale")

    key = sub.add_parser("key", help="Manage the stored API key")
    key_sub = key.add_subparsers(dest="key_command")
    key_set = key_sub.add_parser("set", help="Store an API key")
    key_set.add_argument("value")
    key_sub.add_parser("clear", help="Forget the stored API key")
    key_sub.add_parser("status", help="Show where the API key comes from")
    return parser


def _engine_for(args: argparse.Namespace, run_dir: Path) -> MockupEngine:
    config = EngineConfig.from_env()
    if args.dry_run:
        config = replace(config, dry_run=True)
    events_path = Path(args.events) if args.events else run_dir / "events.jsonl"
    engine = MockupEngine(run_dir, events_path, config=config)
    engine.events.listeners.append(_print_event)
    return engine


async def _suggest(args: argparse.Namespace) -> int:
    engine = _engine_for(args, Path(args.out))
    if args.vibe is not None:
        engine.state.vibe = args.vibe
    entries = await engine.load_image(SourceImage.from_path(Path(args.image)))
    for index, entry in enumerate(entries, start=1):
        print(f"{index}. {entry.text}")
    engine.finish()
    return 0


async def _run(args: argparse.Namespace) -> int:
    engine = _engine_for(args, Path(args.out))
    state = engine.state
    if args.vibe is not None:
        state.vibe = args.vibe
    for value in args.frame:
        state.constraints.frames.select(value)
    for value in args.lighting:
        state.constraints.lighting.select(value)
    for value in args.texture:
        state.constraints.textures.select(value)

    await engine.load_image(SourceImage.from_path(Path(args.image)), suggest=not args.prompt)
    if args.prompt:
        state.prompts.replace_all(args.prompt)

    changes: dict[str, Any] = {}
    if args.negative is not None:
        changes["negative_prompt"] = args.negative
    if args.aspect_ratio is not None:
        changes["aspect_ratio"] = args.aspect_ratio
    if args.print_size is not None:
        changes["print_size"] = args.print_size
    if changes:
        engine.update_settings(**changes)

    print(f"Generating {len(state.prompts)} variation(s) via {engine.provider.name}")
    results = await engine.run_batch()
    for result in results:
        print(f"{result.id}  {engine.run_dir / result.filename()}")
    engine.finish()
    return 0


async def _upscale(args: argparse.Namespace) -> int:
    engine = _engine_for(args, Path(args.run))
    await engine.load_image(SourceImage.from_path(Path(args.image)), suggest=False)
    upscaled = await engine.upscale(args.result)
    print(f"{upscaled.id}  {engine.run_dir / upscaled.filename()}")
    engine.finish()
    return 0


def _handle_key(args: argparse.Namespace) -> int:
    store = SettingsStore(EngineConfig.from_env().settings_path)
    resolver = CredentialResolver(store=store)
    if args.key_command == "set":
        resolver.set_credential(args.value)
        print(f"API key saved to {store.path}")
        return 0
    if args.key_command == "clear":
        resolver.clear_credential()
        print("Stored API key cleared.")
        return 0
    if args.key_command == "status":
        if env_api_key():
            print("API key: set (environment)")
        elif resolver.has_credential():
            print(f"API key: set ({store.path})")
        else:
            print("API key: not set")
        return 0
    print("Usage: mockup key {set,clear,status}")
    return 1


def _dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    if args.command == "suggest":
        return asyncio.run(_suggest(args))
    if args.command == "run":
        return asyncio.run(_run(args))
    if args.command == "upscale":
        return asyncio.run(_upscale(args))
    if args.command == "key":
        return _handle_key(args)
    parser.print_help()
    return 1


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        code = _dispatch(parser, args)
    except (MockupError, KeyError, ValueError, OSError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        print(f"Error: {message}", file=sys.stderr)
        raise SystemExit(1) from exc
    raise SystemExit(code)


if __name__ == "__main__":
    main()

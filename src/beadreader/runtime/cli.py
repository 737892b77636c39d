"""Play a bead pattern through the console cue player."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import IO, Sequence

from ..color_catalog import ColorCatalog, ColorCatalogError, load_color_catalog
from ..pattern_loader import load_pattern_file
from ..settings import PlaybackSettings, SettingsError, load_playback_settings
from .cues import ConsoleCuePlayer
from .scheduler import PlaybackScheduler, PlaybackState

LOGGER = logging.getLogger(__name__)

_QUIT_COMMANDS = frozenset({"quit", "exit", "q"})


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed arguments for the playback CLI."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "pattern",
        type=Path,
        help="Pattern markup file or image with an embedded pattern",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to a TOML file with a [playback] table",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Seconds allowed per bead (overrides the settings file)",
    )
    parser.add_argument(
        "--cue-gap",
        type=float,
        default=None,
        help="Pause between the color and count cues (overrides the settings file)",
    )
    parser.add_argument(
        "--cue-duration",
        type=float,
        default=0.6,
        help="How long each printed cue is held before it counts as finished",
    )
    parser.add_argument(
        "--colors",
        type=Path,
        default=None,
        help="Color list; colors missing from it are reported as failed cues",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Read play/pause/toggle/reset/seek/status/quit commands from stdin",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> PlaybackSettings:
    """Merge the optional settings file with command-line overrides."""

    settings = PlaybackSettings()
    if args.settings is not None:
        settings = load_playback_settings(args.settings)
    return settings.with_overrides(speed=args.speed, cue_gap=args.cue_gap)


def describe_status(scheduler: PlaybackScheduler) -> str:
    """Return a one-line summary of the scheduler position."""

    total = scheduler.pattern.bead_count
    summary = f"{scheduler.state.name.lower()} bead {scheduler.cursor}/{total}"
    bead = scheduler.current_bead
    if bead is not None:
        summary += f" ({bead.color} x{bead.count})"
    return summary


def handle_command(
    scheduler: PlaybackScheduler, command: str, output_stream: IO[str]
) -> bool:
    """Apply one interactive ``command``; return ``False`` to stop reading."""

    verb, _, argument = command.strip().partition(" ")
    verb = verb.lower()
    if verb in _QUIT_COMMANDS:
        return False
    if verb == "play":
        scheduler.play()
    elif verb == "pause":
        scheduler.pause()
    elif verb == "toggle":
        scheduler.toggle()
    elif verb == "reset":
        scheduler.reset()
    elif verb == "seek":
        try:
            scheduler.seek(int(argument.strip()))
        except (ValueError, IndexError):
            output_stream.write(f"invalid bead: {argument.strip()!r}\n")
    elif verb == "status":
        output_stream.write(describe_status(scheduler) + "\n")
    else:
        output_stream.write(f"unknown command: {verb}\n")
    output_stream.flush()
    return True


async def drive_playback(
    scheduler: PlaybackScheduler,
    *,
    input_stream: IO[str] | None = None,
    output_stream: IO[str] = sys.stdout,
) -> PlaybackState:
    """Run ``scheduler`` to completion, or under stdin control when interactive."""

    if input_stream is None:
        scheduler.play()
        await scheduler.wait_stopped()
        return scheduler.state

    while True:
        line = await asyncio.to_thread(input_stream.readline)
        if line == "":  # EOF
            break
        if not line.strip():
            continue
        if not handle_command(scheduler, line, output_stream):
            break

    scheduler.pause()
    await scheduler.wait_stopped()
    return scheduler.state


async def run_playback(
    args: argparse.Namespace,
    *,
    input_stream: IO[str] | None = None,
    output_stream: IO[str] = sys.stdout,
) -> int:
    """Load the pattern named by ``args`` and play it."""

    settings = resolve_settings(args)
    catalog: ColorCatalog | None = None
    if args.colors is not None:
        catalog = load_color_catalog(args.colors)

    pattern = await load_pattern_file(args.pattern)
    if pattern is None:
        print(f"unable to decode pattern: {args.pattern}", file=sys.stderr)
        return 1

    player = ConsoleCuePlayer(
        output_stream, cue_duration=args.cue_duration, catalog=catalog
    )
    scheduler = PlaybackScheduler(
        player,
        settings,
        on_change=lambda current: LOGGER.info("%s", describe_status(current)),
    )
    scheduler.load(pattern)
    if args.interactive and input_stream is None:
        input_stream = sys.stdin
    state = await drive_playback(
        scheduler, input_stream=input_stream, output_stream=output_stream
    )
    LOGGER.info("playback stopped in state %s", state.name)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the playback CLI."""

    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    try:
        return asyncio.run(run_playback(args))
    except (SettingsError, ColorCatalogError, OSError) as exc:
        raise SystemExit(str(exc)) from exc
    except KeyboardInterrupt:  # pragma: no cover - user interrupt
        return 130


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())


__all__ = [
    "describe_status",
    "drive_playback",
    "handle_command",
    "main",
    "parse_args",
    "resolve_settings",
    "run_playback",
]

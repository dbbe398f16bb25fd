#!/usr/bin/env python3
"""
Command line for the chord composer.

Subcommands:
- play: play a composition file, printing events as they sound
- export: write one MIDI file per pattern
- template: write a starter composition file
- chords: list the built-in chords
"""

import argparse
import logging
import sys

from chuk_mcp_chords.api import (
    export_file_to_midi,
    export_template,
    get_chord_keywords,
    load_composition,
    play_from,
)
from chuk_mcp_chords.constants import SuccessMessages
from chuk_mcp_chords.core.rhythm import MusicTime
from chuk_mcp_chords.errors import ChordComposerError
from chuk_mcp_chords.performance.sampler import open_samplers
from chuk_mcp_chords.performance.state import ConsoleState

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chord-composer",
        description="Compose chord progressions, play them back and export them to MIDI.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser("play", help="Play a composition file")
    play.add_argument("composition_file", help="Composition YAML file")
    play.add_argument("--metronome", action="store_true", help="Play with a metronome")
    play.add_argument("--ticker-bar", action="store_true", help="Print every bar")
    play.add_argument("--ticker-beat", action="store_true", help="Print every beat")
    play.add_argument("--ticker-interval", action="store_true", help="Print every beat interval")
    play.add_argument(
        "--from",
        dest="from_time",
        type=MusicTime.parse,
        default=MusicTime.START,
        help="Start time as bar.beat.interval (default: 1.1.1)",
    )
    play.add_argument("--pattern", default=None, help="Pattern to start in (default: first)")
    play.add_argument(
        "--midi-port",
        default=None,
        help="MIDI output port to play through (default: print only)",
    )

    export = subparsers.add_parser("export", help="Export a composition file to MIDI")
    export.add_argument("composition_file", help="Composition YAML file")
    export.add_argument(
        "--output",
        default=None,
        help="Directory to export into (default: next to the composition file)",
    )

    template = subparsers.add_parser("template", help="Write a template composition file")
    template.add_argument("path", help="Where to write the template")

    subparsers.add_parser("chords", help="List the built-in chords")

    return parser


def _play(args: argparse.Namespace) -> None:
    composition = load_composition(args.composition_file)
    state = ConsoleState(
        ticker_bar=args.ticker_bar,
        ticker_beat=args.ticker_beat,
        ticker_interval=args.ticker_interval,
    )

    if args.midi_port is None:
        play_from(
            composition,
            state,
            args.from_time,
            args.pattern,
            metronome_enabled=args.metronome,
        )
    else:
        instrument, metronome = open_samplers(args.midi_port)
        try:
            play_from(
                composition,
                state,
                args.from_time,
                args.pattern,
                metronome_enabled=args.metronome,
                instrument=instrument,
                metronome=metronome,
            )
        finally:
            metronome.release_all()
            instrument.close()

    print(SuccessMessages.PLAYBACK_COMPLETED.format(name=composition.name))


def _export(args: argparse.Namespace) -> None:
    paths = export_file_to_midi(args.composition_file, args.output)
    for path in paths:
        print(f"Exported: {path}")
    if paths:
        print(
            SuccessMessages.COMPOSITION_EXPORTED.format(
                count=len(paths), name=paths[0].parent.name, path=paths[0].parent
            )
        )


def _template(args: argparse.Namespace) -> None:
    path = export_template(args.path)
    print(SuccessMessages.TEMPLATE_EXPORTED.format(path=path))


def _chords(args: argparse.Namespace) -> None:
    for keyword in get_chord_keywords():
        print(f"> {keyword}")


COMMANDS = {
    "play": _play,
    "export": _export,
    "template": _template,
    "chords": _chords,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        COMMANDS[args.command](args)
    except ChordComposerError as e:
        print(str(e), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Playback interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())

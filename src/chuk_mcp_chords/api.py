"""
Chord composer API - load, play and export compositions.

These are the entry points the CLI and the MCP tools build on:
- load_composition / compile_yaml: YAML to a compiled Composition
- play / play_from / play_yaml / play_file: real-time playback
- export_file_to_midi: one .mid file per pattern
- export_template: write a starter composition file
- get_chord_keywords / build_event: chord table helpers
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from pathlib import Path

from chuk_mcp_chords.compiler.composer import compile_composition
from chuk_mcp_chords.compiler.midi import export_composition
from chuk_mcp_chords.constants import PULSE_POLL_SECONDS
from chuk_mcp_chords.core.chord import IntervalChord, chord_keywords
from chuk_mcp_chords.core.rhythm import MusicTime
from chuk_mcp_chords.errors import ExportTemplateError, NoPatternsError
from chuk_mcp_chords.models.composition import Composition, PatternEvent
from chuk_mcp_chords.models.parameters import CompositionParameters
from chuk_mcp_chords.performance.engine import PerformanceEngine
from chuk_mcp_chords.performance.sampler import Sampler
from chuk_mcp_chords.performance.state import PerformanceState
from chuk_mcp_chords.performance.timer import MusicTimer, TimerFactory

logger = logging.getLogger(__name__)

TEMPLATE = """\
# Name of the composition
name: default_composition

# The default master parameters of the composition.
# A pattern can set its own master values to override these.
master:
    # The musical key to transpose the chords.
    # Supported values: C, C#, D, D#, E, F, F#, G, G#, A, A#, B
    key: F#

    # The beats per minute of the composition.
    time: 120

    # The time signature of the composition.
    # Beat numerator supported values: must be > 0.
    # Beat denominator supported values: 2, 4, 8, 16, 32, 64
    # e.g 3/8 is supported, 0/7 is not supported.
    signature: [4, 4]

# Composition defined chords.
chords:
    # [chord_name, [chord intervals]].
    - [custom1, [0, 3, 8]]
    - [custom2, [0, 5]]

# The composition's chord patterns/progressions.
patterns:
    - name: part_a
      # Each pattern event = [bar, beat, beat interval, chord name, chord transpose].
      pattern:
          - [1, 1, 1, MAJOR_SEVENTH, 0]
          - [1, 3, 1, custom1, 0]
          - [2, 1, 1, MAJOR_NINTH, 0]
          - [2, 3, 1, custom1, 0]
          - [3, 1, 1, MAJOR_SEVENTH, 3]
          - [3, 2, 1, custom1, 0]
          - [4, 1, 1, MAJOR_NINTH, -3]
          - [4, 2, 1, "?", 0] # ? = Select a random user defined chord.

    - name: part_b
      master:
          signature: [3, 4]
          key: C#
          time: 69
      # Each pattern event = [bar, beat, beat interval, chord name, chord transpose].
      pattern:
          - [1, 1, 1, MAJOR_SEVENTH, 0]
          - [1, 2, 1, custom1, 0]
          - [2, 1, 5, MAJOR_NINTH, 0]
          - [2, 2, 1, custom1, 0]
          - [3, 1, 5, MAJOR_SEVENTH, 3]
          - [3, 2, 1, custom1, 0]
          - [4, 1, 1, MAJOR_NINTH, -3]
          - [4, 2, 1, "??", 0] # ?? = Select a random chord from user defined and internal chords.
"""


def compile_yaml(text: str, rng: random.Random | None = None) -> Composition:
    """
    Parse and compile a composition from YAML text.

    Raises:
        DeserializeError: If the YAML is malformed
        ChordComposerError: Any compile error (see CompositionCompiler)
    """
    return compile_composition(CompositionParameters.from_yaml(text), rng)


def load_composition(path: Path | str, rng: random.Random | None = None) -> Composition:
    """
    Load and compile a composition file.

    Raises:
        DeserializeError: If the file cannot be read or parsed
        ChordComposerError: Any compile error (see CompositionCompiler)
    """
    return compile_composition(CompositionParameters.from_file(Path(path)), rng)


def play(
    composition: Composition,
    state: PerformanceState,
    metronome_enabled: bool = False,
    instrument: Sampler | None = None,
    metronome: Sampler | None = None,
    timer_factory: TimerFactory = MusicTimer,
    poll_interval: float = PULSE_POLL_SECONDS,
) -> None:
    """
    Play a composition from the beginning.

    Blocks until playback completes.

    Raises:
        NoPatternsError: If the composition has no patterns
    """
    play_from(
        composition,
        state,
        MusicTime.START,
        None,
        metronome_enabled=metronome_enabled,
        instrument=instrument,
        metronome=metronome,
        timer_factory=timer_factory,
        poll_interval=poll_interval,
    )


def play_from(
    composition: Composition,
    state: PerformanceState,
    from_time: MusicTime,
    pattern_name: str | None,
    metronome_enabled: bool = False,
    instrument: Sampler | None = None,
    metronome: Sampler | None = None,
    timer_factory: TimerFactory = MusicTimer,
    poll_interval: float = PULSE_POLL_SECONDS,
) -> None:
    """
    Play a composition from a time within a named pattern.

    Args:
        composition: The compiled composition
        state: Receives playback callbacks
        from_time: Where to start within the pattern
        pattern_name: Pattern to start in (first pattern if None)
        metronome_enabled: Click on every beat and bar
        instrument: Plays event pitches
        metronome: Plays metronome clicks
        timer_factory: Builds the pulse source for each pattern
        poll_interval: Seconds to sleep between polls

    Raises:
        NoPatternsError: If the composition has no patterns
        NoFoundPatternError: If pattern_name does not exist
    """
    if not composition.patterns:
        raise NoPatternsError()

    engine = PerformanceEngine(
        composition,
        state,
        metronome_enabled=metronome_enabled,
        instrument=instrument,
        metronome=metronome,
        timer_factory=timer_factory,
        poll_interval=poll_interval,
    )
    engine.start_from(from_time, pattern_name if pattern_name is not None else 0)
    engine.run()
    logger.debug(f"Finished playing '{composition.name}'")


def play_yaml(
    text: str,
    state: PerformanceState,
    metronome_enabled: bool = False,
    instrument: Sampler | None = None,
    metronome: Sampler | None = None,
    timer_factory: TimerFactory = MusicTimer,
    poll_interval: float = PULSE_POLL_SECONDS,
) -> None:
    """Compile YAML text and play it (see play)."""
    play(
        compile_yaml(text),
        state,
        metronome_enabled=metronome_enabled,
        instrument=instrument,
        metronome=metronome,
        timer_factory=timer_factory,
        poll_interval=poll_interval,
    )


def play_file(
    path: Path | str,
    state: PerformanceState,
    metronome_enabled: bool = False,
    instrument: Sampler | None = None,
    metronome: Sampler | None = None,
    timer_factory: TimerFactory = MusicTimer,
    poll_interval: float = PULSE_POLL_SECONDS,
) -> None:
    """Load a composition file and play it (see play)."""
    play(
        load_composition(path),
        state,
        metronome_enabled=metronome_enabled,
        instrument=instrument,
        metronome=metronome,
        timer_factory=timer_factory,
        poll_interval=poll_interval,
    )


def export_file_to_midi(path: Path | str, output_dir: Path | str | None = None) -> list[Path]:
    """
    Export every pattern of a composition file to MIDI.

    Files go to <output_dir>/<composition name>/<pattern>.mid; output_dir
    defaults to the directory holding the composition file.

    Returns:
        Paths of the written files

    Raises:
        DeserializeError: If the file cannot be read or parsed
        ExportMidiError: If the files cannot be written
    """
    path = Path(path)
    composition = load_composition(path)
    parent = Path(output_dir) if output_dir is not None else path.parent
    return export_composition(composition, parent)


def export_template(path: Path | str) -> Path:
    """
    Write the starter composition template.

    Raises:
        ExportTemplateError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.write_text(TEMPLATE)
    except OSError as e:
        raise ExportTemplateError(path, str(e)) from e
    logger.info(f"Exported template to {path}")
    return path


def get_chord_keywords() -> list[str]:
    """Every built-in chord as 'NAME = [intervals]', in table order."""
    return chord_keywords()


def build_event(
    bar: int,
    beat: int,
    beat_interval: int,
    intervals: Sequence[int],
    transpose: int = 0,
) -> PatternEvent:
    """
    Build a timeline event straight from intervals.

    The intervals are transposed and measured from C1 with no key or
    playback octave applied, so build_event(1, 1, 1, [0]) sounds C1.
    """
    chord = IntervalChord(tuple(intervals)).transpose(transpose)
    return PatternEvent(MusicTime(bar, beat, beat_interval), tuple(chord.to_midi()))

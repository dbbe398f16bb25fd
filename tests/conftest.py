"""
Pytest configuration and shared fixtures.
"""

import random
import tempfile
from pathlib import Path

import pytest

from chuk_mcp_chords.core import MusicTime, TimeSignature
from chuk_mcp_chords.models import Composition, Pattern, PatternEvent

MIDDLE_C_YAML = """
name: middle_c
chords:
    - [single_note, [0]]
patterns:
    - name: part_a
      pattern:
          - [1, 1, 1, single_note, 0]
"""

NEW_COMPOSITION_YAML = """
name: test composition
master:
    key: D
    time: 128
    signature: [3, 4]
chords:
    - [custom1, [0, 3, 8]]
    - [custom2, [0, 5]]
patterns:
    - name: part_a
      pattern:
          - [1, 1, 1, MAJOR_SEVENTH, 0]
          - [1, 2, 1, custom1, 0]
          - [2, 1, 1, MAJOR_NINTH, 0]
          - [2, 2, 1, custom1, -3]
    - name: part_b
      master:
          key: C#
          time: 69
          signature: [4, 4]
      pattern:
          - [1, 1, 1, MAJOR_SEVENTH, 0]
          - [1, 3, 1, custom2, 0]
"""


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def middle_c_yaml() -> str:
    """One C chord on the first beat of a 4/4 bar."""
    return MIDDLE_C_YAML


@pytest.fixture
def composition_yaml() -> str:
    """Two patterns with custom chords and per-pattern overrides."""
    return NEW_COMPOSITION_YAML


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for the random chord tokens."""
    return random.Random(1234)


@pytest.fixture
def seek_composition() -> Composition:
    """Two patterns; the second is 7/4 with events given out of order."""
    return Composition(
        "test compo",
        [
            Pattern.with_events(
                "a",
                100,
                TimeSignature(4, 4),
                [
                    PatternEvent(MusicTime(1, 1, 1), (48, 51, 55)),
                    PatternEvent(MusicTime(2, 1, 1), (49, 52, 56)),
                    PatternEvent(MusicTime(3, 4, 1), (50, 53, 57)),
                ],
            ),
            Pattern.with_events(
                "b",
                150,
                TimeSignature(7, 4),
                [
                    PatternEvent(MusicTime(3, 5, 1), (24,)),
                    PatternEvent(MusicTime(2, 1, 1), (24,)),
                    PatternEvent(MusicTime(1, 1, 1), (24,)),
                ],
            ),
        ],
    )

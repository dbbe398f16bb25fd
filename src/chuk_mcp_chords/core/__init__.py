"""
Core music primitives.

The building blocks everything else composes on:
- Key: The 12 chromatic keys (0-11)
- to_midi_note / midi_to_note: Interval <-> absolute pitch conversion
- CHORD_TABLE: Named chord interval stacks
- IntervalChord: Resolved chord with pending transposition
- TimeSignature: Beats per bar and beat unit
- MusicTime: Position on the bar/beat/interval clock
"""

from chuk_mcp_chords.core.chord import (
    CHORD_TABLE,
    RANDOM_ANY_TOKEN,
    RANDOM_CUSTOM_TOKEN,
    CustomChords,
    IntervalChord,
    chord_keywords,
    resolve_chord,
)
from chuk_mcp_chords.core.pitch import Key, midi_to_note, spell_pitch, to_midi_note
from chuk_mcp_chords.core.rhythm import MusicTime, TimeSignature

__all__ = [
    # Pitch
    "Key",
    "to_midi_note",
    "midi_to_note",
    "spell_pitch",
    # Chord
    "CHORD_TABLE",
    "RANDOM_ANY_TOKEN",
    "RANDOM_CUSTOM_TOKEN",
    "CustomChords",
    "IntervalChord",
    "chord_keywords",
    "resolve_chord",
    # Rhythm
    "TimeSignature",
    "MusicTime",
]

"""
Pitch primitives - Key and absolute MIDI pitch helpers.

Key represents the 12 chromatic keys a composition can be written in.
Intervals are plain semitone offsets; they become absolute MIDI pitches
only through to_midi_note, which saturates at the playable range.
"""

from __future__ import annotations

from enum import IntEnum

from chuk_mcp_chords.constants import MIDI_NOTE_MAX, MIDI_NOTE_MIN

# Display names (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]


class Key(IntEnum):
    """
    The 12 chromatic keys (0-11).

    The value is the semitone offset applied to every chord written in
    that key. Only sharp spellings are recognised when parsing.
    """

    C = 0
    Cs = 1  # C#
    D = 2
    Ds = 3  # D#
    E = 4
    F = 5
    Fs = 6  # F#
    G = 7
    Gs = 8  # G#
    A = 9
    As = 10  # A#
    B = 11

    def spell(self) -> str:
        """Get human-readable name."""
        return _SHARP_NAMES[self.value]

    @classmethod
    def parse(cls, name: str) -> Key:
        """
        Parse a key from a string like 'C', 'C#', 'F#'.

        Unknown names fall back to C rather than failing, so a typo in a
        key never aborts a composition.
        """
        name = name.strip()
        if name in _SHARP_NAMES:
            return cls(_SHARP_NAMES.index(name))
        return cls.C


def to_midi_note(interval: int, base: int = MIDI_NOTE_MIN) -> int:
    """
    Convert a semitone interval to an absolute MIDI note.

    The note is measured from base (C1 = 24) and clamped to the
    playable range [24, 107]; out-of-range notes saturate, never wrap.

    Args:
        interval: Semitones above base (may be negative)
        base: Base MIDI note the interval is measured from

    Returns:
        MIDI note number in [MIDI_NOTE_MIN, MIDI_NOTE_MAX]
    """
    return max(MIDI_NOTE_MIN, min(MIDI_NOTE_MAX, base + interval))


def midi_to_note(pitch: int) -> tuple[int, Key]:
    """
    Split a MIDI note into (octave, key) for display.

    Octaves count from 1 at the base note, so middle C (60) is (4, Key.C).
    """
    offset = pitch - MIDI_NOTE_MIN
    return offset // 12 + 1, Key(offset % 12)


def spell_pitch(pitch: int) -> str:
    """Spell a MIDI note as name and octave, e.g. 60 -> 'C4'."""
    octave, key = midi_to_note(pitch)
    return f"{key.spell()}{octave}"

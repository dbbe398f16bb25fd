"""
Chord primitives - the named chord table and IntervalChord.

Chords are stacks of intervals measured from the root. The table is pure
data keyed by symbolic name; compositions may add their own custom chords
on top of it. IntervalChord carries a resolved interval stack plus a
pending transposition until it is turned into absolute MIDI pitches.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from .pitch import Key, to_midi_note

# User-declared chords: (name, intervals) in declaration order
CustomChords = Sequence[tuple[str, Sequence[int]]]

# Token that picks a random custom chord
RANDOM_CUSTOM_TOKEN = "?"
# Token that picks a random chord from the table and the custom chords
RANDOM_ANY_TOKEN = "??"

CHORD_TABLE: dict[str, tuple[int, ...]] = {
    "AUGMENTED": (0, 4, 8),
    "AUGMENTED_ELEVENTH": (0, 4, 7, 10, 2, 6),
    "AUGMENTED_MAJOR_SEVENTH": (0, 4, 8, 11),
    "AUGMENTED_SEVENTH": (0, 4, 8, 10),
    "AUGMENTED_SIXTH": (0, 6, 8),
    "DIMINISHED": (0, 3, 6),
    "DIMINISHED_MAJOR_SEVENTH": (0, 3, 6, 11),
    "DIMINISHED_SEVENTH": (0, 3, 6, 9),
    "DOMINANT": (0, 4, 7),
    "DOMINANT_ELEVENTH": (0, 4, 7, 10, 2, 5),
    "DOMINANT_MINOR_NINTH": (0, 4, 7, 10, 1),
    "DOMINANT_NINTH": (0, 4, 7, 10, 2),
    "DOMINANT_PARALLEL": (0, 3, 7),
    "DOMINANT_SEVENTH": (0, 4, 7, 10),
    "DOMINANT_SEVENTH_FLAT_FIVE": (0, 4, 6, 10),
    "DOMINANT_SEVENTH_RAISED_NINTH": (0, 4, 7, 10, 3),
    "DOMINANT_THIRTEENTH": (0, 4, 7, 10, 2, 5, 9),
    "DREAM": (0, 5, 6, 7),
    "ELEKTRA": (0, 7, 9, 1, 4),
    "FARBEN": (0, 8, 11, 4, 9),
    "HALF_DIMINISHED_SEVENTH": (0, 3, 6, 10),
    "HARMONIC_SEVENTH": (0, 4, 7, 10),
    "AUGMENTED_NINTH": (0, 4, 7, 10, 3),
    "LEADING_TONE": (0, 3, 6),
    "LYDIAN": (0, 4, 7, 11, 6),
    "MAGIC": (0, 1, 5, 6, 10, 0, 3, 5),
    "MAJOR": (0, 4, 7),
    "MAJOR_ELEVENTH": (0, 4, 7, 11, 2, 5),
    "MAJOR_SEVENTH": (0, 4, 7, 11),
    "MAJOR_SEVENTH_SHARP_ELEVENTH": (0, 4, 8, 11, 6),
    "MAJOR_SIXTH": (0, 4, 7, 9),
    "MAJOR_SIXTH_NINTH": (0, 4, 7, 9, 2),
    "MAJOR_NINTH": (0, 4, 7, 11, 2),
    "MAJOR_THIRTEENTH": (0, 4, 7, 11, 2, 6, 9),
    "MEDIANT": (0, 3, 7),
    "MINOR": (0, 3, 7),
    "MINOR_ELEVENTH": (0, 3, 7, 10, 2, 5),
    "MINOR_MAJOR_SEVENTH": (0, 3, 7, 11),
    "MINOR_NINTH": (0, 3, 7, 10, 2),
    "MINOR_SEVENTH": (0, 3, 7, 10),
    "MINOR_SIXTH": (0, 3, 7, 9),
    "MINOR_SIXTH_NINTH": (0, 3, 7, 9, 2),
    "MINOR_THIRTEENTH": (0, 3, 7, 10, 2, 5, 9),
    "MU": (0, 2, 4, 7),
    "MYSTIC": (0, 6, 10, 4, 9, 2),
    "NEAPOLITAN": (1, 5, 8),
    "NINTH_AUGMENTED_FIFTH": (0, 4, 8, 10, 2),
    "NINTH_FLAT_FIFTH": (0, 4, 6, 10, 2),
    "NORTHERN_LIGHTS": (1, 2, 8, 0, 3, 6, 7, 10, 11, 4, 7),
    "ODE_TO_NAPOLEON_HEXACHORD": (0, 1, 4, 5, 8, 9),
    "PETRUSHKA": (0, 1, 4, 6, 7, 10),
    "POWER": (0, 7),
    "PSALMS": (0, 3, 7),
    "SECONDARY_DOMINANT": (0, 4, 7),
    "SECONDARY_LEADING_TONE": (0, 3, 6),
    "SECONDARY_SUPERTONIC": (0, 3, 7),
    "SEVEN_SIX": (0, 4, 7, 9, 10),
    "SEVENTH_FLAT_NINE": (0, 4, 7, 10, 1),
    "SEVENTH_SUSPENSION_FOUR": (0, 5, 7, 10),
    "SO_WHAT": (0, 5, 10, 3, 7),
    "SUSPENDED": (0, 5, 7),
    "SUBDOMINANT": (0, 4, 7),
    "SUBDOMINANT_PARALLEL": (0, 3, 7),
    "SUBMEDIANT": (0, 3, 7),
    "SUBTONIC": (0, 4, 7),
    "SUPERTONIC": (0, 3, 7),
    "THIRTEENTH_FLAT_NINTH": (0, 4, 7, 10, 1, 12, 9),
    "THIRTEENTH_FLAT_NINTH_FLAT_FIFTH": (0, 4, 6, 10, 1, 12, 9),
    "TONIC_COUNTER_PARALLEL": (0, 3, 7),
    "TONIC": (0, 4, 7),
    "TONIC_PARALLEL": (0, 3, 7),
    "TRISTAN": (0, 3, 6, 10),
    "VIENNESE_TRICHORD": (0, 1, 6, 7),
}


def resolve_chord(
    token: str,
    custom_chords: CustomChords = (),
    rng: random.Random | None = None,
) -> tuple[int, ...]:
    """
    Resolve a chord token to its interval stack.

    Lookup is case-sensitive: the built-in table first, then the custom
    chords in declaration order (first match wins). '?' picks a random
    custom chord, '??' a random chord from the table and the custom chords.

    Args:
        token: Chord name or random token (surrounding whitespace ignored)
        custom_chords: User-declared (name, intervals) pairs
        rng: Random source for the random tokens (module random if None)

    Returns:
        Interval stack, or an empty tuple if the chord is unknown
    """
    token = token.strip()
    chooser = rng or random

    if token == RANDOM_CUSTOM_TOKEN:
        if not custom_chords:
            return ()
        _, intervals = chooser.choice(list(custom_chords))
        return tuple(intervals)

    if token == RANDOM_ANY_TOKEN:
        candidates = list(CHORD_TABLE.values()) + [tuple(i) for _, i in custom_chords]
        return chooser.choice(candidates)

    if token in CHORD_TABLE:
        return CHORD_TABLE[token]

    for name, intervals in custom_chords:
        if name == token:
            return tuple(intervals)

    return ()


@dataclass(frozen=True)
class IntervalChord:
    """
    A resolved interval stack with a pending transposition.

    Transposition accumulates and is only applied when converting to
    MIDI pitches; the stored intervals never change.

    Immutable and hashable.
    """

    intervals: tuple[int, ...]
    transpose_by: int = 0

    @classmethod
    def from_token(
        cls,
        token: str,
        custom_chords: CustomChords = (),
        rng: random.Random | None = None,
    ) -> IntervalChord:
        """Resolve a chord token (see resolve_chord)."""
        return cls(resolve_chord(token, custom_chords, rng))

    def transpose(self, semitones: int) -> IntervalChord:
        """Return a chord transposed by a number of semitones."""
        return IntervalChord(self.intervals, self.transpose_by + semitones)

    def transpose_octave(self, octaves: int) -> IntervalChord:
        """Return a chord transposed by whole octaves."""
        return self.transpose(octaves * 12)

    def in_key(self, key: Key) -> IntervalChord:
        """Return the chord moved into a key."""
        return self.transpose(key.value)

    def to_midi(self) -> list[int]:
        """Absolute MIDI pitches, clamped to the playable range."""
        return [to_midi_note(interval + self.transpose_by) for interval in self.intervals]

    @property
    def is_empty(self) -> bool:
        """True if the chord resolved to no intervals."""
        return not self.intervals

    def __len__(self) -> int:
        return len(self.intervals)


def chord_keywords() -> list[str]:
    """
    Describe every built-in chord, in table order.

    Returns:
        Lines like 'AUGMENTED = [0, 4, 8]'
    """
    return [f"{name} = {list(intervals)}" for name, intervals in CHORD_TABLE.items()]

"""
Rhythm primitives - MusicTime and TimeSignature.

MusicTime is the three-level musical clock (bar, beat, beat interval)
shared by the compiler, the performance engine and the MIDI encoder.
A beat always holds BEAT_INTERVALS_PER_BEAT intervals; a bar holds
`numerator` beats of its time signature.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from chuk_mcp_chords.constants import (
    BEAT_INTERVALS_PER_BEAT,
    DENOMINATOR_POWERS,
    TICKS_PER_BEAT,
    TICKS_PER_BEAT_INTERVAL,
)


@dataclass(frozen=True)
class TimeSignature:
    """
    A time signature: beats per bar over the beat unit.

    Construction does not validate, so an invalid signature can still be
    reported back to the user; check is_valid before using one.

    Examples:
        TimeSignature(4, 4) = 4/4
        TimeSignature(7, 8) = 7/8
    """

    numerator: int
    denominator: int

    COMMON_TIME: ClassVar[TimeSignature]  # 4/4
    WALTZ: ClassVar[TimeSignature]  # 3/4

    @property
    def is_valid(self) -> bool:
        """A positive numerator over a power-of-two denominator from 2 to 64."""
        return self.numerator > 0 and self.denominator in DENOMINATOR_POWERS

    @property
    def denominator_power(self) -> int:
        """The denominator as a power of two (4 -> 2); 0 when unsupported."""
        return DENOMINATOR_POWERS.get(self.denominator, 0)

    @property
    def beat_intervals_per_bar(self) -> int:
        """Number of beat intervals in one bar."""
        return self.numerator * BEAT_INTERVALS_PER_BEAT

    def bar_to_ticks(self, ticks_per_beat: int = TICKS_PER_BEAT) -> int:
        """Get the number of ticks in one bar."""
        return self.numerator * ticks_per_beat

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    @classmethod
    def parse(cls, notation: str) -> TimeSignature:
        """
        Parse a time signature from notation like '4/4', '3/4', '7/8'.

        Args:
            notation: Time signature string

        Returns:
            TimeSignature (not validated)
        """
        parts = notation.split("/")
        if len(parts) != 2:
            raise ValueError(f"Invalid time signature format: {notation}")
        return cls(int(parts[0]), int(parts[1]))


TimeSignature.COMMON_TIME = TimeSignature(4, 4)
TimeSignature.WALTZ = TimeSignature(3, 4)


@dataclass(frozen=True, order=True)
class MusicTime:
    """
    A position on the musical clock.

    All three fields are 1-based. Ordering is lexicographic over
    (bar, beat, beat_interval), so times compare the way they are heard.

    Examples:
        MusicTime(1, 1, 1) = start of the first bar
        MusicTime(2, 3, 5) = bar 2, beat 3, halfway through the beat
    """

    bar: int = 1
    beat: int = 1
    beat_interval: int = 1

    START: ClassVar[MusicTime]

    def __post_init__(self) -> None:
        if self.bar < 0 or self.beat < 0 or self.beat_interval < 0:
            raise ValueError(f"Music time fields must be non-negative, got {self.as_tuple()}")

    def as_tuple(self) -> tuple[int, int, int]:
        """The time as a (bar, beat, beat_interval) tuple."""
        return self.bar, self.beat, self.beat_interval

    def is_reachable(self, signature: TimeSignature) -> bool:
        """
        Check that the clock can ever show this time.

        The bar must be at least 1, the beat within the bar's numerator and
        the beat interval within one beat's subdivisions.
        """
        return (
            self.bar >= 1
            and 1 <= self.beat <= signature.numerator
            and 1 <= self.beat_interval <= BEAT_INTERVALS_PER_BEAT
        )

    def is_last_interval_of_bar(self, signature: TimeSignature) -> bool:
        """True on the final subdivision of the final beat of a bar."""
        return (
            self.beat == signature.numerator
            and self.beat_interval == BEAT_INTERVALS_PER_BEAT
        )

    def advance(self, signature: TimeSignature) -> MusicTime:
        """
        Return the time one beat interval later.

        Intervals wrap into the next beat and beats wrap into the next bar.
        """
        bar, beat, interval = self.as_tuple()
        interval += 1
        if interval > BEAT_INTERVALS_PER_BEAT:
            interval = 1
            beat += 1
            if beat > signature.numerator:
                beat = 1
                bar += 1
        return MusicTime(bar, beat, interval)

    def next_bar(self) -> MusicTime:
        """The first interval of the following bar."""
        return MusicTime(self.bar + 1, 1, 1)

    def to_ticks(self, signature: TimeSignature) -> int:
        """
        Convert to an absolute MIDI tick position from the start of bar 1.

        Args:
            signature: Time signature for bar length calculation

        Returns:
            Absolute tick position
        """
        return (
            (self.bar - 1) * signature.bar_to_ticks()
            + (self.beat - 1) * TICKS_PER_BEAT
            + (self.beat_interval - 1) * TICKS_PER_BEAT_INTERVAL
        )

    def __str__(self) -> str:
        return f"{self.bar}.{self.beat}.{self.beat_interval}"

    @classmethod
    def parse(cls, notation: str) -> MusicTime:
        """
        Parse a time from notation like '2.1.1' (bar.beat.interval).

        Missing trailing fields default to 1, so '3' is the start of bar 3.
        """
        parts = notation.strip().split(".")
        if not 1 <= len(parts) <= 3:
            raise ValueError(f"Invalid music time format: {notation}")
        fields = [int(p) for p in parts] + [1] * (3 - len(parts))
        return cls(*fields)


MusicTime.START = MusicTime(1, 1, 1)

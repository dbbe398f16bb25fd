"""
Timeline model - PatternEvent, Pattern, Composition.

The compiled form of a composition. A Pattern is an ordered run of
time-stamped chords sharing one tempo and time signature; a Composition
is the named, ordered set of patterns. Both are read-only once the
compiler hands them over to the performance engine or the MIDI encoder.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from chuk_mcp_chords.core.rhythm import MusicTime, TimeSignature
from chuk_mcp_chords.errors import NoFoundPatternError


@dataclass(frozen=True, order=True)
class PatternEvent:
    """
    A chord sounding at one point of the musical clock.

    An event may carry no pitches (an unknown chord); it still occupies
    its slot in the timeline.
    """

    time: MusicTime
    pitches: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {"time": list(self.time.as_tuple()), "pitches": list(self.pitches)}


@dataclass
class Pattern:
    """
    A named run of chord events at one tempo and time signature.

    Events are kept in strictly increasing time order; add_event rejects
    anything that would break that.
    """

    name: str
    bpm: int
    signature: TimeSignature
    events: list[PatternEvent] = field(default_factory=list)

    @classmethod
    def with_events(
        cls,
        name: str,
        bpm: int,
        signature: TimeSignature,
        events: Iterable[PatternEvent],
    ) -> Pattern:
        """
        Create a pattern from events in any order.

        Events are sorted by time; duplicate times are rejected.
        """
        pattern = cls(name, bpm, signature)
        for event in sorted(events, key=lambda e: e.time):
            pattern.add_event(event)
        return pattern

    def add_event(self, event: PatternEvent) -> None:
        """
        Append an event after the current last event.

        Raises:
            ValueError: If the event does not come strictly later
        """
        if self.events and event.time <= self.events[-1].time:
            raise ValueError(
                f"Event at {event.time} does not follow {self.events[-1].time} "
                f"in pattern '{self.name}'"
            )
        self.events.append(event)

    def find_next_event_index(self, time: MusicTime) -> int:
        """
        Index of the first event at or after a time.

        Equivalently, the number of events strictly before it; equals
        len(self) when every event is earlier.
        """
        return bisect_left([event.time for event in self.events], time)

    @property
    def last_event(self) -> PatternEvent | None:
        """The final event, or None for an empty pattern."""
        return self.events[-1] if self.events else None

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[PatternEvent]:
        return iter(self.events)

    def __getitem__(self, index: int) -> PatternEvent:
        return self.events[index]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "name": self.name,
            "bpm": self.bpm,
            "signature": [self.signature.numerator, self.signature.denominator],
            "events": [event.to_dict() for event in self.events],
        }


@dataclass
class Composition:
    """
    A named, ordered collection of patterns.

    The root of the timeline; owns every pattern it holds.
    """

    name: str
    patterns: list[Pattern] = field(default_factory=list)

    def add_pattern(self, pattern: Pattern) -> None:
        """Append a pattern to the end of the composition."""
        self.patterns.append(pattern)

    def find_pattern_index(self, name: str) -> int:
        """
        Index of the first pattern with a name.

        Raises:
            NoFoundPatternError: If no pattern has that name
        """
        for index, pattern in enumerate(self.patterns):
            if pattern.name == name:
                return index
        raise NoFoundPatternError(name)

    def get_pattern(self, name: str) -> Pattern:
        """Get a pattern by name (see find_pattern_index)."""
        return self.patterns[self.find_pattern_index(name)]

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self.patterns)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "name": self.name,
            "patterns": [pattern.to_dict() for pattern in self.patterns],
        }

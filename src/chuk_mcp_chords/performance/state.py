"""
Performance states - hosts for playback callbacks.

A performance state is any object with the eight hooks of the
PerformanceState protocol. The engine calls them as playback proceeds;
the host decides what to do (print, record, drive a UI).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO

from chuk_mcp_chords.core.pitch import spell_pitch
from chuk_mcp_chords.core.rhythm import MusicTime
from chuk_mcp_chords.models.composition import Composition, Pattern, PatternEvent


class PerformanceState(Protocol):
    """Callbacks fired by the performance engine."""

    def on_ready(self, composition: Composition) -> None: ...

    def on_beat_interval_change(self, current_time: MusicTime) -> None: ...

    def on_beat_change(self, current_time: MusicTime) -> None: ...

    def on_bar_change(self, current_time: MusicTime) -> None: ...

    def on_event(self, event: PatternEvent) -> None: ...

    def on_pattern_playback_begin(self, pattern: Pattern) -> None: ...

    def on_pattern_playback_end(self, pattern: Pattern) -> None: ...

    def on_completed(self, composition: Composition) -> None: ...


@dataclass
class RecordingState:
    """
    Records every callback in order.

    Each entry is (hook name, argument). Useful for tests and for
    rendering a performance into an inspectable log.
    """

    calls: list[tuple[str, Any]] = field(default_factory=list)
    current_time: MusicTime | None = None
    events: list[PatternEvent] = field(default_factory=list)

    def on_ready(self, composition: Composition) -> None:
        self.calls.append(("ready", composition))

    def on_beat_interval_change(self, current_time: MusicTime) -> None:
        self.current_time = current_time
        self.calls.append(("beat_interval", current_time))

    def on_beat_change(self, current_time: MusicTime) -> None:
        self.calls.append(("beat", current_time))

    def on_bar_change(self, current_time: MusicTime) -> None:
        self.calls.append(("bar", current_time))

    def on_event(self, event: PatternEvent) -> None:
        self.events.append(event)
        self.calls.append(("event", event))

    def on_pattern_playback_begin(self, pattern: Pattern) -> None:
        self.calls.append(("pattern_begin", pattern))

    def on_pattern_playback_end(self, pattern: Pattern) -> None:
        self.calls.append(("pattern_end", pattern))

    def on_completed(self, composition: Composition) -> None:
        self.calls.append(("completed", composition))

    @property
    def callback_count(self) -> int:
        """Total number of callbacks received."""
        return len(self.calls)

    def names(self) -> list[str]:
        """Hook names in call order."""
        return [name for name, _ in self.calls]

    def to_log(self) -> list[dict[str, Any]]:
        """
        Convert the recording to JSON-friendly entries.

        Clock callbacks carry the time, events their pitches, and
        pattern callbacks the pattern name.
        """
        log: list[dict[str, Any]] = []
        for name, arg in self.calls:
            entry: dict[str, Any] = {"callback": name}
            if isinstance(arg, MusicTime):
                entry["time"] = str(arg)
            elif isinstance(arg, PatternEvent):
                entry.update(arg.to_dict())
            elif isinstance(arg, (Pattern, Composition)):
                entry["name"] = arg.name
            log.append(entry)
        return log


def format_time(current_time: MusicTime) -> str:
    """Format a time as a ticker line, e.g. '| 01.1.1'."""
    return f"| {current_time.bar:02}.{current_time.beat}.{current_time.beat_interval}"


class ConsoleState:
    """
    Prints playback progress as it happens.

    Events are always printed; bar, beat and beat interval tickers are
    each optional.
    """

    def __init__(
        self,
        ticker_bar: bool = False,
        ticker_beat: bool = False,
        ticker_interval: bool = False,
        stream: TextIO | None = None,
    ):
        self.ticker_bar = ticker_bar
        self.ticker_beat = ticker_beat
        self.ticker_interval = ticker_interval
        self.stream = stream or sys.stdout

    def _print(self, text: str) -> None:
        print(text, file=self.stream)

    def on_ready(self, composition: Composition) -> None:
        self._print(f"[ {composition.name} ]")

    def on_beat_interval_change(self, current_time: MusicTime) -> None:
        if self.ticker_interval:
            self._print(format_time(current_time))

    def on_beat_change(self, current_time: MusicTime) -> None:
        if self.ticker_beat:
            self._print(format_time(current_time))

    def on_bar_change(self, current_time: MusicTime) -> None:
        if self.ticker_bar:
            self._print(format_time(current_time))

    def on_event(self, event: PatternEvent) -> None:
        notes = " ".join(spell_pitch(pitch) for pitch in event.pitches)
        self._print(f"{format_time(event.time)} | {notes}")

    def on_pattern_playback_begin(self, pattern: Pattern) -> None:
        self._print(f"<< {pattern.name} {pattern.signature} @ {pattern.bpm} bpm >>")

    def on_pattern_playback_end(self, pattern: Pattern) -> None:
        pass

    def on_completed(self, composition: Composition) -> None:
        pass

"""
Pulse generators - drive the musical clock from real or simulated time.

A pulse source owns a MusicTime cursor and, each time it is polled and a
pulse is due, reports the current time to a listener at beat interval
resolution. Bar and beat boundaries are reported first, then the beat
interval itself:

    1.1.1 -> on_bar, on_beat, on_beat_interval
    1.1.2 -> on_beat_interval
    1.2.1 -> on_beat, on_beat_interval

The first pulse reports the start (or seek) time itself; every later
pulse advances one beat interval.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from chuk_mcp_chords.constants import BEAT_INTERVALS_PER_BEAT
from chuk_mcp_chords.core.rhythm import MusicTime, TimeSignature


class PulseListener(Protocol):
    """Receives clock boundaries from a pulse source."""

    def on_bar(self, current_time: MusicTime) -> None: ...

    def on_beat(self, current_time: MusicTime) -> None: ...

    def on_beat_interval(self, current_time: MusicTime) -> None: ...


class PulseSource(Protocol):
    """A musical clock that can be polled, stepped and repositioned."""

    @property
    def current_time(self) -> MusicTime: ...

    def advance_one_pulse(self) -> MusicTime: ...

    def seek(self, time: MusicTime) -> None: ...

    def pulse(self, listener: PulseListener) -> bool: ...


# Builds a pulse source for a pattern's time signature and tempo
TimerFactory = Callable[[TimeSignature, int], PulseSource]


class MusicTimer:
    """
    Wall-clock pulse generator.

    A pulse is due every 60 / bpm / 8 seconds. Pulse deadlines are laid
    out from the first poll, so a late poll catches up on the next one
    instead of drifting.
    """

    def __init__(
        self,
        signature: TimeSignature,
        bpm: int,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Initialize the timer at 1.1.1.

        Args:
            signature: Time signature the clock counts in
            bpm: Tempo in beats per minute
            clock: Monotonic time source in seconds
        """
        if bpm <= 0:
            raise ValueError(f"BPM must be positive, got {bpm}")
        self.signature = signature
        self.bpm = bpm
        self.pulse_seconds = 60.0 / bpm / BEAT_INTERVALS_PER_BEAT
        self._clock = clock
        self._time = MusicTime.START
        self._started = False
        self._next_pulse_at: float | None = None

    @property
    def current_time(self) -> MusicTime:
        """The time the clock shows."""
        return self._time

    def advance_one_pulse(self) -> MusicTime:
        """Step the clock one beat interval without notifying anyone."""
        self._time = self._time.advance(self.signature)
        return self._time

    def seek(self, time: MusicTime) -> None:
        """Move the clock; the next pulse reports this time."""
        self._time = time
        self._started = False
        self._next_pulse_at = None

    def is_pulse_due(self) -> bool:
        """Check the clock and claim the next pulse if it is due."""
        now = self._clock()
        if self._next_pulse_at is None:
            self._next_pulse_at = now
        if now < self._next_pulse_at:
            return False
        self._next_pulse_at += self.pulse_seconds
        return True

    def pulse(self, listener: PulseListener) -> bool:
        """
        Poll the clock, firing callbacks if a pulse is due.

        Args:
            listener: Receives bar, beat and beat interval callbacks

        Returns:
            True if a pulse fired
        """
        if not self.is_pulse_due():
            return False

        if self._started:
            self.advance_one_pulse()
        else:
            self._started = True

        current = self._time
        if current.beat_interval == 1:
            if current.beat == 1:
                listener.on_bar(current)
            listener.on_beat(current)
        listener.on_beat_interval(current)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.signature}, {self.bpm}bpm, at {self._time})"


class ManualTimer(MusicTimer):
    """
    Render-mode pulse generator.

    Every poll is a pulse, so a whole pattern plays back as fast as the
    caller can loop. Used for tests and for rendering a performance
    without waiting in real time.
    """

    def is_pulse_due(self) -> bool:
        return True

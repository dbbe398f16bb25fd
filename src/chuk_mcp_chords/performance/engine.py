"""
Performance Engine - plays a composition in step with a musical clock.

For each pattern, a fresh pulse source is created at the pattern's own
time signature and tempo. Every pulse the engine:
- reports bar and beat changes (with metronome clicks if enabled)
- reports the beat interval
- fires the next event when the clock reaches its time
- stops the pattern once every event has played and the clock is on
  the final interval of a bar

Playback is single-threaded and polling: the engine sleeps a short fixed
interval between polls, so timing is best-effort.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from chuk_mcp_chords.constants import (
    METRONOME_BAR_SAMPLE,
    METRONOME_BEAT_SAMPLE,
    MIDI_NOTE_MIN,
    PULSE_POLL_SECONDS,
)
from chuk_mcp_chords.core.rhythm import MusicTime
from chuk_mcp_chords.models.composition import Composition, Pattern
from chuk_mcp_chords.performance.sampler import Sampler
from chuk_mcp_chords.performance.state import PerformanceState
from chuk_mcp_chords.performance.timer import MusicTimer, TimerFactory

logger = logging.getLogger(__name__)


class PerformanceEngine:
    """
    Walks a composition's timeline, driven by pulses.

    The engine is the pulse listener: the pulse source calls on_bar,
    on_beat and on_beat_interval, and the engine forwards them to the
    performance state.
    """

    def __init__(
        self,
        composition: Composition,
        state: PerformanceState,
        metronome_enabled: bool = False,
        instrument: Sampler | None = None,
        metronome: Sampler | None = None,
        timer_factory: TimerFactory = MusicTimer,
        poll_interval: float = PULSE_POLL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the engine at the start of the first pattern.

        Args:
            composition: The compiled composition (at least one pattern)
            state: Receives playback callbacks
            metronome_enabled: Click on every beat and bar
            instrument: Plays event pitches (index = pitch - 24)
            metronome: Plays metronome clicks (0 = beat, 1 = bar)
            timer_factory: Builds the pulse source for each pattern
            poll_interval: Seconds to sleep between polls
            sleep: Sleep function

        Raises:
            ValueError: If the composition has no patterns
        """
        if not composition.patterns:
            raise ValueError("PerformanceEngine requires a composition with at least one pattern")

        self.composition = composition
        self.state = state
        self.metronome_enabled = metronome_enabled
        self.instrument = instrument
        self.metronome = metronome
        self.timer_factory = timer_factory
        self.poll_interval = poll_interval
        self._sleep = sleep

        self.pattern_index = 0
        self.event_cursor = 0
        self.is_playing = False
        self.start_time = MusicTime.START
        self._stop_requested = False

    @property
    def current_pattern(self) -> Pattern:
        """The pattern being played."""
        return self.composition.patterns[self.pattern_index]

    def start(self, from_time: MusicTime = MusicTime.START, from_pattern_index: int = 0) -> None:
        """
        Position playback at a time within a pattern.

        The event cursor moves to the first event at or after from_time;
        earlier events of that pattern never fire.

        Raises:
            IndexError: If the pattern index is out of range
        """
        if not 0 <= from_pattern_index < len(self.composition):
            raise IndexError(f"Pattern index {from_pattern_index} out of range")
        self.pattern_index = from_pattern_index
        self.start_time = from_time
        self.event_cursor = self.current_pattern.find_next_event_index(from_time)

    def start_from(self, from_time: MusicTime, pattern: int | str) -> None:
        """
        Position playback by pattern index or name.

        Raises:
            NoFoundPatternError: If no pattern has the given name
        """
        if isinstance(pattern, str):
            pattern = self.composition.find_pattern_index(pattern)
        self.start(from_time, pattern)

    def stop(self) -> None:
        """Stop after the current pulse; remaining patterns are skipped."""
        self._stop_requested = True
        self.is_playing = False

    def run(self) -> None:
        """
        Play from the start position to the end of the composition.

        Blocks until playback completes.
        """
        self.state.on_ready(self.composition)

        first_index = self.pattern_index
        for index in range(first_index, len(self.composition)):
            if self._stop_requested:
                break
            from_time = self.start_time if index == first_index else MusicTime.START
            self._play_pattern(index, from_time)

        self.state.on_completed(self.composition)

    def _play_pattern(self, index: int, from_time: MusicTime) -> None:
        self.pattern_index = index
        pattern = self.current_pattern
        logger.debug(f"Playing pattern '{pattern.name}' from {from_time}")

        self.state.on_pattern_playback_begin(pattern)
        self.is_playing = True

        timer = self.timer_factory(pattern.signature, pattern.bpm)
        timer.seek(from_time)
        self.event_cursor = pattern.find_next_event_index(from_time)

        while self.is_playing:
            timer.pulse(self)
            if self.poll_interval > 0:
                self._sleep(self.poll_interval)

        self.state.on_pattern_playback_end(pattern)
        logger.debug(f"Finished pattern '{pattern.name}' at {timer.current_time}")

    def on_beat_interval(self, current_time: MusicTime) -> None:
        """Fire the interval callback and any event due now."""
        pattern = self.current_pattern
        events_complete = self.event_cursor >= len(pattern)

        if events_complete and current_time.is_last_interval_of_bar(pattern.signature):
            self.is_playing = False

        self.state.on_beat_interval_change(current_time)

        if events_complete:
            return

        event = pattern[self.event_cursor]
        if event.time == current_time:
            self.state.on_event(event)
            self.event_cursor += 1
            if self.instrument is not None:
                for pitch in event.pitches:
                    self.instrument.play(pitch - MIDI_NOTE_MIN)

    def on_beat(self, current_time: MusicTime) -> None:
        """Fire the beat callback; click on every beat but the first."""
        if not self.is_playing:
            return
        self.state.on_beat_change(current_time)
        if self.metronome_enabled and self.metronome is not None and current_time.beat != 1:
            self.metronome.play(METRONOME_BEAT_SAMPLE)

    def on_bar(self, current_time: MusicTime) -> None:
        """Fire the bar callback and the bar click."""
        if not self.is_playing:
            return
        self.state.on_bar_change(current_time)
        if self.metronome_enabled and self.metronome is not None:
            self.metronome.play(METRONOME_BAR_SAMPLE)

"""
Samplers - what the performance engine plays sounds through.

A sampler exposes play(index). For the instrument the index is the
pitch above the lowest playable note (pitch - 24); for the metronome it
selects the beat (0) or bar (1) click. Audio decoding is out of scope:
the bundled sampler drives a MIDI output port through mido, so any
synth listening on that port makes the sound.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import IntEnum
from typing import Any, Protocol

import mido

from chuk_mcp_chords.constants import MIDI_NOTE_MIN, NOTE_ON_VELOCITY
from chuk_mcp_chords.errors import LoadSamplerError

logger = logging.getLogger(__name__)

# GM drum channel (0-indexed, so 9 = channel 10)
DRUM_CHANNEL = 9


class MetronomeNote(IntEnum):
    """General MIDI percussion notes used for metronome clicks."""

    BEAT = 77  # Low wood block
    BAR = 76  # High wood block


class Sampler(Protocol):
    """Plays a sound by index."""

    def play(self, index: int) -> None: ...


class SilentSampler:
    """A sampler that plays nothing but remembers what it was asked to play."""

    def __init__(self) -> None:
        self.played: list[int] = []

    def play(self, index: int) -> None:
        self.played.append(index)


class MidiPortSampler:
    """
    Plays sounds as MIDI notes on an output port.

    A note keeps sounding until the same index plays again or the sampler
    is closed, which suits the legato chords of a pattern.
    """

    def __init__(
        self,
        port: Any,
        channel: int = 0,
        notes: Sequence[int] | None = None,
        velocity: int = NOTE_ON_VELOCITY,
    ):
        """
        Initialize the sampler on an open port.

        Args:
            port: An open mido output port
            channel: MIDI channel (0-15)
            notes: Note per index; if None, index + 24 is played
            velocity: Note on velocity
        """
        if not 0 <= channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {channel}")
        self.port = port
        self.channel = channel
        self.notes = list(notes) if notes is not None else None
        self.velocity = velocity
        self._sounding: set[int] = set()

    @classmethod
    def open(
        cls,
        port_name: str | None = None,
        channel: int = 0,
        notes: Sequence[int] | None = None,
    ) -> MidiPortSampler:
        """
        Open an output port by name (default port if None).

        Raises:
            LoadSamplerError: If no MIDI backend or port is available
        """
        try:
            port = mido.open_output(port_name)
        except (OSError, ImportError) as e:
            raise LoadSamplerError(str(e)) from e
        logger.debug(f"Opened MIDI output '{port.name}' on channel {channel}")
        return cls(port, channel=channel, notes=notes)

    def note_for(self, index: int) -> int:
        """The MIDI note played for an index."""
        if self.notes is not None:
            return self.notes[index]
        return index + MIDI_NOTE_MIN

    def play(self, index: int) -> None:
        note = self.note_for(index)
        if note in self._sounding:
            self.port.send(mido.Message("note_off", channel=self.channel, note=note))
        self.port.send(
            mido.Message("note_on", channel=self.channel, note=note, velocity=self.velocity)
        )
        self._sounding.add(note)

    def release_all(self) -> None:
        """Stop every sounding note."""
        for note in sorted(self._sounding):
            self.port.send(mido.Message("note_off", channel=self.channel, note=note))
        self._sounding.clear()

    def close(self) -> None:
        """Release all notes and close the port."""
        self.release_all()
        self.port.close()


def open_samplers(port_name: str | None = None) -> tuple[MidiPortSampler, MidiPortSampler]:
    """
    Open the instrument and metronome samplers on one MIDI port.

    The instrument plays on channel 1, the metronome on the GM drum
    channel using wood block clicks.

    Raises:
        LoadSamplerError: If the port cannot be opened
    """
    instrument = MidiPortSampler.open(port_name)
    metronome = MidiPortSampler(
        instrument.port,
        channel=DRUM_CHANNEL,
        notes=[MetronomeNote.BEAT, MetronomeNote.BAR],
    )
    return instrument, metronome

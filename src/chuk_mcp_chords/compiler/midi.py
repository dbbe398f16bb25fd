"""
MIDI export - the score end of the pipeline.

Each pattern of a composition becomes its own standalone type-1 MIDI
file with two tracks:
- a meta track: tempo, time signature, end of track
- a note track: track name, legato note on/off pairs, end of track

Chords sound until the next event starts; the final chord holds until
the first beat of the bar after it. Note offs are written as note_on with
velocity 0. All operations are deterministic: same input, same bytes.
"""

from __future__ import annotations

import io
import logging
import shutil
import struct
from pathlib import Path

from mido import Message, MetaMessage, MidiFile, MidiTrack
from mido.midifiles.meta import encode_variable_int

from chuk_mcp_chords.constants import (
    MIDI_CHANNEL,
    NOTE_OFF_VELOCITY,
    NOTE_ON_VELOCITY,
    TICKS_PER_BEAT,
)
from chuk_mcp_chords.core.rhythm import MusicTime, TimeSignature
from chuk_mcp_chords.errors import ExportMidiError
from chuk_mcp_chords.models.composition import Composition, Pattern

logger = logging.getLogger(__name__)

# Clock bytes written after the time signature denominator
CLOCKS_PER_CLICK = 8
NOTATED_32ND_NOTES_PER_BEAT = 24


def bpm_to_tempo(bpm: int) -> int:
    """Convert BPM to MIDI tempo (microseconds per beat)."""
    return round(60_000_000 / bpm)


def time_signature_to_data(signature: TimeSignature) -> list[int]:
    """
    The four data bytes of a time signature meta event.

    The denominator is written as its base-2 logarithm; unsupported
    denominators are written as 0.

    Examples:
        4/4 -> [4, 2, 8, 24]
        7/8 -> [7, 3, 8, 24]
    """
    return [
        signature.numerator,
        signature.denominator_power,
        CLOCKS_PER_CLICK,
        NOTATED_32ND_NOTES_PER_BEAT,
    ]


def _time_signature_message(signature: TimeSignature) -> MetaMessage:
    # mido takes the plain denominator and stores its log2
    return MetaMessage(
        "time_signature",
        numerator=signature.numerator,
        denominator=2**signature.denominator_power,
        clocks_per_click=CLOCKS_PER_CLICK,
        notated_32nd_notes_per_beat=NOTATED_32ND_NOTES_PER_BEAT,
        time=0,
    )


def _note(pitch: int, velocity: int, delta: int) -> Message:
    return Message(
        "note_on",
        channel=MIDI_CHANNEL,
        note=pitch,
        velocity=velocity,
        time=delta,
    )


def pattern_to_note_track(pattern: Pattern) -> MidiTrack:
    """
    Build the note track for a pattern.

    Events without pitches are skipped but still end the chord before
    them. Delta times are measured from the previous message written,
    on or off.
    """
    track = MidiTrack()
    track.append(MetaMessage("track_name", name=_track_name(pattern.name), time=0))

    signature = pattern.signature
    current_ticks = 0

    for index, event in enumerate(pattern.events):
        if not event.pitches:
            continue

        start_ticks = event.time.to_ticks(signature)
        for position, pitch in enumerate(event.pitches):
            delta = start_ticks - current_ticks if position == 0 else 0
            track.append(_note(pitch, NOTE_ON_VELOCITY, delta))
        current_ticks = start_ticks

        end_time = _legato_end(pattern, index)
        end_ticks = end_time.to_ticks(signature)
        for position, pitch in enumerate(event.pitches):
            delta = end_ticks - current_ticks if position == 0 else 0
            track.append(_note(pitch, NOTE_OFF_VELOCITY, delta))
        current_ticks = end_ticks

    track.append(MetaMessage("end_of_track", time=0))
    return track


def _track_name(name: str) -> str:
    # mido writes text meta events as latin-1; carry the UTF-8 bytes through unchanged
    return name.encode("utf-8").decode("latin-1")


def _legato_end(pattern: Pattern, index: int) -> MusicTime:
    if index + 1 < len(pattern):
        return pattern[index + 1].time
    return pattern[index].time.next_bar()


def pattern_to_midi(pattern: Pattern, ticks_per_beat: int = TICKS_PER_BEAT) -> MidiFile:
    """
    Convert a pattern to a two-track MidiFile.

    Args:
        pattern: The compiled pattern
        ticks_per_beat: Resolution (default 480)

    Returns:
        A mido MidiFile (type 1) ready to be written
    """
    mid = MidiFile(type=1, ticks_per_beat=ticks_per_beat)

    meta_track = MidiTrack()
    meta_track.append(MetaMessage("set_tempo", tempo=bpm_to_tempo(pattern.bpm), time=0))
    meta_track.append(_time_signature_message(pattern.signature))
    meta_track.append(MetaMessage("end_of_track", time=0))

    mid.tracks.append(meta_track)
    mid.tracks.append(pattern_to_note_track(pattern))
    return mid


def midi_to_bytes(mid: MidiFile, running_status: bool = False) -> bytes:
    """
    Serialize a MidiFile.

    mido always writes with running status; with running_status False
    every channel message keeps its status byte, which is the layout
    existing score files use.

    Args:
        mid: The MidiFile to serialize
        running_status: Use mido's own writer (running status on)

    Returns:
        The complete Standard MIDI File
    """
    if running_status:
        buffer = io.BytesIO()
        mid.save(file=buffer)
        return buffer.getvalue()

    data = bytearray(b"MThd")
    data.extend(struct.pack(">LHHH", 6, mid.type, len(mid.tracks), mid.ticks_per_beat))
    for track in mid.tracks:
        chunk = bytearray()
        for msg in track:
            chunk.extend(encode_variable_int(msg.time))
            chunk.extend(msg.bytes())
        data.extend(b"MTrk")
        data.extend(struct.pack(">L", len(chunk)))
        data.extend(chunk)
    return bytes(data)


def encode_pattern(pattern: Pattern) -> bytes:
    """Encode one pattern as a standalone MIDI file."""
    return midi_to_bytes(pattern_to_midi(pattern))


def encode_composition(composition: Composition) -> dict[str, bytes]:
    """
    Encode every pattern of a composition.

    Returns:
        Mapping of pattern name to MIDI file bytes, in pattern order
    """
    return {pattern.name: encode_pattern(pattern) for pattern in composition.patterns}


def export_composition(composition: Composition, parent_dir: Path) -> list[Path]:
    """
    Write one .mid file per pattern under <parent_dir>/<composition name>/.

    The composition directory is recreated first, so files from an
    earlier export do not linger.

    Args:
        composition: The compiled composition
        parent_dir: Directory to create the composition folder in

    Returns:
        Paths of the written files, in pattern order

    Raises:
        ExportMidiError: If a name is not a plain file name, a pattern
            cannot be encoded, or the directory or a file cannot be written
    """
    parent = Path(parent_dir)
    output_dir = parent / composition.name
    _check_file_name(composition.name, output_dir)
    for pattern in composition.patterns:
        _check_file_name(pattern.name, output_dir / f"{pattern.name}.mid")

    # Encode everything before the old export is removed
    try:
        encoded = encode_composition(composition)
    except ValueError as e:
        raise ExportMidiError(output_dir, str(e)) from e

    if output_dir.resolve().parent != parent.resolve():
        raise ExportMidiError(output_dir, "composition folder escapes the export directory")

    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
    except OSError as e:
        raise ExportMidiError(output_dir, str(e)) from e

    paths: list[Path] = []
    for name, data in encoded.items():
        path = output_dir / f"{name}.mid"
        try:
            path.write_bytes(data)
        except OSError as e:
            raise ExportMidiError(path, str(e)) from e
        logger.info(f"Exported pattern '{name}' to {path}")
        paths.append(path)

    return paths


def _check_file_name(name: str, path: Path) -> None:
    if name in ("", ".", "..") or "/" in name or "\\" in name or "\0" in name:
        raise ExportMidiError(path, f"'{name}' is not a valid file name")

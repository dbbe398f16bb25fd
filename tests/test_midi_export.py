"""
MIDI export tests - the score end of the pipeline.

If these tests pass, the bytes on disk match what a sequencer expects.
"""

import io
from pathlib import Path

import pytest
from mido import MidiFile

from chuk_mcp_chords.compiler import (
    bpm_to_tempo,
    compile_composition,
    encode_composition,
    encode_pattern,
    export_composition,
    midi_to_bytes,
    pattern_to_midi,
    time_signature_to_data,
)
from chuk_mcp_chords.compiler.midi import pattern_to_note_track
from chuk_mcp_chords.core import MusicTime, TimeSignature
from chuk_mcp_chords.errors import ExportMidiError
from chuk_mcp_chords.models import (
    Composition,
    CompositionParameters,
    Pattern,
    PatternEvent,
)


@pytest.fixture
def legato_pattern() -> Pattern:
    """Four events in 4/4; the third carries no pitches."""
    return Pattern.with_events(
        "legato",
        120,
        TimeSignature(4, 4),
        [
            PatternEvent(MusicTime(1, 1, 1), (60,)),
            PatternEvent(MusicTime(1, 2, 1), (62, 65)),
            PatternEvent(MusicTime(1, 2, 2), ()),
            PatternEvent(MusicTime(1, 2, 4), (64,)),
        ],
    )


class TestConversions:
    """Test tempo and time signature conversion."""

    def test_bpm_to_tempo(self) -> None:
        """Microseconds per beat."""
        assert bpm_to_tempo(120) == 500_000
        assert bpm_to_tempo(60) == 1_000_000
        assert bpm_to_tempo(128) == 468_750

    def test_time_signature_data(self) -> None:
        """Numerator, log2 denominator, then clock bytes."""
        assert time_signature_to_data(TimeSignature(4, 4)) == [4, 2, 8, 24]
        assert time_signature_to_data(TimeSignature(7, 8)) == [7, 3, 8, 24]
        assert time_signature_to_data(TimeSignature(3, 4)) == [3, 2, 8, 24]

    def test_unsupported_denominator(self) -> None:
        """Unsupported denominators encode as 0."""
        assert time_signature_to_data(TimeSignature(2, 5)) == [2, 0, 8, 24]


class TestNoteTrack:
    """Test the note track layout."""

    def test_legato_messages(self, legato_pattern: Pattern) -> None:
        """Chords hold until the next event; the last one until the next bar."""
        track = pattern_to_note_track(legato_pattern)
        assert track[0].type == "track_name"
        assert track[0].name == "legato"
        assert track[-1].type == "end_of_track"

        notes = [(m.note, m.velocity, m.time) for m in track[1:-1]]
        assert notes == [
            (60, 64, 0),
            (60, 0, 480),
            (62, 64, 0),
            (65, 64, 0),
            (62, 0, 60),
            (65, 0, 0),
            (64, 64, 120),
            (64, 0, 1260),
        ]

    def test_all_notes_on_channel_zero(self, legato_pattern: Pattern) -> None:
        """Every note message is note_on on channel 0."""
        track = pattern_to_note_track(legato_pattern)
        for msg in track[1:-1]:
            assert msg.type == "note_on"
            assert msg.channel == 0

    def test_ons_and_offs_pair_up(self, legato_pattern: Pattern) -> None:
        """Every note on has a matching velocity 0 note on."""
        track = pattern_to_note_track(legato_pattern)
        ons = sorted(m.note for m in track if m.type == "note_on" and m.velocity > 0)
        offs = sorted(m.note for m in track if m.type == "note_on" and m.velocity == 0)
        assert ons == offs

    def test_total_length(self, legato_pattern: Pattern) -> None:
        """The track ends on the bar after the last event."""
        track = pattern_to_note_track(legato_pattern)
        assert sum(m.time for m in track) == 1920

    def test_empty_pattern(self) -> None:
        """An empty pattern is just a name and an end."""
        track = pattern_to_note_track(Pattern("empty", 120, TimeSignature(4, 4)))
        assert [m.type for m in track] == ["track_name", "end_of_track"]

    def test_bar_length_follows_signature(self) -> None:
        """A final chord in 7/8 holds for seven beats of ticks."""
        pattern = Pattern.with_events(
            "odd", 90, TimeSignature(7, 8), [PatternEvent(MusicTime(1, 1, 1), (48,))]
        )
        track = pattern_to_note_track(pattern)
        assert track[2].time == 7 * 480


class TestPatternToMidi:
    """Test whole-file encoding."""

    def test_layout(self, legato_pattern: Pattern) -> None:
        """Type 1, 480 ticks per beat, meta track then note track."""
        mid = pattern_to_midi(legato_pattern)
        assert mid.type == 1
        assert mid.ticks_per_beat == 480
        assert len(mid.tracks) == 2
        assert [m.type for m in mid.tracks[0]] == [
            "set_tempo",
            "time_signature",
            "end_of_track",
        ]
        assert mid.tracks[0][0].tempo == 500_000

    def test_header_bytes(self, legato_pattern: Pattern) -> None:
        """The MThd chunk."""
        data = encode_pattern(legato_pattern)
        assert data[:14] == bytes.fromhex("4D546864 00000006 0001 0002 01E0")

    def test_meta_track_bytes(self) -> None:
        """3/4 at 128 bpm."""
        pattern = Pattern("waltz", 128, TimeSignature(3, 4))
        data = encode_pattern(pattern)
        assert data[14:22] == bytes.fromhex("4D54726B 00000013")
        assert data[22:41] == bytes.fromhex(
            "00FF5103 07270E" "00FF5804 03020818" "00FF2F00"
        )

    def test_no_running_status(self, legato_pattern: Pattern) -> None:
        """Every channel message keeps its status byte."""
        data = encode_pattern(legato_pattern)
        assert data.count(b"\x90") == 8
        # note off for 60 after 480 ticks
        assert bytes.fromhex("8360903C00") in data

    def test_running_status_is_shorter(self, legato_pattern: Pattern) -> None:
        """mido's writer drops repeated status bytes."""
        mid = pattern_to_midi(legato_pattern)
        assert len(midi_to_bytes(mid, running_status=True)) < len(midi_to_bytes(mid))

    def test_readable_by_mido(self, legato_pattern: Pattern) -> None:
        """The bytes load back into the same messages."""
        data = encode_pattern(legato_pattern)
        loaded = MidiFile(file=io.BytesIO(data))
        built = pattern_to_midi(legato_pattern)
        assert len(loaded.tracks) == 2
        for loaded_track, built_track in zip(loaded.tracks, built.tracks, strict=True):
            assert [m.bytes() for m in loaded_track] == [m.bytes() for m in built_track]
            assert [m.time for m in loaded_track] == [m.time for m in built_track]

    def test_deterministic(self, composition_yaml: str) -> None:
        """Same composition, same bytes."""
        params = CompositionParameters.from_yaml(composition_yaml)
        first = encode_composition(compile_composition(params))
        second = encode_composition(compile_composition(params))
        assert first == second
        assert list(first) == ["part_a", "part_b"]


class TestExportComposition:
    """Test writing files to disk."""

    def test_export(self, temp_dir: Path, seek_composition: Composition) -> None:
        """One file per pattern under the composition folder."""
        paths = export_composition(seek_composition, temp_dir)
        assert paths == [temp_dir / "test compo" / "a.mid", temp_dir / "test compo" / "b.mid"]
        for path in paths:
            assert path.exists()
            assert MidiFile(path).type == 1

    def test_stale_files_removed(self, temp_dir: Path, seek_composition: Composition) -> None:
        """Re-exporting clears the composition folder first."""
        folder = temp_dir / "test compo"
        folder.mkdir()
        stale = folder / "old.mid"
        stale.write_bytes(b"stale")
        export_composition(seek_composition, temp_dir)
        assert not stale.exists()
        assert sorted(p.name for p in folder.iterdir()) == ["a.mid", "b.mid"]

    def test_seven_four_signature(self, temp_dir: Path, seek_composition: Composition) -> None:
        """The 7/4 pattern keeps its signature and tempo."""
        paths = export_composition(seek_composition, temp_dir)
        mid = MidiFile(paths[1])
        signature = mid.tracks[0][1]
        assert (signature.numerator, signature.denominator) == (7, 4)
        assert mid.tracks[0][0].tempo == bpm_to_tempo(150)

    def test_written_file_loads(self, temp_midi_path: Path, legato_pattern: Pattern) -> None:
        """Bytes written to disk open as a two-track file."""
        temp_midi_path.write_bytes(encode_pattern(legato_pattern))
        mid = MidiFile(temp_midi_path)
        assert len(mid.tracks) == 2
        assert mid.tracks[1].name == "legato"


def single_chord_composition(name: str, pattern_name: str = "verse") -> Composition:
    pattern = Pattern.with_events(
        pattern_name, 120, TimeSignature(4, 4), [PatternEvent(MusicTime(1, 1, 1), (60,))]
    )
    return Composition(name, [pattern])


class TestExportNames:
    """Test composition and pattern names used as file names."""

    def test_parent_reference_rejected(self, temp_dir: Path) -> None:
        """A composition named '..' never touches the export directory's parent."""
        sibling = temp_dir / "keep.txt"
        sibling.write_text("keep")
        output = temp_dir / "output"
        output.mkdir()

        with pytest.raises(ExportMidiError):
            export_composition(single_chord_composition(".."), output)

        assert sibling.read_text() == "keep"
        assert output.is_dir()

    @pytest.mark.parametrize("name", ["", ".", "a/b", "a\\b", "../up"])
    def test_bad_composition_names(self, temp_dir: Path, name: str) -> None:
        """Empty, dot and separator names are rejected."""
        with pytest.raises(ExportMidiError):
            export_composition(single_chord_composition(name), temp_dir)
        assert list(temp_dir.iterdir()) == []

    @pytest.mark.parametrize("name", ["..", "a/b", "../x"])
    def test_bad_pattern_names(self, temp_dir: Path, name: str) -> None:
        """Pattern names cannot leave the composition folder."""
        with pytest.raises(ExportMidiError):
            export_composition(single_chord_composition("song", name), temp_dir)
        assert list(temp_dir.iterdir()) == []

    def test_non_latin1_track_name(self) -> None:
        """Track names are written as their UTF-8 bytes."""
        pattern = Pattern.with_events(
            "サビ", 120, TimeSignature(4, 4), [PatternEvent(MusicTime(1, 1, 1), (60,))]
        )
        data = encode_pattern(pattern)
        name_bytes = "サビ".encode("utf-8")
        assert name_bytes == bytes.fromhex("E382B5 E38393")
        assert bytes.fromhex("00FF0306") + name_bytes in data

    def test_non_latin1_export(self, temp_dir: Path) -> None:
        """Non-latin-1 composition and pattern names export."""
        paths = export_composition(single_chord_composition("歌", "サビ"), temp_dir)
        assert paths == [temp_dir / "歌" / "サビ.mid"]
        assert paths[0].read_bytes().startswith(b"MThd")

    def test_failed_encode_keeps_old_export(self, temp_dir: Path) -> None:
        """An unencodable pattern fails before the old export is removed."""
        export_composition(single_chord_composition("song"), temp_dir)
        old = temp_dir / "song" / "verse.mid"
        assert old.exists()

        with pytest.raises(ExportMidiError):
            export_composition(single_chord_composition("song", "bad\ud800"), temp_dir)

        assert old.exists()

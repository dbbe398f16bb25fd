"""
Tests for the top-level composer API.
"""

from pathlib import Path

import pytest
import yaml

import chuk_mcp_chords
from chuk_mcp_chords import (
    build_event,
    compile_yaml,
    export_file_to_midi,
    export_template,
    get_chord_keywords,
    load_composition,
    play,
    play_file,
    play_from,
    play_yaml,
)
from chuk_mcp_chords.api import TEMPLATE
from chuk_mcp_chords.core import MusicTime
from chuk_mcp_chords.errors import (
    DeserializeError,
    ExportTemplateError,
    NoFoundPatternError,
    NoPatternsError,
)
from chuk_mcp_chords.models import Composition
from chuk_mcp_chords.performance import ManualTimer, RecordingState

RENDER = {"timer_factory": ManualTimer, "poll_interval": 0}


class TestPlay:
    """Tests for the play entry points."""

    def test_play_yaml(self, middle_c_yaml: str) -> None:
        """Play YAML text end to end."""
        state = RecordingState()
        play_yaml(middle_c_yaml, state, **RENDER)
        assert state.callback_count == 42
        assert state.current_time == MusicTime(1, 4, 8)
        assert [e.pitches for e in state.events] == [(48,)]

    def test_play_file(self, temp_dir: Path, middle_c_yaml: str) -> None:
        """Play a composition file."""
        path = temp_dir / "middle_c.yaml"
        path.write_text(middle_c_yaml)
        state = RecordingState()
        play_file(path, state, **RENDER)
        assert state.callback_count == 42

    def test_play_from(self, seek_composition: Composition) -> None:
        """Start inside a named pattern."""
        state = RecordingState()
        play_from(seek_composition, state, MusicTime(2, 1, 1), "b", **RENDER)
        assert [e.time for e in state.events] == [MusicTime(2, 1, 1), MusicTime(3, 5, 1)]
        assert state.current_time == MusicTime(3, 7, 8)

    def test_play_from_first_pattern(self, seek_composition: Composition) -> None:
        """No pattern name means the first pattern."""
        state = RecordingState()
        play_from(seek_composition, state, MusicTime(3, 1, 1), None, **RENDER)
        assert [e.time for e in state.events][0] == MusicTime(3, 4, 1)

    def test_play_from_unknown_pattern(self, seek_composition: Composition) -> None:
        """Unknown pattern names fail before any callback."""
        state = RecordingState()
        with pytest.raises(NoFoundPatternError) as exc_info:
            play_from(seek_composition, state, MusicTime.START, "c", **RENDER)
        assert exc_info.value.name == "c"
        assert state.calls == []

    def test_play_empty_composition(self) -> None:
        """A composition without patterns cannot be played."""
        with pytest.raises(NoPatternsError):
            play(Composition("empty"), RecordingState(), **RENDER)

    def test_play_bad_yaml(self) -> None:
        """Malformed YAML surfaces as a deserialize error."""
        with pytest.raises(DeserializeError):
            play_yaml("patterns: [", RecordingState(), **RENDER)

    def test_play_missing_file(self, temp_dir: Path) -> None:
        """A missing file surfaces as a deserialize error."""
        with pytest.raises(DeserializeError):
            play_file(temp_dir / "nope.yaml", RecordingState(), **RENDER)


class TestExport:
    """Tests for file export."""

    def test_export_next_to_file(self, temp_dir: Path, composition_yaml: str) -> None:
        """By default files land beside the composition file."""
        path = temp_dir / "composition.yaml"
        path.write_text(composition_yaml)
        paths = export_file_to_midi(path)
        assert paths == [
            temp_dir / "test composition" / "part_a.mid",
            temp_dir / "test composition" / "part_b.mid",
        ]
        assert all(p.read_bytes().startswith(b"MThd") for p in paths)

    def test_export_to_output_dir(self, temp_dir: Path, middle_c_yaml: str) -> None:
        """An explicit output directory."""
        path = temp_dir / "middle_c.yaml"
        path.write_text(middle_c_yaml)
        out = temp_dir / "out"
        paths = export_file_to_midi(path, out)
        assert paths == [out / "middle_c" / "part_a.mid"]

    def test_template_written(self, temp_dir: Path) -> None:
        """The template is written verbatim."""
        path = export_template(temp_dir / "template.yaml")
        assert path.read_text() == TEMPLATE

    def test_template_compiles(self, temp_dir: Path) -> None:
        """The template is itself a valid composition."""
        path = export_template(temp_dir / "template.yaml")
        composition = load_composition(path)
        assert composition.name == "default_composition"
        assert [p.name for p in composition] == ["part_a", "part_b"]
        assert len(composition.patterns[1]) == 8

    def test_template_random_tokens_are_strings(self) -> None:
        """The random chord tokens survive YAML parsing as strings."""
        data = yaml.safe_load(TEMPLATE)
        assert data["patterns"][0]["pattern"][-1][3] == "?"
        assert data["patterns"][1]["pattern"][-1][3] == "??"

    def test_template_unwritable(self, temp_dir: Path) -> None:
        """Writing into a missing directory fails cleanly."""
        with pytest.raises(ExportTemplateError):
            export_template(temp_dir / "missing" / "template.yaml")


class TestChordHelpers:
    """Tests for chord helpers."""

    def test_keywords(self) -> None:
        """Every table chord, in order."""
        keywords = get_chord_keywords()
        assert len(keywords) == 73
        assert keywords[0] == "AUGMENTED = [0, 4, 8]"
        assert "MAJOR_SEVENTH = [0, 4, 7, 11]" in keywords

    def test_build_event(self) -> None:
        """Intervals are measured from C1."""
        event = build_event(1, 1, 1, [0])
        assert event.time == MusicTime(1, 1, 1)
        assert event.pitches == (24,)

    def test_build_event_transposed(self) -> None:
        """Transpose shifts every interval."""
        event = build_event(2, 3, 4, [0, 4, 7], transpose=12)
        assert event.time == MusicTime(2, 3, 4)
        assert event.pitches == (36, 40, 43)

    def test_compile_yaml(self, composition_yaml: str) -> None:
        """Compile text directly."""
        composition = compile_yaml(composition_yaml)
        assert len(composition) == 2

    def test_version(self) -> None:
        """The package exposes a version."""
        assert chuk_mcp_chords.__version__ == "0.1.0"

"""
Tests for the chord-composer command line.
"""

import functools
from pathlib import Path

import pytest

from chuk_mcp_chords import cli
from chuk_mcp_chords.api import TEMPLATE
from chuk_mcp_chords.core import MusicTime
from chuk_mcp_chords.performance import ManualTimer


@pytest.fixture
def middle_c_file(temp_dir: Path, middle_c_yaml: str) -> Path:
    """A composition file on disk."""
    path = temp_dir / "middle_c.yaml"
    path.write_text(middle_c_yaml)
    return path


@pytest.fixture
def render_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Play without waiting in real time."""
    monkeypatch.setattr(
        cli,
        "play_from",
        functools.partial(cli.play_from, timer_factory=ManualTimer, poll_interval=0),
    )


class TestParser:
    """Tests for argument parsing."""

    def test_play_defaults(self) -> None:
        """Playback starts at 1.1.1 of the first pattern."""
        args = cli.build_parser().parse_args(["play", "song.yaml"])
        assert args.from_time == MusicTime.START
        assert args.pattern is None
        assert not args.metronome
        assert args.midi_port is None

    def test_play_from(self) -> None:
        """--from parses bar.beat.interval."""
        args = cli.build_parser().parse_args(
            ["play", "song.yaml", "--from", "2.3", "--pattern", "b"]
        )
        assert args.from_time == MusicTime(2, 3, 1)
        assert args.pattern == "b"

    def test_command_required(self) -> None:
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestCommands:
    """Tests for the subcommands."""

    @pytest.mark.usefixtures("render_mode")
    def test_play(self, middle_c_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Play prints the composition and its events."""
        assert cli.main(["play", str(middle_c_file)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "[ middle_c ]"
        assert "| 01.1.1 | C3" in out
        assert out[-1] == "Finished playing 'middle_c'."

    @pytest.mark.usefixtures("render_mode")
    def test_play_unknown_pattern(
        self, middle_c_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Errors go to stderr with exit code 1."""
        assert cli.main(["play", str(middle_c_file), "--pattern", "chorus"]) == 1
        assert "chorus" in capsys.readouterr().err

    def test_export(self, middle_c_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Export writes beside the composition file."""
        assert cli.main(["export", str(middle_c_file)]) == 0
        expected = middle_c_file.parent / "middle_c" / "part_a.mid"
        assert expected.exists()
        assert str(expected) in capsys.readouterr().out

    def test_export_output(self, middle_c_file: Path, temp_dir: Path) -> None:
        """--output chooses the export directory."""
        out = temp_dir / "exports"
        assert cli.main(["export", str(middle_c_file), "--output", str(out)]) == 0
        assert (out / "middle_c" / "part_a.mid").exists()

    def test_export_missing_file(self, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Missing files fail cleanly."""
        assert cli.main(["export", str(temp_dir / "missing.yaml")]) == 1
        assert "Failed to parse composition" in capsys.readouterr().err

    def test_template(self, temp_dir: Path) -> None:
        """Write the template."""
        path = temp_dir / "template.yaml"
        assert cli.main(["template", str(path)]) == 0
        assert path.read_text() == TEMPLATE

    def test_chords(self, capsys: pytest.CaptureFixture[str]) -> None:
        """List every chord."""
        assert cli.main(["chords"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 73
        assert lines[0] == "> AUGMENTED = [0, 4, 8]"

"""
Composition tools - MCP tools for validating, exporting and rendering.

Compositions are passed as YAML text in the chord composer format
(see composition_template).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.api import TEMPLATE, compile_yaml, export_template, play_from
from chuk_mcp_chords.compiler.midi import export_composition
from chuk_mcp_chords.constants import SuccessMessages
from chuk_mcp_chords.core.rhythm import MusicTime
from chuk_mcp_chords.errors import (
    BadTimeSignatureError,
    ChordComposerError,
    NoFoundPatternError,
    TimeReverseError,
    UnreachableTimeError,
)
from chuk_mcp_chords.performance.state import RecordingState
from chuk_mcp_chords.performance.timer import ManualTimer

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)


def error_payload(error: ChordComposerError) -> dict[str, Any]:
    """
    Describe a chord composer error for a tool response.

    Timeline errors carry the offending event's time, index and chord.
    """
    payload: dict[str, Any] = {
        "status": "error",
        "error": type(error).__name__,
        "message": str(error),
    }
    if isinstance(error, (TimeReverseError, UnreachableTimeError)):
        payload["time"] = str(error.time)
        payload["index"] = error.index
        payload["chord"] = error.chord
    elif isinstance(error, BadTimeSignatureError):
        payload["signature"] = str(error.signature)
    elif isinstance(error, NoFoundPatternError):
        payload["pattern"] = error.name
    return payload


def register_composition_tools(mcp: FastMCP, output_dir: Path) -> dict[str, Any]:
    """
    Register composition tools with the MCP server.

    Args:
        mcp: The MCP server instance
        output_dir: Directory for exported files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool()
    async def composition_template(save_as: str | None = None) -> str:
        """
        Get the starter composition template.

        The template documents every field of the YAML format and is a
        valid composition in its own right.

        Args:
            save_as: Optional filename to also write the template to

        Returns:
            JSON string with the template text (and path if saved)

        Example:
            composition_template(save_as="my_song.yaml")
        """
        try:
            result: dict[str, Any] = {"status": "success", "template": TEMPLATE}
            if save_as:
                output_dir.mkdir(parents=True, exist_ok=True)
                path = export_template(output_dir / save_as)
                result["path"] = str(path)
                result["message"] = SuccessMessages.TEMPLATE_EXPORTED.format(path=path)
            return json.dumps(result)
        except ChordComposerError as e:
            return json.dumps(error_payload(e))
        except Exception as e:
            logger.exception("Failed to export template")
            return json.dumps({"status": "error", "message": str(e)})

    tools["composition_template"] = composition_template

    @mcp.tool()
    async def composition_validate(composition_yaml: str) -> str:
        """
        Compile a composition and report problems.

        Checks the time signatures and that every event is reachable and
        later than the one before it. Stops at the first problem.

        Args:
            composition_yaml: Composition in YAML format

        Returns:
            JSON string with the compiled timeline or the first error

        Example:
            composition_validate(composition_yaml="name: demo\\npatterns: ...")
        """
        try:
            composition = compile_yaml(composition_yaml)
            return json.dumps(
                {
                    "status": "success",
                    "valid": True,
                    "composition": composition.to_dict(),
                    "message": SuccessMessages.COMPOSITION_VALID.format(
                        name=composition.name, count=len(composition)
                    ),
                }
            )
        except ChordComposerError as e:
            return json.dumps({**error_payload(e), "valid": False})
        except Exception as e:
            logger.exception("Failed to validate composition")
            return json.dumps({"status": "error", "message": str(e)})

    tools["composition_validate"] = composition_validate

    @mcp.tool()
    async def composition_export_midi(composition_yaml: str) -> str:
        """
        Export a composition to MIDI, one file per pattern.

        Files are written to <output>/<composition name>/<pattern>.mid,
        replacing any earlier export of the same composition.

        Args:
            composition_yaml: Composition in YAML format

        Returns:
            JSON string with the written file paths

        Example:
            composition_export_midi(composition_yaml="name: demo\\npatterns: ...")
        """
        try:
            composition = compile_yaml(composition_yaml)
            paths = export_composition(composition, output_dir)
            return json.dumps(
                {
                    "status": "success",
                    "paths": [str(p) for p in paths],
                    "message": SuccessMessages.COMPOSITION_EXPORTED.format(
                        count=len(paths),
                        name=composition.name,
                        path=output_dir / composition.name,
                    ),
                }
            )
        except ChordComposerError as e:
            return json.dumps(error_payload(e))
        except Exception as e:
            logger.exception("Failed to export MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["composition_export_midi"] = composition_export_midi

    @mcp.tool()
    async def composition_render(
        composition_yaml: str,
        from_time: str = "1.1.1",
        pattern: str | None = None,
        include_clock: bool = False,
    ) -> str:
        """
        Render a performance without waiting in real time.

        Runs the playback engine as fast as possible and returns what a
        listener would have seen: pattern boundaries and chord events,
        plus every bar, beat and interval if include_clock is set.

        Args:
            composition_yaml: Composition in YAML format
            from_time: Start time as bar.beat.interval
            pattern: Pattern to start in (default: first)
            include_clock: Include bar/beat/interval callbacks

        Returns:
            JSON string with the callback log

        Example:
            composition_render(composition_yaml="...", from_time="2.1.1", pattern="chorus")
        """
        try:
            composition = compile_yaml(composition_yaml)
            state = RecordingState()
            play_from(
                composition,
                state,
                MusicTime.parse(from_time),
                pattern,
                timer_factory=ManualTimer,
                poll_interval=0,
            )

            clock_callbacks = {"bar", "beat", "beat_interval"}
            log = [
                entry
                for entry in state.to_log()
                if include_clock or entry["callback"] not in clock_callbacks
            ]
            return json.dumps(
                {
                    "status": "success",
                    "name": composition.name,
                    "events": len(state.events),
                    "end_time": str(state.current_time) if state.current_time else None,
                    "log": log,
                }
            )
        except ChordComposerError as e:
            return json.dumps(error_payload(e))
        except Exception as e:
            logger.exception("Failed to render composition")
            return json.dumps({"status": "error", "message": str(e)})

    tools["composition_render"] = composition_render

    return tools

"""
Chord tools - MCP tools for exploring the chord table.

Tools for listing the built-in chords and resolving a chord to pitches.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.constants import PLAYBACK_OCTAVE
from chuk_mcp_chords.core import CHORD_TABLE, IntervalChord, Key, spell_pitch

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)


def register_chord_tools(mcp: FastMCP) -> dict[str, Any]:
    """
    Register chord tools with the MCP server.

    Args:
        mcp: The MCP server instance

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool()
    async def chords_list() -> str:
        """
        List every built-in chord with its intervals.

        Intervals are semitones above the root. Use these names as the
        chord token of a pattern event, or '?' / '??' for a random chord.

        Returns:
            JSON string with the chord table

        Example:
            chords_list()
        """
        chords = [
            {"name": name, "intervals": list(intervals)} for name, intervals in CHORD_TABLE.items()
        ]
        return json.dumps({"status": "success", "count": len(chords), "chords": chords})

    tools["chords_list"] = chords_list

    @mcp.tool()
    async def chords_resolve(
        chord: str,
        key: str = "C",
        transpose: int = 0,
        custom_chords: list[list[Any]] | None = None,
    ) -> str:
        """
        Resolve a chord to the MIDI pitches a composition would play.

        Applies the key, the transpose and the playback octave exactly
        as the compiler does.

        Args:
            chord: Chord name (e.g., 'MAJOR_SEVENTH') or a custom chord name
            key: Key (C, C#, D ... B)
            transpose: Semitone transposition
            custom_chords: Optional [[name, [intervals]], ...] definitions

        Returns:
            JSON string with pitches and note names

        Example:
            chords_resolve(chord="MAJOR_SEVENTH", key="D")
        """
        try:
            custom = [
                (str(name), [int(i) for i in intervals]) for name, intervals in custom_chords or []
            ]
            resolved = (
                IntervalChord.from_token(chord, custom)
                .in_key(Key.parse(key))
                .transpose(transpose)
                .transpose_octave(PLAYBACK_OCTAVE - 1)
            )
            if resolved.is_empty:
                return json.dumps({"status": "error", "message": f"Unknown chord: {chord}"})

            pitches = resolved.to_midi()
            return json.dumps(
                {
                    "status": "success",
                    "chord": chord,
                    "intervals": list(resolved.intervals),
                    "pitches": pitches,
                    "notes": [spell_pitch(p) for p in pitches],
                }
            )
        except Exception as e:
            logger.exception("Failed to resolve chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_resolve"] = chords_resolve

    return tools

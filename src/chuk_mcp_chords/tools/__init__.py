"""
MCP tool implementations.

Tools are organized by domain:
- chords - Chord table discovery and resolution
- composition - Validation, MIDI export and rendered playback
"""

from chuk_mcp_chords.tools.chords import register_chord_tools
from chuk_mcp_chords.tools.composition import register_composition_tools

__all__ = [
    "register_chord_tools",
    "register_composition_tools",
]

#!/usr/bin/env python3
"""
Async Chord Composer MCP Server using the MCP Python SDK

This server provides MCP tools for composing chord progressions. A
composition is a YAML document of named patterns, each a list of chord
events on a bar/beat/interval clock.

The server provides tools for:
- Listing and resolving the built-in chords
- Validating compositions (time signatures, event ordering)
- Exporting compositions to MIDI, one file per pattern
- Rendering a performance as a callback log
"""

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from chuk_mcp_chords.tools import register_chord_tools, register_composition_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = FastMCP("chuk-mcp-chords")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
OUTPUT_DIR = BASE_PATH / "output"

# Register all tools
chord_tools = register_chord_tools(mcp)
composition_tools = register_composition_tools(mcp, OUTPUT_DIR)

# Export tool functions for direct access
chords_list = chord_tools["chords_list"]
chords_resolve = chord_tools["chords_resolve"]

composition_template = composition_tools["composition_template"]
composition_validate = composition_tools["composition_validate"]
composition_export_midi = composition_tools["composition_export_midi"]
composition_render = composition_tools["composition_render"]

logger.info("Chord Composer MCP Server initialized")
logger.info(f"  Output dir: {OUTPUT_DIR}")

"""
Data models for the chord composer.

Two layers:
- Parameters (pydantic): the raw YAML document as written
- Composition (dataclasses): the compiled, time-ordered timeline
"""

from chuk_mcp_chords.models.composition import Composition, Pattern, PatternEvent
from chuk_mcp_chords.models.parameters import (
    CompositionParameters,
    EventParameters,
    MasterParameters,
    PatternParameters,
)

__all__ = [
    # Parameters
    "CompositionParameters",
    "EventParameters",
    "MasterParameters",
    "PatternParameters",
    # Timeline
    "Composition",
    "Pattern",
    "PatternEvent",
]

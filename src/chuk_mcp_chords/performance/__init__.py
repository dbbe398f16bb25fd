"""
Performance - real-time playback of a compiled composition.

This module provides:
- PerformanceEngine: Pulse-driven playback state machine
- PerformanceState: Callback protocol for playback hosts
- MusicTimer / ManualTimer: Wall-clock and render-mode pulse sources
- Samplers: Sound output through a MIDI port
"""

from chuk_mcp_chords.performance.engine import PerformanceEngine
from chuk_mcp_chords.performance.sampler import (
    MidiPortSampler,
    Sampler,
    SilentSampler,
    open_samplers,
)
from chuk_mcp_chords.performance.state import ConsoleState, PerformanceState, RecordingState
from chuk_mcp_chords.performance.timer import (
    ManualTimer,
    MusicTimer,
    PulseListener,
    PulseSource,
    TimerFactory,
)

__all__ = [
    "ConsoleState",
    "ManualTimer",
    "MidiPortSampler",
    "MusicTimer",
    "PerformanceEngine",
    "PerformanceState",
    "PulseListener",
    "PulseSource",
    "RecordingState",
    "Sampler",
    "SilentSampler",
    "TimerFactory",
    "open_samplers",
]

"""
Chord composer - compile chord progressions to playback and MIDI.

The pipeline:
    YAML → CompositionParameters → Composition → {PerformanceEngine, MIDI files}
"""

from chuk_mcp_chords.api import (
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

__version__ = "0.1.0"

__all__ = [
    "build_event",
    "compile_yaml",
    "export_file_to_midi",
    "export_template",
    "get_chord_keywords",
    "load_composition",
    "play",
    "play_file",
    "play_from",
    "play_yaml",
]

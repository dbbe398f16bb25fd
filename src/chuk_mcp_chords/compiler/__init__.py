"""
Compilation pipeline - transforms composition documents to timelines and MIDI.

The pipeline:
    Composition YAML → CompositionParameters (pydantic)
    → Composition (time-ordered, resolved pitches)
    → MIDI files (one per pattern)
"""

# Import MIDI first (no circular dependencies)
from chuk_mcp_chords.compiler.midi import (
    bpm_to_tempo,
    encode_composition,
    encode_pattern,
    export_composition,
    midi_to_bytes,
    pattern_to_midi,
    time_signature_to_data,
)


def __getattr__(name: str):
    """Lazy imports for the composer to avoid circular dependencies."""
    if name in ("CompositionCompiler", "compile_composition"):
        from chuk_mcp_chords.compiler.composer import (
            CompositionCompiler,
            compile_composition,
        )

        return {
            "CompositionCompiler": CompositionCompiler,
            "compile_composition": compile_composition,
        }[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Composer (lazy loaded)
    "CompositionCompiler",
    "compile_composition",
    # MIDI
    "bpm_to_tempo",
    "encode_composition",
    "encode_pattern",
    "export_composition",
    "midi_to_bytes",
    "pattern_to_midi",
    "time_signature_to_data",
]

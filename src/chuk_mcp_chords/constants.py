"""
Constants for the chord composer.

No magic numbers - the musical clock, MIDI layout and playback defaults
are all named here.
"""

# Musical clock: a beat holds a fixed number of beat intervals
BEAT_INTERVALS_PER_BEAT = 8

# MIDI encoding
TICKS_PER_BEAT_INTERVAL = 60
TICKS_PER_BEAT = BEAT_INTERVALS_PER_BEAT * TICKS_PER_BEAT_INTERVAL  # 480
NOTE_ON_VELOCITY = 64
NOTE_OFF_VELOCITY = 0
MIDI_CHANNEL = 0

# Playable pitch range (C1..B7)
MIDI_NOTE_MIN = 24
MIDI_NOTE_MAX = 107

# Compiled chords are lifted this many octaves above the base note
PLAYBACK_OCTAVE = 3

# Valid time signature denominators and their log2 encoding
DENOMINATOR_POWERS: dict[int, int] = {2: 1, 4: 2, 8: 3, 16: 4, 32: 5, 64: 6}

# Defaults applied when neither the composition nor a pattern sets a value
DEFAULT_COMPOSITION_NAME = "Unnamed composition"
DEFAULT_PATTERN_NAME = "unnamed_pattern_{index}"
DEFAULT_KEY = "C"
DEFAULT_BPM = 120
DEFAULT_SIGNATURE = (4, 4)

# Playback loop poll interval in seconds
PULSE_POLL_SECONDS = 0.016

# Metronome sample slots
METRONOME_BEAT_SAMPLE = 0
METRONOME_BAR_SAMPLE = 1


class ErrorMessages:
    """Standardized error messages."""

    DESERIALIZE = "Failed to parse composition: {reason}"
    EXPORT_MIDI = "Failed to export MIDI to '{path}': {reason}"
    EXPORT_TEMPLATE = "Failed to export template to '{path}': {reason}"
    NO_PATTERNS = "Composition has no patterns."
    EMPTY_PATTERNS = "Composition patterns list is empty."
    NO_FOUND_PATTERN = "Pattern '{name}' not found."
    TIME_REVERSE = "Time cannot reverse! Event {index} ({chord}) at {time}."
    UNREACHABLE_TIME = "Time is unreachable! Event {index} ({chord}) at {time}."
    BAD_TIME_SIGNATURE = "Invalid time signature {signature}."
    LOAD_SAMPLER = "Failed to load sampler: {reason}"


class SuccessMessages:
    """Standardized success messages."""

    COMPOSITION_EXPORTED = "Exported {count} pattern(s) of '{name}' to {path}."
    TEMPLATE_EXPORTED = "Exported template to {path}."
    COMPOSITION_VALID = "Composition '{name}' compiled with {count} pattern(s)."
    PLAYBACK_COMPLETED = "Finished playing '{name}'."

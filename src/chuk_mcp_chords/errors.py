"""
Error taxonomy for the chord composer.

Every failure surfaces as a typed exception carrying the data needed to
diagnose it. All of them derive from ValueError so tool wrappers and
callers that already handle bad input keep working.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from chuk_mcp_chords.constants import ErrorMessages

if TYPE_CHECKING:
    from pathlib import Path

    from chuk_mcp_chords.core.rhythm import MusicTime, TimeSignature


class ChordComposerError(ValueError):
    """Base class for all chord composer failures."""


class DeserializeError(ChordComposerError):
    """The composition document could not be read or parsed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(ErrorMessages.DESERIALIZE.format(reason=reason))


class ExportMidiError(ChordComposerError):
    """Writing a score file failed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(ErrorMessages.EXPORT_MIDI.format(path=path, reason=reason))


class ExportTemplateError(ChordComposerError):
    """Writing the composition template failed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(ErrorMessages.EXPORT_TEMPLATE.format(path=path, reason=reason))


class NoPatternsError(ChordComposerError):
    """The composition declares no pattern list."""

    def __init__(self) -> None:
        super().__init__(ErrorMessages.NO_PATTERNS)


class EmptyPatternsError(ChordComposerError):
    """The composition pattern list is empty."""

    def __init__(self) -> None:
        super().__init__(ErrorMessages.EMPTY_PATTERNS)


class NoFoundPatternError(ChordComposerError):
    """A pattern looked up by name does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(ErrorMessages.NO_FOUND_PATTERN.format(name=name))


class _EventTimeError(ChordComposerError):
    """An event whose time breaks the timeline ordering."""

    template = ""

    def __init__(self, time: MusicTime, index: int, chord: str):
        self.time = time
        self.index = index
        self.chord = chord
        super().__init__(self.template.format(time=time, index=index, chord=chord))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        that = cast(_EventTimeError, other)
        return (self.time, self.index, self.chord) == (that.time, that.index, that.chord)

    def __hash__(self) -> int:
        return hash((type(self), self.time, self.index, self.chord))


class TimeReverseError(_EventTimeError):
    """An event is earlier than the event before it."""

    template = ErrorMessages.TIME_REVERSE


class UnreachableTimeError(_EventTimeError):
    """An event time cannot be reached by the clock, or does not advance."""

    template = ErrorMessages.UNREACHABLE_TIME


class BadTimeSignatureError(ChordComposerError):
    """A pattern uses an invalid time signature."""

    def __init__(self, signature: TimeSignature):
        self.signature = signature
        super().__init__(ErrorMessages.BAD_TIME_SIGNATURE.format(signature=signature))


class LoadSamplerError(ChordComposerError):
    """The sample player could not be created."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(ErrorMessages.LOAD_SAMPLER.format(reason=reason))

"""
Parameter models - the raw composition document.

These pydantic models mirror the YAML a user writes: a composition name,
default master settings, custom chords, and patterns of raw events.
Nothing here is resolved yet; the compiler turns a CompositionParameters
into a Composition.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from chuk_mcp_chords.constants import DEFAULT_BPM, DEFAULT_KEY, DEFAULT_SIGNATURE
from chuk_mcp_chords.core.pitch import Key
from chuk_mcp_chords.core.rhythm import MusicTime, TimeSignature
from chuk_mcp_chords.errors import DeserializeError


class MasterParameters(BaseModel):
    """
    Key, tempo and time signature settings.

    Every field is optional: a pattern's master overrides the composition
    master field by field, and unset fields fall back to the built-in
    defaults (C, 120 bpm, 4/4).
    """

    key: str | None = Field(None, description="Key (C, C#, D ... B)")
    time: int | None = Field(None, gt=0, le=255, description="Tempo in BPM")
    signature: tuple[int, int] | None = Field(None, description="Time signature [num, den]")

    model_config = {"frozen": True}

    @classmethod
    def from_overrides(
        cls,
        default: MasterParameters | None,
        override: MasterParameters | None,
    ) -> MasterParameters:
        """
        Merge an override onto a default, per field.

        Args:
            default: Composition-level settings (may be None)
            override: Pattern-level settings (may be None)

        Returns:
            Fully populated MasterParameters
        """
        default = default or cls()
        override = override or cls()
        return cls(
            key=override.key or default.key or DEFAULT_KEY,
            time=override.time or default.time or DEFAULT_BPM,
            signature=override.signature or default.signature or DEFAULT_SIGNATURE,
        )

    def get_key(self) -> Key:
        """Get parsed Key (unknown keys resolve to C)."""
        return Key.parse(self.key or DEFAULT_KEY)

    def get_bpm(self) -> int:
        """Get the tempo in BPM."""
        return self.time or DEFAULT_BPM

    def get_time_signature(self) -> TimeSignature:
        """Get the TimeSignature (not validated)."""
        return TimeSignature(*(self.signature or DEFAULT_SIGNATURE))


class EventParameters(BaseModel):
    """
    One raw chord event: [bar, beat, beat_interval, chord, transpose].

    Accepts the compact list form used in YAML as well as a mapping.
    The transpose is optional and defaults to 0.
    """

    bar: int = Field(..., ge=0, description="Bar (1-based)")
    beat: int = Field(..., ge=0, description="Beat within the bar (1-based)")
    beat_interval: int = Field(..., ge=0, description="Beat interval (1-8)")
    chord: str = Field(..., description="Chord name, custom chord, '?' or '??'")
    transpose: int = Field(0, description="Semitone transposition")

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def from_sequence(cls, data: Any) -> Any:
        """Map the list form onto named fields."""
        if isinstance(data, (list, tuple)):
            if len(data) not in (4, 5):
                raise ValueError(
                    f"Event must be [bar, beat, beat_interval, chord, transpose?], got {data!r}"
                )
            names = ("bar", "beat", "beat_interval", "chord", "transpose")
            return {name: value for name, value in zip(names, data, strict=False)}
        return data

    @property
    def time(self) -> MusicTime:
        """The event position as a MusicTime."""
        return MusicTime(self.bar, self.beat, self.beat_interval)

    def to_list(self) -> list[Any]:
        """Convert back to the compact list form."""
        return [self.bar, self.beat, self.beat_interval, self.chord, self.transpose]


class PatternParameters(BaseModel):
    """A raw pattern: optional name and master override, plus its events."""

    name: str | None = Field(None, description="Pattern name")
    master: MasterParameters | None = Field(None, description="Master overrides")
    pattern: list[EventParameters] | None = Field(None, description="Chord events")


class CompositionParameters(BaseModel):
    """
    A complete composition document.

    This is what the YAML file deserializes to and what the compiler
    consumes.
    """

    name: str | None = Field(None, description="Composition name")
    master: MasterParameters | None = Field(None, description="Default master settings")
    chords: list[tuple[str, list[int]]] | None = Field(None, description="Custom chords")
    patterns: list[PatternParameters] | None = Field(None, description="Patterns in play order")

    def custom_chords(self) -> list[tuple[str, list[int]]]:
        """Custom chords in declaration order (empty if none)."""
        return list(self.chords or [])

    @classmethod
    def from_yaml(cls, text: str) -> CompositionParameters:
        """
        Parse a composition from YAML text.

        Raises:
            DeserializeError: If the text is not valid YAML or not a composition
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DeserializeError(str(e)) from e
        return cls.from_yaml_dict(data)

    @classmethod
    def from_yaml_dict(cls, data: Any) -> CompositionParameters:
        """
        Create from a YAML-parsed dict.

        Raises:
            DeserializeError: If the data does not describe a composition
        """
        if not isinstance(data, dict):
            raise DeserializeError(f"expected a mapping, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DeserializeError(str(e)) from e

    @classmethod
    def from_file(cls, path: Path) -> CompositionParameters:
        """
        Load a composition from a YAML file.

        Raises:
            DeserializeError: If the file cannot be read or parsed
        """
        try:
            with open(path) as f:
                text = f.read()
        except OSError as e:
            raise DeserializeError(str(e)) from e
        return cls.from_yaml(text)

    def to_yaml_dict(self) -> dict[str, Any]:
        """
        Convert to a YAML-friendly dict.

        Unset fields are omitted so the output round-trips unchanged.
        """
        result: dict[str, Any] = {}
        if self.name is not None:
            result["name"] = self.name
        if self.master is not None:
            result["master"] = _master_to_dict(self.master)
        if self.chords is not None:
            result["chords"] = [[name, list(intervals)] for name, intervals in self.chords]
        if self.patterns is not None:
            result["patterns"] = [_pattern_to_dict(p) for p in self.patterns]
        return result

    def to_yaml(self) -> str:
        """Serialize to YAML text."""
        return yaml.safe_dump(self.to_yaml_dict(), default_flow_style=None, sort_keys=False)


def _master_to_dict(master: MasterParameters) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if master.key is not None:
        result["key"] = master.key
    if master.time is not None:
        result["time"] = master.time
    if master.signature is not None:
        result["signature"] = list(master.signature)
    return result


def _pattern_to_dict(pattern: PatternParameters) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if pattern.name is not None:
        result["name"] = pattern.name
    if pattern.master is not None:
        result["master"] = _master_to_dict(pattern.master)
    if pattern.pattern is not None:
        result["pattern"] = [event.to_list() for event in pattern.pattern]
    return result

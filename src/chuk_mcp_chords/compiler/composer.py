"""
Composition Compiler - compiles composition parameters to a timeline.

The compiler:
1. Merges each pattern's master overrides onto the composition defaults
2. Validates the pattern's time signature
3. Resolves every chord token to absolute MIDI pitches
4. Checks that each event time is reachable and later than the last
5. Appends the pattern to the Composition

Compilation is all-or-nothing: the first error aborts the whole compile
and no partial Composition is ever returned.
"""

from __future__ import annotations

import logging
import random

from chuk_mcp_chords.constants import (
    DEFAULT_COMPOSITION_NAME,
    DEFAULT_PATTERN_NAME,
    PLAYBACK_OCTAVE,
)
from chuk_mcp_chords.core.chord import CustomChords, IntervalChord
from chuk_mcp_chords.core.pitch import Key
from chuk_mcp_chords.errors import (
    BadTimeSignatureError,
    EmptyPatternsError,
    NoPatternsError,
    TimeReverseError,
    UnreachableTimeError,
)
from chuk_mcp_chords.models.composition import Composition, Pattern, PatternEvent
from chuk_mcp_chords.models.parameters import (
    CompositionParameters,
    EventParameters,
    MasterParameters,
    PatternParameters,
)

logger = logging.getLogger(__name__)


class CompositionCompiler:
    """
    Compiles CompositionParameters to a Composition.

    Holds only the random source used by the '?' and '??' chord tokens,
    so one compiler can be reused for many compositions.
    """

    def __init__(self, rng: random.Random | None = None):
        """
        Initialize the compiler.

        Args:
            rng: Random source for random chord tokens (module random if None)
        """
        self.rng = rng

    def compile(self, parameters: CompositionParameters) -> Composition:
        """
        Compile a composition.

        Args:
            parameters: The parsed composition document

        Returns:
            The compiled Composition

        Raises:
            NoPatternsError: If the document has no pattern list
            EmptyPatternsError: If the pattern list is empty
            BadTimeSignatureError: If a pattern has an invalid time signature
            UnreachableTimeError: If an event time is invalid or repeated
            TimeReverseError: If an event is earlier than the one before it
        """
        if parameters.patterns is None:
            raise NoPatternsError()
        if not parameters.patterns:
            raise EmptyPatternsError()

        composition = Composition(parameters.name or DEFAULT_COMPOSITION_NAME)
        custom_chords = parameters.custom_chords()

        for pattern_params in parameters.patterns:
            pattern = self.compile_pattern(
                pattern_params,
                default_master=parameters.master,
                custom_chords=custom_chords,
                default_name=DEFAULT_PATTERN_NAME.format(index=len(composition)),
            )
            composition.add_pattern(pattern)

        logger.debug(f"Compiled '{composition.name}' with {len(composition)} pattern(s)")
        return composition

    def compile_pattern(
        self,
        parameters: PatternParameters,
        default_master: MasterParameters | None = None,
        custom_chords: CustomChords = (),
        default_name: str = DEFAULT_PATTERN_NAME.format(index=0),
    ) -> Pattern:
        """
        Compile a single pattern.

        Args:
            parameters: The raw pattern
            default_master: Composition-level master settings
            custom_chords: Composition-level custom chords
            default_name: Name used when the pattern has none

        Returns:
            The compiled Pattern
        """
        master = MasterParameters.from_overrides(default_master, parameters.master)
        signature = master.get_time_signature()
        if not signature.is_valid:
            raise BadTimeSignatureError(signature)

        if parameters.pattern is None:
            raise NoPatternsError()

        key = master.get_key()
        pattern = Pattern(parameters.name or default_name, master.get_bpm(), signature)

        for event in parameters.pattern:
            time = event.time
            index = len(pattern)

            if not time.is_reachable(signature):
                raise UnreachableTimeError(time, index, event.chord)

            last = pattern.last_event
            if last is not None:
                if time == last.time:
                    raise UnreachableTimeError(time, index, event.chord)
                if time < last.time:
                    raise TimeReverseError(time, index, event.chord)

            pattern.add_event(PatternEvent(time, self.resolve_pitches(event, key, custom_chords)))

        logger.debug(
            f"Compiled pattern '{pattern.name}' ({signature} @ {pattern.bpm} bpm, "
            f"{len(pattern)} events)"
        )
        return pattern

    def resolve_pitches(
        self,
        event: EventParameters,
        key: Key,
        custom_chords: CustomChords = (),
    ) -> tuple[int, ...]:
        """
        Resolve an event's chord to absolute MIDI pitches.

        The key offset is applied first, then the event's own transpose,
        then the playback octave lift.
        """
        chord = (
            IntervalChord.from_token(event.chord, custom_chords, self.rng)
            .in_key(key)
            .transpose(event.transpose)
            .transpose_octave(PLAYBACK_OCTAVE - 1)
        )
        return tuple(chord.to_midi())


def compile_composition(
    parameters: CompositionParameters,
    rng: random.Random | None = None,
) -> Composition:
    """
    Convenience function to compile composition parameters.

    Args:
        parameters: The parsed composition document
        rng: Random source for random chord tokens

    Returns:
        The compiled Composition
    """
    return CompositionCompiler(rng).compile(parameters)

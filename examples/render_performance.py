#!/usr/bin/env python3
"""
Example: Render a performance without waiting in real time.

Compiles a small progression, then drives the performance engine with a
ManualTimer so every pulse fires immediately. The console state prints
the bar ticker and each chord as it would sound.

Usage:
    python examples/render_performance.py
"""

from chuk_mcp_chords import compile_yaml, play_from
from chuk_mcp_chords.core import MusicTime
from chuk_mcp_chords.performance import ConsoleState, ManualTimer, RecordingState

PROGRESSION = """
name: two_five_one
master:
    key: C
    time: 96
    signature: [4, 4]
patterns:
    - name: verse
      pattern:
          - [1, 1, 1, MINOR_SEVENTH, 2]
          - [2, 1, 1, DOMINANT_SEVENTH, 7]
          - [3, 1, 1, MAJOR_SEVENTH, 0]
          - [3, 3, 5, MAJOR_SIXTH_NINTH, 0]
    - name: turnaround
      master:
          signature: [3, 4]
      pattern:
          - [1, 1, 1, MINOR_NINTH, 9]
          - [2, 1, 1, DOMINANT_NINTH, 2]
"""


def main() -> None:
    """Render the progression twice: printed, then recorded."""
    composition = compile_yaml(PROGRESSION)

    print("=== Full performance ===")
    play_from(
        composition,
        ConsoleState(ticker_bar=True),
        MusicTime.START,
        None,
        timer_factory=ManualTimer,
        poll_interval=0,
    )

    print("\n=== From bar 2 of the turnaround ===")
    state = RecordingState()
    play_from(
        composition,
        state,
        MusicTime(2, 1, 1),
        "turnaround",
        timer_factory=ManualTimer,
        poll_interval=0,
    )
    for event in state.events:
        print(f"  {event.time}: {list(event.pitches)}")
    print(f"  Ended at {state.current_time} after {state.callback_count} callbacks")


if __name__ == "__main__":
    main()

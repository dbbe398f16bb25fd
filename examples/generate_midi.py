#!/usr/bin/env python3
"""
Example: Export the template composition to MIDI.

This demonstrates the score end of the pipeline. Run this script to
create one playable MIDI file per pattern that you can open in any DAW.

Usage:
    python examples/generate_midi.py
    # Creates: examples/output/default_composition/part_a.mid
    #          examples/output/default_composition/part_b.mid
"""

from pathlib import Path

from chuk_mcp_chords import export_file_to_midi, export_template


def main() -> None:
    """Generate example MIDI files."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    print("Writing template.yaml...")
    template = export_template(output_dir / "template.yaml")
    print(f"  Created: {template}")

    print("\nExporting patterns...")
    for path in export_file_to_midi(template):
        print(f"  Created: {path}")

    print("\nDone! Open the MIDI files in your DAW to hear them.")


if __name__ == "__main__":
    main()

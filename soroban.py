#!/usr/bin/env python3
"""
SOROBAN.PY - Bead frame counting device: command line front end

Sets a value on a virtual soroban, prints its digits and invariant report,
writes an SVG of the frame or opens the interactive view.

Usage:
    python3 soroban.py --value 509 --rods 3      # Show 509 on three rods
    python3 soroban.py --random --svg frame.svg  # Random value, write SVG
    python3 soroban.py --value 42 --report       # Print invariant report
    python3 soroban.py --interactive             # Drag beads with the mouse
"""

import argparse
import logging
import sys

from soroban_codec import format_number, generate_random_number
from soroban_config import CONFIG_PATH, SorobanConfig, load_config
from soroban_models import BeadRole, SorobanError
from soroban_renderer import SorobanRenderer
from soroban_state import BeadModel
from soroban_validation import validate_invariants, print_invariant_report


def print_frame(model: BeadModel):
    """Print one line per rod: digit, heavy state and light states."""
    print("\n" + "="*60)
    print(f"SOROBAN - {model.rod_count} RODS")
    print("="*60)
    geometry = model.geometry
    print(f"Bead span {geometry.bead_span}, gap {geometry.min_gap}, travel {geometry.travel}, "
          f"activation {geometry.activation_fraction:.0%}")
    print(f"Zones: heavy {geometry.zone_bounds(BeadRole.HEAVY)}, "
          f"light {geometry.zone_bounds(BeadRole.LIGHT)}\n")
    print(f"{'Rod':>3} {'Digit':>5}  {'Heavy':<6} {'Light (slot 0..3)':<20}")
    print("-" * 40)
    for rod in model.rods:
        heavy = "down" if rod.heavy.active else "up"
        lights = " ".join("x" if b.active else "." for b in rod.beads(BeadRole.LIGHT))
        print(f"{rod.index:>3} {rod.digit():>5}  {heavy:<6} {lights:<20}")
    print("-" * 40)
    print(f"Value: {model.get_value()} ({format_number(model.get_value(), model.rod_count)})")
    print("="*60 + "\n")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Virtual soroban: set, inspect and draw values')
    parser.add_argument('--config', default=CONFIG_PATH,
                        help='JSON configuration file (defaults used if missing)')
    parser.add_argument('--rods', type=int, default=None,
                        help='Number of rods (overrides config)')
    value_group = parser.add_mutually_exclusive_group()
    value_group.add_argument('--value', type=int, default=None,
                             help='Value to show on the frame')
    value_group.add_argument('--random', action='store_true',
                             help='Show a random value')
    value_group.add_argument('--clear', action='store_true',
                             help='Show zero (all beads inactive)')
    parser.add_argument('--svg', default=None,
                        help='Write an SVG drawing of the frame to this path')
    parser.add_argument('--show-digits', action='store_true',
                        help='Draw the digit row in the SVG')
    parser.add_argument('--report', action='store_true',
                        help='Print invariant validation report')
    parser.add_argument('--interactive', action='store_true',
                        help='Open the interactive matplotlib view')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s [%(name)s] %(message)s")

    try:
        config = load_config(args.config)
        if args.rods is not None:
            data = config.to_dict()
            data['rod_count'] = args.rods
            config = SorobanConfig.from_dict(data)
        if args.show_digits:
            config.show_digits = True

        model = BeadModel(config)
        if args.value is not None:
            model.set_value(args.value)
        elif args.random:
            model.set_value(generate_random_number(model.rod_count))
        elif args.clear:
            model.clear()
    except SorobanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print_frame(model)

    if args.report:
        violations = validate_invariants(model)
        print_invariant_report(violations, model)

    if args.svg:
        SorobanRenderer(model).render(args.svg)

    if args.interactive:
        from soroban_interactive import InteractiveSoroban
        InteractiveSoroban(model).show()

    return 0


if __name__ == "__main__":
    sys.exit(main())

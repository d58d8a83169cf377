#!/usr/bin/env python3
"""
SOROBAN_CODEC.PY - Value codec for the bead frame

Contains:
- decompose_digit / compose_digit: digit 0-9 <-> (heavy active, light count)
- decompose_number / compose_number: integer <-> per-column digits
- max_value, is_valid_number, format_number, generate_random_number
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from soroban_models import (
    BeadRole, RangeError, ROLE_UNIT_VALUE, LIGHT_BEAD_COUNT, MAX_DIGIT
)

logger = logging.getLogger(__name__)

HEAVY_VALUE = ROLE_UNIT_VALUE[BeadRole.HEAVY]


def _check_int(value, what: str):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise RangeError(f"{what} must be an integer, got {value!r}")


def decompose_digit(digit: int) -> Tuple[bool, int]:
    """Split a digit into (heavy bead active, number of active light beads)."""
    _check_int(digit, "Digit")
    if not 0 <= digit <= MAX_DIGIT:
        raise RangeError(f"Digit {digit} outside 0..{MAX_DIGIT}")
    if digit >= HEAVY_VALUE:
        return True, int(digit) - HEAVY_VALUE
    return False, int(digit)


def compose_digit(heavy_active: bool, light_count: int) -> int:
    if not 0 <= light_count <= LIGHT_BEAD_COUNT:
        raise RangeError(f"Light bead count {light_count} outside 0..{LIGHT_BEAD_COUNT}")
    return (HEAVY_VALUE if heavy_active else 0) + light_count


def max_value(digit_count: int) -> int:
    return 10 ** digit_count - 1


def is_valid_number(value, digit_count: int) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        return False
    return 0 <= value <= max_value(digit_count)


def format_number(value: int, digit_count: int) -> str:
    """Zero-padded decimal representation, one character per rod."""
    return str(int(value)).zfill(digit_count)


def decompose_number(value: int, digit_count: int) -> List[int]:
    """Per-column digits of value, most significant column first."""
    _check_int(value, "Value")
    if not is_valid_number(value, digit_count):
        raise RangeError(
            f"Value {value} outside 0..{max_value(digit_count)} for {digit_count} rods")
    return [int(ch) for ch in format_number(value, digit_count)]


def compose_number(digits: List[int]) -> int:
    total = 0
    for d in digits:
        if not 0 <= d <= MAX_DIGIT:
            raise RangeError(f"Digit {d} outside 0..{MAX_DIGIT}")
        total = total * 10 + d
    return total


def generate_random_number(digit_count: int, min_digit: int = 0, max_digit: int = 9,
                           rng: Optional[np.random.Generator] = None) -> int:
    """Random value whose every column digit lies in [min_digit, max_digit]."""
    if not 0 <= min_digit <= max_digit <= MAX_DIGIT:
        raise RangeError(f"Digit range {min_digit}..{max_digit} invalid")
    rng = rng if rng is not None else np.random.default_rng()
    digits = rng.integers(min_digit, max_digit + 1, size=digit_count)
    value = compose_number([int(d) for d in digits])
    logger.debug("Generated random number %s", format_number(value, digit_count))
    return value

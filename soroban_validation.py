#!/usr/bin/env python3
"""
SOROBAN_VALIDATION.PY - Invariant validation for a bead frame

Contains:
- InvariantViolation: Data class for invariant violations
- validate_invariants: Check all bead-state invariants
- assert_invariants: Raise InvariantError on the first violation
- print_invariant_report: Print formatted validation report
"""

from dataclasses import dataclass
from typing import List, Optional

from soroban_geometry import is_near
from soroban_models import InvariantError, MAX_DIGIT
from soroban_state import BeadModel

# Float slack for gap and bound comparisons
TOLERANCE = 1e-6


@dataclass
class InvariantViolation:
    """An invariant violation found during validation."""
    invariant: str
    message: str
    severity: str = "error"  # "error" or "warning"
    column: Optional[int] = None
    slot: Optional[int] = None
    actual_value: Optional[float] = None
    expected_value: Optional[float] = None


def validate_invariants(model: BeadModel, require_settled: bool = True) -> List[InvariantViolation]:
    """
    Validate bead invariants:
    1. Light stack ordered by slot with at least bead_span + min_gap between centres
    2. Every bead inside its zone
    3. Active light beads form a prefix from slot 0 (settled frames only)
    4. Digit in 0..9, value in 0..10**N - 1
    5. At most one bead dragging

    With require_settled=False (mid-drag) the prefix and canonical-offset
    checks are skipped.

    Returns list of violations (empty if all invariants hold).
    """
    violations = []
    geometry = model.geometry
    pitch = geometry.pitch
    dragging = []

    for rod in model.rods:
        # ---------------------------------------------------------------------
        # 1. STACK ORDER AND GAP
        # ---------------------------------------------------------------------
        for lower, upper in zip(rod.lights, rod.lights[1:]):
            spacing = upper.offset - lower.offset
            if spacing < pitch - TOLERANCE:
                violations.append(InvariantViolation(
                    invariant="stack_gap",
                    message=f"Rod {rod.index}: slots {lower.slot}-{upper.slot} {spacing:.3f} apart (min {pitch:.3f})",
                    column=rod.index,
                    slot=lower.slot,
                    actual_value=spacing,
                    expected_value=pitch,
                ))

        # ---------------------------------------------------------------------
        # 2. ZONE BOUNDS
        # ---------------------------------------------------------------------
        for bead in rod.all_beads():
            lo, hi = geometry.zone_bounds(bead.role)
            if not lo - TOLERANCE <= bead.offset <= hi + TOLERANCE:
                violations.append(InvariantViolation(
                    invariant="zone_bounds",
                    message=f"Rod {rod.index}: {bead.role.value} slot {bead.slot} at {bead.offset:.3f} outside [{lo:.3f}, {hi:.3f}]",
                    column=rod.index,
                    slot=bead.slot,
                    actual_value=bead.offset,
                ))
            if bead.dragging:
                dragging.append((rod.index, bead))

        # ---------------------------------------------------------------------
        # 3. ACTIVE PREFIX AND CANONICAL OFFSETS
        # ---------------------------------------------------------------------
        if require_settled:
            flags = [b.active for b in rod.lights]
            count = sum(flags)
            if flags != [i < count for i in range(len(flags))]:
                violations.append(InvariantViolation(
                    invariant="active_prefix",
                    message=f"Rod {rod.index}: active light beads {flags} are not a prefix",
                    column=rod.index,
                ))
            for bead in rod.all_beads():
                canonical = geometry.canonical_offset(bead.role, bead.slot, bead.active)
                if not is_near(bead.offset, canonical, TOLERANCE):
                    violations.append(InvariantViolation(
                        invariant="canonical_offset",
                        message=f"Rod {rod.index}: {bead.role.value} slot {bead.slot} at {bead.offset:.3f}, rest position {canonical:.3f}",
                        severity="warning",
                        column=rod.index,
                        slot=bead.slot,
                        actual_value=bead.offset,
                        expected_value=canonical,
                    ))

        # ---------------------------------------------------------------------
        # 4. DIGIT RANGE
        # ---------------------------------------------------------------------
        digit = rod.digit()
        if not 0 <= digit <= MAX_DIGIT:
            violations.append(InvariantViolation(
                invariant="digit_range",
                message=f"Rod {rod.index}: digit {digit} outside 0..{MAX_DIGIT}",
                column=rod.index,
                actual_value=digit,
            ))

    value = model.get_value()
    if not 0 <= value <= model.max_value():
        violations.append(InvariantViolation(
            invariant="value_range",
            message=f"Value {value} outside 0..{model.max_value()}",
            actual_value=value,
        ))

    # -------------------------------------------------------------------------
    # 5. SINGLE DRAG
    # -------------------------------------------------------------------------
    if len(dragging) > 1:
        violations.append(InvariantViolation(
            invariant="single_drag",
            message=f"{len(dragging)} beads dragging at once",
            actual_value=len(dragging),
            expected_value=1,
        ))

    return violations


def assert_invariants(model: BeadModel, require_settled: bool = True):
    """Raise InvariantError if any error-severity invariant fails."""
    errors = [v for v in validate_invariants(model, require_settled) if v.severity == "error"]
    if errors:
        raise InvariantError("; ".join(v.message for v in errors))


def print_invariant_report(violations: List[InvariantViolation], model: BeadModel):
    """Print violations rod by rod; frame-wide ones are listed last."""
    errors = sum(1 for v in violations if v.severity == "error")
    warnings = len(violations) - errors
    status = "PASSED" if not violations else f"{errors} errors, {warnings} warnings"
    print(f"\nInvariants ({model.rod_count} rods): {status}")

    for column in list(range(model.rod_count)) + [None]:
        found = [v for v in violations if v.column == column]
        if not found:
            continue
        label = "frame" if column is None else f"rod {column}"
        names = ", ".join(sorted({v.invariant.replace("_", " ") for v in found}))
        print(f"  {label} [{names}]")
        for v in found:
            marker = "✗" if v.severity == "error" else "⚠"
            print(f"    {marker} {v.message}")
    print()

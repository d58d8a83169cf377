#!/usr/bin/env python3
"""
SOROBAN_PHYSICS.PY - Bead collision and snapping

Contains:
- resolve_heavy / resolve_stack: pure push-chain solvers for one drag sample
- DragResolver: applies a drag sample to the model during a gesture
- SnapPolicy: discretizes a released rod and closes the gesture

Beads move along one axis only. Offsets grow away from the divider, so in
the light stack slot k always satisfies

    offset[k+1] - offset[k] >= bead_span + min_gap
"""

import logging
from typing import Dict, List

from soroban_geometry import RodGeometry, clamp
from soroban_models import BeadKey, BeadRole, InvariantError, LIGHT_BEAD_COUNT
from soroban_state import BeadModel, ChangeEvent, SnapEvent

logger = logging.getLogger(__name__)

# Offsets closer than this are treated as unchanged
OFFSET_EPSILON = 1e-9


# =============================================================================
# PUSH-CHAIN SOLVERS
# =============================================================================

def resolve_heavy(current: float, desired: float, geometry: RodGeometry) -> Dict[int, float]:
    """The heavy bead has no neighbours: clamp to its zone."""
    lo, hi = geometry.zone_bounds(BeadRole.HEAVY)
    target = clamp(desired, lo, hi)
    if abs(target - current) <= OFFSET_EPSILON:
        return {}
    return {0: target}


def resolve_stack(offsets: List[float], slot: int, desired: float,
                  geometry: RodGeometry) -> Dict[int, float]:
    """Compute new offsets for a light-bead drag sample.

    Args:
        offsets: Current offsets of slots 0..3 (must already be ordered)
        slot: Slot being dragged
        desired: Offset requested for the dragged bead
        geometry: Zone dimensions

    Returns:
        {slot: new_offset} for the beads that actually move, dragged bead
        included. Beads that stay put are not listed.
    """
    count = len(offsets)
    if count != LIGHT_BEAD_COUNT:
        raise InvariantError(f"Light stack must hold {LIGHT_BEAD_COUNT} beads, got {count}")
    if not 0 <= slot < count:
        raise InvariantError(f"No light bead in slot {slot}")

    lo, hi = geometry.zone_bounds(BeadRole.LIGHT)
    pitch = geometry.pitch

    target = clamp(desired, lo, hi)
    current = offsets[slot]
    if abs(target - current) <= OFFSET_EPSILON:
        return {}

    # +1 walks away from the divider, -1 toward it
    step = 1 if target > current else -1
    placed = {slot: target}
    last = slot

    k = slot + step
    while 0 <= k < count:
        required = placed[k - step] + step * pitch
        if step * (offsets[k] - required) >= 0:
            break
        placed[k] = required
        last = k
        k += step

    # The chain ran into the frame (or the divider): pin the end bead to the
    # zone edge and rebuild the chain inward from there.
    bound = hi if step > 0 else lo
    if step * (placed[last] - bound) > 0:
        for j in range(last, slot - step, -step):
            placed[j] = bound - step * abs(last - j) * pitch

    return {j: y for j, y in placed.items() if abs(y - offsets[j]) > OFFSET_EPSILON}


# =============================================================================
# DRAG RESOLVER
# =============================================================================

class DragResolver:
    """Moves the dragged bead and any beads it pushes."""

    def __init__(self, model: BeadModel):
        self.model = model

    def drag_to(self, key: BeadKey, desired: float) -> Dict[int, float]:
        """Apply one drag sample. Returns the offsets that changed, by slot."""
        model = self.model
        if model.gesture_bead != key:
            raise InvariantError(f"Drag update for {key} without an active gesture on it")

        rod = model.rods[key.column]
        if key.role is BeadRole.HEAVY:
            moves = resolve_heavy(rod.heavy.offset, desired, model.geometry)
        else:
            moves = resolve_stack([b.offset for b in rod.lights], key.slot, desired, model.geometry)

        # every offset is computed before any is written
        for slot in sorted(moves):
            model.set_offset(key.column, key.role, slot, moves[slot])
        return moves


# =============================================================================
# SNAP POLICY
# =============================================================================

class SnapPolicy:
    """Turns released offsets into discrete states and canonical offsets."""

    def __init__(self, model: BeadModel):
        self.model = model

    def settle(self, column: int, role: BeadRole) -> int:
        """Discretize one zone of a rod from its current offsets.

        Heavy: active when within activation_fraction of the travel from the
        divider. Light: the active count is the run of slots, starting at
        slot 0, that sit within the same band of their packed divider-end
        position; the first bead outside the group ends the run.

        Returns the number of active beads in the zone. Calling this twice
        in a row leaves the rod unchanged the second time.
        """
        model = self.model
        geometry = model.geometry
        rod = model.rods[column]
        beads = rod.beads(role)

        count = 0
        for bead in beads:
            if bead.offset <= geometry.activation_limit(role, bead.slot) + OFFSET_EPSILON:
                count += 1
            else:
                break

        # flags first: the prefix is complete before any bead_move listener runs
        for bead in beads:
            model.set_active(column, role, bead.slot, bead.slot < count)
        for bead in beads:
            canonical = geometry.canonical_offset(role, bead.slot, bead.active)
            if abs(bead.offset - canonical) > OFFSET_EPSILON:
                model.set_offset(column, role, bead.slot, canonical)
        return count

    def snap(self, key: BeadKey) -> SnapEvent:
        """Finish the gesture on key: settle, notify once, unlock.

        The gesture lock is held until both notifications have been
        delivered, so listeners cannot interleave a bulk update, and it is
        released even if settling or a listener raises.
        """
        model = self.model
        if model.gesture_bead != key:
            raise InvariantError(f"Snap requested for {key} with no active gesture on it")

        try:
            self.settle(key.column, key.role)

            bead = model.get_bead(key.column, key.role, key.slot)
            digit = model.get_digit(key.column)
            event = SnapEvent(key.column, key.role, key.slot, bead.active, digit)
            logger.debug("Bead snapped: column=%d %s slot=%d active=%s digit=%d",
                         key.column, key.role.value, key.slot, bead.active, digit)

            model.emit("change", ChangeEvent(model.get_value(), key.column, key.role, key.slot, bead.active))
            model.emit("snap", event)
        finally:
            model.end_gesture(key)
        return event

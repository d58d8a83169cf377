#!/usr/bin/env python3
"""
SOROBAN_STATE.PY - Authoritative bead state for a bead frame

Contains:
- ChangeEvent, BeadMoveEvent, SnapEvent: notification payloads
- BeadState: read-only snapshot entry for the rendering side
- BeadModel: per-rod bead arrays, digit/value derivation, bulk value set,
  the mutators used by the drag resolver and snap policy, and the single
  gesture lock
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional

from soroban_codec import decompose_digit, decompose_number, compose_number, format_number
from soroban_config import SorobanConfig
from soroban_geometry import RodGeometry
from soroban_models import (
    Bead, BeadKey, BeadRole, Rod, RangeError, GestureInProgressError,
    InvariantError, LIGHT_BEAD_COUNT
)

logger = logging.getLogger(__name__)


# =============================================================================
# NOTIFICATION PAYLOADS
# =============================================================================

@dataclass(frozen=True)
class ChangeEvent:
    """Total value after a change, plus the bead that caused it (if any)."""
    value: int
    column: Optional[int] = None
    role: Optional[BeadRole] = None
    slot: Optional[int] = None
    active: Optional[bool] = None


@dataclass(frozen=True)
class BeadMoveEvent:
    column: int
    role: BeadRole
    slot: int
    offset: float


@dataclass(frozen=True)
class SnapEvent:
    column: int
    role: BeadRole
    slot: int
    active: bool
    digit: int


class BeadState(NamedTuple):
    offset: float
    active: bool
    dragging: bool


# =============================================================================
# BEAD MODEL
# =============================================================================

class BeadModel:
    """Owns every rod's beads and keeps digits consistent with bead states."""

    EVENTS = ("change", "bead_move", "snap", "render")

    def __init__(self, config: Optional[SorobanConfig] = None):
        self.config = config if config is not None else SorobanConfig()
        self._listeners: Dict[str, List[Callable]] = {name: [] for name in self.EVENTS}
        self._gesture: Optional[BeadKey] = None
        self._build()

    def _build(self):
        self.geometry = RodGeometry.from_config(self.config)
        self.rod_count = self.config.rod_count
        self.rods: List[Rod] = []
        for col in range(self.rod_count):
            heavy = Bead(BeadRole.HEAVY, 0, self.geometry.canonical_offset(BeadRole.HEAVY, 0, False))
            lights = [
                Bead(BeadRole.LIGHT, slot, self.geometry.canonical_offset(BeadRole.LIGHT, slot, False))
                for slot in range(LIGHT_BEAD_COUNT)
            ]
            self.rods.append(Rod(col, heavy, lights))
        logger.debug("Initialized %d columns", self.rod_count)

    def reinitialize(self, config: SorobanConfig):
        """Rebuild every rod for a new configuration (e.g. a new rod count)."""
        self._require_idle("reinitialize")
        self.config = config
        self._build()
        self.emit("render", None)

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def on(self, event: str, callback: Callable) -> Callable[[], None]:
        """Subscribe to an event. Returns a function that unsubscribes."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event {event!r}; expected one of {self.EVENTS}")
        self._listeners[event].append(callback)

        def unsubscribe():
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)

        return unsubscribe

    def emit(self, event: str, payload):
        for callback in list(self._listeners[event]):
            if payload is None:
                callback()
            else:
                callback(payload)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _check_column(self, column: int, error=RangeError):
        if isinstance(column, bool) or not isinstance(column, int) or not 0 <= column < self.rod_count:
            raise error(f"Column {column!r} outside 0..{self.rod_count - 1}")

    def rod(self, column: int) -> Rod:
        self._check_column(column)
        return self.rods[column]

    def get_bead(self, column: int, role: BeadRole, slot: int = 0) -> Bead:
        self._check_column(column, InvariantError)
        return self.rods[column].bead(role, slot)

    def get_digit(self, column: int) -> int:
        return self.rod(column).digit()

    def get_digits(self) -> List[int]:
        return [r.digit() for r in self.rods]

    def get_value(self) -> int:
        return compose_number(self.get_digits())

    def max_value(self) -> int:
        return 10 ** self.rod_count - 1

    def snapshot(self) -> Dict[BeadKey, BeadState]:
        """Read-only copy of every bead's (offset, active, dragging)."""
        return {
            BeadKey(rod.index, b.role, b.slot): BeadState(b.offset, b.active, b.dragging)
            for rod in self.rods
            for b in rod.all_beads()
        }

    def __str__(self):
        return format_number(self.get_value(), self.rod_count)

    # -------------------------------------------------------------------------
    # Bulk path
    # -------------------------------------------------------------------------

    @property
    def gesture_active(self) -> bool:
        return self._gesture is not None

    @property
    def gesture_bead(self) -> Optional[BeadKey]:
        return self._gesture

    def _require_idle(self, action: str):
        if self._gesture is not None:
            raise GestureInProgressError(
                f"Cannot {action} while bead {self._gesture} is being dragged")

    def _write_column(self, column: int, digit: int):
        heavy_active, light_count = decompose_digit(digit)
        rod = self.rods[column]
        rod.heavy.active = heavy_active
        rod.heavy.offset = self.geometry.canonical_offset(BeadRole.HEAVY, 0, heavy_active)
        for bead in rod.lights:
            bead.active = bead.slot < light_count
            bead.offset = self.geometry.canonical_offset(BeadRole.LIGHT, bead.slot, bead.active)

    def set_value(self, value: int):
        """Show value on the frame, writing canonical offsets directly.

        Raises RangeError for values outside 0..10**N - 1; the frame is left
        unchanged in that case.
        """
        self._require_idle("set value")
        try:
            digits = decompose_number(value, self.rod_count)
        except RangeError:
            logger.warning("Rejected value %r for %d rods", value, self.rod_count)
            raise
        for column, digit in enumerate(digits):
            self._write_column(column, digit)
        value = int(value)
        logger.debug("Set value: %d", value)
        self.emit("change", ChangeEvent(value))

    def set_column_value(self, column: int, digit: int):
        self._require_idle("set column value")
        self._check_column(column)
        decompose_digit(digit)
        self._write_column(column, digit)
        self.emit("change", ChangeEvent(self.get_value(), column=column))

    def clear(self):
        """Move every bead to its inactive position."""
        self.set_value(0)
        logger.debug("All beads cleared")

    # -------------------------------------------------------------------------
    # Mutators used by the resolver and snap policy
    # -------------------------------------------------------------------------

    def set_offset(self, column: int, role: BeadRole, slot: int, offset: float):
        bead = self.get_bead(column, role, slot)
        bead.offset = offset
        self.emit("bead_move", BeadMoveEvent(column, role, slot, offset))

    def set_active(self, column: int, role: BeadRole, slot: int, active: bool):
        self.get_bead(column, role, slot).active = bool(active)

    def set_dragging(self, column: int, role: BeadRole, slot: int, dragging: bool):
        bead = self.get_bead(column, role, slot)
        if dragging:
            for rod in self.rods:
                other = rod.dragging_bead()
                if other is not None and other is not bead:
                    raise InvariantError(
                        f"Bead {(rod.index, other.role.value, other.slot)} is already dragging")
        bead.dragging = bool(dragging)

    def begin_gesture(self, key: BeadKey):
        """Take the single gesture lock for a bead."""
        if self._gesture is not None:
            raise GestureInProgressError(f"Gesture already active on {self._gesture}")
        self.set_dragging(key.column, key.role, key.slot, True)
        self._gesture = key
        logger.debug("Gesture started on column=%d %s slot=%d", key.column, key.role.value, key.slot)

    def end_gesture(self, key: BeadKey):
        if self._gesture != key:
            raise InvariantError(f"No gesture active on {key}")
        self.set_dragging(key.column, key.role, key.slot, False)
        self._gesture = None
        logger.debug("Gesture ended on column=%d", key.column)

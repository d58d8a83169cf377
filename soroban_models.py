#!/usr/bin/env python3
"""
SOROBAN_MODELS.PY - Data classes for soroban components

Contains the data structures representing one bead frame:
- BeadRole: Heavy (worth 5) or Light (worth 1)
- Bead, Rod, BeadKey
- Error taxonomy shared by the engine
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple


# =============================================================================
# BEAD ROLE CONSTANTS
# =============================================================================

class BeadRole(Enum):
    """Tagged variant for the two kinds of bead on a rod."""
    HEAVY = "heavy"
    LIGHT = "light"


ROLE_SLOTS = {
    BeadRole.HEAVY: 1,
    BeadRole.LIGHT: 4,
}

ROLE_UNIT_VALUE = {
    BeadRole.HEAVY: 5,
    BeadRole.LIGHT: 1,
}

LIGHT_BEAD_COUNT = ROLE_SLOTS[BeadRole.LIGHT]
MAX_DIGIT = ROLE_UNIT_VALUE[BeadRole.HEAVY] + LIGHT_BEAD_COUNT * ROLE_UNIT_VALUE[BeadRole.LIGHT]


# =============================================================================
# ERRORS
# =============================================================================

class SorobanError(Exception):
    """Base class for all soroban engine errors."""


class RangeError(SorobanError, ValueError):
    """A value, digit or column index lies outside what the frame can hold."""


class ConfigError(SorobanError, ValueError):
    """Configuration value is missing or out of bounds."""


class GestureInProgressError(SorobanError):
    """A bulk update or second gesture was requested while a bead is being dragged."""


class InvariantError(SorobanError, RuntimeError):
    """Caller broke an engine contract (programmer error, not user input)."""


# =============================================================================
# COMPONENT CLASSES
# =============================================================================

class BeadKey(NamedTuple):
    """Identity of a physical bead: column, role and slot."""
    column: int
    role: BeadRole
    slot: int = 0


@dataclass
class Bead:
    """A bead on a rod.

    offset is the continuous distance from the divider face to the bead
    centre. active is the discrete state used for the value.
    """
    role: BeadRole
    slot: int
    offset: float
    active: bool = False
    dragging: bool = False

    def unit_value(self) -> int:
        return ROLE_UNIT_VALUE[self.role] if self.active else 0


@dataclass
class Rod:
    """One digit column: a single heavy bead and a stack of four light beads.

    Light slot 0 sits nearest the divider.
    """
    index: int
    heavy: Bead
    lights: List[Bead] = field(default_factory=list)

    def beads(self, role: BeadRole) -> List[Bead]:
        """Return the beads for a role, indexed by slot."""
        if role is BeadRole.HEAVY:
            return [self.heavy]
        return self.lights

    def bead(self, role: BeadRole, slot: int = 0) -> Bead:
        if not isinstance(role, BeadRole):
            raise InvariantError(f"Unknown bead role {role!r}")
        beads = self.beads(role)
        if not 0 <= slot < len(beads):
            raise InvariantError(f"Rod {self.index} has no {role.value} bead in slot {slot}")
        return beads[slot]

    def all_beads(self) -> List[Bead]:
        return [self.heavy] + list(self.lights)

    def active_light_count(self) -> int:
        return sum(1 for b in self.lights if b.active)

    def digit(self) -> int:
        """Column digit = 5 * heavy + number of active light beads."""
        return sum(b.unit_value() for b in self.all_beads())

    def dragging_bead(self):
        for b in self.all_beads():
            if b.dragging:
                return b
        return None

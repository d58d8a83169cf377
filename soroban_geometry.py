#!/usr/bin/env python3
"""
SOROBAN_GEOMETRY.PY - Geometry calculations for the bead frame

Contains:
- distance, point_in_circle, point_in_rect, clamp, lerp, bead_bounds, is_near
- RodGeometry: zone bounds and canonical offsets along one rod
- FrameLayout: rod-local offsets <-> drawing coordinates (y grows downward)
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

from soroban_models import BeadRole, InvariantError, LIGHT_BEAD_COUNT


# =============================================================================
# GEOMETRY FUNCTIONS
# =============================================================================

def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    dx = x2 - x1
    dy = y2 - y1
    return math.sqrt(dx*dx + dy*dy)


def point_in_circle(px: float, py: float, cx: float, cy: float, radius: float) -> bool:
    return distance(px, py, cx, cy) <= radius


def point_in_rect(px: float, py: float, rx: float, ry: float, width: float, height: float) -> bool:
    return rx <= px <= rx + width and ry <= py <= ry + height


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation, t in [0, 1]."""
    return start + (end - start) * t


def is_near(a: float, b: float, tolerance: float) -> bool:
    return abs(a - b) <= tolerance


def bead_bounds(x: float, y: float, width: float, height: float) -> Dict[str, float]:
    """Bounding box of a bead centred on (x, y).

    width is the half-width across the rod, height the full span along it.
    """
    return {
        "left": x - width,
        "right": x + width,
        "top": y - height / 2,
        "bottom": y + height / 2,
        "center_x": x,
        "center_y": y,
    }


# =============================================================================
# ROD GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class RodGeometry:
    """Travel zones of one rod, in rod-local offsets from the divider face.

    Offsets grow away from the divider in both zones:

        frame | heavy zone | DIVIDER | light zone (4 stacked) | frame
                 <- offset    0         offset ->
    """
    bead_span: float
    min_gap: float
    clearance: float
    travel: float
    activation_fraction: float

    @classmethod
    def from_config(cls, config) -> "RodGeometry":
        return cls(
            bead_span=config.bead_span,
            min_gap=config.min_gap,
            clearance=config.clearance,
            travel=config.travel,
            activation_fraction=config.activation_fraction,
        )

    @property
    def pitch(self) -> float:
        """Centre-to-centre distance of two touching light beads."""
        return self.bead_span + self.min_gap

    @property
    def base(self) -> float:
        """Offset of a bead centre resting against the divider."""
        return self.clearance + self.bead_span / 2

    def zone_bounds(self, role: BeadRole) -> Tuple[float, float]:
        """(nearest, farthest) legal offset of any bead centre in the zone."""
        if role is BeadRole.HEAVY:
            return self.base, self.base + self.travel
        if role is BeadRole.LIGHT:
            return self.base, self.base + (LIGHT_BEAD_COUNT - 1) * self.pitch + self.travel
        raise InvariantError(f"Unknown bead role {role!r}")

    def zone_length(self, role: BeadRole) -> float:
        """Inner length of the zone between divider face and frame."""
        lo, hi = self.zone_bounds(role)
        return hi + self.bead_span / 2 + self.clearance

    def canonical_offset(self, role: BeadRole, slot: int, active: bool) -> float:
        """Resting offset for a discrete state."""
        if role is BeadRole.HEAVY:
            position = self.base
        elif role is BeadRole.LIGHT:
            position = self.base + slot * self.pitch
        else:
            raise InvariantError(f"Unknown bead role {role!r}")
        return position if active else position + self.travel

    def activation_limit(self, role: BeadRole, slot: int) -> float:
        """Farthest offset at which a released bead still counts as active."""
        return self.canonical_offset(role, slot, True) + self.activation_fraction * self.travel


# =============================================================================
# FRAME LAYOUT
# =============================================================================

@dataclass(frozen=True)
class FrameLayout:
    """Placement of rods and zones in drawing coordinates (SVG style, y down).

    The heavy zone sits above the divider and the light zone below it.
    """
    geometry: RodGeometry
    rod_count: int
    bead_width: float = 32.0
    rod_spacing: float = 72.0
    frame_margin: float = 50.0
    frame_thickness: float = 30.0
    divider_thickness: float = 10.0
    padding: float = 10.0
    hit_padding: float = 10.0

    @classmethod
    def from_config(cls, config) -> "FrameLayout":
        return cls(
            geometry=RodGeometry.from_config(config),
            rod_count=config.rod_count,
            bead_width=config.bead_width,
            rod_spacing=config.rod_spacing,
            frame_margin=config.frame_margin,
            frame_thickness=config.frame_thickness,
            divider_thickness=config.divider_thickness,
            hit_padding=config.hit_padding,
        )

    @property
    def top_inner(self) -> float:
        return self.padding + self.frame_thickness

    @property
    def divider_top(self) -> float:
        return self.top_inner + self.geometry.zone_length(BeadRole.HEAVY)

    @property
    def divider_bottom(self) -> float:
        return self.divider_top + self.divider_thickness

    @property
    def bottom_inner(self) -> float:
        return self.divider_bottom + self.geometry.zone_length(BeadRole.LIGHT)

    @property
    def width(self) -> float:
        return 2 * self.frame_margin + (self.rod_count - 1) * self.rod_spacing

    @property
    def height(self) -> float:
        return self.bottom_inner + self.frame_thickness + self.padding

    @property
    def hit_radius(self) -> float:
        return self.bead_width + self.hit_padding

    def rod_x(self, column: int) -> float:
        return self.frame_margin + column * self.rod_spacing

    def offset_to_y(self, role: BeadRole, offset: float) -> float:
        if role is BeadRole.HEAVY:
            return self.divider_top - offset
        return self.divider_bottom + offset

    def y_to_offset(self, role: BeadRole, y: float) -> float:
        if role is BeadRole.HEAVY:
            return self.divider_top - y
        return y - self.divider_bottom

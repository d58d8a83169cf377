#!/usr/bin/env python3
"""
SOROBAN_INTERACTION.PY - Pointer handling for the bead frame

Turns a normalized pointer stream (down / move / up / cancel, already in
frame drawing coordinates) into hit tests and drag-lifecycle calls:

    IDLE --down on bead--> DRAGGING --move*--> DRAGGING --up/cancel--> SNAPPING --> IDLE
"""

import logging
from enum import Enum
from typing import Dict, Optional

from soroban_geometry import FrameLayout, distance, point_in_circle, point_in_rect
from soroban_models import BeadKey
from soroban_physics import DragResolver, SnapPolicy
from soroban_state import BeadModel, SnapEvent

logger = logging.getLogger(__name__)


class GestureState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    SNAPPING = "snapping"


class InteractionController:
    """Single-pointer drag controller for one BeadModel."""

    def __init__(self, model: BeadModel, layout: Optional[FrameLayout] = None):
        self.model = model
        self.layout = layout if layout is not None else FrameLayout.from_config(model.config)
        self.resolver = DragResolver(model)
        self.snap_policy = SnapPolicy(model)

        self.state = GestureState.IDLE
        self.dragged: Optional[BeadKey] = None
        self._press_y = 0.0
        self._bead_start = 0.0

        model.on("render", self._on_render)

    def _on_render(self):
        self.layout = FrameLayout.from_config(self.model.config)

    def bead_at(self, x: float, y: float) -> Optional[BeadKey]:
        """Find the bead under a point, or None.

        The hit area of a bead is a circle of radius bead_width + hit_padding.
        Neighbouring hit areas overlap, so the closest bead centre wins.
        """
        layout = self.layout
        if not point_in_rect(x, y, 0, 0, layout.width, layout.height):
            return None
        radius = layout.hit_radius
        min_dist = float('inf')
        closest = None

        for rod in self.model.rods:
            rod_x = layout.rod_x(rod.index)
            for bead in rod.all_beads():
                bead_y = layout.offset_to_y(bead.role, bead.offset)
                if not point_in_circle(x, y, rod_x, bead_y, radius):
                    continue
                dist = distance(x, y, rod_x, bead_y)
                if dist < min_dist:
                    min_dist = dist
                    closest = BeadKey(rod.index, bead.role, bead.slot)
        return closest

    def pointer_down(self, x: float, y: float) -> Optional[BeadKey]:
        """Start a gesture on the bead under (x, y), if any."""
        if self.state is not GestureState.IDLE:
            logger.debug("Ignoring pointer down during %s", self.state.value)
            return None

        key = self.bead_at(x, y)
        if key is None:
            return None

        self.model.begin_gesture(key)
        self.dragged = key
        self.state = GestureState.DRAGGING
        self._press_y = y
        self._bead_start = self.model.get_bead(key.column, key.role, key.slot).offset
        logger.debug("Started dragging: column=%d %s slot=%d", key.column, key.role.value, key.slot)
        return key

    def pointer_move(self, x: float, y: float) -> Dict[int, float]:
        """Feed one move sample to the resolver. Returns moved offsets by slot."""
        if self.state is not GestureState.DRAGGING:
            return {}
        role = self.dragged.role
        delta = self.layout.y_to_offset(role, y) - self.layout.y_to_offset(role, self._press_y)
        return self.resolver.drag_to(self.dragged, self._bead_start + delta)

    def pointer_up(self) -> Optional[SnapEvent]:
        """End the gesture; the snap policy always runs."""
        if self.state is not GestureState.DRAGGING:
            return None
        key = self.dragged
        self.state = GestureState.SNAPPING
        try:
            return self.snap_policy.snap(key)
        finally:
            self.state = GestureState.IDLE
            self.dragged = None
            logger.debug("Drag ended")

    def pointer_cancel(self) -> Optional[SnapEvent]:
        """Pointer lost (e.g. left the window): settle like a release."""
        return self.pointer_up()

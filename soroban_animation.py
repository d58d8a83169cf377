#!/usr/bin/env python3
"""
SOROBAN_ANIMATION.PY - Optional eased transitions for bulk value changes

The model is always updated synchronously first; an animator only produces
display offsets that glide from where the beads were drawn to where the
model now says they are. Dropping a transition (cancel, or a newer call)
leaves the display on the model's canonical offsets.
"""

import logging
import math
from typing import Callable, Dict, Optional

import numpy as np

from soroban_geometry import lerp
from soroban_models import BeadKey
from soroban_state import BeadModel

logger = logging.getLogger(__name__)


def _ease_out_cubic(t):
    t = t - 1
    return t * t * t + 1


def _ease_in_elastic(t):
    if t in (0.0, 1.0):
        return t
    p = 0.3
    s = p / 4
    return -(2 ** (10 * (t - 1)) * math.sin((t - 1 - s) * (2 * math.pi) / p))


def _ease_out_elastic(t):
    if t in (0.0, 1.0):
        return t
    p = 0.3
    s = p / 4
    return 2 ** (-10 * t) * math.sin((t - s) * (2 * math.pi) / p) + 1


EASING: Dict[str, Callable[[float], float]] = {
    "linear": lambda t: t,
    "ease_in_quad": lambda t: t * t,
    "ease_out_quad": lambda t: t * (2 - t),
    "ease_in_out_quad": lambda t: 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t,
    "ease_in_cubic": lambda t: t * t * t,
    "ease_out_cubic": _ease_out_cubic,
    "ease_in_out_cubic": lambda t: 4 * t * t * t if t < 0.5 else (t - 1) * (2 * t - 2) * (2 * t - 2) + 1,
    "ease_in_quart": lambda t: t ** 4,
    "ease_out_quart": lambda t: 1 - (t - 1) ** 4,
    "ease_in_out_quart": lambda t: 8 * t ** 4 if t < 0.5 else 1 - 8 * (t - 1) ** 4,
    "ease_in_back": lambda t: t * t * (2.70158 * t - 1.70158),
    "ease_out_back": lambda t: (t - 1) * (t - 1) * (2.70158 * (t - 1) + 1.70158) + 1,
    "ease_in_elastic": _ease_in_elastic,
    "ease_out_elastic": _ease_out_elastic,
}


class BeadAnimator:
    """Frame-stepped display transitions for set_value / clear."""

    def __init__(self, model: BeadModel, duration_ms: Optional[float] = None,
                 easing: Optional[str] = None):
        self.model = model
        self.duration_ms = model.config.animation_duration_ms if duration_ms is None else duration_ms
        self.easing = EASING[easing or model.config.easing]

        self._keys = []
        self._start: Optional[np.ndarray] = None
        self._end: Optional[np.ndarray] = None
        self._elapsed = 0.0

    @property
    def running(self) -> bool:
        return self._start is not None

    def _model_offsets(self) -> Dict[BeadKey, float]:
        return {key: state.offset for key, state in self.model.snapshot().items()}

    def display_offsets(self) -> Dict[BeadKey, float]:
        """Offsets to draw right now."""
        if not self.running:
            return self._model_offsets()
        progress = min(self._elapsed / self.duration_ms, 1.0) if self.duration_ms > 0 else 1.0
        frame = lerp(self._start, self._end, self.easing(progress))
        return dict(zip(self._keys, frame.tolist()))

    def animate_to(self, value: int):
        """Set the value now and start a transition from the drawn positions."""
        drawn = self.display_offsets()
        self.model.set_value(value)
        target = self._model_offsets()

        self._keys = list(target)
        self._start = np.array([drawn.get(k, target[k]) for k in self._keys], dtype=float)
        self._end = np.array([target[k] for k in self._keys], dtype=float)
        self._elapsed = 0.0
        logger.debug("Animating to %d over %.0f ms", value, self.duration_ms)

    def animate_clear(self):
        self.animate_to(0)

    def advance(self, dt_ms: float) -> Dict[BeadKey, float]:
        """Step the transition by dt_ms and return the offsets to draw."""
        if not self.running:
            return self._model_offsets()
        self._elapsed += dt_ms
        offsets = self.display_offsets()
        if self._elapsed >= self.duration_ms:
            self.cancel()
            return self._model_offsets()
        return offsets

    def cancel(self):
        """Drop the transition; the display falls back to the model."""
        self._keys = []
        self._start = None
        self._end = None
        self._elapsed = 0.0

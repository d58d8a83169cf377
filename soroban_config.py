#!/usr/bin/env python3
"""
SOROBAN_CONFIG.PY - Configuration for the bead frame

Defaults are merged with an optional JSON file. The configuration is read
once when a BeadModel is built; changing rod_count needs a new model.
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields

from soroban_models import ConfigError

logger = logging.getLogger(__name__)

# Config file path
CONFIG_PATH = os.path.join(os.path.dirname(__file__), "soroban_config.json")

MIN_RODS = 1
MAX_RODS = 20

EASING_NAMES = (
    "linear",
    "ease_in_quad", "ease_out_quad", "ease_in_out_quad",
    "ease_in_cubic", "ease_out_cubic", "ease_in_out_cubic",
    "ease_in_quart", "ease_out_quart", "ease_in_out_quart",
    "ease_in_back", "ease_out_back",
    "ease_in_elastic", "ease_out_elastic",
)


@dataclass
class SorobanConfig:
    """Frame dimensions and snapping parameters."""
    rod_count: int = 13
    bead_span: float = 36.0
    bead_width: float = 32.0
    min_gap: float = 1.0          # clearance between adjacent light beads
    clearance: float = 1.0        # clearance to divider and frame
    travel: float = 36.0          # active <-> inactive distance
    activation_fraction: float = 0.6
    rod_spacing: float = 72.0
    frame_margin: float = 50.0
    frame_thickness: float = 30.0
    divider_thickness: float = 10.0
    hit_padding: float = 10.0
    show_digits: bool = False
    animation_duration_ms: float = 150.0
    easing: str = "ease_out_cubic"

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigError if any value is out of bounds."""
        if isinstance(self.rod_count, bool) or not isinstance(self.rod_count, int):
            raise ConfigError(f"rod_count must be an integer, got {self.rod_count!r}")
        if not MIN_RODS <= self.rod_count <= MAX_RODS:
            raise ConfigError(f"rod_count must be in {MIN_RODS}..{MAX_RODS}, got {self.rod_count}")

        for name in ("bead_span", "bead_width", "travel", "rod_spacing"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("min_gap", "clearance", "frame_margin", "frame_thickness",
                     "divider_thickness", "hit_padding", "animation_duration_ms"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")

        if not 0.0 < self.activation_fraction < 1.0:
            raise ConfigError(
                f"activation_fraction must be in (0, 1), got {self.activation_fraction}")
        if self.easing not in EASING_NAMES:
            raise ConfigError(f"Unknown easing {self.easing!r}")

    @classmethod
    def from_dict(cls, data) -> "SorobanConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        merged = get_defaults()
        merged.update(data)
        return cls(**merged)

    def to_dict(self):
        return asdict(self)


def get_defaults():
    """Return default config values."""
    return {f.name: f.default for f in fields(SorobanConfig)}


def load_config(path=None) -> SorobanConfig:
    """Load config from JSON file, falling back to defaults."""
    path = path or CONFIG_PATH
    if os.path.exists(path):
        with open(path, 'r') as f:
            data = json.load(f)
        logger.debug("Configuration loaded from %s", path)
        return SorobanConfig.from_dict(data)
    logger.debug("Using default configuration")
    return SorobanConfig.from_dict({})


def save_config(config: SorobanConfig, path=None):
    """Save config to JSON file."""
    path = path or CONFIG_PATH
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug("Configuration saved to %s", path)

#!/usr/bin/env python3
"""
SOROBAN_RENDERER.PY - SVG rendering for a bead frame

Contains:
- SorobanRenderer: frame, rods, divider bar, octagonal beads and optional
  digit row, drawn from a BeadModel snapshot using svgwrite
"""

from typing import Dict, Optional

import svgwrite

from soroban_geometry import FrameLayout
from soroban_models import BeadKey
from soroban_state import BeadModel


class SorobanRenderer:
    """Renders a BeadModel to SVG using svgwrite."""

    FRAME_COLORS = ("#A0522D", "#8B4513", "#6B3410")
    BAR_COLORS = ("#949494", "#ababab", "#757575", "#8c8c8c", "#606060")
    BEAD_COLORS = ("#ffb366", "#ff7c00", "#cc6300")
    ROD_COLOR = "#654321"
    DIGIT_COLOR = "#4a4a4a"
    DRAG_STROKE = "#333333"

    # Octagon shape
    CUT_SIZE = 12
    SIDE_ROUNDNESS = 2

    def __init__(self, model: BeadModel, layout: Optional[FrameLayout] = None):
        self.model = model
        self.layout = layout if layout is not None else FrameLayout.from_config(model.config)
        model.on("render", self._on_render)

    def _on_render(self):
        self.layout = FrameLayout.from_config(self.model.config)

    def bead_path(self, x: float, y: float) -> str:
        """SVG path data for an octagonal bead centred on (x, y)."""
        hw = self.layout.bead_width
        hh = self.layout.geometry.bead_span / 2
        c = self.CUT_SIZE
        r = self.SIDE_ROUNDNESS
        return (
            f"M {x - c:.2f} {y - hh:.2f} "
            f"L {x + c:.2f} {y - hh:.2f} "
            f"Q {x + c + 2:.2f} {y - hh + 2:.2f} {x + hw - r:.2f} {y - r:.2f} "
            f"Q {x + hw:.2f} {y:.2f} {x + hw - r:.2f} {y + r:.2f} "
            f"Q {x + c + 2:.2f} {y + hh - 2:.2f} {x + c:.2f} {y + hh:.2f} "
            f"L {x - c:.2f} {y + hh:.2f} "
            f"Q {x - c - 2:.2f} {y + hh - 2:.2f} {x - hw + r:.2f} {y + r:.2f} "
            f"Q {x - hw:.2f} {y:.2f} {x - hw + r:.2f} {y - r:.2f} "
            f"Q {x - c - 2:.2f} {y - hh + 2:.2f} {x - c:.2f} {y - hh:.2f} Z"
        )

    def _add_gradients(self, dwg):
        frame = dwg.linearGradient(start=(0, 0), end=(0, 1), id="frameGradient")
        for i, color in enumerate(self.FRAME_COLORS):
            frame.add_stop_color(i / (len(self.FRAME_COLORS) - 1), color)
        dwg.defs.add(frame)

        bar = dwg.linearGradient(start=(0, 0), end=(0, 1), id="barGradient")
        for offset, color in zip((0.0, 0.3, 0.5, 0.7, 1.0), self.BAR_COLORS):
            bar.add_stop_color(offset, color)
        dwg.defs.add(bar)

        bead = dwg.radialGradient(center=(0.45, 0.4), r=0.6, id="beadGradient")
        for i, color in enumerate(self.BEAD_COLORS):
            bead.add_stop_color(i / (len(self.BEAD_COLORS) - 1), color)
        dwg.defs.add(bead)
        return frame, bar, bead

    def build(self, display_offsets: Optional[Dict[BeadKey, float]] = None,
              show_digits: Optional[bool] = None) -> svgwrite.Drawing:
        """Build the drawing.

        Args:
            display_offsets: Offsets to draw instead of the model's (e.g. an
                animation frame); missing beads fall back to the model
            show_digits: Draw the digit row; defaults to config.show_digits
        """
        layout = self.layout
        if show_digits is None:
            show_digits = self.model.config.show_digits

        dwg = svgwrite.Drawing(size=(f"{layout.width:.0f}", f"{layout.height:.0f}"),
                               debug=False)  # data-* attributes are not in the SVG profile
        frame, bar, bead_fill = self._add_gradients(dwg)

        x0 = layout.padding
        inner_width = layout.width - 2 * layout.padding

        # Frame bars
        dwg.add(dwg.rect((x0, layout.padding), (inner_width, layout.frame_thickness),
                         rx=5, fill=frame.get_paint_server(), class_="frame"))
        dwg.add(dwg.rect((x0, layout.bottom_inner), (inner_width, layout.frame_thickness),
                         rx=5, fill=frame.get_paint_server(), class_="frame"))

        # Rods
        for col in range(self.model.rod_count):
            x = layout.rod_x(col)
            dwg.add(dwg.line((x, layout.top_inner), (x, layout.bottom_inner),
                             stroke=self.ROD_COLOR, stroke_width=8, class_="rod"))

        # Divider bar
        dwg.add(dwg.rect((x0, layout.divider_top), (inner_width, layout.divider_thickness),
                         rx=2, fill=bar.get_paint_server(), class_="divider"))

        # Beads
        snapshot = self.model.snapshot()
        for key, state in snapshot.items():
            offset = state.offset
            if display_offsets is not None:
                offset = display_offsets.get(key, offset)
            x = layout.rod_x(key.column)
            y = layout.offset_to_y(key.role, offset)
            group = dwg.g(class_="bead")
            group.attribs["data-col"] = key.column
            group.attribs["data-type"] = key.role.value
            group.attribs["data-index"] = key.slot
            path = dwg.path(d=self.bead_path(x, y), fill=bead_fill.get_paint_server())
            if state.dragging:
                path.stroke(self.DRAG_STROKE, width=2)
            group.add(path)
            group.add(dwg.line((x - layout.bead_width, y), (x + layout.bead_width, y),
                               stroke="black", stroke_opacity=0.075, stroke_width=2))
            dwg.add(group)

        if show_digits:
            digits = dwg.g(class_="digits")
            for col, digit in enumerate(self.model.get_digits()):
                digits.add(dwg.text(str(digit), insert=(layout.rod_x(col), layout.padding + 20),
                                    text_anchor="middle", font_family="Montserrat, sans-serif",
                                    font_size=20, font_weight="bold", fill=self.DIGIT_COLOR))
            dwg.add(digits)

        return dwg

    def render(self, output_path: str, display_offsets: Optional[Dict[BeadKey, float]] = None,
               show_digits: Optional[bool] = None):
        """Render the frame to an SVG file."""
        dwg = self.build(display_offsets, show_digits)
        dwg.saveas(output_path)
        print(f"SVG saved to {output_path} (value: {self.model})")

    def to_string(self, display_offsets: Optional[Dict[BeadKey, float]] = None,
                  show_digits: Optional[bool] = None) -> str:
        return self.build(display_offsets, show_digits).tostring()

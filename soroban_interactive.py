#!/usr/bin/env python3
"""
SOROBAN_INTERACTIVE.PY - Interactive bead frame using matplotlib

Drag beads directly on the frame. Pushed beads move with the dragged one,
and released beads snap to their rest positions.
"""

import logging

import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch, Rectangle
from matplotlib.widgets import Button, TextBox

from soroban_animation import BeadAnimator
from soroban_codec import generate_random_number
from soroban_config import load_config
from soroban_geometry import FrameLayout, bead_bounds
from soroban_interaction import InteractionController
from soroban_models import BeadKey, SorobanError
from soroban_state import BeadModel

logger = logging.getLogger(__name__)

FRAME_COLOR = '#8B4513'
BAR_COLOR = '#8c8c8c'
ROD_COLOR = '#654321'
BEAD_COLOR = '#ff7c00'
BEAD_EDGE = '#cc6300'
DRAG_EDGE = '#333333'

FRAME_INTERVAL_MS = 16


class BeadPatch:
    """A bead drawn on the plot."""

    def __init__(self, ax, x, y, width, span):
        self.width = width
        self.span = span
        box = bead_bounds(x, y, width, span)
        self.patch = FancyBboxPatch((box["left"], box["top"]), 2 * width, span,
                                    boxstyle="round,pad=0,rounding_size=8",
                                    facecolor=BEAD_COLOR, edgecolor=BEAD_EDGE,
                                    linewidth=1, zorder=10)
        ax.add_patch(self.patch)

    def update_position(self, y):
        self.patch.set_y(y - self.span / 2)

    def set_dragging(self, dragging):
        self.patch.set_edgecolor(DRAG_EDGE if dragging else BEAD_EDGE)
        self.patch.set_linewidth(2 if dragging else 1)

    @property
    def center_y(self):
        return self.patch.get_y() + self.span / 2


class InteractiveSoroban:
    """Interactive view of a BeadModel."""

    def __init__(self, model: BeadModel):
        self.model = model
        self.controller = InteractionController(model)
        self.animator = BeadAnimator(model)
        self._animating = False
        self.timer = None

        self.fig, self.ax = plt.subplots(1, 1, figsize=(max(6, model.rod_count * 1.0), 5))
        self.beads = {}
        self.digit_labels = []
        self._draw()

        # Connect events
        self.fig.canvas.mpl_connect('button_press_event', self._on_press)
        self.fig.canvas.mpl_connect('button_release_event', self._on_release)
        self.fig.canvas.mpl_connect('motion_notify_event', self._on_motion)
        self.fig.canvas.mpl_connect('figure_leave_event', self._on_leave)

        model.on('bead_move', self._on_bead_move)
        model.on('change', self._on_change)
        model.on('render', self._draw)

        self._add_buttons()

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _draw(self):
        """Draw frame, rods, divider and beads from scratch."""
        layout = FrameLayout.from_config(self.model.config)
        self.layout = layout
        ax = self.ax
        ax.clear()
        ax.set_aspect('equal')
        ax.set_xlim(0, layout.width)
        ax.set_ylim(layout.height, 0)
        ax.axis('off')

        x0 = layout.padding
        inner_width = layout.width - 2 * layout.padding
        ax.add_patch(Rectangle((x0, layout.padding), inner_width, layout.frame_thickness,
                               facecolor=FRAME_COLOR, zorder=1))
        ax.add_patch(Rectangle((x0, layout.bottom_inner), inner_width, layout.frame_thickness,
                               facecolor=FRAME_COLOR, zorder=1))
        for col in range(self.model.rod_count):
            x = layout.rod_x(col)
            ax.plot([x, x], [layout.top_inner, layout.bottom_inner], '-',
                    color=ROD_COLOR, linewidth=3, zorder=2)
        ax.add_patch(Rectangle((x0, layout.divider_top), inner_width, layout.divider_thickness,
                               facecolor=BAR_COLOR, zorder=5))

        self.beads = {}
        for key, state in self.model.snapshot().items():
            y = layout.offset_to_y(key.role, state.offset)
            self.beads[key] = BeadPatch(ax, layout.rod_x(key.column), y,
                                        layout.bead_width, layout.geometry.bead_span)

        self.digit_labels = [
            ax.text(layout.rod_x(col), layout.padding + layout.frame_thickness / 2, '',
                    ha='center', va='center', color='white', fontsize=11,
                    fontweight='bold', zorder=6)
            for col in range(self.model.rod_count)
        ]
        self._update_labels()
        self.fig.canvas.draw_idle()

    def _update_labels(self):
        show = self.model.config.show_digits
        for col, label in enumerate(self.digit_labels):
            label.set_text(str(self.model.get_digit(col)) if show else '')
        self.ax.set_title(f'Soroban - value {self.model.get_value()}')

    def _place_beads(self, offsets):
        for key, offset in offsets.items():
            self.beads[key].update_position(self.layout.offset_to_y(key.role, offset))
        self.fig.canvas.draw_idle()

    # -------------------------------------------------------------------------
    # Model notifications
    # -------------------------------------------------------------------------

    def _on_bead_move(self, event):
        patch = self.beads.get(BeadKey(event.column, event.role, event.slot))
        if patch is not None:
            patch.update_position(self.layout.offset_to_y(event.role, event.offset))
        self.fig.canvas.draw_idle()

    def _on_change(self, event):
        self._update_labels()
        if not self._animating:
            self._place_beads(self.animator.display_offsets())

    # -------------------------------------------------------------------------
    # Pointer events
    # -------------------------------------------------------------------------

    def _on_press(self, event):
        """Handle mouse press."""
        if event.inaxes != self.ax or event.xdata is None:
            return
        self.animator.cancel()
        key = self.controller.pointer_down(event.xdata, event.ydata)
        if key is not None:
            self._place_beads(self.animator.display_offsets())
            self.beads[key].set_dragging(True)
            self.fig.canvas.draw_idle()

    def _on_motion(self, event):
        """Handle mouse motion."""
        if self.controller.dragged is None or event.ydata is None:
            return
        self.controller.pointer_move(event.xdata, event.ydata)

    def _on_release(self, event):
        """Handle mouse release."""
        key = self.controller.dragged
        if self.controller.pointer_up() is not None:
            self.beads[key].set_dragging(False)
            self.fig.canvas.draw_idle()

    def _on_leave(self, event):
        key = self.controller.dragged
        if self.controller.pointer_cancel() is not None:
            self.beads[key].set_dragging(False)
            self.fig.canvas.draw_idle()

    # -------------------------------------------------------------------------
    # Buttons
    # -------------------------------------------------------------------------

    def _add_buttons(self):
        """Add value box, Clear and Random buttons."""
        # Store as instance attributes to prevent garbage collection
        self.ax_value = plt.axes([0.15, 0.02, 0.3, 0.05])
        self.txt_value = TextBox(self.ax_value, 'Value ', initial='')
        self.txt_value.on_submit(self._submit_value)

        self.ax_clear = plt.axes([0.59, 0.02, 0.1, 0.05])
        self.btn_clear = Button(self.ax_clear, 'Clear')
        self.btn_clear.on_clicked(self._clear)

        self.ax_random = plt.axes([0.7, 0.02, 0.1, 0.05])
        self.btn_random = Button(self.ax_random, 'Random')
        self.btn_random.on_clicked(self._random)

    def animate_to(self, value):
        """Set value on the model and glide the beads to it."""
        self._animating = True
        try:
            self.animator.animate_to(value)
        finally:
            self._animating = False
        if self.timer is None:
            self.timer = self.fig.canvas.new_timer(interval=FRAME_INTERVAL_MS)
            self.timer.add_callback(self._on_timer)
        self.timer.start()

    def _on_timer(self):
        self._place_beads(self.animator.advance(FRAME_INTERVAL_MS))
        if not self.animator.running:
            self.timer.stop()

    def _submit_value(self, text):
        try:
            self.animate_to(int(text.strip()))
        except (ValueError, SorobanError) as e:
            print(f"Cannot show {text!r}: {e}")

    def _clear(self, event):
        self.animate_to(0)
        print("Cleared")

    def _random(self, event):
        self.animate_to(generate_random_number(self.model.rod_count))

    def show(self):
        """Show the interactive frame."""
        plt.show()


def main():
    editor = InteractiveSoroban(BeadModel(load_config()))
    editor.show()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Tests for the matplotlib view, driven with synthetic mouse events."""

from types import SimpleNamespace

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

from soroban_config import SorobanConfig
from soroban_interactive import InteractiveSoroban
from soroban_models import BeadKey, BeadRole
from soroban_state import BeadModel


@pytest.fixture
def app():
    view = InteractiveSoroban(BeadModel(SorobanConfig(rod_count=3, show_digits=True)))
    yield view
    plt.close("all")


def mouse(app, x, y, inaxes=True):
    return SimpleNamespace(inaxes=app.ax if inaxes else None, xdata=x, ydata=y)


def bead_center(app, key):
    bead = app.model.get_bead(*key)
    return app.layout.rod_x(key.column), app.layout.offset_to_y(key.role, bead.offset)


def test_one_patch_per_bead(app):
    assert len(app.beads) == 15
    assert len(app.digit_labels) == 3


def test_drag_updates_patches_and_value(app):
    key = BeadKey(1, BeadRole.HEAVY)
    x, y = bead_center(app, key)
    app._on_press(mouse(app, x, y))
    assert app.controller.dragged == key

    app._on_motion(mouse(app, x, y + 20))
    assert app.beads[key].center_y == pytest.approx(y + 20)

    app._on_release(mouse(app, x, y + 20))
    assert app.model.get_value() == 50
    assert app.beads[key].center_y == pytest.approx(app.layout.offset_to_y(BeadRole.HEAVY, 19.0))
    assert app.digit_labels[1].get_text() == "5"


def test_press_outside_axes_ignored(app):
    x, y = bead_center(app, BeadKey(0, BeadRole.HEAVY))
    app._on_press(mouse(app, x, y, inaxes=False))
    assert app.controller.dragged is None


def test_leaving_figure_settles_drag(app):
    key = BeadKey(2, BeadRole.LIGHT, 0)
    x, y = bead_center(app, key)
    app._on_press(mouse(app, x, y))
    app._on_motion(mouse(app, x, y - 30))
    app._on_leave(SimpleNamespace())
    assert app.controller.dragged is None
    assert app.model.get_value() == 1


def test_animate_to_reaches_target(app):
    app.animate_to(42)
    assert app.model.get_value() == 42
    while app.animator.running:
        app._on_timer()
    for key, patch in app.beads.items():
        bead = app.model.get_bead(*key)
        assert patch.center_y == pytest.approx(app.layout.offset_to_y(key.role, bead.offset))


def test_submit_bad_value_reports(app, capsys):
    app.model.set_value(7)
    app._submit_value("1000")
    app._submit_value("seven")
    assert app.model.get_value() == 7
    assert "Cannot show" in capsys.readouterr().out


def test_clear_button(app):
    app.model.set_value(123)
    app._clear(None)
    assert app.model.get_value() == 0

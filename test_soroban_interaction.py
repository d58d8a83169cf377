#!/usr/bin/env python3
"""Tests for InteractionController: hit testing and the pointer lifecycle."""

import pytest

from soroban_config import SorobanConfig
from soroban_interaction import GestureState, InteractionController
from soroban_models import BeadKey, BeadRole, GestureInProgressError
from soroban_state import BeadModel, SnapEvent
from soroban_validation import validate_invariants


@pytest.fixture
def model():
    return BeadModel(SorobanConfig(rod_count=3))


@pytest.fixture
def controller(model):
    return InteractionController(model)


def bead_xy(controller, key):
    layout = controller.layout
    bead = controller.model.get_bead(key.column, key.role, key.slot)
    return layout.rod_x(key.column), layout.offset_to_y(key.role, bead.offset)


def test_bead_at_centres(controller, model):
    for key in model.snapshot():
        x, y = bead_xy(controller, key)
        assert controller.bead_at(x, y) == key


def test_bead_at_prefers_closest(controller):
    x, y = bead_xy(controller, BeadKey(1, BeadRole.LIGHT, 1))
    # hit areas of slots 1 and 2 overlap here; slot 2 is closer
    assert controller.bead_at(x, y + 25) == BeadKey(1, BeadRole.LIGHT, 2)
    assert controller.bead_at(x + 30, y + 5) == BeadKey(1, BeadRole.LIGHT, 1)


def test_bead_at_misses(controller):
    layout = controller.layout
    assert controller.bead_at(0, 0) is None
    assert controller.bead_at(layout.rod_x(0), layout.padding) is None


def test_press_on_nothing(controller, model):
    assert controller.pointer_down(0, 0) is None
    assert controller.state is GestureState.IDLE
    assert not model.gesture_active
    assert controller.pointer_move(0, 50) == {}
    assert controller.pointer_up() is None


def test_drag_light_slot_two_toward_divider(controller, model):
    key = BeadKey(0, BeadRole.LIGHT, 2)
    x, y = bead_xy(controller, key)

    assert controller.pointer_down(x, y) == key
    assert controller.state is GestureState.DRAGGING
    assert model.get_bead(0, BeadRole.LIGHT, 2).dragging

    controller.pointer_move(x, y - 40)
    controller.pointer_move(x, y - 79)
    assert validate_invariants(model, require_settled=False) == []
    assert model.get_value() == 0

    event = controller.pointer_up()
    assert event.active
    assert event.digit == 3
    assert model.get_value() == 300
    assert controller.state is GestureState.IDLE
    assert controller.dragged is None
    assert not model.gesture_active
    assert validate_invariants(model) == []


def test_drag_heavy_down_to_divider(controller, model):
    key = BeadKey(2, BeadRole.HEAVY)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    controller.pointer_move(x, y + 36)
    event = controller.pointer_up()
    assert event.active
    assert model.get_value() == 5


def test_drag_follows_pointer_relative_to_press(controller, model):
    key = BeadKey(1, BeadRole.HEAVY)
    x, y = bead_xy(controller, key)
    # grab the bead off-centre; the bead keeps its distance to the pointer
    controller.pointer_down(x, y + 10)
    controller.pointer_move(x, y + 20)
    assert model.get_bead(1, BeadRole.HEAVY).offset == pytest.approx(45.0)


def test_second_press_ignored_while_dragging(controller, model):
    first = BeadKey(0, BeadRole.HEAVY)
    controller.pointer_down(*bead_xy(controller, first))
    other = bead_xy(controller, BeadKey(2, BeadRole.LIGHT, 0))
    assert controller.pointer_down(*other) is None
    assert controller.dragged == first
    assert model.gesture_bead == first


def test_set_value_rejected_mid_drag(controller, model):
    controller.pointer_down(*bead_xy(controller, BeadKey(0, BeadRole.HEAVY)))
    with pytest.raises(GestureInProgressError):
        model.set_value(42)


def test_pointer_cancel_snaps(controller, model):
    key = BeadKey(1, BeadRole.LIGHT, 0)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    controller.pointer_move(x, y - 30)

    snaps = []
    model.on("snap", snaps.append)
    event = controller.pointer_cancel()
    assert event.active
    assert snaps == [event]
    assert model.get_value() == 10
    assert controller.state is GestureState.IDLE


def test_change_emitted_once_per_release(controller, model):
    changes = []
    model.on("change", changes.append)
    key = BeadKey(0, BeadRole.LIGHT, 0)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    for dy in range(0, 40, 4):
        controller.pointer_move(x, y - dy)
    controller.pointer_up()
    assert len(changes) == 1
    assert changes[0].value == 100


def test_layout_follows_reinitialize(controller, model):
    model.reinitialize(SorobanConfig(rod_count=6))
    assert controller.layout.rod_count == 6
    assert controller.bead_at(*bead_xy(controller, BeadKey(5, BeadRole.HEAVY))) == BeadKey(5, BeadRole.HEAVY)


def test_push_onto_active_heavy_gives_eight(controller, model):
    model.set_value(500)
    key = BeadKey(0, BeadRole.LIGHT, 2)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    controller.pointer_move(x, y - 79)
    event = controller.pointer_up()
    assert event.digit == 8
    assert model.get_value() == 800
    assert validate_invariants(model) == []


def test_pointer_cancel_on_heavy(controller, model):
    key = BeadKey(1, BeadRole.HEAVY)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    controller.pointer_move(x, y + 30)
    event = controller.pointer_cancel()
    assert event == SnapEvent(1, BeadRole.HEAVY, 0, True, 5)
    assert model.get_bead(1, BeadRole.HEAVY).offset == 19.0
    assert not model.gesture_active
    assert controller.state is GestureState.IDLE


def test_failing_redraw_listener_releases_gesture(controller, model):
    key = BeadKey(0, BeadRole.LIGHT, 0)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    controller.pointer_move(x, y - 30)

    def broken_redraw(event):
        raise RuntimeError("redraw failed")

    unsubscribe = model.on("bead_move", broken_redraw)
    with pytest.raises(RuntimeError):
        controller.pointer_up()
    unsubscribe()

    assert controller.state is GestureState.IDLE
    assert not model.gesture_active
    assert not model.get_bead(0, BeadRole.LIGHT, 0).dragging
    assert [b.active for b in model.rod(0).lights] == [True, False, False, False]

    other = BeadKey(2, BeadRole.HEAVY)
    assert controller.pointer_down(*bead_xy(controller, other)) == other
    controller.pointer_up()
    model.set_value(1)
    assert model.get_value() == 1


def test_bulk_update_refused_while_snapping(controller, model):
    seen = []

    def rewrite_on_change(event):
        seen.append(controller.state)
        with pytest.raises(GestureInProgressError):
            model.set_value(99)

    model.on("change", rewrite_on_change)
    key = BeadKey(2, BeadRole.LIGHT, 0)
    x, y = bead_xy(controller, key)
    controller.pointer_down(x, y)
    controller.pointer_move(x, y - 36)
    event = controller.pointer_up()

    assert seen == [GestureState.SNAPPING]
    assert event.digit == model.get_digit(2) == 1
    assert model.get_value() == 1
    assert not model.gesture_active

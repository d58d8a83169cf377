#!/usr/bin/env python3
"""Tests for easing functions and BeadAnimator."""

import pytest

from soroban_animation import EASING, BeadAnimator
from soroban_config import SorobanConfig
from soroban_models import BeadKey, BeadRole, RangeError
from soroban_state import BeadModel

HEAVY_1 = BeadKey(1, BeadRole.HEAVY)


@pytest.fixture
def model():
    return BeadModel(SorobanConfig(rod_count=2))


@pytest.mark.parametrize("name", sorted(EASING))
def test_easing_endpoints(name):
    ease = EASING[name]
    assert ease(0.0) == pytest.approx(0.0, abs=1e-9)
    assert ease(1.0) == pytest.approx(1.0, abs=1e-9)


def test_easing_monotonic_families():
    for name in ("linear", "ease_in_quad", "ease_out_cubic", "ease_in_out_quart"):
        samples = [EASING[name](i / 20) for i in range(21)]
        assert samples == sorted(samples)


def test_model_updates_before_animation(model):
    animator = BeadAnimator(model, duration_ms=100, easing="linear")
    animator.animate_to(5)
    assert model.get_value() == 5
    assert animator.running
    # display still shows the old position
    assert animator.display_offsets()[HEAVY_1] == 55.0


def test_linear_halfway(model):
    animator = BeadAnimator(model, duration_ms=100, easing="linear")
    animator.animate_to(5)
    offsets = animator.advance(50)
    assert offsets[HEAVY_1] == pytest.approx(37.0)
    # beads that do not move stay put
    assert offsets[BeadKey(0, BeadRole.HEAVY)] == pytest.approx(55.0)


def test_finishes_on_model_offsets(model):
    animator = BeadAnimator(model, duration_ms=100)
    animator.animate_to(99)
    for _ in range(10):
        offsets = animator.advance(16)
    assert not animator.running
    expected = {k: s.offset for k, s in model.snapshot().items()}
    assert offsets == expected


def test_cancel_falls_back_to_model(model):
    animator = BeadAnimator(model, duration_ms=100)
    animator.animate_to(7)
    animator.advance(20)
    animator.cancel()
    assert not animator.running
    assert animator.display_offsets()[HEAVY_1] == model.get_bead(1, BeadRole.HEAVY).offset


def test_new_target_starts_from_drawn_position(model):
    animator = BeadAnimator(model, duration_ms=100, easing="linear")
    animator.animate_to(5)
    animator.advance(50)
    animator.animate_to(0)
    assert model.get_value() == 0
    assert animator.display_offsets()[HEAVY_1] == pytest.approx(37.0)
    assert animator.advance(100)[HEAVY_1] == 55.0


def test_out_of_range_leaves_everything(model):
    animator = BeadAnimator(model, duration_ms=100)
    model.set_value(12)
    with pytest.raises(RangeError):
        animator.animate_to(100)
    assert model.get_value() == 12
    assert not animator.running


def test_zero_duration_jumps(model):
    animator = BeadAnimator(model, duration_ms=0)
    animator.animate_clear()
    assert animator.display_offsets()[HEAVY_1] == 55.0
    animator.advance(0)
    assert not animator.running

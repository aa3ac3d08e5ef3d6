import math

import pytest

from areameasure_core.calibration import (
    UNCALIBRATED,
    CalibrationEngine,
    CalibrationOutcome,
    CalibrationSnapshot,
    CalibrationState,
    ScriptedPrompt,
)
from areameasure_core.shapes import Shape, ShapeKind


def _segment(length):
    return Shape(ShapeKind.SEGMENT, [(0, 0), (length, 0)], finished=True)


def test_segment_etalon_sets_meters_per_pixel():
    prompt = ScriptedPrompt([5.0])
    result = CalibrationEngine().calibrate(_segment(100), prompt)
    assert result.applied
    assert result.state.meters_per_pixel_original == pytest.approx(0.05)
    assert result.state.snapshot().real_length(40) == pytest.approx(2.0)


def test_prompt_is_asked_once_with_length_text():
    prompt = ScriptedPrompt([5.0])
    CalibrationEngine().calibrate(_segment(100), prompt)
    assert prompt.calls == ["Enter the etalon length (m):"]


def test_area_etalon_goes_through_square_roots():
    square = Shape(ShapeKind.RECTANGLE, [(0, 0), (10, 10)], finished=True)
    prompt = ScriptedPrompt([4.0])
    result = CalibrationEngine().calibrate(square, prompt)
    assert prompt.calls == ["Enter the etalon area (m²):"]
    assert result.state.meters_per_pixel_original == pytest.approx(0.2)
    assert result.state.etalon_real_linear == pytest.approx(2.0)
    assert result.state.snapshot().real_area(100) == pytest.approx(4.0)


def test_cancel_leaves_calibration_unset():
    result = CalibrationEngine().calibrate(_segment(100), ScriptedPrompt([None]))
    assert result.outcome is CalibrationOutcome.CANCELLED
    assert result.state == UNCALIBRATED
    assert not result.state.is_calibrated


@pytest.mark.parametrize("answer", [0.0, -1.0, 0.0001, 2e9, math.nan, math.inf])
def test_out_of_range_answers_are_rejected(answer):
    result = CalibrationEngine().calibrate(_segment(100), ScriptedPrompt([answer]))
    assert result.outcome is CalibrationOutcome.INVALID_INPUT
    assert result.state.meters_per_pixel_original == 0.0


def test_zero_length_etalon_is_degenerate():
    shape = Shape(ShapeKind.SEGMENT, [(5, 5), (5, 5)], finished=True)
    result = CalibrationEngine().from_real_size(shape, 1.0)
    assert result.outcome is CalibrationOutcome.DEGENERATE_EXTENT
    assert result.state == UNCALIBRATED


def test_self_intersecting_etalon_is_rejected():
    bowtie = Shape(ShapeKind.POLYGON, [(0, 0), (10, 10), (10, 0), (0, 10)], finished=True)
    result = CalibrationEngine().from_real_size(bowtie, 1.0)
    assert result.outcome is CalibrationOutcome.SELF_INTERSECTING
    assert result.state.meters_per_pixel_original == 0.0


def test_recalibrate_keeps_real_size():
    state = CalibrationState(0.05, 5.0)
    result = CalibrationEngine().recalibrate(_segment(50), state)
    assert result.applied
    assert result.state.meters_per_pixel_original == pytest.approx(0.1)
    assert result.state.etalon_real_linear == 5.0


def test_recalibrate_with_broken_etalon_zeroes_factor():
    state = CalibrationState(0.05, 5.0)
    bowtie = Shape(ShapeKind.POLYGON, [(0, 0), (10, 10), (10, 0), (0, 10)], finished=True)
    result = CalibrationEngine().recalibrate(bowtie, state)
    assert not result.applied
    assert result.state.meters_per_pixel_original == 0.0
    assert result.state.etalon_real_linear == 5.0


def test_effective_factor_divides_by_scale():
    snap = CalibrationSnapshot(0.05, 2.0)
    assert snap.effective_meters_per_pixel == pytest.approx(0.025)
    assert snap.real_length(40) == pytest.approx(2.0)


def test_scripted_prompt_runs_dry():
    prompt = ScriptedPrompt()
    assert prompt("text", 1.0, 0.001, 10.0, 3) is None
    prompt.push(2.5)
    assert prompt("text", 1.0, 0.001, 10.0, 3) == 2.5

import pytest

from areameasure_core.display import DisplayScale
from areameasure_core.errors import ContractViolation


def test_default_scale_is_one():
    scale = DisplayScale()
    assert scale.value == 1.0


def test_zoom_steps_through_the_list():
    scale = DisplayScale()
    assert scale.zoomed_in().value == 1.25
    assert scale.zoomed_out().value == 0.75


def test_zoom_clamps_at_the_ends():
    smallest = DisplayScale.from_list([0.5, 1.0], 0.5)
    assert not smallest.can_zoom_out()
    assert smallest.zoomed_out() == smallest
    largest = smallest.zoomed_in()
    assert not largest.can_zoom_in()
    assert largest.zoomed_in().value == 1.0


def test_from_list_picks_nearest_step():
    assert DisplayScale.from_list([0.5, 1.0, 2.0], 0.9).value == 1.0


def test_fitting_picks_largest_step_that_fits():
    scale = DisplayScale().fitting((2000, 1000), (800, 600))
    assert scale.value == 0.333


def test_fitting_small_image_keeps_largest_step():
    scale = DisplayScale().fitting((10, 10), (800, 600))
    assert scale.value == 8.0


def test_coordinate_mapping_round_trips():
    scale = DisplayScale().zoomed_in()
    assert scale.to_display((8, 4)) == (10.0, 5.0)
    assert scale.to_original((10, 5)) == pytest.approx((8.0, 4.0))


def test_index_out_of_range_is_a_contract_violation():
    with pytest.raises(ContractViolation):
        DisplayScale(index=99)

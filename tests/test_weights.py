"""
Weight tests — job weight and shipping box counts.
"""

import pytest

from print_pricing.weights import (
    PAPER_WEIGHTS, MAX_BOX_WEIGHT_LBS,
    paper_weight, sq_in_from_dimensions, weight_from_dimensions, boxes_for_weight,
)
from print_pricing.config import settings


def test_weight_from_dimensions():
    assert weight_from_dimensions(0.0035, 4, 6, 1000) == pytest.approx(84.0)


def test_weight_falls_back_to_default():
    expected = round(settings.DEFAULT_PAPER_WEIGHT_PER_SQ_IN * 24 * 1000, 2)
    assert weight_from_dimensions(None, 4, 6, 1000) == pytest.approx(expected)
    assert weight_from_dimensions(0, 4, 6, 1000) == pytest.approx(expected)


def test_weight_scales_with_quantity():
    one = weight_from_dimensions(0.0025, 8.5, 11, 1000)
    five = weight_from_dimensions(0.0025, 8.5, 11, 5000)
    assert five == pytest.approx(one * 5, abs=0.05)


def test_paper_weight_lookup():
    assert paper_weight("14pt_c2s_cardstock") == PAPER_WEIGHTS["14pt_c2s_cardstock"]
    assert paper_weight("mystery_stock") == settings.DEFAULT_PAPER_WEIGHT_PER_SQ_IN


def test_sq_in_from_dimensions():
    assert sq_in_from_dimensions(8.5, 11) == 93.5


@pytest.mark.parametrize("weight, boxes", [
    (0, 1),
    (10.0, 1),
    (MAX_BOX_WEIGHT_LBS, 1),
    (36.01, 2),
    (72.0, 2),
    (100.0, 3),
])
def test_boxes_for_weight(weight, boxes):
    assert boxes_for_weight(weight) == boxes

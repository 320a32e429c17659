"""
Star rating thresholds and config selection.
"""

import pytest

from producthub.models.capacity import EffortRatingConfig
from producthub.services.effort_rating import select_config, star_rating

THRESHOLDS = (5, 10, 20, 40)


@pytest.mark.parametrize("total,expected", [
    (1, 1), (5, 1),
    (6, 2), (10, 2),
    (11, 3), (20, 3),
    (21, 4), (40, 4),
    (41, 5), (1000, 5),
])
def test_star_rating_boundaries(total, expected):
    assert star_rating(total, THRESHOLDS) == expected


def test_equal_thresholds_skip_stars():
    assert star_rating(5, (5, 5, 5, 5)) == 1
    assert star_rating(6, (5, 5, 5, 5)) == 5


def _config(unit):
    return EffortRatingConfig(unit_type=unit, star1_max=1, star2_max=2, star3_max=3, star4_max=4)


def test_select_config_prefers_matching_unit():
    days, points = _config("days"), _config("points")
    assert select_config([days, points], "points") is points


def test_select_config_falls_back_to_first():
    days = _config("days")
    assert select_config([days, _config("points")], "weeks") is days


def test_select_config_without_configs():
    assert select_config([], "days") is None

"""
Payload coercion helpers.
"""

import pytest

from producthub.core.exceptions import ValidationError
from producthub.utils.helpers import parse_int


@pytest.mark.parametrize("value", [2.9, True, "2.5", "two", []])
def test_parse_int_rejects_non_integers(value):
    with pytest.raises(ValidationError):
        parse_int(value, "effort_days")


@pytest.mark.parametrize("value, expected", [(2, 2), (2.0, 2), ("7", 7)])
def test_parse_int_accepts_integral_values(value, expected):
    assert parse_int(value, "effort_days") == expected


def test_parse_int_optional_and_bounds():
    assert parse_int(None, "reach", required=False) is None
    with pytest.raises(ValidationError):
        parse_int(None, "reach")
    with pytest.raises(ValidationError):
        parse_int(-1, "reach", minimum=0)

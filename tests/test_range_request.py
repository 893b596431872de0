import pytest

from dmroom.core.domain.values import MAX_RANGE_LIMIT, Direction, RangeRequest, RangeRequestWithUserId
from dmroom.core.errors import ValidationError


def test_defaults_to_newest_first_without_anchor():
    r = RangeRequest()
    assert r.anchor is None
    assert r.direction is Direction.before
    assert r.limit == 50


def test_limit_is_clamped_to_maximum():
    assert RangeRequest(limit=10_000).limit == MAX_RANGE_LIMIT


@pytest.mark.parametrize("limit", [0, -5])
def test_non_positive_limit_is_rejected(limit):
    with pytest.raises(ValidationError):
        RangeRequest(limit=limit)


def test_direction_accepts_plain_string():
    r = RangeRequestWithUserId(user_id=7, direction="after", anchor=3)
    assert r.direction is Direction.after
    assert r.user_id == 7

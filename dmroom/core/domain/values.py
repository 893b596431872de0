from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import ValidationError


# Sentinel for "no log": unset room watermark, nothing hidden by a member.
NO_LOG_ID = -1

DEFAULT_RANGE_LIMIT = 50
MAX_RANGE_LIMIT = 100


class Direction(str, Enum):
    # before: keys lower than the anchor, newest first
    before = "before"
    # after: keys greater than the anchor, oldest first
    after = "after"


@dataclass(frozen=True, slots=True, kw_only=True)
class RangeRequest:
    """Keyset page request.

    ``anchor`` is the last key seen on the previous page and is never part of
    the result. Without an anchor the most recent ``limit`` rows are returned.
    """

    anchor: int | None = None
    limit: int = DEFAULT_RANGE_LIMIT
    direction: Direction = Direction.before

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValidationError("Range limit must be positive")
        if self.limit > MAX_RANGE_LIMIT:
            object.__setattr__(self, "limit", MAX_RANGE_LIMIT)
        object.__setattr__(self, "direction", Direction(self.direction))


@dataclass(frozen=True, slots=True, kw_only=True)
class RangeRequestWithUserId(RangeRequest):
    user_id: int

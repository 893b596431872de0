from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ...core.domain.values import DEFAULT_RANGE_LIMIT, Direction, RangeRequestWithUserId


class RangeQuery(BaseModel):
    anchor: Optional[int] = None
    limit: int = Field(default=DEFAULT_RANGE_LIMIT, ge=1)
    direction: Direction = Direction.before

    def for_user(self, user_id: int) -> RangeRequestWithUserId:
        return RangeRequestWithUserId(anchor=self.anchor, limit=self.limit, direction=self.direction, user_id=user_id)


class RoomDTO(BaseModel):
    id: int
    start_inclusive_log_id: int


class RoomIdDTO(BaseModel):
    room_id: int


class RoomSummaryDTO(BaseModel):
    room_id: int
    counterpart_id: int
    counterpart_name: str
    last_log_id: int
    hide_log_id: int


class CounterpartDTO(BaseModel):
    counterpart_id: int


class MembershipDTO(BaseModel):
    is_member: bool


class LogDTO(BaseModel):
    id: int
    room_id: int
    member_id: int
    content: str
    date: int
    is_html: bool
    is_liked: bool


class PostLogInput(BaseModel):
    content: str = Field(min_length=1, max_length=4000)


class PostLogResult(BaseModel):
    id: int


class HideCursorInput(BaseModel):
    log_id: int = Field(ge=-1)


class LikeInput(BaseModel):
    liked: bool

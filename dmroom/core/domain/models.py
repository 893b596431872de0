from __future__ import annotations

from dataclasses import dataclass

from .values import NO_LOG_ID


def order_pair(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a <= b else (b, a)


@dataclass(slots=True)
class User:
    id: int
    display_name: str


@dataclass(slots=True)
class DirectMessageRoom:
    """Private conversation between exactly two users.

    ``start_inclusive_log_id`` is the lowest log id still considered live for
    the room, or ``NO_LOG_ID`` when no watermark is set.
    """
    id: int
    start_inclusive_log_id: int = NO_LOG_ID


@dataclass(slots=True)
class DirectMessageLog:
    id: int
    room_id: int
    member_id: int
    content: str
    date: int
    is_html: bool = False
    is_liked: bool = False


@dataclass(slots=True)
class RoomSummary:
    room_id: int
    counterpart_id: int
    counterpart_name: str
    last_log_id: int
    hide_log_id: int

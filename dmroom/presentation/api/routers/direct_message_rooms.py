from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from ....application.dto.direct_messages import (
    CounterpartDTO,
    HideCursorInput,
    LogDTO,
    MembershipDTO,
    PostLogInput,
    PostLogResult,
    RangeQuery,
    RoomDTO,
    RoomIdDTO,
    RoomSummaryDTO,
)
from ....application.use_cases.logs import AppendLog, ListLogs, SetHideCursor
from ....application.use_cases.rooms import DeleteRoom, EnsureRoom, GetCounterpart, GetRoom, IsMember, ListRooms, ResolveRoom
from ....core.domain.models import User
from ....core.errors import NotFoundError, PermissionDenied, StorageError, ValidationError
from ....core.ports.repositories import LogRepository, MembershipRepository, RoomRepository, UnitOfWork, UserRepository
from ....core.ports.services import Clock, NotificationDispatcher
from ....infrastructure.config import get_settings
from ..deps.auth import get_current_user
from ..deps.containers import (
    get_clock,
    get_log_repo,
    get_membership_repo,
    get_notification_dispatcher,
    get_room_repo,
    get_unit_of_work,
    get_user_repo,
)

router = APIRouter(prefix="/api/v1/direct-message-rooms", tags=["direct-message-rooms"])


async def ensure_member(memberships: MembershipRepository, user_id: int, room_id: int) -> None:
    if not await IsMember(memberships).execute(user_id, room_id):
        raise PermissionDenied("Not a member of this room")


@router.get("", response_model=list[RoomSummaryDTO])
async def list_rooms(
    query: Annotated[RangeQuery, Query()],
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
):
    items = await ListRooms(memberships).execute(query.for_user(current.id))
    return [
        RoomSummaryDTO(
            room_id=r.room_id,
            counterpart_id=r.counterpart_id,
            counterpart_name=r.counterpart_name,
            last_log_id=r.last_log_id,
            hide_log_id=r.hide_log_id,
        )
        for r in items
    ]


@router.put("/counterparts/{counterpart_id}", response_model=RoomDTO)
async def ensure_room(
    counterpart_id: int,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rooms: RoomRepository = Depends(get_room_repo),
    logs: LogRepository = Depends(get_log_repo),
    users: UserRepository = Depends(get_user_repo),
    current: User = Depends(get_current_user),
) -> RoomDTO:
    if counterpart_id == current.id:
        raise ValidationError("Cannot open a conversation with yourself")
    if await users.get_by_id(counterpart_id) is None:
        raise NotFoundError("User not found")
    room = await EnsureRoom(uow, rooms, logs).execute(current.id, counterpart_id)
    if room is None:
        raise StorageError("Room could not be created")
    return RoomDTO(id=room.id, start_inclusive_log_id=room.start_inclusive_log_id)


@router.get("/counterparts/{counterpart_id}", response_model=RoomIdDTO)
async def resolve_room(
    counterpart_id: int,
    rooms: RoomRepository = Depends(get_room_repo),
    current: User = Depends(get_current_user),
) -> RoomIdDTO:
    room_id = await ResolveRoom(rooms).execute(current.id, counterpart_id)
    if room_id is None:
        raise NotFoundError("No conversation with this user")
    return RoomIdDTO(room_id=room_id)


@router.get("/{room_id}", response_model=RoomDTO)
async def get_room(
    room_id: int,
    rooms: RoomRepository = Depends(get_room_repo),
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> RoomDTO:
    await ensure_member(memberships, current.id, room_id)
    room = await GetRoom(rooms).execute(room_id)
    if room is None:
        raise NotFoundError("Room not found")
    return RoomDTO(id=room.id, start_inclusive_log_id=room.start_inclusive_log_id)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    room_id: int,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rooms: RoomRepository = Depends(get_room_repo),
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> Response:
    await ensure_member(memberships, current.id, room_id)
    if not await DeleteRoom(uow, rooms).execute(room_id):
        raise StorageError("Room could not be deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{room_id}/membership", response_model=MembershipDTO)
async def get_membership(
    room_id: int,
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> MembershipDTO:
    return MembershipDTO(is_member=await IsMember(memberships).execute(current.id, room_id))


@router.get("/{room_id}/counterpart", response_model=CounterpartDTO)
async def get_counterpart(
    room_id: int,
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> CounterpartDTO:
    await ensure_member(memberships, current.id, room_id)
    counterpart_id = await GetCounterpart(memberships).execute(current.id, room_id)
    if counterpart_id is None:
        raise NotFoundError("Counterpart not found")
    return CounterpartDTO(counterpart_id=counterpart_id)


@router.get("/{room_id}/logs", response_model=list[LogDTO])
async def list_logs(
    room_id: int,
    query: Annotated[RangeQuery, Query()],
    logs: LogRepository = Depends(get_log_repo),
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
):
    await ensure_member(memberships, current.id, room_id)
    items = await ListLogs(logs, memberships).execute(room_id, query.for_user(current.id))
    return [
        LogDTO(
            id=m.id,
            room_id=m.room_id,
            member_id=m.member_id,
            content=m.content,
            date=m.date,
            is_html=m.is_html,
            is_liked=m.is_liked,
        )
        for m in items
    ]


@router.post("/{room_id}/logs", response_model=PostLogResult, status_code=status.HTTP_201_CREATED)
async def append_log(
    room_id: int,
    data: PostLogInput,
    uow: UnitOfWork = Depends(get_unit_of_work),
    logs: LogRepository = Depends(get_log_repo),
    rooms: RoomRepository = Depends(get_room_repo),
    memberships: MembershipRepository = Depends(get_membership_repo),
    users: UserRepository = Depends(get_user_repo),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    clock: Clock = Depends(get_clock),
    current: User = Depends(get_current_user),
) -> PostLogResult:
    await ensure_member(memberships, current.id, room_id)
    use = AppendLog(uow, logs, rooms, memberships, users, dispatcher, clock, link_prefix=get_settings().NOTIFY_LINK_PREFIX)
    log_id = await use.execute(current.id, room_id, data.content)
    if log_id is None:
        raise StorageError("Message was not stored")
    return PostLogResult(id=log_id)


@router.put("/{room_id}/hide-cursor", status_code=status.HTTP_204_NO_CONTENT)
async def set_hide_cursor(
    room_id: int,
    data: HideCursorInput,
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> Response:
    await ensure_member(memberships, current.id, room_id)
    await SetHideCursor(memberships).execute(current.id, room_id, data.log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ....application.dto.direct_messages import LikeInput, LogDTO
from ....application.use_cases.logs import GetLog, ToggleLike
from ....core.domain.models import DirectMessageLog, User
from ....core.errors import NotFoundError
from ....core.ports.repositories import LogRepository, MembershipRepository
from ..deps.auth import get_current_user
from ..deps.containers import get_log_repo, get_membership_repo
from .direct_message_rooms import ensure_member

router = APIRouter(prefix="/api/v1/direct-message-logs", tags=["direct-message-logs"])


async def _visible_log(log_id: int, logs: LogRepository, memberships: MembershipRepository, user_id: int) -> DirectMessageLog:
    log = await GetLog(logs).execute(log_id)
    if log is None:
        raise NotFoundError("Message not found")
    await ensure_member(memberships, user_id, log.room_id)
    return log


@router.get("/{log_id}", response_model=LogDTO)
async def get_log(
    log_id: int,
    logs: LogRepository = Depends(get_log_repo),
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> LogDTO:
    m = await _visible_log(log_id, logs, memberships, current.id)
    return LogDTO(id=m.id, room_id=m.room_id, member_id=m.member_id, content=m.content, date=m.date, is_html=m.is_html, is_liked=m.is_liked)


@router.put("/{log_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def like_log(
    log_id: int,
    data: LikeInput,
    logs: LogRepository = Depends(get_log_repo),
    memberships: MembershipRepository = Depends(get_membership_repo),
    current: User = Depends(get_current_user),
) -> Response:
    await _visible_log(log_id, logs, memberships, current.id)
    await ToggleLike(logs).execute(log_id, data.liked)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

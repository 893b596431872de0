import pytest

from dmroom.application.use_cases.logs import ListLogs
from dmroom.core.domain.values import Direction, RangeRequestWithUserId


@pytest.fixture()
async def room_with_seven_logs(repos):
    room = await repos.ensure_room().execute(1, 2)
    ids = []
    for i in range(7):
        author = 1 if i % 2 == 0 else 2
        ids.append(await repos.append_log().execute(author, room.id, f"msg {i}"))
    return room, ids


async def _page(repos, room_id, **kwargs):
    items = await ListLogs(repos.logs, repos.memberships).execute(room_id, RangeRequestWithUserId(user_id=1, **kwargs))
    return [m.id for m in items]


@pytest.mark.asyncio
async def test_without_anchor_returns_most_recent_rows_newest_first(repos, room_with_seven_logs):
    room, ids = room_with_seven_logs
    assert await _page(repos, room.id, limit=3) == ids[::-1][:3]


@pytest.mark.asyncio
async def test_after_without_anchor_returns_most_recent_rows_oldest_first(repos, room_with_seven_logs):
    room, ids = room_with_seven_logs
    assert await _page(repos, room.id, limit=3, direction=Direction.after) == ids[-3:]


@pytest.mark.asyncio
async def test_backward_pages_concatenate_without_gaps_or_duplicates(repos, room_with_seven_logs):
    room, ids = room_with_seven_logs
    seen: list[int] = []
    anchor = None
    while True:
        page = await _page(repos, room.id, limit=3, anchor=anchor)
        if not page:
            break
        assert len(page) <= 3
        seen.extend(page)
        anchor = page[-1]
    assert seen == sorted(ids, reverse=True)


@pytest.mark.asyncio
async def test_forward_pages_concatenate_without_gaps_or_duplicates(repos, room_with_seven_logs):
    room, ids = room_with_seven_logs
    seen: list[int] = []
    anchor = ids[0] - 1
    while True:
        page = await _page(repos, room.id, limit=2, anchor=anchor, direction=Direction.after)
        if not page:
            break
        seen.extend(page)
        anchor = page[-1]
    assert seen == ids


@pytest.mark.asyncio
async def test_anchor_is_exclusive(repos, room_with_seven_logs):
    room, ids = room_with_seven_logs
    anchor = ids[3]
    assert anchor not in await _page(repos, room.id, anchor=anchor)
    assert anchor not in await _page(repos, room.id, anchor=anchor, direction=Direction.after)


@pytest.mark.asyncio
async def test_repeated_calls_are_identical(repos, room_with_seven_logs):
    room, ids = room_with_seven_logs
    first = await _page(repos, room.id, limit=4, anchor=ids[-1])
    second = await _page(repos, room.id, limit=4, anchor=ids[-1])
    assert first == second == ids[::-1][1:5]

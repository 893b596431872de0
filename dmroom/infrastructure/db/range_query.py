"""Keyset pagination shared by every list query.

Both helpers take a ``Select`` and return a new one. ``key`` must be a unique,
monotonic column (log id, room id) so that pages built from the last seen key
neither repeat nor skip rows.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select

from ...core.domain.values import Direction, RangeRequest


def add_where_condition(request: RangeRequest, stmt: Select[Any], key: Any, exclusive: bool = True) -> Select[Any]:
    if request.anchor is None:
        return stmt
    if request.direction is Direction.before:
        return stmt.where(key < request.anchor if exclusive else key <= request.anchor)
    return stmt.where(key > request.anchor if exclusive else key >= request.anchor)


def add_order_and_limit(request: RangeRequest, stmt: Select[Any], key: Any, key_label: str) -> Select[Any]:
    """Order by ``key`` in the request direction and cut at ``request.limit``.

    ``key_label`` is the name ``key`` is selected under; it is needed when
    the page has to be re-sorted from a subquery.
    """
    if request.direction is Direction.before:
        return stmt.order_by(key.desc()).limit(request.limit)
    if request.anchor is not None:
        return stmt.order_by(key.asc()).limit(request.limit)
    # no anchor: newest `limit` rows, returned oldest first
    newest = stmt.order_by(key.desc()).limit(request.limit).subquery()
    return select(newest).order_by(newest.c[key_label].asc())


def apply_range(request: RangeRequest, stmt: Select[Any], key: Any, key_label: str) -> Select[Any]:
    stmt = add_where_condition(request, stmt, key, exclusive=True)
    return add_order_and_limit(request, stmt, key, key_label)

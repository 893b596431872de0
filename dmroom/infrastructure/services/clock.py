from __future__ import annotations

from datetime import datetime, timezone

from ...core.ports.services import Clock


class SystemClock(Clock):
    def now(self) -> datetime:  # type: ignore[override]
        return datetime.now(tz=timezone.utc)

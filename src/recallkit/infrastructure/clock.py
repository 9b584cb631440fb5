"""Clock adapters."""

import time
from datetime import datetime

from recallkit.domain.constants import ONE_DAY_MS
from recallkit.domain.ports import Clock


class SystemClock(Clock):
    """Reads the wall clock."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class FixedClock(Clock):
    """
    A clock that only moves when told to.

    Used by tests and by callers that need a reproducible "now".
    """

    def __init__(self, now_ms: int | None = None):
        self._now_ms = int(time.time() * 1000) if now_ms is None else now_ms

    @classmethod
    def at(cls, moment: datetime) -> "FixedClock":
        """Build a clock frozen at ``moment`` (naive datetimes are local time)."""
        return cls(int(moment.timestamp() * 1000))

    def now_ms(self) -> int:
        return self._now_ms

    def set(self, now_ms: int) -> None:
        self._now_ms = now_ms

    def advance(self, days: float = 0, hours: float = 0, ms: int = 0) -> None:
        self._now_ms += int(days * ONE_DAY_MS + hours * 3_600_000) + ms

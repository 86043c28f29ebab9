from datetime import datetime

from memit.domain.ports import Clock


class SystemClock(Clock):
    """Wall-clock time in the local timezone."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

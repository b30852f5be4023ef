from datetime import UTC, date, datetime, time, timedelta, timezone


class SystemClock:
    """
    Wall clock for services.

    Shop opening hours are local to the marketplace (IST by default), while
    timestamps are stored in UTC.
    """

    def __init__(self, local_offset_minutes: int = 330) -> None:
        self._local_tz = timezone(timedelta(minutes=local_offset_minutes))

    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def today_utc(self) -> date:
        return self.now_utc().date()

    def local_time(self) -> time:
        return datetime.now(self._local_tz).time()


class FixedClock:
    """Deterministic clock for tests and CLI dry-runs."""

    def __init__(self, now: datetime, local: time | None = None) -> None:
        self._now = now
        self._local = local or now.time()

    def now_utc(self) -> datetime:
        return self._now

    def today_utc(self) -> date:
        return self._now.date()

    def local_time(self) -> time:
        return self._local

    def advance(self, delta: timedelta) -> None:
        self._now = self._now + delta

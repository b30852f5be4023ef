from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Protocol

from samankhojo.rules.models import RateLimitRules, RateLimitWindow


class TimePort(Protocol):
    """Protocol for time operations (enables testing with deterministic time)."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...


class SystemTimeAdapter:
    """Production time adapter using system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class RateLimiter:
    def __init__(
        self,
        rules: RateLimitRules,
        time_port: TimePort | None = None,
    ):
        self.rules = rules
        self._time = time_port if time_port is not None else SystemTimeAdapter()
        self._history: dict[str, list[datetime]] = {}
        self._lock = Lock()

    def _cleanup(self, key: str, window: int) -> None:
        cutoff = self._time.now() - timedelta(seconds=window)
        if key in self._history:
            self._history[key] = [t for t in self._history[key] if t > cutoff]
            if not self._history[key]:
                del self._history[key]

    def allow_request(self, key: str, window: int, limit: int) -> bool:
        """
        Check if request is allowed.
        If allowed, records the attempt and returns True.
        If denied, returns False.
        """
        if limit <= 0:
            return False

        with self._lock:
            self._cleanup(key, window)
            history = self._history.setdefault(key, [])
            if len(history) >= limit:
                return False
            history.append(self._time.now())
            return True

    def check(self, key: str, window: RateLimitWindow) -> bool:
        return self.allow_request(key, window.window_seconds, window.max_requests)

    def check_admin(self, user_id: str) -> bool:
        return self.check(f"admin:{user_id}", self.rules.admin)

    def check_admin_heavy(self, user_id: str) -> bool:
        return self.check(f"admin_heavy:{user_id}", self.rules.admin_heavy)

    def reset(self) -> None:
        with self._lock:
            self._history.clear()

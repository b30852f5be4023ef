"""
Festival expiry job.

Background thread that periodically deactivates festivals whose end date
has passed. Serving the active festival also expires stale ones, so the
job only keeps the table tidy between requests.

Key behaviors:
- Runs the sweep in-process on a fixed poll interval
- Failures are logged and the loop keeps going
- trigger_now() runs a sweep synchronously (CLI and tests)
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class ExpirySweepPort(Protocol):
    def deactivate_expired(self) -> int: ...


@dataclass(frozen=True)
class SweepResult:
    deactivated: int
    execution_time_ms: int
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class FestivalExpiryScheduler:
    """
    Festival expiry scheduler with background polling.

    Runs a daemon thread that calls deactivate_expired()
    at a configurable interval.
    """

    def __init__(
        self,
        sweeper: ExpirySweepPort,
        poll_interval_seconds: float = 300.0,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            sweeper: Service exposing deactivate_expired()
            poll_interval_seconds: Interval between sweeps
        """
        self._sweeper = sweeper
        self._poll_interval = poll_interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> None:
        """Start the background scheduler."""
        if self._running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()
        self._running = True
        logger.info("Festival expiry scheduler started (poll interval: %.1fs)", self._poll_interval)

    def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if not self._running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._running = False
        logger.info("Festival expiry scheduler stopped")

    def trigger_now(self) -> SweepResult:
        """Run one sweep immediately."""
        start_time = time.monotonic()
        try:
            count = self._sweeper.deactivate_expired()
        except Exception as e:
            elapsed_ms = int((time.monotonic() - start_time) * 1000)
            logger.exception("Festival expiry sweep failed")
            return SweepResult(deactivated=0, execution_time_ms=elapsed_ms, error=str(e))

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        return SweepResult(deactivated=count, execution_time_ms=elapsed_ms)

    @property
    def is_running(self) -> bool:
        return self._running

    def _poll_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._poll_interval):
            result = self.trigger_now()
            if result.deactivated > 0:
                logger.info("Expiry sweep deactivated %d festivals", result.deactivated)


def create_expiry_scheduler(
    sweeper: ExpirySweepPort,
    poll_interval_seconds: float = 300.0,
) -> FestivalExpiryScheduler:
    return FestivalExpiryScheduler(sweeper, poll_interval_seconds)

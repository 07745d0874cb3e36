"""Time source used by polling and credential expiry checks."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Wall clock plus an interruptible wait."""

    def now(self) -> datetime:
        """Current time, timezone aware (UTC)."""
        ...

    def monotonic(self) -> float:
        """Seconds from an arbitrary origin, for measuring elapsed time."""
        ...

    def wait(self, seconds: float, cancel: threading.Event | None = None) -> bool:
        """Block for ``seconds``.

        Returns:
            True if ``cancel`` was set before the wait finished.
        """
        ...


class SystemClock:
    """Clock backed by the real time of the process."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()

    def wait(self, seconds: float, cancel: threading.Event | None = None) -> bool:
        if cancel is None:
            time.sleep(seconds)
            return False
        return cancel.wait(seconds)

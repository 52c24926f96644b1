# Overview: Transient user-facing notification channel with delayed auto-clear.

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable


LEVEL_SUCCESS = "success"
LEVEL_ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    level: str
    posted_at: float

    def to_dict(self) -> dict:
        return {"message": self.message, "level": self.level}


class Notifier:
    """
    Holds the latest message. A newer message replaces the current one; a
    message expires ttl_seconds after it was posted. Expiry has no effect on
    ledger state.
    """

    def __init__(self, ttl_seconds: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._current: Notification | None = None
        self._lock = threading.Lock()

    def notify(self, message: str, level: str = LEVEL_SUCCESS) -> Notification:
        notification = Notification(message=message, level=level, posted_at=self._clock())
        with self._lock:
            self._current = notification
        return notification

    def error(self, message: str) -> Notification:
        return self.notify(message, LEVEL_ERROR)

    def current(self) -> Notification | None:
        with self._lock:
            notification = self._current
            if notification and self._clock() - notification.posted_at >= self.ttl_seconds:
                self._current = None
                return None
            return notification

    def clear(self) -> None:
        with self._lock:
            self._current = None

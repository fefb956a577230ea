from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FlushScheduler:
    """Debounce timer: every `touch()` restarts the countdown, bursts coalesce into one call.

    There is never more than one armed timer. An in-flight callback is not cancelled.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], object],
        *,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self._delay = float(delay)
        self._callback = callback
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def touch(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = self._timer_factory(self._delay, lambda: self._fire(timer))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, timer: threading.Timer) -> None:
        with self._lock:
            # a newer touch() may already have replaced this timer
            if self._timer is timer:
                self._timer = None
        try:
            self._callback()
        except Exception:
            logger.exception("Scheduled flush raised")

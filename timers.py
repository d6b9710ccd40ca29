"""
Timer scheduling for the navigation screen.

All callbacks run while holding EVENT_LOCK, the same lock request handlers
take before touching a controller, so controller state only ever changes
from one logical event thread.
"""
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

EVENT_LOCK = threading.RLock()


class TimerHandle:
    def cancel(self) -> None:
        raise NotImplementedError

    @property
    def active(self) -> bool:
        raise NotImplementedError


class Scheduler:
    """call_later / call_every with cancellable handles. Delays are seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class _ThreadTimer(TimerHandle):
    def __init__(self, delay: float, callback: Callable[[], None], lock: threading.RLock,
                 repeat: bool = False):
        self._delay = delay
        self._callback = callback
        self._lock = lock
        self._repeat = repeat
        self._cancelled = False
        self._fired = False
        self._timer: Optional[threading.Timer] = None
        self._arm()

    def _arm(self) -> None:
        self._timer = threading.Timer(self._delay, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            if self._repeat:
                self._arm()
            else:
                self._fired = True
            try:
                self._callback()
            except Exception:
                logger.exception("Timer callback failed")

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()

    @property
    def active(self) -> bool:
        return not self._cancelled and not self._fired


class ThreadingScheduler(Scheduler):
    def __init__(self, lock: threading.RLock = EVENT_LOCK):
        self.lock = lock

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return _ThreadTimer(delay, callback, self.lock)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        return _ThreadTimer(interval, callback, self.lock, repeat=True)

import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path for direct pytest runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from speech import SpeechEngine  # noqa: E402
from timers import Scheduler, TimerHandle  # noqa: E402


class _ManualHandle(TimerHandle):
    def __init__(self, when, callback, order, interval=None):
        self.when = when
        self.callback = callback
        self.order = order
        self.interval = interval
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self):
        return not self.cancelled and not self.fired


class ManualScheduler(Scheduler):
    """Virtual time: nothing fires until advance() is called."""

    def __init__(self):
        self.now = 0.0
        self._handles = []
        self._order = 0

    def _add(self, delay, callback, interval=None):
        self._order += 1
        handle = _ManualHandle(self.now + delay, callback, self._order, interval)
        self._handles.append(handle)
        return handle

    def call_later(self, delay, callback):
        return self._add(delay, callback)

    def call_every(self, interval, callback):
        return self._add(interval, callback, interval)

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self._handles if h.active and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.order))
            self.now = handle.when
            if handle.interval is not None:
                handle.when += handle.interval
            else:
                handle.fired = True
            handle.callback()
        self.now = target

    @property
    def pending(self):
        return [h for h in self._handles if h.active]


class RecordingSpeechEngine(SpeechEngine):
    def __init__(self):
        self.events = []
        self.current = None

    def speak(self, utterance):
        self.events.append(("speak", utterance))
        self.current = utterance

    def cancel(self):
        self.events.append(("cancel", None))
        self.current = None

    @property
    def spoken(self):
        return [u for kind, u in self.events if kind == "speak"]


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def speech_engine():
    return RecordingSpeechEngine()


@pytest.fixture
def clock():
    return FakeClock()

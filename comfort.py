"""
Comfort-Phrase Scheduler: a reassurance sentence every interval during guided navigation.
"""
import logging
import random
from typing import Optional, Sequence

import config
import local_database as local_db
from speech import SpeechAnnouncer
from timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class ComfortPhraseScheduler:
    def __init__(self, announcer: SpeechAnnouncer, scheduler: Scheduler,
                 phrases: Sequence[str] = tuple(local_db.COMFORT_PHRASES),
                 interval_s: float = config.COMFORT_INTERVAL_S,
                 display_s: float = config.COMFORT_DISPLAY_S,
                 rng: Optional[random.Random] = None):
        if not phrases:
            raise ValueError("ComfortPhraseScheduler needs at least one phrase")
        self.announcer = announcer
        self.scheduler = scheduler
        self.phrases = list(phrases)
        self.interval_s = interval_s
        self.display_s = display_s
        self.rng = rng or random.Random()

        self.displayed: Optional[str] = None
        self.spoken_count = 0
        self._tick: Optional[TimerHandle] = None
        self._clear: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._tick is not None

    def start(self) -> None:
        # Restart from zero rather than stacking a second interval
        self.stop()
        self._tick = self.scheduler.call_every(self.interval_s, self._on_tick)

    def stop(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None
        self._cancel_clear()
        self.displayed = None

    def _on_tick(self) -> None:
        phrase = self.rng.choice(self.phrases)
        self.spoken_count += 1
        self.displayed = phrase
        self.announcer.say(phrase)
        self._cancel_clear()
        self._clear = self.scheduler.call_later(self.display_s, self._clear_display)
        logger.debug("Comfort phrase #%d: %s", self.spoken_count, phrase)

    def _clear_display(self) -> None:
        self.displayed = None
        self._clear = None

    def _cancel_clear(self) -> None:
        if self._clear is not None:
            self._clear.cancel()
            self._clear = None

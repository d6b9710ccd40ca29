"""
Speech output for guided navigation: one utterance at a time.
"""
import logging
import re
import threading
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SPEECH_LANG = "pt-BR"
SPEECH_PITCH = 1.1
# Brazilian Portuguese TTS voices run close to 3 words per second at rate 1.0
WORDS_PER_SECOND = 3.0
MAX_UTTERANCE_CHARS = 500


def sanitize_tts_text(text: str) -> str:
    """Remove control chars and limit length for safe TTS."""
    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", text or "")
    text = re.sub(r"\s+", " ", text).strip()
    return text[:MAX_UTTERANCE_CHARS]


@dataclass(frozen=True)
class Utterance:
    seq: int
    text: str
    rate: float
    lang: str = SPEECH_LANG
    pitch: float = SPEECH_PITCH

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SpeechEngine:
    """The device voice. `speak` never queues: callers cancel first."""

    def speak(self, utterance: Utterance) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError


class ClientSpeechEngine(SpeechEngine):
    """
    Speech played by the browser.

    Holds the single utterance the client should be voicing. The client polls,
    speaks any sequence number it has not spoken yet, and calls
    speechSynthesis.cancel() when `current` goes back to None.
    """

    def __init__(self):
        self.current: Optional[Utterance] = None
        self._lock = threading.Lock()

    def speak(self, utterance: Utterance) -> None:
        with self._lock:
            self.current = utterance

    def cancel(self) -> None:
        with self._lock:
            self.current = None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self.current.to_dict() if self.current else None


class SpeechAnnouncer:
    def __init__(self, engine: SpeechEngine):
        self.engine = engine
        self._seq = 0

    def say(self, text: str, rate: float = 1.0) -> Optional[Utterance]:
        text = sanitize_tts_text(text)
        if not text:
            return None
        # Cancel first so rapid triggers never pile up in the engine
        self.engine.cancel()
        self._seq += 1
        utterance = Utterance(seq=self._seq, text=text, rate=rate)
        self.engine.speak(utterance)
        logger.debug("Speaking #%d at rate %.2f: %s", utterance.seq, rate, text)
        return utterance

    def cancel_all(self) -> None:
        self.engine.cancel()

    @staticmethod
    def estimate_duration(text: str, rate: float = 1.0) -> float:
        """Approximate seconds to voice `text`. Not a completion signal."""
        words = len(sanitize_tts_text(text).split())
        if not words:
            return 0.0
        return round(words / (WORDS_PER_SECOND * max(rate, 0.1)) + 0.5, 2)

"""
Uploaded cry clips: decode with librosa before anything is sent to the AI.
"""
import logging
import os
import tempfile
from dataclasses import dataclass

import librosa
import numpy as np

import config

logger = logging.getLogger(__name__)

MIME_SUFFIXES = {
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


class ClipError(ValueError):
    """The upload is not usable audio."""


@dataclass
class ClipInfo:
    duration_s: float
    rms: float


def inspect_clip(audio_bytes: bytes, mime_type: str) -> ClipInfo:
    """
    Load the first seconds of the clip and measure it.

    Raises ClipError for empty or undecodable audio.
    """
    if not audio_bytes:
        raise ClipError("Empty audio upload")

    suffix = MIME_SUFFIXES.get(mime_type.split(";")[0].strip().lower(), ".webm")
    fd, path = tempfile.mkstemp(prefix="cry_", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(audio_bytes)
        try:
            y, sr = librosa.load(path, sr=config.CLIP_SAMPLE_RATE, duration=config.CLIP_SECONDS)
        except Exception as e:
            logger.info("Could not decode %s clip: %s", mime_type, e)
            raise ClipError("Error reading audio file. Please send a valid audio recording.") from e
    finally:
        try:
            os.remove(path)
        except OSError as cleanup_error:
            logger.debug("Temp clip cleanup failed: %s", cleanup_error)

    if y.size == 0:
        raise ClipError("Audio clip has no samples")

    info = ClipInfo(
        duration_s=float(librosa.get_duration(y=y, sr=sr)),
        rms=float(np.sqrt(np.mean(np.square(y)))),
    )
    logger.debug("Clip: %.2fs, rms %.4f", info.duration_s, info.rms)
    return info

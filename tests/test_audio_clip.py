import io
import wave

import numpy as np
import pytest

from audio_clip import ClipError, inspect_clip


def make_wav(seconds=1.0, sr=22050, freq=440.0):
    t = np.linspace(0, seconds, int(sr * seconds), endpoint=False)
    samples = (0.5 * np.sin(2 * np.pi * freq * t) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(sr)
        w.writeframes(samples.tobytes())
    return buf.getvalue()


def test_inspect_wav_clip():
    info = inspect_clip(make_wav(1.0), "audio/wav")
    assert info.duration_s == pytest.approx(1.0, abs=0.05)
    assert info.rms > 0.1


def test_only_the_first_seconds_are_loaded():
    info = inspect_clip(make_wav(7.0), "audio/wav")
    assert info.duration_s == pytest.approx(5.0, abs=0.05)


def test_empty_upload_rejected():
    with pytest.raises(ClipError):
        inspect_clip(b"", "audio/webm")


def test_garbage_upload_rejected():
    with pytest.raises(ClipError):
        inspect_clip(b"definitely not audio" * 10, "audio/wav")

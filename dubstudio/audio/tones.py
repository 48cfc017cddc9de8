"""
Fallback tones for mock synthesis.

Mock synthesis returns no audio bytes; players substitute a short beep so
the preview is still audible.
"""

from __future__ import annotations

import numpy as np

from dubstudio.audio.buffer import SampleBuffer
from dubstudio.audio.wav import encode_wav


def generate_tone(
    duration: float = 0.5,
    sample_rate: int = 24000,
    frequency: float = 440.0,
    amplitude: float = 0.3,
    fade: float = 0.01,
) -> SampleBuffer:
    """Generate a mono sine tone with short linear fades at both ends."""
    num_samples = int(duration * sample_rate)
    t = np.arange(num_samples, dtype=np.float32) / sample_rate
    audio = amplitude * np.sin(2 * np.pi * frequency * t)

    # Fades avoid clicks at the edges
    fade_samples = min(int(fade * sample_rate), num_samples // 2)
    if fade_samples > 0:
        ramp = np.linspace(0.0, 1.0, fade_samples, dtype=np.float32)
        audio[:fade_samples] *= ramp
        audio[-fade_samples:] *= ramp[::-1]

    return SampleBuffer(channels=audio.astype(np.float32), sample_rate=sample_rate)


def fallback_tone(duration: float = 0.5, sample_rate: int = 24000) -> bytes:
    """WAV bytes of the beep used in place of mock synthesis output."""
    return encode_wav(generate_tone(duration=duration, sample_rate=sample_rate))

"""
SampleBuffer - Channel-separated float PCM.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class SampleBuffer:
    """Decoded audio, one row per channel.

    Samples are float32, nominally in [-1, 1]. Values outside that range
    are kept as-is and clamped by the encoder.

    Attributes:
        channels: Array of shape (num_channels, num_frames)
        sample_rate: Sample rate in Hz
    """
    channels: np.ndarray
    sample_rate: int

    def __post_init__(self):
        data = np.asarray(self.channels, dtype=np.float32)
        if data.ndim == 1:
            data = data[np.newaxis, :]
        if data.ndim != 2:
            raise ValueError(f"Expected (channels, frames) array, got shape {data.shape}")
        if self.sample_rate <= 0:
            raise ValueError(f"Invalid sample rate: {self.sample_rate}")
        self.channels = data
        self.sample_rate = int(self.sample_rate)

    @property
    def num_channels(self) -> int:
        return self.channels.shape[0]

    @property
    def num_frames(self) -> int:
        return self.channels.shape[1]

    @property
    def duration_seconds(self) -> float:
        return self.num_frames / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        return self.channels[index]

    @classmethod
    def from_interleaved(
        cls,
        samples: np.ndarray,
        num_channels: int,
        sample_rate: int,
    ) -> "SampleBuffer":
        """Build a buffer from frame-interleaved samples (L R L R ...)."""
        samples = np.asarray(samples, dtype=np.float32)
        if num_channels <= 0:
            raise ValueError(f"Invalid channel count: {num_channels}")
        frames = len(samples) // num_channels
        data = samples[:frames * num_channels].reshape(frames, num_channels).T
        return cls(channels=np.ascontiguousarray(data), sample_rate=sample_rate)

    @classmethod
    def silence(cls, num_frames: int, sample_rate: int, num_channels: int = 1) -> "SampleBuffer":
        return cls(
            channels=np.zeros((num_channels, num_frames), dtype=np.float32),
            sample_rate=sample_rate,
        )

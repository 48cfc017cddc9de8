"""
Shared fixtures for DubStudio tests.

Provides:
    - WAV media generation (soundfile)
    - Analysis results with known segment layouts
    - A recording voice backend with failure injection
"""

from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass, field

import numpy as np
import pytest
import soundfile as sf

from dubstudio.errors import RegistrationError, SynthesisError
from dubstudio.models import AnalysisResult, Segment, Speaker, VideoMetadata
from dubstudio.voices.base import AudioResource, BaseVoiceBackend


def make_wav_bytes(
    duration: float = 2.0,
    sample_rate: int = 8000,
    channels: int = 1,
    frequency: float = 220.0,
) -> bytes:
    """Float WAV media so decoded samples match the generated ones exactly."""
    num_samples = int(duration * sample_rate)
    t = np.arange(num_samples, dtype=np.float32) / sample_rate
    tone = (0.5 * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
    if channels == 1:
        data = tone
    else:
        data = np.stack([tone * (c + 1) / channels for c in range(channels)], axis=1)

    buffer = io.BytesIO()
    sf.write(buffer, data, sample_rate, format="WAV", subtype="FLOAT")
    return buffer.getvalue()


@dataclass
class RecordingVoiceBackend(BaseVoiceBackend):
    """Voice backend that records calls and can fail on demand.

    Each successful register() returns a fresh id: voice_<speaker>_<n>.
    """

    fail_register_for: set[str] = field(default_factory=set)
    fail_synthesize: bool = False
    delay: float = 0.0
    register_calls: list[tuple[str, bytes]] = field(default_factory=list)
    synthesize_calls: list[tuple[str, str]] = field(default_factory=list)
    _counter: int = 0

    @property
    def name(self) -> str:
        return "recording"

    async def register(self, speaker_id: str, audio: bytes) -> str:
        self.register_calls.append((speaker_id, audio))
        if self.delay:
            await asyncio.sleep(self.delay)
        if speaker_id in self.fail_register_for:
            raise RegistrationError(speaker_id, "Injected failure", status_code=500)
        self._counter += 1
        return f"voice_{speaker_id}_{self._counter}"

    async def synthesize(self, text: str, voice_id: str) -> AudioResource:
        self.synthesize_calls.append((text, voice_id))
        if self.fail_synthesize:
            raise SynthesisError(voice_id, "Injected failure", status_code=500)
        return AudioResource(data=f"{voice_id}:{text}".encode(), content_type="audio/mpeg")

    @property
    def registered_speakers(self) -> list[str]:
        return [speaker_id for speaker_id, _ in self.register_calls]


def make_analysis(layout: dict[str, list[tuple[float, float]]]) -> AnalysisResult:
    """Build an analysis from {speaker_id: [(start, end), ...]}.

    Segments are interleaved in transcript order by start time.
    """
    speakers = [Speaker(id=sid, name=f"Speaker {sid}") for sid in layout]
    segments = []
    for sid, windows in layout.items():
        for i, (start, end) in enumerate(windows):
            segments.append(Segment(
                id=f"{sid}_{i}",
                speaker_id=sid,
                start_time=start,
                end_time=end,
                text=f"line {i} from {sid}",
            ))
    segments.sort(key=lambda s: s.start_time)
    return AnalysisResult(
        metadata=VideoMetadata(total_duration=5.0, detected_language="en"),
        speakers=speakers,
        segments=segments,
    )


@pytest.fixture
def wav_media() -> bytes:
    """5 seconds of mono 8 kHz tone."""
    return make_wav_bytes(duration=5.0, sample_rate=8000)


@pytest.fixture
def backend() -> RecordingVoiceBackend:
    return RecordingVoiceBackend()


@pytest.fixture
def analysis_payload() -> dict:
    return {
        "metadata": {"total_duration": 12.5, "detected_language": "en"},
        "speakers": [
            {"id": "spk_1", "name": "Host", "voice_tone": "warm, low"},
            {"id": "spk_2", "name": "Guest", "voice_tone": "bright"},
        ],
        "segments": [
            {"id": "seg_1", "speaker_id": "spk_1", "start_time": 0.0, "end_time": 2.5, "text": "Welcome back."},
            {"id": "seg_2", "speaker_id": "spk_2", "start_time": 2.5, "end_time": 6.0, "text": "Thanks for having me."},
            {"id": "seg_3", "speaker_id": "spk_1", "start_time": 6.0, "end_time": 12.5, "text": "Let's get started."},
        ],
    }

"""
Voice Backend Base - Cloning/synthesis protocol.

All backends implement two coroutines:

    register(speaker_id, audio) -> voice_id
    synthesize(text, voice_id)  -> AudioResource

BACKEND CONTRACT:
    Backends MUST:
        - Return the service-issued identifier from register()
        - Raise RegistrationError / SynthesisError on failure
        - Leave speaker -> voice bookkeeping to VoiceRegistry

    Backends MUST NOT:
        - Extract or encode audio (they receive a finished WAV blob)
        - Retry failed calls
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

VoiceHandle = str

MOCK_HANDLE_PREFIX = "mock_"


def is_mock_handle(voice_id: VoiceHandle) -> bool:
    return voice_id.startswith(MOCK_HANDLE_PREFIX)


@dataclass(frozen=True)
class AudioResource:
    """Playable synthesis output.

    Mock resources carry no bytes; players substitute a local tone
    (see dubstudio.audio.fallback_tone).
    """
    data: bytes | None
    content_type: str = "audio/mpeg"
    is_mock: bool = False

    @classmethod
    def mock(cls) -> "AudioResource":
        return cls(data=None, content_type="", is_mock=True)

    @property
    def size(self) -> int:
        return len(self.data) if self.data else 0

    def save(self, path: Path | str) -> Path:
        """Write the audio bytes to disk.

        Raises:
            ValueError: For mock resources, which have no bytes
        """
        if self.data is None:
            raise ValueError("Mock audio resource has no data to save")
        path = Path(path)
        path.write_bytes(self.data)
        return path


@runtime_checkable
class VoiceBackend(Protocol):
    """Protocol for voice cloning backends."""

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'mock', 'minimax')."""
        ...

    async def register(self, speaker_id: str, audio: bytes) -> VoiceHandle:
        """Upload a reference WAV and return the issued voice id."""
        ...

    async def synthesize(self, text: str, voice_id: VoiceHandle) -> AudioResource:
        """Speak text in a registered voice."""
        ...


class BaseVoiceBackend(ABC):
    """Base class for voice backends with common functionality."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    def is_mock(self) -> bool:
        return False

    @abstractmethod
    async def register(self, speaker_id: str, audio: bytes) -> VoiceHandle:
        ...

    @abstractmethod
    async def synthesize(self, text: str, voice_id: VoiceHandle) -> AudioResource:
        ...

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""

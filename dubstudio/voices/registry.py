"""
Voice Registry - Speaker -> voice handle store in front of one backend.

The registry is an owned object, not module state: each session (or test)
builds its own and hands it to the orchestrator.

Usage:
    registry = VoiceRegistry(MockVoiceBackend())
    await registry.register("spk_1", wav_bytes)
    audio = await registry.synthesize("New line", "spk_1")
"""

from __future__ import annotations

import logging
from typing import Callable

from dubstudio.errors import SynthesisError, UnknownSpeakerError
from dubstudio.voices.base import (
    AudioResource,
    VoiceBackend,
    VoiceHandle,
    is_mock_handle,
)
from dubstudio.voices.mock import MockVoiceBackend

logger = logging.getLogger(__name__)


class VoiceRegistry:
    """Maps speaker ids to the voice handle issued by the backend.

    At most one handle is live per speaker; registering again overwrites
    the previous handle.

    Example:
        registry = VoiceRegistry(load_voice_backend(Config.from_env()))
        handle = await registry.register("spk_2", blob)
        assert registry.get_voice_id("spk_2") == handle
    """

    def __init__(
        self,
        backend: VoiceBackend,
        mock_backend: MockVoiceBackend | None = None,
    ):
        """Initialize registry.

        Args:
            backend: Backend used for registration and synthesis
            mock_backend: Serves handles with the mock_ prefix. Defaults to
                the backend itself when it is a mock, else a zero-latency mock.
        """
        self._backend = backend
        if mock_backend is None:
            mock_backend = backend if isinstance(backend, MockVoiceBackend) else MockVoiceBackend(0.0, 0.0)
        self._mock_backend = mock_backend
        self._voices: dict[str, VoiceHandle] = {}

    @property
    def backend(self) -> VoiceBackend:
        return self._backend

    @property
    def is_mock_mode(self) -> bool:
        return bool(getattr(self._backend, "is_mock", False))

    async def register(
        self,
        speaker_id: str,
        audio: bytes,
        *,
        commit: Callable[[], bool] | None = None,
    ) -> VoiceHandle:
        """Upload a reference clip and store the resulting handle.

        Args:
            speaker_id: Speaker the clip belongs to
            audio: WAV bytes
            commit: Checked after the upload returns; when it returns False
                the handle is returned but not stored

        Raises:
            RegistrationError: If the backend rejects the upload
        """
        voice_id = await self._backend.register(speaker_id, audio)
        if commit is not None and not commit():
            logger.debug(f"Discarding voice {voice_id} for {speaker_id}: caller no longer current")
            return voice_id

        previous = self._voices.get(speaker_id)
        self._voices[speaker_id] = voice_id
        if previous and previous != voice_id:
            logger.info(f"Replaced voice for {speaker_id}: {previous} -> {voice_id}")
        return voice_id

    def assign(self, speaker_id: str, voice_id: VoiceHandle) -> None:
        """Store a handle without contacting the backend (demo voices)."""
        self._voices[speaker_id] = voice_id

    async def synthesize(self, text: str, speaker_id: str) -> AudioResource:
        """Speak text in the speaker's registered voice.

        Raises:
            UnknownSpeakerError: If no voice is registered for the speaker
            SynthesisError: If the backend fails
        """
        voice_id = self._voices.get(speaker_id)
        if not voice_id:
            raise UnknownSpeakerError(speaker_id)

        backend = self._mock_backend if is_mock_handle(voice_id) else self._backend
        try:
            return await backend.synthesize(text, voice_id)
        except SynthesisError as e:
            # Backends only know the voice id
            e.speaker_id = speaker_id
            raise

    def get_voice_id(self, speaker_id: str) -> VoiceHandle | None:
        return self._voices.get(speaker_id)

    def voice_ids(self) -> dict[str, VoiceHandle]:
        return dict(self._voices)

    def remove(self, speaker_id: str) -> bool:
        return self._voices.pop(speaker_id, None) is not None

    def clear(self) -> None:
        self._voices.clear()

    def __contains__(self, speaker_id: str) -> bool:
        return speaker_id in self._voices

    def __len__(self) -> int:
        return len(self._voices)

    async def aclose(self) -> None:
        close = getattr(self._backend, "aclose", None)
        if close is not None:
            await close()

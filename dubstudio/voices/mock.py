"""
Mock Backend - Voice cloning without network access.

Simulates service latency and returns placeholder voice ids, so the whole
pipeline can be exercised for demos and tests.
"""

from __future__ import annotations

import asyncio
import logging
import time

from dubstudio.voices.base import (
    AudioResource,
    BaseVoiceBackend,
    MOCK_HANDLE_PREFIX,
    VoiceHandle,
)

logger = logging.getLogger(__name__)


def mock_voice_id(speaker_id: str, stamp: int | None = None) -> VoiceHandle:
    """Placeholder handle: mock_voice_<speaker>[_<ms timestamp>]."""
    base = f"{MOCK_HANDLE_PREFIX}voice_{speaker_id}"
    return base if stamp is None else f"{base}_{stamp}"


class MockVoiceBackend(BaseVoiceBackend):
    """Mock cloning backend.

    register() never fails. synthesize() returns AudioResource.mock(),
    which tells callers to play a local fallback tone.
    """

    def __init__(
        self,
        register_latency: float = 1.5,
        synthesize_latency: float = 1.0,
    ):
        """Initialize mock backend.

        Args:
            register_latency: Simulated upload time in seconds
            synthesize_latency: Simulated synthesis time in seconds
        """
        self._register_latency = register_latency
        self._synthesize_latency = synthesize_latency

    @property
    def name(self) -> str:
        return "mock"

    @property
    def is_mock(self) -> bool:
        return True

    async def register(self, speaker_id: str, audio: bytes) -> VoiceHandle:
        logger.info(f"[Mock] Cloning voice for {speaker_id} ({len(audio)} bytes)")
        if self._register_latency > 0:
            await asyncio.sleep(self._register_latency)
        return mock_voice_id(speaker_id, int(time.time() * 1000))

    async def synthesize(self, text: str, voice_id: VoiceHandle) -> AudioResource:
        logger.info(f'[Mock] Synthesizing "{text}" with {voice_id}')
        if self._synthesize_latency > 0:
            await asyncio.sleep(self._synthesize_latency)
        return AudioResource.mock()

"""
MiniMax Backend - Cloud voice cloning and text-to-speech.

Usage:
    backend = MiniMaxVoiceBackend(api_key="...")
    voice_id = await backend.register("spk_1", wav_bytes)
    audio = await backend.synthesize("Hello!", voice_id)

Endpoints:
    POST {base_url}/files/upload   multipart reference upload -> file_id
    POST {base_url}/t2a_v2         JSON text-to-audio -> audio bytes

Requires:
    - MINIMAX_API_KEY environment variable (or api_key parameter)
"""

from __future__ import annotations

import logging
import os

import httpx

from dubstudio.config import DEFAULT_BASE_URL, DEFAULT_TTS_MODEL
from dubstudio.errors import RegistrationError, SynthesisError
from dubstudio.voices.base import AudioResource, BaseVoiceBackend, VoiceHandle

logger = logging.getLogger(__name__)


class MiniMaxVoiceBackend(BaseVoiceBackend):
    """MiniMax voice cloning backend.

    The uploaded reference file id doubles as the voice id for dynamic
    text-to-audio requests.

    Limitations:
        - Requires API key and internet
        - No retries; failures surface as RegistrationError/SynthesisError
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_TTS_MODEL,
        speed: float = 1.0,
        volume: float = 1.0,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize MiniMax backend.

        Args:
            api_key: MiniMax API key (defaults to MINIMAX_API_KEY env var)
            base_url: API root
            model: Text-to-audio model name
            speed: Speech speed multiplier sent with every request
            volume: Output volume sent with every request
            timeout: HTTP timeout in seconds
            client: Pre-built AsyncClient (tests pass one with a MockTransport)
        """
        self._api_key = api_key or os.environ.get("MINIMAX_API_KEY")
        if not self._api_key:
            raise ValueError(
                "MiniMax API key required. Set MINIMAX_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._base_url = base_url.rstrip("/")
        self._model = model
        self._speed = speed
        self._volume = volume
        self._timeout = timeout

        # Lazy client
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def name(self) -> str:
        return "minimax"

    @property
    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def register(self, speaker_id: str, audio: bytes) -> VoiceHandle:
        client = self._get_client()
        url = f"{self._base_url}/files/upload"

        files = {"file": (f"reference_{speaker_id}.wav", audio, "audio/wav")}
        form = {"purpose": "voice_cloning"}

        try:
            response = await client.post(url, headers=self._auth_headers, data=form, files=files)
        except httpx.HTTPError as e:
            logger.error(f"Voice registration request failed for {speaker_id}: {e}")
            raise RegistrationError(speaker_id, f"MiniMax upload failed: {e}") from e

        if not response.is_success:
            raise RegistrationError(
                speaker_id,
                f"MiniMax Upload Failed: {response.reason_phrase or response.status_code}",
                status_code=response.status_code,
                details={"body": response.text[:500]},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistrationError(
                speaker_id,
                "MiniMax upload returned a non-JSON body",
                status_code=response.status_code,
            ) from e

        voice_id = None
        if isinstance(payload, dict):
            voice_id = payload.get("file_id") or payload.get("voice_id")
        if not voice_id:
            raise RegistrationError(
                speaker_id,
                "No voice ID returned from API",
                status_code=response.status_code,
            )

        logger.info(f"Registered voice {voice_id} for {speaker_id}")
        return str(voice_id)

    async def synthesize(self, text: str, voice_id: VoiceHandle) -> AudioResource:
        client = self._get_client()
        url = f"{self._base_url}/t2a_v2"
        payload = {
            "model": self._model,
            "text": text,
            "voice_setting": {
                "voice_id": voice_id,
                "speed": self._speed,
                "vol": self._volume,
            },
        }

        try:
            response = await client.post(url, headers=self._auth_headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"TTS request failed for voice {voice_id}: {e}")
            raise SynthesisError(voice_id, f"TTS Generation Failed: {e}") from e

        if not response.is_success:
            raise SynthesisError(
                voice_id,
                f"TTS Generation Failed: {response.reason_phrase or response.status_code}",
                status_code=response.status_code,
                details={"body": response.text[:500]},
            )

        content_type = response.headers.get("content-type", "audio/mpeg").split(";")[0]
        return AudioResource(data=response.content, content_type=content_type)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

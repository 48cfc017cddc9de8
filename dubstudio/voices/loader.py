"""
Backend Loader - Pick the mock or real cloning backend once at startup.
"""

from __future__ import annotations

import logging

from dubstudio.config import Config
from dubstudio.voices.base import BaseVoiceBackend

logger = logging.getLogger(__name__)


def load_voice_backend(config: Config | None = None, backend: str = "auto") -> BaseVoiceBackend:
    """Load a voice backend.

    Args:
        config: Pipeline configuration (defaults to Config.from_env())
        backend: "auto", "mock" or "minimax". "auto" selects minimax when a
                 real credential is configured, otherwise mock.

    Returns:
        Initialized backend

    Raises:
        ValueError: For an unknown backend name, or "minimax" without a key
    """
    config = config or Config.from_env()

    if backend == "auto":
        backend = "mock" if config.is_mock_mode else "minimax"

    if backend == "mock":
        from dubstudio.voices.mock import MockVoiceBackend
        logger.info("Voice backend: mock (no MiniMax credential configured)")
        return MockVoiceBackend(
            register_latency=config.mock_register_latency,
            synthesize_latency=config.mock_synthesize_latency,
        )

    if backend == "minimax":
        if config.is_mock_mode:
            raise ValueError("MiniMax backend requested but MINIMAX_API_KEY is not set")
        from dubstudio.voices.minimax import MiniMaxVoiceBackend
        logger.info(f"Voice backend: minimax ({config.minimax_base_url})")
        return MiniMaxVoiceBackend(
            api_key=config.minimax_api_key,
            base_url=config.minimax_base_url,
            model=config.tts_model,
            timeout=config.request_timeout,
        )

    raise ValueError(f"Unknown voice backend: {backend}")


def list_voice_backends(config: Config | None = None) -> list[str]:
    """Backends usable with the given configuration."""
    config = config or Config.from_env()
    available = ["mock"]
    if not config.is_mock_mode:
        available.append("minimax")
    return available

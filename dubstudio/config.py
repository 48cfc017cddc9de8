"""
Configuration for the voice cloning pipeline.

Values come from keyword arguments or, via Config.from_env(), from the
environment:

    MINIMAX_API_KEY        cloning/synthesis credential (absent => mock mode)
    MINIMAX_BASE_URL       API root (default https://api.minimax.chat/v1)
    DUBSTUDIO_TTS_MODEL    synthesis model (default speech-01)
    DUBSTUDIO_TIMEOUT      HTTP timeout in seconds (default 60)
    DUBSTUDIO_LOG_LEVEL    logging level name (default INFO)
    DUBSTUDIO_DEMO_DELAY   simulated demo-mode preparation time (default 1.0)
    DUBSTUDIO_MOCK_REGISTER_LATENCY  mock upload latency (default 1.5)
    DUBSTUDIO_MOCK_SYNTH_LATENCY     mock synthesis latency (default 1.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.minimax.chat/v1"
DEFAULT_TTS_MODEL = "speech-01"

# Credential value shipped in sample env files; treated as "no key"
PLACEHOLDER_API_KEY = "mock-key"


@dataclass
class Config:
    """Pipeline configuration."""
    minimax_api_key: str | None = None
    minimax_base_url: str = DEFAULT_BASE_URL
    tts_model: str = DEFAULT_TTS_MODEL
    request_timeout: float = 60.0

    # Simulated latency for mock mode
    mock_register_latency: float = 1.5
    mock_synthesize_latency: float = 1.0
    demo_delay: float = 1.0

    log_level: str = "INFO"

    def __post_init__(self):
        self.minimax_base_url = self.minimax_base_url.rstrip("/")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

    @property
    def is_mock_mode(self) -> bool:
        """True unless a real (non-placeholder) credential is configured."""
        key = (self.minimax_api_key or "").strip()
        return not key or key == PLACEHOLDER_API_KEY

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        values = {
            "minimax_api_key": os.environ.get("MINIMAX_API_KEY"),
            "minimax_base_url": os.environ.get("MINIMAX_BASE_URL", DEFAULT_BASE_URL),
            "tts_model": os.environ.get("DUBSTUDIO_TTS_MODEL", DEFAULT_TTS_MODEL),
            "request_timeout": float(os.environ.get("DUBSTUDIO_TIMEOUT", "60")),
            "log_level": os.environ.get("DUBSTUDIO_LOG_LEVEL", "INFO").upper(),
            "demo_delay": float(os.environ.get("DUBSTUDIO_DEMO_DELAY", "1.0")),
            "mock_register_latency": float(os.environ.get("DUBSTUDIO_MOCK_REGISTER_LATENCY", "1.5")),
            "mock_synthesize_latency": float(os.environ.get("DUBSTUDIO_MOCK_SYNTH_LATENCY", "1.0")),
        }
        values.update(overrides)
        return cls(**values)

    def as_dict(self) -> dict:
        return {
            "has_api_key": not self.is_mock_mode,
            "minimax_base_url": self.minimax_base_url,
            "tts_model": self.tts_model,
            "request_timeout": self.request_timeout,
            "mock_register_latency": self.mock_register_latency,
            "mock_synthesize_latency": self.mock_synthesize_latency,
            "demo_delay": self.demo_delay,
            "log_level": self.log_level,
        }

"""
Voices Module - Voice registration and synthesis backends.

Backends:
    MockVoiceBackend     simulated latency, placeholder voice ids
    MiniMaxVoiceBackend  MiniMax file upload + t2a_v2 over httpx

VoiceRegistry owns the speaker -> voice handle map and routes synthesis
to the right backend.
"""

from dubstudio.voices.base import (
    AudioResource,
    BaseVoiceBackend,
    VoiceBackend,
    VoiceHandle,
    is_mock_handle,
)
from dubstudio.voices.mock import MockVoiceBackend, mock_voice_id
from dubstudio.voices.minimax import MiniMaxVoiceBackend
from dubstudio.voices.registry import VoiceRegistry
from dubstudio.voices.loader import load_voice_backend, list_voice_backends

__all__ = [
    "AudioResource",
    "BaseVoiceBackend",
    "VoiceBackend",
    "VoiceHandle",
    "is_mock_handle",
    "MockVoiceBackend",
    "mock_voice_id",
    "MiniMaxVoiceBackend",
    "VoiceRegistry",
    "load_voice_backend",
    "list_voice_backends",
]

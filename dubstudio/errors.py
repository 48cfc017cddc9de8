"""
DubStudio Errors - Domain-specific error types.

Error hierarchy:
    DubStudioError (base)
    ├── AnalysisError
    ├── DecodeError
    ├── RangeError
    ├── UnsupportedFormatError
    ├── RegistrationError
    ├── SynthesisError
    ├── UnknownSpeakerError
    └── VoiceUnavailableError

Extraction, encoding and registration errors raised while cloning a batch
are recorded as a FAILED speaker status by the orchestrator. Synthesis-time
errors always propagate to the caller.
"""

from __future__ import annotations

from typing import Any


class DubStudioError(Exception):
    """Base error for all pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AnalysisError(DubStudioError):
    """Raised when the video analysis step fails or returns malformed data."""


class DecodeError(DubStudioError):
    """Raised when a media byte stream cannot be decoded as audio."""


class RangeError(DubStudioError, ValueError):
    """Raised for an empty or inverted extraction window."""

    def __init__(
        self,
        start_time: float,
        end_time: float,
        message: str | None = None,
    ):
        msg = message or f"Invalid time range for audio extraction: {start_time} -> {end_time}"
        super().__init__(msg, {"start_time": start_time, "end_time": end_time})
        self.start_time = start_time
        self.end_time = end_time


class UnsupportedFormatError(DubStudioError):
    """Raised when a buffer or blob is outside the supported PCM layout."""


class RegistrationError(DubStudioError):
    """
    Raised when the cloning service rejects a reference sample.

    Examples:
    - Non-2xx response from the upload endpoint
    - A 2xx response without a voice identifier
    - Transport failure while uploading
    """

    def __init__(
        self,
        speaker_id: str,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.speaker_id = speaker_id
        self.status_code = status_code


class SynthesisError(DubStudioError):
    """Raised when the synthesis endpoint fails to produce audio."""

    def __init__(
        self,
        speaker_id: str,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.speaker_id = speaker_id
        self.status_code = status_code


class UnknownSpeakerError(DubStudioError):
    """Raised when no voice handle is registered for a speaker."""

    def __init__(self, speaker_id: str):
        super().__init__(f"No voice registered for speaker {speaker_id}")
        self.speaker_id = speaker_id


class VoiceUnavailableError(DubStudioError):
    """Raised when synthesis is requested for a speaker that is not cloned."""

    def __init__(self, speaker_id: str, status: str | None = None):
        super().__init__(
            "Voice not available for this speaker.",
            {"speaker_id": speaker_id, "status": status},
        )
        self.speaker_id = speaker_id
        self.status = status

"""
Audio Module - Clip extraction and WAV encoding.

This module provides:
- SampleBuffer, the channel-separated float PCM container
- Clip extraction from video/audio byte streams
- Canonical 16-bit PCM WAV encoding and header parsing
- Fallback tones for mock synthesis previews

Usage:
    from dubstudio.audio import ClipExtractor, encode_wav

    clip = ClipExtractor().extract(video_bytes, 4.0, 9.0)
    blob = encode_wav(clip)
"""

from dubstudio.audio.buffer import SampleBuffer
from dubstudio.audio.wav import (
    WavHeader,
    encode_wav,
    read_wav_header,
    decode_wav_samples,
)
from dubstudio.audio.extractor import (
    ClipExtractor,
    MediaSource,
    decode_media,
    extract_clip,
    slice_buffer,
)
from dubstudio.audio.tones import generate_tone, fallback_tone

__all__ = [
    "SampleBuffer",
    "WavHeader",
    "encode_wav",
    "read_wav_header",
    "decode_wav_samples",
    "ClipExtractor",
    "MediaSource",
    "decode_media",
    "extract_clip",
    "slice_buffer",
    "generate_tone",
    "fallback_tone",
]

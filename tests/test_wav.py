"""
Tests for the WAV encoder.
"""

import io
import struct

import numpy as np
import pytest
import soundfile as sf

from dubstudio.audio import SampleBuffer, encode_wav, read_wav_header, decode_wav_samples
from dubstudio.audio.wav import WAV_HEADER_SIZE, interleave, quantize
from dubstudio.errors import UnsupportedFormatError


def _pcm(blob: bytes) -> np.ndarray:
    return np.frombuffer(blob[WAV_HEADER_SIZE:], dtype="<i2")


class TestHeader:
    """Byte layout of the canonical header."""

    def test_mono_header_fields(self):
        buffer = SampleBuffer(np.zeros(10, dtype=np.float32), sample_rate=16000)
        blob = encode_wav(buffer)

        assert len(blob) == 44 + 10 * 2
        assert blob[0:4] == b"RIFF"
        assert struct.unpack_from("<I", blob, 4)[0] == 36 + 20
        assert blob[8:12] == b"WAVE"
        assert blob[12:16] == b"fmt "

        fmt = struct.unpack_from("<IHHIIHH", blob, 16)
        assert fmt == (16, 1, 1, 16000, 32000, 2, 16)

        assert blob[36:40] == b"data"
        assert struct.unpack_from("<I", blob, 40)[0] == 20

    def test_stereo_header_fields(self):
        buffer = SampleBuffer(np.zeros((2, 5), dtype=np.float32), sample_rate=44100)
        blob = encode_wav(buffer)

        _, _, channels, rate, byte_rate, block_align, bits = struct.unpack_from("<IHHIIHH", blob, 16)
        assert channels == 2
        assert rate == 44100
        assert byte_rate == 44100 * 2 * 2
        assert block_align == 4
        assert bits == 16
        assert len(blob) == 44 + 5 * 2 * 2

    def test_header_roundtrip(self):
        buffer = SampleBuffer(np.zeros((2, 300), dtype=np.float32), sample_rate=22050)
        header = read_wav_header(encode_wav(buffer))

        assert header.sample_rate == 22050
        assert header.channels == 2
        assert header.bits_per_sample == 16
        assert header.num_frames == 300
        assert header.data_offset == WAV_HEADER_SIZE

    def test_readable_by_soundfile(self):
        """An independent reader agrees on rate, channels and length."""
        samples = np.linspace(-0.5, 0.5, 1000, dtype=np.float32)
        blob = encode_wav(SampleBuffer(samples, sample_rate=8000))

        info = sf.info(io.BytesIO(blob))
        assert info.samplerate == 8000
        assert info.channels == 1
        assert info.frames == 1000
        assert info.subtype == "PCM_16"


class TestSamples:
    """Sample quantization and interleaving."""

    def test_all_zero_data_chunk(self):
        buffer = SampleBuffer(np.zeros((2, 64), dtype=np.float32), sample_rate=8000)
        blob = encode_wav(buffer)

        data = blob[WAV_HEADER_SIZE:]
        assert len(data) == 64 * 2 * 2
        assert data == bytes(len(data))

    def test_clamping(self):
        samples = np.array([2.0, 1.0, -2.0, -1.0], dtype=np.float32)
        pcm = _pcm(encode_wav(SampleBuffer(samples, sample_rate=8000)))

        assert pcm[0] == pcm[1] == 32767
        assert pcm[2] == pcm[3] == -32768

    def test_asymmetric_scaling(self):
        pcm = quantize(np.array([0.25, -0.25, -0.5, 0.0]))
        assert list(pcm) == [8192, -8192, -16384, 0]

    def test_stereo_interleaving(self):
        left = np.array([0.25, 0.5, 0.75], dtype=np.float32)
        right = np.array([-0.25, -0.5, -0.75], dtype=np.float32)
        buffer = SampleBuffer(np.stack([left, right]), sample_rate=8000)

        flat = interleave(buffer)
        np.testing.assert_array_equal(flat, [0.25, -0.25, 0.5, -0.5, 0.75, -0.75])

        pcm = _pcm(encode_wav(buffer))
        assert pcm[0] > 0 and pcm[1] < 0
        assert pcm[2] > 0 and pcm[3] < 0

    def test_deterministic(self):
        samples = np.random.default_rng(7).uniform(-1.2, 1.2, 500).astype(np.float32)
        buffer = SampleBuffer(samples, sample_rate=16000)

        assert encode_wav(buffer) == encode_wav(buffer)

    def test_decode_roundtrip(self):
        samples = np.linspace(-1.0, 1.0, 101, dtype=np.float32)
        buffer = SampleBuffer(np.stack([samples, samples[::-1]]), sample_rate=8000)

        decoded = decode_wav_samples(encode_wav(buffer))

        assert decoded.num_channels == 2
        assert decoded.sample_rate == 8000
        np.testing.assert_allclose(decoded.channels, buffer.channels, atol=1 / 32767)


class TestUnsupported:
    """Inputs outside the supported layout."""

    def test_three_channels_rejected(self):
        buffer = SampleBuffer(np.zeros((3, 10), dtype=np.float32), sample_rate=8000)
        with pytest.raises(UnsupportedFormatError):
            encode_wav(buffer)

    def test_zero_channels_rejected(self):
        buffer = SampleBuffer(np.zeros((0, 10), dtype=np.float32), sample_rate=8000)
        with pytest.raises(UnsupportedFormatError):
            encode_wav(buffer)

    def test_non_wav_header(self):
        with pytest.raises(UnsupportedFormatError):
            read_wav_header(b"ID3\x03" + bytes(100))

    def test_missing_data_chunk(self):
        blob = encode_wav(SampleBuffer(np.zeros(4, dtype=np.float32), sample_rate=8000))
        with pytest.raises(UnsupportedFormatError):
            read_wav_header(blob[:36])

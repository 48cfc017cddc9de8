"""
Tests for the command-line interface.
"""

import json
import logging

import pytest

from dubstudio.audio import read_wav_header
from dubstudio.cli import main
from dubstudio.monitoring import logging as dub_logging


@pytest.fixture(autouse=True)
def cli_env(monkeypatch):
    """Mock mode with no simulated latency; package logger restored afterwards."""
    monkeypatch.delenv("MINIMAX_API_KEY", raising=False)
    monkeypatch.setenv("DUBSTUDIO_DEMO_DELAY", "0")
    monkeypatch.setenv("DUBSTUDIO_MOCK_REGISTER_LATENCY", "0")
    monkeypatch.setenv("DUBSTUDIO_MOCK_SYNTH_LATENCY", "0")

    logger = logging.getLogger("dubstudio")
    handlers = list(logger.handlers)
    level = logger.level
    store = dub_logging._global_store
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    dub_logging._global_store = store


@pytest.fixture
def project(tmp_path, wav_media, analysis_payload):
    # The payload runs to 12.5s; keep every segment inside the 5s media
    analysis_payload["segments"][2]["start_time"] = 4.0
    analysis_payload["segments"][2]["end_time"] = 5.0
    media = tmp_path / "talk.wav"
    media.write_bytes(wav_media)
    analysis = tmp_path / "analysis.json"
    analysis.write_text(json.dumps(analysis_payload))
    return media, analysis


class TestCli:

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.startswith("dubstudio ")

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_extract(self, project, tmp_path):
        media, _ = project
        output = tmp_path / "clip.wav"

        assert main(["extract", str(media), "1.0", "2.5", "-o", str(output)]) == 0

        header = read_wav_header(output.read_bytes())
        assert header.num_frames == 12000

    def test_extract_bad_range(self, project, tmp_path, capsys):
        media, _ = project
        assert main(["extract", str(media), "3.0", "1.0", "-o", str(tmp_path / "x.wav")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_clone(self, project, capsys):
        media, analysis = project

        assert main(["clone", str(media), str(analysis)]) == 0

        out = capsys.readouterr().out
        assert "Cloning voice for Host (1/2)..." in out
        assert "Voice cloning complete." in out
        assert out.count("CLONED") == 2

    def test_clone_demo(self, project, capsys):
        media, analysis = project

        assert main(["clone", str(media), str(analysis), "--demo"]) == 0
        assert "Demo voices ready (Mock Mode)" in capsys.readouterr().out

    def test_clone_missing_analysis(self, project, tmp_path, capsys):
        media, _ = project
        assert main(["clone", str(media), str(tmp_path / "none.json")]) == 1

    def test_speak_mock_writes_tone(self, project, tmp_path):
        media, analysis = project
        output = tmp_path / "line.mp3"

        assert main(["speak", str(media), str(analysis), "spk_2", "Hi again", "-o", str(output)]) == 0

        tone = tmp_path / "line.wav"
        assert tone.exists()
        assert read_wav_header(tone.read_bytes()).sample_rate == 24000

    def test_speak_unknown_speaker(self, project, tmp_path, capsys):
        media, analysis = project
        code = main(["speak", str(media), str(analysis), "spk_9", "Hi", "-o", str(tmp_path / "x.mp3")])

        assert code == 1
        assert "Voice not available" in capsys.readouterr().err

    def test_debug_log(self, project, tmp_path):
        media, analysis = project
        log_path = tmp_path / "debug.txt"

        main(["--log-level", "DEBUG", "--debug-log", str(log_path), "clone", str(media), str(analysis)])

        text = log_path.read_text(encoding="utf-8")
        assert "[INFO]" in text
        assert "Cloned voice for spk_1" in text

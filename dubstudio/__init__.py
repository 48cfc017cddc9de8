"""
DubStudio - Voice cloning pipeline for video re-voicing.

Architecture:
    AnalysisResult + media → ClipExtractor → WAV → VoiceRegistry → AudioResource

Public API (stable):
    CloningOrchestrator - Clones every speaker, tracks status, serves synthesis
    VoiceRegistry       - Speaker → voice handle store over one backend
    ClipExtractor       - Decode media and cut time windows
    encode_wav          - Canonical 16-bit PCM WAV encoder
    Config              - Pipeline configuration (Config.from_env())

Submodules:
    audio       - SampleBuffer, extraction, WAV encoding, fallback tones
    voices      - Mock and MiniMax backends, registry, backend loader
    pipeline    - Orchestrator, run state, speaker status
    monitoring  - In-memory debug log with export
    analysis    - Analyzer protocol and JSON-backed analyzer

Example:
    from dubstudio import (
        CloningOrchestrator, Config, VoiceRegistry, load_analysis, load_voice_backend,
    )

    config = Config.from_env()
    registry = VoiceRegistry(load_voice_backend(config))
    orchestrator = CloningOrchestrator(registry, demo_delay=config.demo_delay)

    analysis = load_analysis("analysis.json")
    state = await orchestrator.start(analysis, "interview.mp4")
    print(state.speaker_status)

    audio = await orchestrator.synthesize_segment("spk_1", "A brand new line.")
"""

__version__ = "0.3.0"

from dubstudio.config import Config
from dubstudio.models import (
    AnalysisResult,
    Segment,
    Speaker,
    VideoMetadata,
    load_analysis,
)
from dubstudio.audio import (
    ClipExtractor,
    SampleBuffer,
    encode_wav,
    extract_clip,
    read_wav_header,
)
from dubstudio.voices import (
    AudioResource,
    MiniMaxVoiceBackend,
    MockVoiceBackend,
    VoiceRegistry,
    load_voice_backend,
)
from dubstudio.pipeline import (
    CloningOrchestrator,
    CloningStatus,
    RunState,
    VoiceSystemState,
)
from dubstudio.errors import (
    DubStudioError,
    AnalysisError,
    DecodeError,
    RangeError,
    UnsupportedFormatError,
    RegistrationError,
    SynthesisError,
    UnknownSpeakerError,
    VoiceUnavailableError,
)

__all__ = [
    "__version__",
    # Core
    "CloningOrchestrator",
    "VoiceRegistry",
    "ClipExtractor",
    "Config",
    # Data
    "AnalysisResult",
    "Segment",
    "Speaker",
    "VideoMetadata",
    "load_analysis",
    "SampleBuffer",
    "AudioResource",
    "CloningStatus",
    "RunState",
    "VoiceSystemState",
    # Functions
    "encode_wav",
    "extract_clip",
    "read_wav_header",
    "load_voice_backend",
    # Backends
    "MockVoiceBackend",
    "MiniMaxVoiceBackend",
    # Errors
    "DubStudioError",
    "AnalysisError",
    "DecodeError",
    "RangeError",
    "UnsupportedFormatError",
    "RegistrationError",
    "SynthesisError",
    "UnknownSpeakerError",
    "VoiceUnavailableError",
]

"""
Pipeline Module - Voice cloning orchestration.

Usage:
    from dubstudio.pipeline import CloningOrchestrator, CloningStatus

    orchestrator = CloningOrchestrator(registry)
    state = await orchestrator.start(analysis, video_bytes)
    failed = [sid for sid, s in state.speaker_status.items() if s is CloningStatus.FAILED]
"""

from dubstudio.pipeline.state import (
    CloningStatus,
    RunState,
    VoiceSystemState,
    VALID_TRANSITIONS,
    is_valid_transition,
)
from dubstudio.pipeline.orchestrator import (
    CloningOrchestrator,
    PROGRESS_COMPLETE,
    PROGRESS_DEMO_READY,
    PROGRESS_PREPARING,
    select_cloning_samples,
)

__all__ = [
    "CloningStatus",
    "RunState",
    "VoiceSystemState",
    "VALID_TRANSITIONS",
    "is_valid_transition",
    "CloningOrchestrator",
    "PROGRESS_COMPLETE",
    "PROGRESS_DEMO_READY",
    "PROGRESS_PREPARING",
    "select_cloning_samples",
]

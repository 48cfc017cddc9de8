"""
Pipeline State - Run lifecycle, per-speaker status and snapshots.

Run lifecycle:

    IDLE ──► PREPARING ──► RUNNING ──► READY
                 │                       ▲
                 └──── (demo mode) ──────┘

Starting a new run moves any state back to PREPARING; clearing the
analysis moves any state back to IDLE.

Speaker status starts at PENDING when a run starts and moves exactly once
to CLONED or FAILED within that run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class RunState(Enum):
    """Orchestration run lifecycle states."""
    IDLE = "idle"
    PREPARING = "preparing"
    RUNNING = "running"
    READY = "ready"


class CloningStatus(str, Enum):
    """Per-speaker cloning status."""
    PENDING = "PENDING"
    CLONED = "CLONED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not CloningStatus.PENDING


# Valid state transitions (from -> to)
VALID_TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.IDLE: {RunState.IDLE, RunState.PREPARING},
    RunState.PREPARING: {RunState.PREPARING, RunState.RUNNING, RunState.READY, RunState.IDLE},
    RunState.RUNNING: {RunState.RUNNING, RunState.READY, RunState.PREPARING, RunState.IDLE},
    RunState.READY: {RunState.READY, RunState.PREPARING, RunState.IDLE},
}


def is_valid_transition(from_state: RunState, to_state: RunState) -> bool:
    """Check if a run state transition is valid."""
    return to_state in VALID_TRANSITIONS.get(from_state, set())


def is_valid_status_change(current: CloningStatus | None, new: CloningStatus) -> bool:
    """Statuses only leave PENDING, and only once."""
    if new is CloningStatus.PENDING:
        return current is None
    return current is CloningStatus.PENDING


@dataclass(frozen=True)
class VoiceSystemState:
    """Immutable snapshot published to subscribers on every change.

    Attributes:
        is_ready: True once the current run has finished
        progress: Human-readable progress line
        speaker_status: Cloning status per speaker id
        run_state: Lifecycle state of the current run
        generation: Id of the run this snapshot belongs to
    """
    is_ready: bool = False
    progress: str = ""
    speaker_status: Mapping[str, CloningStatus] = field(default_factory=dict)
    run_state: RunState = RunState.IDLE
    generation: int = 0

    def status_of(self, speaker_id: str) -> CloningStatus | None:
        return self.speaker_status.get(speaker_id)

    def count(self, status: CloningStatus) -> int:
        return sum(1 for s in self.speaker_status.values() if s is status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_ready": self.is_ready,
            "progress": self.progress,
            "speaker_status": {k: v.value for k, v in self.speaker_status.items()},
            "run_state": self.run_state.value,
            "generation": self.generation,
        }

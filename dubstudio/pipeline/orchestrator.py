"""
Cloning Orchestrator - Clone every speaker's voice from the source video.

For each speaker the orchestrator picks the longest segment as the
reference sample, extracts and encodes it, and registers it with the voice
registry. Speakers are processed one at a time in the order the analysis
lists them, since every extraction decodes the full media. A failure marks
that speaker FAILED and the run moves on; the run always ends READY.

Without a media source (demo mode) every speaker gets a placeholder voice
so synthesis previews work end to end.

Every run carries a generation id. Starting a new run or clearing the
analysis bumps the generation; writes from an older generation are dropped,
including voice handles its in-flight uploads return.

Usage:
    orchestrator = CloningOrchestrator(VoiceRegistry(load_voice_backend()))
    unsubscribe = orchestrator.subscribe(lambda state: print(state.progress))

    state = await orchestrator.start(analysis, video_bytes)
    audio = await orchestrator.synthesize_segment("spk_1", "Edited line")
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Callable

from dubstudio.audio.extractor import ClipExtractor, MediaSource
from dubstudio.audio.wav import encode_wav
from dubstudio.errors import VoiceUnavailableError
from dubstudio.models import AnalysisResult, Segment, Speaker
from dubstudio.pipeline.state import (
    CloningStatus,
    RunState,
    VoiceSystemState,
    is_valid_status_change,
    is_valid_transition,
)
from dubstudio.voices.base import AudioResource
from dubstudio.voices.mock import mock_voice_id
from dubstudio.voices.registry import VoiceRegistry

logger = logging.getLogger(__name__)

StateListener = Callable[[VoiceSystemState], None]

PROGRESS_PREPARING = "Preparing to clone voices..."
PROGRESS_DEMO_READY = "Demo voices ready (Mock Mode)"
PROGRESS_COMPLETE = "Voice cloning complete."


def select_cloning_samples(analysis: AnalysisResult) -> list[tuple[Speaker, Segment]]:
    """Pick the longest segment of each speaker as its cloning sample.

    Ties go to the segment that comes first. Speakers without segments are
    left out. Order follows analysis.speakers.
    """
    queue: list[tuple[Speaker, Segment]] = []
    for speaker in analysis.speakers:
        best: Segment | None = None
        for segment in analysis.segments:
            if segment.speaker_id != speaker.id:
                continue
            if best is None or segment.duration > best.duration:
                best = segment
        if best is not None:
            queue.append((speaker, best))
    return queue


class CloningOrchestrator:
    """Drives voice cloning for an analysis result and serves synthesis.

    Example:
        registry = VoiceRegistry(MockVoiceBackend())
        orchestrator = CloningOrchestrator(registry)

        # Real path
        state = await orchestrator.start(analysis, "interview.mp4")
        assert state.is_ready

        # Fire and forget, e.g. from a UI event handler
        task = orchestrator.launch(analysis, video_bytes)
    """

    def __init__(
        self,
        registry: VoiceRegistry,
        extractor: ClipExtractor | None = None,
        *,
        demo_delay: float = 1.0,
    ):
        """Initialize orchestrator.

        Args:
            registry: Voice registry shared with synthesis callers
            extractor: Clip extractor (defaults to ClipExtractor())
            demo_delay: Simulated preparation time for demo runs, seconds
        """
        self._registry = registry
        self._extractor = extractor or ClipExtractor()
        self._demo_delay = demo_delay

        self._state = VoiceSystemState()
        self._generation = 0
        self._demo_mode = False
        self._listeners: list[StateListener] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def snapshot(self) -> VoiceSystemState:
        return self._state

    @property
    def registry(self) -> VoiceRegistry:
        return self._registry

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_demo_mode(self) -> bool:
        return self._demo_mode

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call listener with every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _update(self, generation: int, **changes) -> bool:
        """Apply changes for a run. Returns False if the run is stale."""
        if not self._is_current(generation):
            logger.debug(f"Dropping update from stale run {generation}: {changes}")
            return False

        run_state = changes.get("run_state")
        if run_state is not None and not is_valid_transition(self._state.run_state, run_state):
            raise RuntimeError(
                f"Invalid run transition: {self._state.run_state.value} -> {run_state.value}"
            )

        self._state = dataclasses.replace(self._state, generation=generation, **changes)
        self._emit()
        return True

    def _set_status(self, generation: int, speaker_id: str, status: CloningStatus) -> bool:
        if not self._is_current(generation):
            logger.debug(f"Dropping status {status.value} for {speaker_id} from stale run {generation}")
            return False

        current = self._state.speaker_status.get(speaker_id)
        if not is_valid_status_change(current, status):
            logger.warning(
                f"Ignoring status change for {speaker_id}: "
                f"{current.value if current else None} -> {status.value}"
            )
            return False

        statuses = dict(self._state.speaker_status)
        statuses[speaker_id] = status
        return self._update(generation, speaker_status=statuses)

    # =========================================================================
    # Runs
    # =========================================================================

    def _begin_run(self, analysis: AnalysisResult, media: MediaSource | None) -> int:
        self._generation += 1
        generation = self._generation
        self._demo_mode = media is None

        logger.info(
            f"Starting cloning run {generation} for {len(analysis.speakers)} speakers"
            f"{' (demo mode)' if self._demo_mode else ''}"
        )

        if self._demo_mode:
            # Placeholder voices up front so previews work while pending
            for speaker in analysis.speakers:
                self._registry.assign(speaker.id, mock_voice_id(speaker.id))

        self._update(
            generation,
            run_state=RunState.PREPARING,
            is_ready=False,
            progress=PROGRESS_PREPARING,
            speaker_status={s.id: CloningStatus.PENDING for s in analysis.speakers},
        )
        return generation

    async def start(
        self,
        analysis: AnalysisResult,
        media: MediaSource | None = None,
    ) -> VoiceSystemState:
        """Run cloning for an analysis result and wait for it to finish.

        Supersedes any run in flight.

        Args:
            analysis: Speakers and segments from the analysis step
            media: Source video/audio (bytes or path); None for demo mode

        Returns:
            The snapshot after the run finished (or after it was superseded)
        """
        generation = self._begin_run(analysis, media)
        await self._execute(generation, analysis, media)
        return self._state

    def launch(
        self,
        analysis: AnalysisResult,
        media: MediaSource | None = None,
    ) -> asyncio.Task:
        """Start a run as a background task on the running loop.

        The run is registered (generation bumped, statuses reset) before this
        returns, so a later launch() always supersedes an earlier one.
        """
        generation = self._begin_run(analysis, media)
        return asyncio.create_task(self._execute(generation, analysis, media))

    def clear(self) -> None:
        """Drop the current analysis and return to IDLE."""
        self._generation += 1
        self._demo_mode = False
        self._update(
            self._generation,
            run_state=RunState.IDLE,
            is_ready=False,
            progress="",
            speaker_status={},
        )

    async def _execute(
        self,
        generation: int,
        analysis: AnalysisResult,
        media: MediaSource | None,
    ) -> None:
        if media is None:
            await self._run_demo(generation, analysis)
        else:
            await self._run_cloning(generation, analysis, media)

    async def _run_demo(self, generation: int, analysis: AnalysisResult) -> None:
        if self._demo_delay > 0:
            await asyncio.sleep(self._demo_delay)
        if not self._is_current(generation):
            return

        self._update(
            generation,
            run_state=RunState.READY,
            is_ready=True,
            progress=PROGRESS_DEMO_READY,
            speaker_status={s.id: CloningStatus.CLONED for s in analysis.speakers},
        )

    async def _run_cloning(
        self,
        generation: int,
        analysis: AnalysisResult,
        media: MediaSource,
    ) -> None:
        queue = select_cloning_samples(analysis)
        total = len(queue)

        skipped = len(analysis.speakers) - total
        if skipped:
            logger.info(f"Skipping {skipped} speaker(s) with no segments")

        if not self._update(generation, run_state=RunState.RUNNING):
            return

        for index, (speaker, segment) in enumerate(queue, start=1):
            if not self._update(
                generation,
                progress=f"Cloning voice for {speaker.name} ({index}/{total})...",
            ):
                return

            try:
                clip = await self._extractor.extract_async(media, segment.start_time, segment.end_time)
                blob = encode_wav(clip)
                await self._registry.register(
                    speaker.id,
                    blob,
                    commit=lambda: self._is_current(generation),
                )
            except Exception as e:
                logger.error(f"Failed to clone voice for {speaker.id}: {e}", exc_info=True)
                self._set_status(generation, speaker.id, CloningStatus.FAILED)
            else:
                logger.info(
                    f"Cloned voice for {speaker.id} from segment {segment.id} "
                    f"({segment.duration:.2f}s)"
                )
                self._set_status(generation, speaker.id, CloningStatus.CLONED)

        self._update(
            generation,
            run_state=RunState.READY,
            is_ready=True,
            progress=PROGRESS_COMPLETE,
        )

    # =========================================================================
    # Synthesis
    # =========================================================================

    async def synthesize_segment(self, speaker_id: str, text: str) -> AudioResource:
        """Speak edited text in a speaker's cloned voice.

        Demo runs always delegate to the registry. Real runs require the
        speaker to be CLONED.

        Raises:
            VoiceUnavailableError: No run started, or speaker not CLONED
            UnknownSpeakerError: No voice registered for the speaker
            SynthesisError: The backend failed
        """
        if self._state.run_state is RunState.IDLE:
            raise VoiceUnavailableError(speaker_id)

        if not self._demo_mode:
            status = self._state.speaker_status.get(speaker_id)
            if status is not CloningStatus.CLONED:
                raise VoiceUnavailableError(speaker_id, status.value if status else None)

        return await self._registry.synthesize(text, speaker_id)

"""
Analysis boundary - Turn a video into speakers and segments.

The analysis model itself is an external service; this module only fixes
the interface the pipeline calls and ships a file-backed implementation
for offline runs and tests.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable

from dubstudio.models import AnalysisResult, load_analysis


@runtime_checkable
class Analyzer(Protocol):
    """Protocol for video analysis services.

    Implementations raise AnalysisError on failure; callers surface the
    message as-is.
    """

    async def analyze(self, video: bytes) -> AnalysisResult:
        ...


class JsonFileAnalyzer:
    """Returns a pre-computed analysis stored as JSON, ignoring the video."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    async def analyze(self, video: bytes) -> AnalysisResult:
        return await asyncio.to_thread(load_analysis, self.path)

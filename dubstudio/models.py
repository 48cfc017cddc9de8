"""
Analysis Models - Speakers and transcript segments.

The analysis step (an external model call) turns a video into a set of
speakers and speaker-attributed segments. These dataclasses are the shape
the rest of the pipeline consumes; they read and write the same JSON layout
the analysis service returns.

Usage:
    from dubstudio.models import load_analysis

    analysis = load_analysis("analysis.json")
    for speaker in analysis.speakers:
        print(speaker.name, len(analysis.segments_for(speaker.id)))
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from dubstudio.errors import AnalysisError

logger = logging.getLogger(__name__)


@dataclass
class Speaker:
    """A speaker detected in the video."""
    id: str
    name: str
    voice_tone: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Speaker":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            voice_tone=str(data.get("voice_tone", "")),
        )


@dataclass
class Segment:
    """A contiguous stretch of speech attributed to one speaker."""
    id: str
    speaker_id: str
    start_time: float
    end_time: float
    text: str = ""

    def __post_init__(self):
        if self.end_time < self.start_time:
            raise AnalysisError(
                f"Segment {self.id} ends before it starts",
                {"start_time": self.start_time, "end_time": self.end_time},
            )

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @classmethod
    def from_dict(cls, data: dict) -> "Segment":
        return cls(
            id=str(data["id"]),
            speaker_id=str(data["speaker_id"]),
            start_time=float(data["start_time"]),
            end_time=float(data["end_time"]),
            text=str(data.get("text", "")),
        )


@dataclass
class VideoMetadata:
    total_duration: float = 0.0
    detected_language: str = ""


@dataclass
class AnalysisResult:
    """Complete analysis output for one video.

    Attributes:
        metadata: Duration and detected language
        speakers: Speakers in the order the analysis listed them
        segments: Segments in transcript order
    """
    metadata: VideoMetadata = field(default_factory=VideoMetadata)
    speakers: list[Speaker] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)

    def segments_for(self, speaker_id: str) -> list[Segment]:
        """Segments belonging to a speaker, in transcript order."""
        return [s for s in self.segments if s.speaker_id == speaker_id]

    def get_speaker(self, speaker_id: str) -> Speaker | None:
        for speaker in self.speakers:
            if speaker.id == speaker_id:
                return speaker
        return None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        """Build a result from the analysis service's JSON payload.

        Raises:
            AnalysisError: If required fields are missing or malformed
        """
        try:
            meta = data.get("metadata") or {}
            metadata = VideoMetadata(
                total_duration=float(meta.get("total_duration", 0.0)),
                detected_language=str(meta.get("detected_language", "")),
            )
            speakers = [Speaker.from_dict(s) for s in data.get("speakers", [])]
            segments = [Segment.from_dict(s) for s in data.get("segments", [])]
        except AnalysisError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise AnalysisError(f"Malformed analysis result: {e}") from e

        ids = [s.id for s in speakers]
        if len(ids) != len(set(ids)):
            raise AnalysisError("Duplicate speaker ids in analysis result")

        known = set(ids)
        orphans = {s.speaker_id for s in segments if s.speaker_id not in known}
        if orphans:
            logger.warning(f"Segments reference unknown speakers: {sorted(orphans)}")

        return cls(metadata=metadata, speakers=speakers, segments=segments)


def load_analysis(path: Path | str) -> AnalysisResult:
    """Load an analysis result from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        AnalysisError: If the file is not a valid analysis result
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Analysis file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Invalid analysis JSON in {path}: {e}") from e

    return AnalysisResult.from_dict(data)

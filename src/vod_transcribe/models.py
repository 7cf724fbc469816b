from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

UNBOUNDED_DURATION = "-1"


@dataclass(frozen=True)
class TimeRange:
    """Slice of the source to process.

    Both fields are passed to ffmpeg verbatim; ``start`` is ``HH:MM:SS`` (or
    ``0``) and ``duration`` a number of seconds, or ``-1`` for the whole source.
    """

    start: str
    duration: str

    @property
    def is_unbounded(self) -> bool:
        return self.duration.strip() == UNBOUNDED_DURATION


@dataclass(frozen=True)
class StreamUrls:
    video_url: str
    # None when the source only exposes a combined audio+video stream.
    audio_url: str | None


@dataclass(frozen=True)
class PipelineArtifacts:
    output_video: Path
    run_root: Path
    cleanup_performed: bool

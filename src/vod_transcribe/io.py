from __future__ import annotations

import shutil
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from vod_transcribe.asr.whisper_cpp import subtitle_path_for
from vod_transcribe.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunWorkspace:
    root: Path
    fetched_video: Path
    waveform: Path
    subtitles: Path


def create_run_workspace(workspace_dir: Path, run_id: str | None = None) -> RunWorkspace:
    timestamp = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")
    selected_run_id = run_id or f"run_{timestamp}_{uuid.uuid4().hex[:8]}"
    root = workspace_dir / selected_run_id
    root.mkdir(parents=True, exist_ok=False)
    waveform = root / "vod-resampled.wav"
    logger.debug("Created run workspace %s", root)
    return RunWorkspace(
        root=root,
        fetched_video=root / "vod.mp4",
        waveform=waveform,
        subtitles=subtitle_path_for(waveform),
    )


def cleanup_run_workspace(workspace: RunWorkspace) -> None:
    if workspace.root.exists():
        shutil.rmtree(workspace.root)
        logger.debug("Removed run workspace %s", workspace.root)
    parent = workspace.root.parent
    if parent.is_dir() and not any(parent.iterdir()):
        try:
            parent.rmdir()
        except OSError:
            # A concurrent run created its own workspace in the meantime.
            logger.debug("Workspace directory %s is in use, keeping it", parent)

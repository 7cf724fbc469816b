from pathlib import Path

import pytest

from vod_transcribe.io import cleanup_run_workspace, create_run_workspace


def test_create_run_workspace_paths(tmp_path: Path) -> None:
    workspace = create_run_workspace(tmp_path / "tmp", run_id="demo_run")

    assert workspace.root == tmp_path / "tmp" / "demo_run"
    assert workspace.root.is_dir()
    assert workspace.fetched_video == workspace.root / "vod.mp4"
    assert workspace.waveform == workspace.root / "vod-resampled.wav"
    assert workspace.subtitles == workspace.root / "vod-resampled.wav.srt"


def test_create_run_workspace_generates_unique_roots(tmp_path: Path) -> None:
    first = create_run_workspace(tmp_path)
    second = create_run_workspace(tmp_path)

    assert first.root != second.root
    assert first.root.name.startswith("run_")


def test_create_run_workspace_refuses_existing_run(tmp_path: Path) -> None:
    create_run_workspace(tmp_path, run_id="demo_run")

    with pytest.raises(FileExistsError):
        create_run_workspace(tmp_path, run_id="demo_run")


def test_cleanup_run_workspace_is_idempotent(tmp_path: Path) -> None:
    workspace = create_run_workspace(tmp_path / "tmp", run_id="demo_run")
    workspace.fetched_video.write_bytes(b"video")
    workspace.waveform.write_bytes(b"wav")
    workspace.subtitles.write_text("1\n", encoding="utf-8")

    cleanup_run_workspace(workspace)
    cleanup_run_workspace(workspace)

    assert not workspace.root.exists()
    assert not (tmp_path / "tmp").exists()


def test_cleanup_run_workspace_keeps_concurrent_runs(tmp_path: Path) -> None:
    mine = create_run_workspace(tmp_path / "tmp", run_id="mine")
    other = create_run_workspace(tmp_path / "tmp", run_id="other")

    cleanup_run_workspace(mine)

    assert not mine.root.exists()
    assert other.root.is_dir()

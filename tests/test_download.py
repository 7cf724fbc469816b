import subprocess
from pathlib import Path

import pytest

from vod_transcribe.config import load_config
from vod_transcribe.ingest.download import StreamResolutionError, fetch_source, parse_stream_urls
from vod_transcribe.models import TimeRange


def _fake_run_command_factory(calls: list[list[str]], stream_output: str):
    def _fake_run_command(command: list[str]) -> subprocess.CompletedProcess[str]:
        calls.append(command)
        if "-g" in command:
            return subprocess.CompletedProcess(command, 0, stdout=stream_output, stderr="")
        output = Path(command[-1]) if command[0] == "ffmpeg" else Path(command[command.index("-o") + 1])
        output.write_bytes(b"mp4")
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    return _fake_run_command


def test_time_range_unbounded_sentinel() -> None:
    assert TimeRange(start="0", duration="-1").is_unbounded
    assert TimeRange(start="0", duration=" -1 ").is_unbounded
    assert not TimeRange(start="00:01:30", duration="60").is_unbounded
    assert not TimeRange(start="0", duration="0").is_unbounded


def test_parse_stream_urls_video_and_audio() -> None:
    streams = parse_stream_urls("https://cdn/v\nhttps://cdn/a\n")
    assert streams.video_url == "https://cdn/v"
    assert streams.audio_url == "https://cdn/a"


def test_parse_stream_urls_combined_stream() -> None:
    streams = parse_stream_urls("https://cdn/av\n")
    assert streams.video_url == "https://cdn/av"
    assert streams.audio_url is None


@pytest.mark.parametrize("output", ["", "\n\n", "https://a\nhttps://b\nhttps://c\n"])
def test_parse_stream_urls_rejects_unexpected_count(output: str) -> None:
    with pytest.raises(StreamResolutionError):
        parse_stream_urls(output)


def test_fetch_source_unbounded_downloads_full_vod(tmp_path: Path, monkeypatch) -> None:
    calls: list[list[str]] = []
    messages: list[str] = []
    monkeypatch.setattr(
        "vod_transcribe.ingest.download.run_command", _fake_run_command_factory(calls, "")
    )

    output = fetch_source(
        url="https://example.com/v",
        time_range=TimeRange(start="00:00:00", duration="-1"),
        output_path=tmp_path / "vod.mp4",
        yt_dlp_bin="yt-dlp",
        ffmpeg_bin="ffmpeg",
        download_config=load_config(environ={}).download,
        progress_hook=messages.append,
    )

    assert output.exists()
    assert len(calls) == 1
    assert calls[0][0] == "yt-dlp"
    assert "-g" not in calls[0]
    assert messages == ["Downloading full VOD..."]


def test_fetch_source_bounded_resolves_then_clips(tmp_path: Path, monkeypatch) -> None:
    calls: list[list[str]] = []
    messages: list[str] = []
    monkeypatch.setattr(
        "vod_transcribe.ingest.download.run_command",
        _fake_run_command_factory(calls, "https://cdn/v\nhttps://cdn/a\n"),
    )

    fetch_source(
        url="https://example.com/v",
        time_range=TimeRange(start="00:01:30", duration="60"),
        output_path=tmp_path / "vod.mp4",
        yt_dlp_bin="yt-dlp",
        ffmpeg_bin="ffmpeg",
        download_config=load_config(environ={}).download,
        progress_hook=messages.append,
    )

    assert calls[0] == ["yt-dlp", "-g", "https://example.com/v"]
    clip = calls[1]
    assert clip[0] == "ffmpeg"
    assert clip.count("00:01:30") == 2
    assert clip[clip.index("-t") + 1] == "60"
    assert "https://cdn/a" in clip
    assert messages == ["Downloading partial VOD..."]


def test_fetch_source_bounded_stops_on_bad_stream_list(tmp_path: Path, monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(
        "vod_transcribe.ingest.download.run_command", _fake_run_command_factory(calls, "")
    )

    with pytest.raises(StreamResolutionError):
        fetch_source(
            url="https://example.com/v",
            time_range=TimeRange(start="0", duration="30"),
            output_path=tmp_path / "vod.mp4",
            yt_dlp_bin="yt-dlp",
            ffmpeg_bin="ffmpeg",
            download_config=load_config(environ={}).download,
        )
    assert len(calls) == 1


def test_fetch_source_raises_when_output_missing(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        "vod_transcribe.ingest.download.run_command",
        lambda command: subprocess.CompletedProcess(command, 0, stdout="", stderr=""),
    )

    with pytest.raises(FileNotFoundError, match="fetched video"):
        fetch_source(
            url="https://example.com/v",
            time_range=TimeRange(start="0", duration="-1"),
            output_path=tmp_path / "vod.mp4",
            yt_dlp_bin="yt-dlp",
            ffmpeg_bin="ffmpeg",
            download_config=load_config(environ={}).download,
        )

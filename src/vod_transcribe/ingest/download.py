from __future__ import annotations

from pathlib import Path
from typing import Callable

from vod_transcribe.config import DownloadConfig
from vod_transcribe.logging_utils import get_logger
from vod_transcribe.models import StreamUrls, TimeRange
from vod_transcribe.utils.subprocess_utils import run_command

logger = get_logger(__name__)

ProgressHook = Callable[[str], None]


class StreamResolutionError(ValueError):
    pass


def _cookies_args(cookies_from_browser: str | None) -> list[str]:
    # Needed for members-only VODs.
    if cookies_from_browser:
        return ["--cookies-from-browser", cookies_from_browser]
    return []


def build_full_download_command(
    yt_dlp_bin: str,
    url: str,
    output_path: Path,
    *,
    format_selector: str,
    embed_thumbnail: bool = True,
    embed_chapters: bool = True,
    xattrs: bool = True,
    cookies_from_browser: str | None = None,
) -> list[str]:
    command = [yt_dlp_bin, "-f", format_selector]
    if embed_thumbnail:
        command.append("--embed-thumbnail")
    if embed_chapters:
        command.append("--embed-chapters")
    if xattrs:
        command.append("--xattrs")
    command.extend(_cookies_args(cookies_from_browser))
    command.extend([url, "-o", str(output_path)])
    return command


def build_resolve_streams_command(
    yt_dlp_bin: str,
    url: str,
    *,
    cookies_from_browser: str | None = None,
) -> list[str]:
    return [yt_dlp_bin, "-g", *_cookies_args(cookies_from_browser), url]


def parse_stream_urls(output: str) -> StreamUrls:
    urls = [line.strip() for line in output.splitlines() if line.strip()]
    if len(urls) == 2:
        return StreamUrls(video_url=urls[0], audio_url=urls[1])
    if len(urls) == 1:
        return StreamUrls(video_url=urls[0], audio_url=None)
    raise StreamResolutionError(
        f"Expected one combined stream URL or a video/audio URL pair, got {len(urls)} URLs."
    )


def build_clip_command(
    ffmpeg_bin: str,
    streams: StreamUrls,
    time_range: TimeRange,
    output_path: Path,
    *,
    video_codec: str,
    audio_codec: str,
) -> list[str]:
    command = [ffmpeg_bin, "-y", "-ss", time_range.start, "-i", streams.video_url]
    if streams.audio_url is not None:
        command.extend(["-ss", time_range.start, "-i", streams.audio_url])
        command.extend(["-map", "0:v", "-map", "1:a"])
    else:
        command.extend(["-map", "0:v", "-map", "0:a"])
    command.extend(
        [
            "-t",
            time_range.duration,
            "-c:v",
            video_codec,
            "-c:a",
            audio_codec,
            str(output_path),
        ]
    )
    return command


def resolve_stream_urls(
    yt_dlp_bin: str,
    url: str,
    *,
    cookies_from_browser: str | None = None,
) -> StreamUrls:
    command = build_resolve_streams_command(
        yt_dlp_bin, url, cookies_from_browser=cookies_from_browser
    )
    result = run_command(command)
    return parse_stream_urls(result.stdout)


def fetch_source(
    *,
    url: str,
    time_range: TimeRange,
    output_path: Path,
    yt_dlp_bin: str,
    ffmpeg_bin: str,
    download_config: DownloadConfig,
    progress_hook: ProgressHook | None = None,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if time_range.is_unbounded:
        if progress_hook is not None:
            progress_hook("Downloading full VOD...")
        if time_range.start.strip() not in {"0", "00:00:00"}:
            logger.debug("Ignoring start point %s for a full download", time_range.start)
        command = build_full_download_command(
            yt_dlp_bin,
            url,
            output_path,
            format_selector=download_config.format,
            embed_thumbnail=download_config.embed_thumbnail,
            embed_chapters=download_config.embed_chapters,
            xattrs=download_config.xattrs,
            cookies_from_browser=download_config.cookies_from_browser,
        )
    else:
        if progress_hook is not None:
            progress_hook("Downloading partial VOD...")
        streams = resolve_stream_urls(
            yt_dlp_bin, url, cookies_from_browser=download_config.cookies_from_browser
        )
        logger.debug(
            "Resolved %s stream(s) for %s",
            "separate" if streams.audio_url is not None else "combined",
            url,
        )
        command = build_clip_command(
            ffmpeg_bin,
            streams,
            time_range,
            output_path,
            video_codec=download_config.clip_video_codec,
            audio_codec=download_config.clip_audio_codec,
        )
    run_command(command)
    if not output_path.exists():
        raise FileNotFoundError(f"Expected fetched video was not created: {output_path}")
    return output_path

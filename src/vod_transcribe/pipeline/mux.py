from __future__ import annotations

from pathlib import Path

from vod_transcribe.utils.subprocess_utils import run_command


def build_subtitle_mux_command(
    *,
    ffmpeg_bin: str,
    source_video: Path,
    subtitles: Path,
    output_video: Path,
    subtitle_codec: str = "mov_text",
) -> list[str]:
    # Streams are copied as-is; only the subtitle track is encoded.
    return [
        ffmpeg_bin,
        "-i",
        str(source_video),
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(subtitles),
        "-c",
        "copy",
        "-c:s",
        subtitle_codec,
        "-y",
        str(output_video),
    ]


def embed_subtitles(
    *,
    ffmpeg_bin: str,
    source_video: Path,
    subtitles: Path,
    output_video: Path,
    subtitle_codec: str = "mov_text",
) -> Path:
    output_video.parent.mkdir(parents=True, exist_ok=True)
    command = build_subtitle_mux_command(
        ffmpeg_bin=ffmpeg_bin,
        source_video=source_video,
        subtitles=subtitles,
        output_video=output_video,
        subtitle_codec=subtitle_codec,
    )
    run_command(command)
    if not output_video.exists():
        raise FileNotFoundError(f"Final subtitled video was not created: {output_video}")
    return output_video

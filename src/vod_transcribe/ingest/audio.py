from __future__ import annotations

from pathlib import Path

from vod_transcribe.utils.subprocess_utils import run_command


def build_ffmpeg_extract_command(
    ffmpeg_bin: str,
    input_video: Path,
    output_wav: Path,
    sample_rate: int,
    channels: int,
    codec: str,
) -> list[str]:
    return [
        ffmpeg_bin,
        "-i",
        str(input_video),
        "-hide_banner",
        "-loglevel",
        "error",
        "-vn",
        "-ar",
        str(sample_rate),
        "-ac",
        str(channels),
        "-c:a",
        codec,
        "-y",
        str(output_wav),
    ]


def extract_waveform(
    ffmpeg_bin: str,
    input_video: Path,
    output_wav: Path,
    sample_rate: int = 16000,
    channels: int = 1,
    codec: str = "pcm_s16le",
) -> Path:
    output_wav.parent.mkdir(parents=True, exist_ok=True)
    command = build_ffmpeg_extract_command(
        ffmpeg_bin=ffmpeg_bin,
        input_video=input_video,
        output_wav=output_wav,
        sample_rate=sample_rate,
        channels=channels,
        codec=codec,
    )
    run_command(command)
    if not output_wav.exists():
        raise FileNotFoundError(f"Expected resampled audio was not created: {output_wav}")
    return output_wav

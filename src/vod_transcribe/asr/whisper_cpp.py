from __future__ import annotations

from pathlib import Path

from vod_transcribe.utils.subprocess_utils import run_command


def subtitle_path_for(waveform: Path) -> Path:
    """whisper.cpp names its SRT output after the full input file name."""
    return waveform.with_name(waveform.name + ".srt")


def build_whisper_command(
    whisper_bin: str,
    model_path: Path,
    language: str,
    waveform: Path,
    threads: int,
) -> list[str]:
    return [
        whisper_bin,
        "-m",
        str(model_path),
        "-l",
        language,
        "-f",
        str(waveform),
        "-t",
        str(threads),
        "-osrt",
        "--translate",
    ]


def transcribe_to_srt(
    *,
    whisper_bin: str,
    model_path: Path,
    language: str,
    waveform: Path,
    threads: int,
) -> Path:
    command = build_whisper_command(
        whisper_bin=whisper_bin,
        model_path=model_path,
        language=language,
        waveform=waveform,
        threads=threads,
    )
    run_command(command)
    subtitles = subtitle_path_for(waveform)
    if not subtitles.exists():
        raise FileNotFoundError(f"Expected subtitle file was not created: {subtitles}")
    return subtitles

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath

REMEDIATION_HINTS: dict[str, str] = {
    "ffmpeg": "ffmpeg is required (https://ffmpeg.org).",
    "yt-dlp": "yt-dlp is required (https://github.com/yt-dlp/yt-dlp).",
    "whisper": (
        "Whisper is required (https://github.com/ggerganov/whisper.cpp). "
        "Build it in the whisper.cpp checkout and put it on PATH, "
        "e.g. 'make && cp ./main /usr/local/bin/whisper', or set WHISPER_EXECUTABLE."
    ),
}


@dataclass(frozen=True)
class ToolCheck:
    name: str
    command: str
    path: str | None

    @property
    def ok(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class PreflightReport:
    ffmpeg: ToolCheck
    yt_dlp: ToolCheck
    whisper: ToolCheck

    @property
    def tools(self) -> tuple[ToolCheck, ToolCheck, ToolCheck]:
        return (self.ffmpeg, self.yt_dlp, self.whisper)

    @property
    def ok(self) -> bool:
        return all(tool.ok for tool in self.tools)


def _is_explicit_path(command: str) -> bool:
    return "/" in command or "\\" in command or command.lower().endswith(".exe")


def _has_windows_drive(command: str) -> bool:
    return bool(PureWindowsPath(command).drive)


def _resolve_command_path(command: str) -> str | None:
    normalized = command.strip()
    if not normalized:
        return None
    if _is_explicit_path(normalized):
        candidate = Path(normalized)
        if not candidate.is_absolute() and not _has_windows_drive(normalized):
            candidate = Path.cwd() / candidate
        if candidate.exists() and candidate.is_file():
            return str(candidate)
        return None
    return shutil.which(normalized)


def run_preflight(*, yt_dlp_bin: str, ffmpeg_bin: str, whisper_bin: str) -> PreflightReport:
    return PreflightReport(
        ffmpeg=ToolCheck(name="ffmpeg", command=ffmpeg_bin, path=_resolve_command_path(ffmpeg_bin)),
        yt_dlp=ToolCheck(name="yt-dlp", command=yt_dlp_bin, path=_resolve_command_path(yt_dlp_bin)),
        whisper=ToolCheck(
            name="whisper", command=whisper_bin, path=_resolve_command_path(whisper_bin)
        ),
    )


def preflight_errors(report: PreflightReport) -> list[str]:
    errors: list[str] = []
    for tool in report.tools:
        if not tool.ok:
            errors.append(
                f"{REMEDIATION_HINTS[tool.name]} (configured command: '{tool.command}')"
            )
    return errors

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomllib

DEFAULT_CONFIG: dict[str, Any] = {
    "tools": {
        "yt_dlp": "yt-dlp",
        "ffmpeg": "ffmpeg",
        "whisper": "whisper",
    },
    "whisper": {
        # Use a multilingual model to translate from a foreign language to English.
        "model_path": "models/ggml-small.bin",
        "language": "en",
        "threads": 8,
    },
    "pipeline": {
        "workspace_dir": "tmp",
        "results_dir": "res",
        "output_name": "res.mp4",
    },
    "audio": {
        "sample_rate": 16000,
        "channels": 1,
        "codec": "pcm_s16le",
    },
    "download": {
        "format": "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]/best",
        "embed_thumbnail": True,
        "embed_chapters": True,
        "xattrs": True,
        "cookies_from_browser": None,
        "clip_video_codec": "libx264",
        "clip_audio_codec": "aac",
    },
    "mux": {
        "subtitle_codec": "mov_text",
    },
}

# Environment variable -> (table, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "WHISPER_EXECUTABLE": ("tools", "whisper"),
    "MODEL_PATH": ("whisper", "model_path"),
    "WHISPER_LANG": ("whisper", "language"),
}


@dataclass(frozen=True)
class ToolConfig:
    yt_dlp: str
    ffmpeg: str
    whisper: str


@dataclass(frozen=True)
class WhisperConfig:
    model_path: Path
    language: str
    threads: int


@dataclass(frozen=True)
class PipelineConfig:
    workspace_dir: Path
    results_dir: Path
    output_name: str

    @property
    def output_path(self) -> Path:
        return self.results_dir / self.output_name


@dataclass(frozen=True)
class AudioConfig:
    sample_rate: int
    channels: int
    codec: str


@dataclass(frozen=True)
class DownloadConfig:
    format: str
    embed_thumbnail: bool
    embed_chapters: bool
    xattrs: bool
    cookies_from_browser: str | None
    clip_video_codec: str
    clip_audio_codec: str


@dataclass(frozen=True)
class MuxConfig:
    subtitle_codec: str


@dataclass(frozen=True)
class AppConfig:
    tools: ToolConfig
    whisper: WhisperConfig
    pipeline: PipelineConfig
    audio: AudioConfig
    download: DownloadConfig
    mux: MuxConfig


def _required_non_empty_str(value: object, field: str) -> str:
    normalized = str(value).strip()
    if not normalized:
        raise ValueError(f"Config field '{field}' must be a non-empty string.")
    return normalized


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip()
    return normalized or None


def _required_positive_int(value: object, field: str) -> int:
    try:
        parsed = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Config field '{field}' must be an integer.") from exc
    if parsed <= 0:
        raise ValueError(f"Config field '{field}' must be > 0.")
    return parsed


def _required_bool(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{field}' must be true or false.")
    return value


def _deep_merge(left: dict[str, Any], right: dict[str, Any]) -> dict[str, Any]:
    merged = dict(left)
    for key, value in right.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        data = tomllib.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a TOML table: {path}")
    return data


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for variable, (table, field) in ENV_OVERRIDES.items():
        value = environ.get(variable, "").strip()
        if value:
            overrides.setdefault(table, {})[field] = value
    return _deep_merge(data, overrides)


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    data = DEFAULT_CONFIG
    if config_path is not None:
        data = _deep_merge(data, _read_toml(config_path))
    data = _apply_env_overrides(data, os.environ if environ is None else environ)

    tools_table = data.get("tools", {})
    whisper_table = data.get("whisper", {})
    pipeline_table = data.get("pipeline", {})
    audio_table = data.get("audio", {})
    download_table = data.get("download", {})
    mux_table = data.get("mux", {})

    return AppConfig(
        tools=ToolConfig(
            yt_dlp=_required_non_empty_str(tools_table.get("yt_dlp"), "tools.yt_dlp"),
            ffmpeg=_required_non_empty_str(tools_table.get("ffmpeg"), "tools.ffmpeg"),
            whisper=_required_non_empty_str(tools_table.get("whisper"), "tools.whisper"),
        ),
        whisper=WhisperConfig(
            model_path=Path(
                _required_non_empty_str(whisper_table.get("model_path"), "whisper.model_path")
            ),
            language=_required_non_empty_str(whisper_table.get("language"), "whisper.language"),
            threads=_required_positive_int(whisper_table.get("threads"), "whisper.threads"),
        ),
        pipeline=PipelineConfig(
            workspace_dir=Path(
                _required_non_empty_str(
                    pipeline_table.get("workspace_dir"), "pipeline.workspace_dir"
                )
            ),
            results_dir=Path(
                _required_non_empty_str(pipeline_table.get("results_dir"), "pipeline.results_dir")
            ),
            output_name=_required_non_empty_str(
                pipeline_table.get("output_name"), "pipeline.output_name"
            ),
        ),
        audio=AudioConfig(
            sample_rate=_required_positive_int(audio_table.get("sample_rate"), "audio.sample_rate"),
            channels=_required_positive_int(audio_table.get("channels"), "audio.channels"),
            codec=_required_non_empty_str(audio_table.get("codec"), "audio.codec"),
        ),
        download=DownloadConfig(
            format=_required_non_empty_str(download_table.get("format"), "download.format"),
            embed_thumbnail=_required_bool(
                download_table.get("embed_thumbnail"), "download.embed_thumbnail"
            ),
            embed_chapters=_required_bool(
                download_table.get("embed_chapters"), "download.embed_chapters"
            ),
            xattrs=_required_bool(download_table.get("xattrs"), "download.xattrs"),
            cookies_from_browser=_optional_str(download_table.get("cookies_from_browser")),
            clip_video_codec=_required_non_empty_str(
                download_table.get("clip_video_codec"), "download.clip_video_codec"
            ),
            clip_audio_codec=_required_non_empty_str(
                download_table.get("clip_audio_codec"), "download.clip_audio_codec"
            ),
        ),
        mux=MuxConfig(
            subtitle_codec=_required_non_empty_str(
                mux_table.get("subtitle_codec"), "mux.subtitle_codec"
            ),
        ),
    )

from __future__ import annotations

from pathlib import Path
from typing import Callable

from vod_transcribe.asr.whisper_cpp import transcribe_to_srt
from vod_transcribe.config import AppConfig
from vod_transcribe.ingest.audio import extract_waveform
from vod_transcribe.ingest.download import fetch_source
from vod_transcribe.io import cleanup_run_workspace, create_run_workspace
from vod_transcribe.models import PipelineArtifacts, TimeRange
from vod_transcribe.pipeline.mux import embed_subtitles

ProgressHook = Callable[[str], None]


def run_transcribe_pipeline(
    *,
    source_url: str,
    time_range: TimeRange,
    config: AppConfig,
    output_path: Path | None = None,
    workspace_dir: Path | None = None,
    run_id: str | None = None,
    keep_intermediates: bool = False,
    progress_hook: ProgressHook | None = None,
) -> PipelineArtifacts:
    """Fetch, resample, transcribe and mux one VOD into a subtitled MP4.

    Stages run strictly in order and the first failure propagates. The run's
    intermediate directory is removed afterwards whether or not the run
    succeeded, unless ``keep_intermediates`` is set.
    """

    def _progress(message: str) -> None:
        if progress_hook is not None:
            progress_hook(message)

    final_output = output_path or config.pipeline.output_path
    workspace = create_run_workspace(workspace_dir or config.pipeline.workspace_dir, run_id)
    try:
        fetched_video = fetch_source(
            url=source_url,
            time_range=time_range,
            output_path=workspace.fetched_video,
            yt_dlp_bin=config.tools.yt_dlp,
            ffmpeg_bin=config.tools.ffmpeg,
            download_config=config.download,
            progress_hook=progress_hook,
        )

        _progress("Extracting audio and resampling...")
        waveform = extract_waveform(
            ffmpeg_bin=config.tools.ffmpeg,
            input_video=fetched_video,
            output_wav=workspace.waveform,
            sample_rate=config.audio.sample_rate,
            channels=config.audio.channels,
            codec=config.audio.codec,
        )

        _progress("Transcribing to subtitle file...")
        _progress(f"Whisper specified at: {config.tools.whisper}")
        subtitles = transcribe_to_srt(
            whisper_bin=config.tools.whisper,
            model_path=config.whisper.model_path,
            language=config.whisper.language,
            waveform=waveform,
            threads=config.whisper.threads,
        )

        _progress("Embedding subtitle track...")
        output_video = embed_subtitles(
            ffmpeg_bin=config.tools.ffmpeg,
            source_video=fetched_video,
            subtitles=subtitles,
            output_video=final_output,
            subtitle_codec=config.mux.subtitle_codec,
        )
    finally:
        if not keep_intermediates:
            _progress("Cleaning up...")
            cleanup_run_workspace(workspace)

    return PipelineArtifacts(
        output_video=output_video,
        run_root=workspace.root,
        cleanup_performed=not keep_intermediates,
    )

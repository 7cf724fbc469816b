from __future__ import annotations

from pathlib import Path

import typer

from vod_transcribe.config import load_config
from vod_transcribe.ingest.download import StreamResolutionError
from vod_transcribe.logging_utils import setup_logging
from vod_transcribe.models import TimeRange
from vod_transcribe.pipeline.run import run_transcribe_pipeline
from vod_transcribe.preflight import preflight_errors, run_preflight
from vod_transcribe.utils.subprocess_utils import CommandExecutionError

HELP_TEXT = "\n".join(
    [
        "Usage: transcribe-vod <video_url> <start_point> <duration>",
        "Use start_point as 00:00:00 if you want to start from the beginning and duration as -1",
        "Configurable env variables: MODEL_PATH, WHISPER_EXECUTABLE, WHISPER_LANG",
        "This will produce an MP4 muxed file called res.mp4 in the results directory",
        "Requirements: ffmpeg yt-dlp whisper",
        "Whisper needs to be built into the main binary with make, then you can rename it "
        "to something like 'whisper' and add it to your PATH for convenience.",
        "E.g. in the root of Whisper.cpp, run: 'make && cp ./main /usr/local/bin/whisper'",
    ]
)

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _stage_message(message: str) -> None:
    typer.echo(message, err=True)


# Unknown options are kept as positionals so a duration of -1 parses.
@app.command(context_settings={"ignore_unknown_options": True})
def transcribe(
    source_url: str = typer.Argument(..., help="VOD URL, or 'help' to print usage."),
    start_point: str | None = typer.Argument(None, help="Start offset, HH:MM:SS or 0."),
    duration: str | None = typer.Argument(
        None, help="Duration in seconds, or -1 for the whole VOD."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Optional TOML config file to override defaults."
    ),
    output: Path | None = typer.Option(
        None, "--output", help="Final video path (default: res/res.mp4)."
    ),
    workspace: Path | None = typer.Option(
        None, "--workspace", help="Directory for intermediate files (default: tmp)."
    ),
    keep_temp: bool = typer.Option(
        False, "--keep-temp", help="Keep intermediate files after the run."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log external commands."),
) -> None:
    """Download a live stream VOD, transcribe it with whisper.cpp and embed the subtitles."""
    if source_url == "help":
        typer.echo(HELP_TEXT)
        raise typer.Exit(code=0)
    if start_point is None or duration is None:
        raise typer.BadParameter(
            "start_point and duration are required (use 0 and -1 for the whole VOD)."
        )

    setup_logging("DEBUG" if verbose else None)
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    report = run_preflight(
        yt_dlp_bin=config.tools.yt_dlp,
        ffmpeg_bin=config.tools.ffmpeg,
        whisper_bin=config.tools.whisper,
    )
    errors = preflight_errors(report)
    if errors:
        for error in errors:
            typer.echo(error, err=True)
        raise typer.Exit(code=1)

    try:
        artifacts = run_transcribe_pipeline(
            source_url=source_url,
            time_range=TimeRange(start=start_point, duration=duration),
            config=config,
            output_path=output,
            workspace_dir=workspace,
            keep_intermediates=keep_temp,
            progress_hook=_stage_message,
        )
    except CommandExecutionError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=exc.exit_status) from exc
    except FileExistsError as exc:
        typer.echo(f"Run directory already exists: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except StreamResolutionError as exc:
        typer.echo(f"Could not resolve stream URLs: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected pipeline failure: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if keep_temp:
        typer.echo(f"Intermediate files kept in: {artifacts.run_root}", err=True)
    typer.echo(f"Done! Your finished file is ready: {artifacts.output_video}", err=True)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

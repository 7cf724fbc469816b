from __future__ import annotations

import shlex
import subprocess

from vod_transcribe.logging_utils import get_logger

logger = get_logger(__name__)


class CommandExecutionError(RuntimeError):
    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        joined = shlex.join(command)
        super().__init__(f"Command failed ({returncode}): {joined}\n{stderr.strip()}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr

    @property
    def exit_status(self) -> int:
        """Shell-style status: 128+N for a tool killed by signal N."""
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode


def run_command(command: list[str]) -> subprocess.CompletedProcess[str]:
    logger.debug("Running: %s", shlex.join(command))
    result = subprocess.run(
        command,
        check=False,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    if result.returncode != 0:
        logger.debug("Exited with %d: %s", result.returncode, command[0])
        raise CommandExecutionError(command, result.returncode, result.stderr or "")
    return result

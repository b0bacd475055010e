"""
Subprocess helpers.

All external commands (platform probes, verification, the local build) run
through run_command(), which reports how the process ended instead of raising.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

from artifactfetch.log_utils import logger

Command = Union[str, Sequence[str]]


@dataclass(frozen=True)
class CommandResult:
    exit_code: Optional[int]
    signal: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        """
        Return True if the process exited normally with status 0.
        """
        return self.exit_code == 0 and self.signal is None


def describe_command(command: Command) -> str:
    if isinstance(command, str):
        return command
    return " ".join(command)


def run_command(
    command: Command,
    forward_output: bool = False,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
) -> CommandResult:
    """
    Run a command to completion and report how it ended.

    String commands go through the shell, sequences are executed directly. The
    child inherits the current environment unless `env` is given.

    Parameters:
        command: Shell string or argv sequence.
        forward_output: When True the child writes straight to this process's
            stdout/stderr and nothing is captured.
        env: Optional environment for the child.
        cwd: Optional working directory for the child.

    Returns:
        CommandResult: exit code (None when killed by a signal or when the
        command could not be started), terminating signal, captured output.
        Output that is not valid text is decoded with replacement characters.
    """
    logger.debug(f"Running command: {describe_command(command)}")
    try:
        completed = subprocess.run(
            command,
            shell=isinstance(command, str),
            capture_output=not forward_output,
            text=True,
            errors="replace",
            env=dict(env) if env is not None else os.environ.copy(),
            cwd=cwd,
            check=False,
        )
    except OSError as exc:
        logger.debug(f"Could not start {describe_command(command)}: {exc}")
        return CommandResult(exit_code=None, stderr=str(exc))

    returncode = completed.returncode
    if returncode < 0:
        return CommandResult(
            exit_code=None,
            signal=-returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
    return CommandResult(
        exit_code=returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )

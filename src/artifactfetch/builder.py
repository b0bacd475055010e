"""
Local build fallback.
"""

from __future__ import annotations

import shlex
import sys
from typing import Callable, Optional

from artifactfetch.commands import CommandResult, run_command
from artifactfetch.config import InstallConfig
from artifactfetch.exceptions import FallbackBuildError
from artifactfetch.log_utils import logger


def default_rebuild_command() -> str:
    return f"{shlex.quote(sys.executable)} setup.py build_ext --inplace"


def rebuild_command(config: Optional[InstallConfig]) -> str:
    if config is not None and config.manifest.rebuild:
        return config.manifest.rebuild
    return default_rebuild_command()


def run_fallback_build(
    config: Optional[InstallConfig],
    runner: Callable[..., CommandResult] = run_command,
) -> None:
    """
    Build the native module from source.

    Build output is always forwarded to the console. This step is not
    recovered: any failure is raised to the caller.

    Raises:
        FallbackBuildError: If the build exits non-zero, is killed by a signal
            or cannot be started.
    """
    command = rebuild_command(config)
    logger.debug(f"Running local build: {command}")
    result = runner(command, forward_output=True)
    if result.succeeded:
        return

    if result.signal is not None:
        details = f"terminated by signal {result.signal}"
    elif result.exit_code is not None:
        details = f"exited with status {result.exit_code}"
    else:
        details = result.stderr or "could not be started"
    raise FallbackBuildError(
        "Local build failed",
        command=command,
        exit_code=result.exit_code,
        signal=result.signal,
        details=details,
    )

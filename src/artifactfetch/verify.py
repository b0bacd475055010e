"""
Post-install verification of a downloaded artifact.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from artifactfetch.commands import CommandResult, run_command
from artifactfetch.config import InstallConfig
from artifactfetch.constants import MSG_NO_VERIFY_COMMAND, MSG_VERIFICATION_FAILED
from artifactfetch.log_utils import logger


class VerificationOutcome(Enum):
    PASSED = "passed"
    FAILED = "failed"
    UNAVAILABLE = "unavailable"

    @property
    def succeeded(self) -> bool:
        # UNAVAILABLE counts as a failure: an unverifiable artifact is rebuilt
        return self is VerificationOutcome.PASSED


def select_verify_command(config: InstallConfig) -> Optional[str]:
    return config.manifest.verify_build or config.manifest.test


def verify_build(
    config: InstallConfig, runner: Callable[..., CommandResult] = run_command
) -> VerificationOutcome:
    """
    Run the project's verify-build command (or its test command) against the
    freshly written artifact.

    Output is suppressed unless the config asks for verification results to be
    shown.

    Returns:
        VerificationOutcome: PASSED on exit status 0, FAILED on a non-zero exit,
        a signal or a command that cannot be started, UNAVAILABLE when no
        command is configured.
    """
    command = select_verify_command(config)
    if not command:
        logger.info(MSG_NO_VERIFY_COMMAND)
        return VerificationOutcome.UNAVAILABLE

    logger.debug(f"Verifying artifact with: {command}")
    result = runner(command, forward_output=config.show_verification_output)
    if result.succeeded:
        return VerificationOutcome.PASSED

    if result.signal is not None:
        logger.debug(f"Verification command terminated by signal {result.signal}")
    else:
        logger.debug(f"Verification command exited with status {result.exit_code}")
    logger.info(MSG_VERIFICATION_FAILED)
    return VerificationOutcome.FAILED

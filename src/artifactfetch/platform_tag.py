"""
Platform, architecture and ABI fingerprinting for asset names.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Callable, Optional

from artifactfetch.commands import CommandResult, run_command
from artifactfetch.constants import (
    ARCH_ALIASES,
    GLIBC_PROBE_COMMAND,
    LIBC_INFO_PROBE_COMMAND,
    MUSL_MARKER,
    MUSL_VARIANT,
)
from artifactfetch.log_utils import logger

Runner = Callable[..., CommandResult]


@dataclass(frozen=True)
class PlatformTag:
    os: str
    libc_variant: Optional[str] = None

    def __str__(self) -> str:
        if self.libc_variant:
            return f"{self.os}-{self.libc_variant}"
        return self.os


def _probe_reports_musl(result: CommandResult) -> bool:
    if result.exit_code == 0:
        return MUSL_MARKER in result.stdout
    if result.exit_code == 1:
        return MUSL_MARKER in result.stderr
    return False


def detect_platform(
    runner: Runner = run_command, os_name: Optional[str] = None
) -> PlatformTag:
    """
    Return the platform tag used in asset names.

    Non-Linux systems are returned as-is. On Linux, a successful
    `getconf GNU_LIBC_VERSION` means glibc and a plain `linux` tag; otherwise
    `ldd --version` output is searched for "musl" (stdout when it exits 0,
    stderr when it exits 1). A probe killed by a signal, or one that cannot be
    started, degrades to plain `linux`. Never raises.
    """
    os_name = os_name or sys.platform
    if os_name != "linux":
        return PlatformTag(os_name)

    result = runner(list(GLIBC_PROBE_COMMAND))
    if result.succeeded:
        return PlatformTag(os_name)

    result = runner(list(LIBC_INFO_PROBE_COMMAND))
    if result.signal is not None:
        logger.debug(f"libc probe terminated by signal {result.signal}")
        return PlatformTag(os_name)
    if _probe_reports_musl(result):
        return PlatformTag(os_name, MUSL_VARIANT)
    return PlatformTag(os_name)


def get_arch() -> str:
    machine = platform.machine().lower()
    return ARCH_ALIASES.get(machine, machine)


def get_abi_version() -> str:
    """
    Return the interpreter ABI identifier, e.g. "cpython-312".

    Falls back to the C API version number for interpreters that do not
    publish a cache tag.
    """
    cache_tag = sys.implementation.cache_tag
    if cache_tag:
        return cache_tag
    return str(sys.api_version)

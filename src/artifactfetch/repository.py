"""
Repository reference parsing and release asset URL construction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from artifactfetch.constants import DEFAULT_DOWNLOAD_HOST, RELEASE_DOWNLOAD_PATH

# Ordered: the first pattern that matches wins
REPOSITORY_PATTERNS = (
    re.compile(
        r"^(?:https?|git|git\+ssh|git\+https?)://github.com/([^/]+)/([^/.]+)(?:/|\.git\b|$)",
        re.IGNORECASE,
    ),
    re.compile(r"^github:([^/]+)/([^#]+)(?:#|$)", re.IGNORECASE),
    re.compile(r"^([^:/]+)/([^#]+)(?:#|$)", re.IGNORECASE),
)


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    name: str


@dataclass(frozen=True)
class AssetRequest:
    """Everything needed to name a release asset, resolved before any download."""

    repository: Optional[RepositoryRef]
    version: Optional[str]
    platform: str
    arch: str
    abi_version: str
    prefix: str = ""
    suffix: str = ""
    host: str = DEFAULT_DOWNLOAD_HOST


def parse_repository(ref: Optional[str]) -> Optional[RepositoryRef]:
    """
    Extract owner and name from a repository reference.

    Accepts full GitHub URLs (http(s), git, git+ssh, git+http(s) schemes, with
    an optional `.git` or trailing path), `github:owner/name` and bare
    `owner/name` shorthands, each optionally followed by `#ref`.

    Returns:
        RepositoryRef | None: The first match, or None for empty input or no match.
    """
    if not ref:
        return None
    for pattern in REPOSITORY_PATTERNS:
        match = pattern.match(ref)
        if match:
            return RepositoryRef(owner=match.group(1), name=match.group(2))
    return None


def resolve_host(
    override: Optional[str] = None, env_value: Optional[str] = None
) -> str:
    """
    Pick the release host: explicit override, then the mirror environment
    variable value, then the public default.
    """
    host = override or env_value or DEFAULT_DOWNLOAD_HOST
    return host.rstrip("/")


def build_asset_url(request: AssetRequest) -> Optional[str]:
    """
    Build the codec-less asset URL for a release download.

    Returns None when the repository or version is missing, in which case
    there is nothing to download.
    """
    if request.repository is None or not request.version:
        return None
    repo = request.repository
    file_name = (
        f"{request.prefix}{request.platform}-{request.arch}-"
        f"{request.abi_version}{request.suffix}"
    )
    return (
        f"{request.host}/{repo.owner}/{repo.name}/{RELEASE_DOWNLOAD_PATH}/"
        f"{request.version}/{file_name}"
    )

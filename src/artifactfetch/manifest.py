"""
Package manifest reader.

Reads the repository location, version and the optional verify/test/rebuild
commands from a project's pyproject.toml.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from typing import Any, Dict, Optional

from artifactfetch.constants import (
    MANIFEST_GITHUB_KEY,
    MANIFEST_REBUILD_KEY,
    MANIFEST_REPOSITORY_URL_KEYS,
    MANIFEST_TEST_KEY,
    MANIFEST_TOOL_SECTION,
    MANIFEST_VERIFY_BUILD_KEY,
)
from artifactfetch.exceptions import ManifestError
from artifactfetch.log_utils import logger


@dataclass(frozen=True)
class Manifest:
    repository: Optional[str] = None
    version: Optional[str] = None
    verify_build: Optional[str] = None
    test: Optional[str] = None
    rebuild: Optional[str] = None


def _string_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _table(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def parse_manifest(data: Dict[str, Any]) -> Manifest:
    """
    Build a Manifest from already-parsed pyproject data.

    The repository comes from `[tool.artifactfetch].github` when present,
    otherwise from the first of the Repository, Source or Homepage entries in
    `[project.urls]`. Non-string values are treated as absent.
    """
    project = _table(data, "project")
    tool = _table(_table(data, "tool"), MANIFEST_TOOL_SECTION)
    urls = _table(project, "urls")

    repository = _string_or_none(tool.get(MANIFEST_GITHUB_KEY))
    if repository is None:
        for key in MANIFEST_REPOSITORY_URL_KEYS:
            repository = _string_or_none(urls.get(key))
            if repository:
                break

    return Manifest(
        repository=repository,
        version=_string_or_none(project.get("version")),
        verify_build=_string_or_none(tool.get(MANIFEST_VERIFY_BUILD_KEY)),
        test=_string_or_none(tool.get(MANIFEST_TEST_KEY)),
        rebuild=_string_or_none(tool.get(MANIFEST_REBUILD_KEY)),
    )


def load_manifest(path: str) -> Manifest:
    """
    Read and parse the manifest at `path`.

    Raises:
        ManifestError: If the file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ManifestError("Could not read manifest", path=path, details=str(exc))
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError("Could not parse manifest", path=path, details=str(exc))

    manifest = parse_manifest(data)
    logger.debug(f"Loaded manifest {path}: {manifest}")
    return manifest

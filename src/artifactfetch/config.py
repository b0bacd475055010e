"""
Run configuration.

The InstallConfig is built once, near the start of a run, from CLI options,
the optional user configuration file, the package manifest and the process
environment. Components receive it explicitly and never read the environment
themselves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

import platformdirs
import yaml

from artifactfetch.commands import CommandResult, run_command
from artifactfetch.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_HOST_ENV_VAR,
    DEV_SHOW_VERIFICATION_ENV_VAR,
    DEV_SKIP_ENV_VAR,
    MANIFEST_FILE_NAME,
    MSG_NO_ARTIFACT,
    MSG_NO_MANIFEST,
)
from artifactfetch.exceptions import ConfigurationError, ManifestError
from artifactfetch.log_utils import logger
from artifactfetch.manifest import Manifest, load_manifest
from artifactfetch.platform_tag import (
    PlatformTag,
    detect_platform,
    get_abi_version,
    get_arch,
)
from artifactfetch.repository import AssetRequest, parse_repository, resolve_host

USER_CONFIG_KEYS = ("HOST", "HOST_VAR", "PREFIX", "SUFFIX", "LOG_LEVEL", "LOG_TO_FILE")
USER_CONFIG_FLAG_KEYS = ("LOG_TO_FILE",)


@dataclass(frozen=True)
class InstallConfig:
    artifact_path: Optional[str]
    platform: PlatformTag
    arch: str
    abi_version: str
    working_dir: str
    prefix: str = ""
    suffix: str = ""
    host_override: Optional[str] = None
    host_var: str = DEFAULT_HOST_ENV_VAR
    host_env_value: Optional[str] = None
    manifest_path: Optional[str] = None
    manifest: Manifest = field(default_factory=Manifest)
    manifest_error: Optional[str] = None
    dev_skip: bool = False
    show_verification_output: bool = False

    @property
    def host(self) -> str:
        return resolve_host(self.host_override, self.host_env_value)

    def validate(self) -> None:
        """
        Check that the run has what it needs to download an artifact.

        Raises:
            ManifestError: If the manifest could not be loaded.
            ConfigurationError: If no artifact path was given.
        """
        if self.manifest_error:
            raise ManifestError(
                MSG_NO_MANIFEST.format(path=self.manifest_path),
                path=self.manifest_path,
                details=self.manifest_error,
            )
        if not self.artifact_path:
            raise ConfigurationError(MSG_NO_ARTIFACT)

    def asset_request(self) -> AssetRequest:
        return AssetRequest(
            repository=parse_repository(self.manifest.repository),
            version=self.manifest.version,
            platform=str(self.platform),
            arch=self.arch,
            abi_version=self.abi_version,
            prefix=self.prefix,
            suffix=self.suffix,
            host=self.host,
        )


def get_config_file() -> str:
    return os.path.join(platformdirs.user_config_dir(APP_NAME), CONFIG_FILE_NAME)


def load_user_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load optional user defaults from the artifactfetch YAML file.

    Parameters:
        path (str | None): Explicit file to read; defaults to `artifactfetch.yaml`
            in the platformdirs user config directory.

    Returns:
        dict: Recognised keys only (HOST, HOST_VAR, PREFIX, SUFFIX, LOG_LEVEL,
        LOG_TO_FILE). LOG_TO_FILE is a bool, the others are strings. Empty
        when the file is missing, unreadable or malformed.
    """
    config_path = path or get_config_file()
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning(f"Ignoring unreadable configuration {config_path}: {exc}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring configuration {config_path}: expected a mapping")
        return {}
    values: Dict[str, Any] = {}
    for key in USER_CONFIG_KEYS:
        value = data.get(key)
        if value is None:
            continue
        # YAML turns e.g. `LOG_LEVEL: 10` into an int
        values[key] = bool(value) if key in USER_CONFIG_FLAG_KEYS else str(value)
    return values


def default_manifest_path(environ: Mapping[str, str]) -> str:
    base_dir = environ.get("PWD") or os.getcwd()
    return os.path.join(base_dir, MANIFEST_FILE_NAME)


def build_install_config(
    artifact_path: Optional[str] = None,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
    host: Optional[str] = None,
    host_var: Optional[str] = None,
    manifest_path: Optional[str] = None,
    user_config: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    runner: Callable[..., CommandResult] = run_command,
) -> InstallConfig:
    """
    Resolve every input of a run into one immutable InstallConfig.

    Explicit arguments take precedence over `user_config` values, which take
    precedence over built-in defaults. A manifest that cannot be loaded does
    not raise; the error is recorded in `manifest_error` so the installer can
    route to the local build.

    Parameters:
        artifact_path: Target path for the binary (`--artifact`).
        prefix, suffix: Asset file name decorations.
        host: Mirror host override (`--host`).
        host_var: Name of the environment variable carrying a mirror host.
        manifest_path: pyproject.toml to read; defaults to one under $PWD.
        user_config: Values from load_user_config().
        environ: Environment mapping; defaults to os.environ.
        runner: Command runner used for the platform probes.
    """
    env = os.environ if environ is None else environ
    defaults = user_config or {}

    resolved_host_var = host_var or defaults.get("HOST_VAR") or DEFAULT_HOST_ENV_VAR
    manifest_path = manifest_path or default_manifest_path(env)

    manifest = Manifest()
    manifest_error = None
    try:
        manifest = load_manifest(manifest_path)
    except ManifestError as exc:
        manifest_error = str(exc)
        logger.debug(f"Manifest unavailable: {exc}")

    return InstallConfig(
        artifact_path=artifact_path or None,
        platform=detect_platform(runner),
        arch=get_arch(),
        abi_version=get_abi_version(),
        working_dir=os.getcwd(),
        prefix=prefix if prefix is not None else str(defaults.get("PREFIX", "")),
        suffix=suffix if suffix is not None else str(defaults.get("SUFFIX", "")),
        host_override=host or defaults.get("HOST") or None,
        host_var=resolved_host_var,
        host_env_value=env.get(resolved_host_var) or None,
        manifest_path=manifest_path,
        manifest=manifest,
        manifest_error=manifest_error,
        dev_skip=bool(env.get(DEV_SKIP_ENV_VAR)),
        show_verification_output=bool(env.get(DEV_SHOW_VERIFICATION_ENV_VAR)),
    )

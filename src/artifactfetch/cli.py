# src/artifactfetch/cli.py

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import platformdirs

from artifactfetch import log_utils
from artifactfetch.config import build_install_config, load_user_config
from artifactfetch.constants import APP_NAME, DEFAULT_HOST_ENV_VAR
from artifactfetch.exceptions import FallbackBuildError
from artifactfetch.installer import ArtifactInstaller


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=(
            "Install a prebuilt native artifact from a GitHub release, "
            "falling back to a local build"
        ),
    )
    parser.add_argument(
        "--artifact",
        help="Path where the downloaded binary is written (required to download)",
    )
    parser.add_argument("--prefix", help="String prepended to the asset file name")
    parser.add_argument("--suffix", help="String appended to the asset file name")
    parser.add_argument("--host", help="Mirror host overriding the release host")
    parser.add_argument(
        "--host-var",
        dest="host_var",
        help=f"Environment variable carrying a mirror host (default: {DEFAULT_HOST_ENV_VAR})",
    )
    parser.add_argument(
        "--manifest",
        help="pyproject.toml to read (default: pyproject.toml in $PWD)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Log level name, e.g. DEBUG or INFO",
    )
    return parser


def _configure_logging(log_level: Optional[str], log_to_file: bool) -> None:
    if log_level:
        log_utils.set_log_level(log_level)
    if log_to_file:
        log_utils.add_file_logging(
            Path(platformdirs.user_log_dir(APP_NAME)), level_name=log_level or "INFO"
        )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the artifactfetch command-line interface.

    Resolves the run configuration, then either installs a verified prebuilt
    artifact or builds locally. Exits non-zero only when the local build
    fails, using the build's exit status when it has one.
    """
    args = build_parser().parse_args(argv)
    user_config = load_user_config()

    _configure_logging(
        args.log_level or user_config.get("LOG_LEVEL"),
        bool(user_config.get("LOG_TO_FILE")),
    )

    config = build_install_config(
        artifact_path=args.artifact,
        prefix=args.prefix,
        suffix=args.suffix,
        host=args.host,
        host_var=args.host_var,
        manifest_path=args.manifest,
        user_config=user_config,
    )

    try:
        ArtifactInstaller(config).run()
    except FallbackBuildError as error:
        log_utils.logger.error(f"Local build failed: {error}")
        sys.exit(error.exit_code or 1)
    return 0


if __name__ == "__main__":
    main()

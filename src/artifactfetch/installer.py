"""
Install orchestration.

ArtifactInstaller walks a fixed state machine: resolve configuration, check
for development mode, build the asset URL, try the brotli and then the gzip
asset, verify the result. Any precondition that fails jumps straight to the
local build, which is the only step allowed to fail the run.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional

from artifactfetch.builder import run_fallback_build
from artifactfetch.commands import CommandResult, run_command
from artifactfetch.config import InstallConfig
from artifactfetch.constants import (
    MSG_BUILDING_LOCALLY,
    MSG_DEV_FLAG,
    MSG_DONE,
    MSG_NO_REPOSITORY,
    MSG_TRYING,
    MSG_WRITING,
)
from artifactfetch.decompress import (
    BROTLI,
    GZIP,
    Codec,
    available_codecs,
    decompress,
    write_artifact,
)
from artifactfetch.env_utils import is_development
from artifactfetch.exceptions import (
    ConfigurationError,
    DecompressionError,
    DownloadError,
)
from artifactfetch.fetcher import fetch
from artifactfetch.log_utils import logger
from artifactfetch.repository import build_asset_url
from artifactfetch.verify import verify_build


class InstallState(Enum):
    INIT = "init"
    CONFIG_RESOLVE = "config_resolve"
    DEV_CHECK = "dev_check"
    URL_RESOLVE = "url_resolve"
    TRY_BROTLI = "try_brotli"
    TRY_GZIP = "try_gzip"
    VERIFY = "verify"
    DONE = "done"
    FALLBACK_BUILD = "fallback_build"


TERMINAL_STATES = frozenset({InstallState.DONE, InstallState.FALLBACK_BUILD})


class InstallOutcome(Enum):
    DOWNLOADED = "downloaded"
    BUILT = "built"


class ArtifactInstaller:
    """
    Obtain a prebuilt artifact for the current platform, or build it locally.

    Usage:
        installer = ArtifactInstaller(config)
        outcome = installer.run()

    Guarantees:
    - At most one artifact is written per run; once a codec has produced it,
      later codecs are never tried, even if verification then fails.
    - The local build runs exactly once, and only when no verified artifact
      was written.
    - Only FallbackBuildError escapes run(); every other failure routes to
      the local build.
    """

    def __init__(
        self,
        config: Optional[InstallConfig],
        fetcher: Callable[[str], bytes] = fetch,
        runner: Callable[..., CommandResult] = run_command,
    ):
        """
        Parameters:
            config (InstallConfig | None): Resolved run configuration; None when
                it could not be produced at all.
            fetcher (Callable): Downloads a URL to bytes, following redirects.
            runner (Callable): Command runner for verification and the build.
        """
        self.config = config
        self._fetch = fetcher
        self._runner = runner
        self.history: List[InstallState] = []
        self.asset_url: Optional[str] = None
        self.codec_used: Optional[str] = None
        self._handlers: Dict[InstallState, Callable[[], InstallState]] = {
            InstallState.INIT: self._init,
            InstallState.CONFIG_RESOLVE: self._resolve_config,
            InstallState.DEV_CHECK: self._check_development,
            InstallState.URL_RESOLVE: self._resolve_url,
            InstallState.TRY_BROTLI: self._try_brotli,
            InstallState.TRY_GZIP: self._try_gzip,
            InstallState.VERIFY: self._verify,
        }

    def run(self) -> InstallOutcome:
        """
        Drive the state machine to a terminal state.

        Returns:
            InstallOutcome: DOWNLOADED when a verified artifact was installed,
            BUILT when the local build ran and succeeded.

        Raises:
            FallbackBuildError: If the local build fails.
        """
        state = InstallState.INIT
        while state not in TERMINAL_STATES:
            self.history.append(state)
            state = self._handlers[state]()
        self.history.append(state)

        if state is InstallState.DONE:
            logger.info(MSG_DONE)
            return InstallOutcome.DOWNLOADED

        logger.info(MSG_BUILDING_LOCALLY)
        run_fallback_build(self.config, self._runner)
        return InstallOutcome.BUILT

    def _init(self) -> InstallState:
        return InstallState.CONFIG_RESOLVE

    def _resolve_config(self) -> InstallState:
        config = self.config
        if config is None:
            return InstallState.FALLBACK_BUILD
        try:
            config.validate()
        except ConfigurationError as exc:
            logger.info(exc.message)
            if exc.details:
                logger.debug(exc.details)
            return InstallState.FALLBACK_BUILD
        return InstallState.DEV_CHECK

    def _check_development(self) -> InstallState:
        if is_development(self.config):
            logger.info(MSG_DEV_FLAG)
            return InstallState.FALLBACK_BUILD
        return InstallState.URL_RESOLVE

    def _resolve_url(self) -> InstallState:
        self.asset_url = build_asset_url(self.config.asset_request())
        if not self.asset_url:
            logger.info(MSG_NO_REPOSITORY)
            return InstallState.FALLBACK_BUILD
        return InstallState.TRY_BROTLI

    def _try_brotli(self) -> InstallState:
        return self._try_codec(BROTLI, on_failure=InstallState.TRY_GZIP)

    def _try_gzip(self) -> InstallState:
        return self._try_codec(GZIP, on_failure=InstallState.FALLBACK_BUILD)

    def _try_codec(self, codec: Codec, on_failure: InstallState) -> InstallState:
        if codec not in available_codecs():
            logger.debug(f"Skipping {codec.name}: not supported by this runtime")
            return on_failure

        url = f"{self.asset_url}{codec.extension}"
        artifact_path = self.config.artifact_path
        logger.info(MSG_TRYING.format(url=url))
        try:
            data = self._fetch(url)
            logger.info(MSG_WRITING.format(path=artifact_path))
            write_artifact(artifact_path, decompress(codec, data))
        except (DownloadError, DecompressionError, OSError) as exc:
            logger.debug(f"{codec.name} attempt failed: {exc}")
            return on_failure

        self.codec_used = codec.name
        return InstallState.VERIFY

    def _verify(self) -> InstallState:
        if verify_build(self.config, self._runner).succeeded:
            return InstallState.DONE
        return InstallState.FALLBACK_BUILD

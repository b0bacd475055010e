import os

import platformdirs
import pytest
import requests

from artifactfetch.commands import CommandResult
from artifactfetch.config import InstallConfig
from artifactfetch.manifest import Manifest
from artifactfetch.platform_tag import PlatformTag

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)

_ISOLATED_ENV_VARS = (
    "DEVELOPMENT_SKIP_GETTING_ASSET",
    "DEVELOPMENT_SHOW_VERIFICATION_RESULTS",
    "DOWNLOAD_HOST",
    "ARTIFACTFETCH_LOG_LEVEL",
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """
    Register the markers used across the suite.
    """
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line(
        "markers", "integration: tests that drive several modules together"
    )


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs at temporary directories and clear environment variables
    that change installer behaviour, so the developer's machine never leaks into tests.
    """
    base = tmp_path_factory.mktemp("artifactfetch")
    config_dir = base / "config"
    log_dir = base / "log"
    for path in (config_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )


def pytest_runtest_setup():
    """
    Prevent real network requests during tests by replacing HTTP entry points with blocking callables.
    """
    requests.get = _block_network
    requests.head = _block_network
    requests.Session.request = _block_network


class FakeRunner:
    """
    Command runner double that records invocations and replays scripted results.

    `results` maps a command (string, or argv joined with spaces) to the
    CommandResult it should produce; unknown commands succeed.
    """

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls = []

    def __call__(self, command, forward_output=False, env=None, cwd=None):
        key = command if isinstance(command, str) else " ".join(command)
        self.calls.append((key, forward_output))
        return self.results.get(key, CommandResult(exit_code=0))

    def commands(self):
        return [command for command, _ in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_config(tmp_path):
    """
    Provide a factory for InstallConfig objects with sensible test defaults.

    The default config targets `tmp_path/build/native.so`, uses `tmp_path` as
    working directory and carries a manifest with a repository, a version and
    verify/rebuild commands. Keyword arguments override fields; `manifest`
    keyword arguments are merged into the default manifest.
    """

    def _make(manifest=None, **overrides):
        manifest_fields = {
            "repository": "https://github.com/owner/project",
            "version": "1.2.3",
            "verify_build": "verify-cmd",
            "rebuild": "rebuild-cmd",
        }
        manifest_fields.update(manifest or {})
        values = {
            "artifact_path": str(tmp_path / "build" / "native.so"),
            "platform": PlatformTag("linux"),
            "arch": "x86_64",
            "abi_version": "cpython-312",
            "working_dir": str(tmp_path),
            "manifest_path": str(tmp_path / "pyproject.toml"),
            "manifest": Manifest(**manifest_fields),
        }
        values.update(overrides)
        return InstallConfig(**values)

    return _make

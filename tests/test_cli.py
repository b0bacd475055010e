from pathlib import Path

import platformdirs
import pytest
import yaml

from artifactfetch import cli
from artifactfetch.config import get_config_file
from artifactfetch.exceptions import FallbackBuildError
from artifactfetch.installer import InstallOutcome
from artifactfetch.platform_tag import PlatformTag


@pytest.fixture
def mock_installer(mocker):
    mocker.patch(
        "artifactfetch.config.detect_platform", return_value=PlatformTag("linux")
    )
    installer_cls = mocker.patch("artifactfetch.cli.ArtifactInstaller")
    installer_cls.return_value.run.return_value = InstallOutcome.DOWNLOADED
    return installer_cls


def _config_passed(installer_cls):
    return installer_cls.call_args.args[0]


@pytest.mark.unit
def test_parser_options():
    args = cli.build_parser().parse_args(
        [
            "--artifact",
            "build/native.so",
            "--prefix",
            "mod-",
            "--suffix",
            ".so",
            "--host",
            "https://mirror",
            "--host-var",
            "MIRROR",
        ]
    )
    assert args.artifact == "build/native.so"
    assert args.prefix == "mod-"
    assert args.suffix == ".so"
    assert args.host == "https://mirror"
    assert args.host_var == "MIRROR"
    assert args.manifest is None


@pytest.mark.unit
def test_main_success(mock_installer, tmp_path):
    manifest = tmp_path / "pyproject.toml"
    manifest.write_text('[project]\nversion = "1.0.0"\n')

    code = cli.main(
        ["--artifact", "build/native.so", "--manifest", str(manifest)]
    )

    assert code == 0
    config = _config_passed(mock_installer)
    assert config.artifact_path == "build/native.so"
    assert config.manifest.version == "1.0.0"
    assert config.host_var == "DOWNLOAD_HOST"
    mock_installer.return_value.run.assert_called_once_with()


@pytest.mark.unit
def test_main_without_artifact_still_runs_installer(mock_installer, tmp_path):
    assert cli.main(["--manifest", str(tmp_path / "missing.toml")]) == 0
    config = _config_passed(mock_installer)
    assert config.artifact_path is None
    assert config.manifest_error is not None


@pytest.mark.unit
def test_main_exits_with_build_status(mock_installer):
    mock_installer.return_value.run.side_effect = FallbackBuildError(
        "Local build failed", command="make", exit_code=3
    )

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--artifact", "a.so"])

    assert exc_info.value.code == 3


@pytest.mark.unit
def test_main_exits_one_when_build_has_no_status(mock_installer):
    mock_installer.return_value.run.side_effect = FallbackBuildError(
        "Local build failed", command="make", signal=9
    )

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--artifact", "a.so"])

    assert exc_info.value.code == 1


@pytest.mark.unit
def test_log_level_option(mock_installer, mocker):
    set_level = mocker.patch("artifactfetch.cli.log_utils.set_log_level")

    cli.main(["--artifact", "a.so", "--log-level", "DEBUG"])

    set_level.assert_called_once_with("DEBUG")


@pytest.mark.unit
def test_user_config_enables_file_logging(mock_installer, mocker):
    with open(get_config_file(), "w", encoding="utf-8") as f:
        yaml.safe_dump({"LOG_TO_FILE": True, "LOG_LEVEL": "WARNING", "PREFIX": "x-"}, f)
    set_level = mocker.patch("artifactfetch.cli.log_utils.set_log_level")
    add_file = mocker.patch("artifactfetch.cli.log_utils.add_file_logging")

    cli.main(["--artifact", "a.so"])

    set_level.assert_called_once_with("WARNING")
    add_file.assert_called_once_with(
        Path(platformdirs.user_log_dir("artifactfetch")), level_name="WARNING"
    )
    assert _config_passed(mock_installer).prefix == "x-"


@pytest.mark.unit
def test_numeric_log_level_in_user_config_is_not_fatal(mock_installer):
    with open(get_config_file(), "w", encoding="utf-8") as f:
        f.write("LOG_LEVEL: 10\n")

    assert cli.main(["--artifact", "a.so"]) == 0

"""Test configuration loader."""

import pytest
from unittest import mock
from pathlib import Path

from mcmas_runner.infrastructure.config import ConfigLoader, VerifierConfig
from mcmas_runner.domain.exceptions import ConfigurationError

ENV_VARS = (
    "MCMAS_EXECUTABLE", "MCMAS_MODELS_DIR", "MCMAS_EXTENSION", "MCMAS_TIMEOUT",
    "MCMAS_SUCCESS_MARKER", "MCMAS_FAILURE_MARKER", "MCMAS_SUCCESS_EXIT_CODE",
    "MCMAS_SETTLE_SECONDS", "MCMAS_SCRATCH_DIR", "MCMAS_TIMEOUT_SLACK", "MCMAS_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file(tmp_path):
    """Missing config file falls back to defaults."""
    config = ConfigLoader(tmp_path / "absent.yaml").load()

    assert config.timeout_seconds == 10.0
    assert config.success_marker == "parsed successfully"
    assert config.failure_marker == "syntax error"
    assert config.file_extension == ".ispl"
    assert config.executable is None


def test_missing_explicit_file_warns(tmp_path):
    loader = ConfigLoader(tmp_path / "absent.yaml")
    loader._logger = mock.Mock()

    loader.load()

    loader._logger.warning.assert_called_once()
    assert "absent.yaml" in loader._logger.warning.call_args[0][0]


def test_missing_default_file_is_quiet(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    loader = ConfigLoader()
    loader._logger = mock.Mock()

    config = loader.load()

    assert config.timeout_seconds == 10.0
    loader._logger.warning.assert_not_called()
    loader._logger.debug.assert_called()


def test_load_from_yaml(tmp_path):
    """Test loading config from a YAML file."""
    path = tmp_path / "mcmas.yaml"
    path.write_text(
        "executable: /opt/mcmas/mcmas\n"
        "models_dir: ./models\n"
        "timeout_seconds: 30\n"
        "success_marker: verified\n"
        "unknown_key: ignored\n"
    )

    config = ConfigLoader(path).load()

    assert config.executable == Path("/opt/mcmas/mcmas")
    assert config.models_dir == Path("models")
    assert config.timeout_seconds == 30
    assert config.success_marker == "verified"


def test_env_overrides_yaml_and_overrides_win(tmp_path, monkeypatch):
    """Precedence: YAML < environment < explicit overrides."""
    path = tmp_path / "mcmas.yaml"
    path.write_text("timeout_seconds: 30\nfailure_marker: bad\n")
    monkeypatch.setenv("MCMAS_TIMEOUT", "5")
    monkeypatch.setenv("MCMAS_FAILURE_MARKER", "error")
    monkeypatch.setenv("MCMAS_SUCCESS_EXIT_CODE", "2")

    config = ConfigLoader(path).load(overrides={"timeout_seconds": 2.5, "success_marker": None})

    assert config.timeout_seconds == 2.5
    assert config.failure_marker == "error"
    assert config.success_exit_code == 2
    assert config.success_marker == "parsed successfully"


def test_invalid_env_number_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("MCMAS_TIMEOUT", "ten")

    config = ConfigLoader(tmp_path / "absent.yaml").load()

    assert config.timeout_seconds == 10.0


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "mcmas.yaml"
    path.write_text("timeout_seconds: [unclosed\n")

    with pytest.raises(ConfigurationError):
        ConfigLoader(path).load()


def test_non_mapping_yaml_raises(tmp_path):
    path = tmp_path / "mcmas.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigurationError):
        ConfigLoader(path).load()


@pytest.mark.parametrize("kwargs", [
    {"timeout_seconds": 0},
    {"success_marker": ""},
    {"failure_marker": ""},
    {"success_exit_code": "0"},
    {"settle_seconds": -1},
    {"timeout_slack_seconds": -1},
    {"file_extension": ""},
])
def test_config_validation(kwargs):
    """Test that invalid values raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        VerifierConfig(**kwargs)


def test_to_batch_config():
    config = VerifierConfig(timeout_seconds=3, success_marker="ok", timeout_slack_seconds=1.0)

    batch = config.to_batch_config()

    assert batch.timeout_seconds == 3.0
    assert batch.success_marker == "ok"
    assert batch.failure_marker == "syntax error"
    assert batch.timeout_slack_seconds == 1.0

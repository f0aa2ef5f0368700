"""Configuration loading and validation."""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, fields

from mcmas_runner.domain.exceptions import ConfigurationError
from mcmas_runner.domain.models import BatchConfig
from mcmas_runner.shared.logging import get_logger

logger = get_logger(__name__)

PATH_FIELDS = ('executable', 'models_dir', 'scratch_dir', 'log_file')


@dataclass
class VerifierConfig:
    """Configuration for batch verification."""

    # Locations (resolved at startup when unset)
    executable: Optional[Path] = None
    models_dir: Optional[Path] = None
    file_extension: str = ".ispl"

    # Verifier contract
    timeout_seconds: float = 10.0
    success_marker: str = "parsed successfully"
    failure_marker: str = "syntax error"
    success_exit_code: int = 0

    # Process supervision
    settle_seconds: float = 0.01
    scratch_dir: Optional[Path] = None

    # Reporting
    timeout_slack_seconds: Optional[float] = None
    reset_delay_seconds: float = 0.0
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        for name in PATH_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                setattr(self, name, Path(value).expanduser())
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if not isinstance(self.timeout_seconds, (int, float)) or self.timeout_seconds <= 0:
            raise ConfigurationError(f"Timeout must be positive, got: {self.timeout_seconds}")

        if not self.success_marker:
            raise ConfigurationError("success_marker cannot be empty")

        if not self.failure_marker:
            raise ConfigurationError("failure_marker cannot be empty")

        if not isinstance(self.success_exit_code, int) or isinstance(self.success_exit_code, bool):
            raise ConfigurationError(f"success_exit_code must be an integer, got: {self.success_exit_code!r}")

        if self.settle_seconds < 0:
            raise ConfigurationError(f"settle_seconds cannot be negative, got: {self.settle_seconds}")

        if self.timeout_slack_seconds is not None and self.timeout_slack_seconds < 0:
            raise ConfigurationError(f"timeout_slack_seconds cannot be negative, got: {self.timeout_slack_seconds}")

        if self.reset_delay_seconds < 0:
            raise ConfigurationError(f"reset_delay_seconds cannot be negative, got: {self.reset_delay_seconds}")

        if not self.file_extension:
            raise ConfigurationError("file_extension cannot be empty")

    def to_batch_config(self) -> BatchConfig:
        """Settings the orchestrator applies uniformly to one batch."""
        return BatchConfig(
            timeout_seconds=float(self.timeout_seconds),
            success_marker=self.success_marker,
            failure_marker=self.failure_marker,
            success_exit_code=self.success_exit_code,
            timeout_slack_seconds=self.timeout_slack_seconds,
            reset_delay_seconds=self.reset_delay_seconds,
        )


class ConfigLoader:
    """Loads and validates configuration from YAML files and environment variables."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional path to YAML config file
        """
        self.config_path = Path(config_path) if config_path else Path("mcmas.yaml")
        self._explicit = config_path is not None
        self._logger = get_logger(__name__)

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> VerifierConfig:
        """
        Load configuration from file and environment.

        Precedence, lowest first: YAML file, environment, overrides.

        Returns:
            VerifierConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {}

        if self.config_path.exists():
            self._logger.info(f"Loading config from {self.config_path}")
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(yaml_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            config_dict.update(yaml_config)
        elif self._explicit:
            self._logger.warning(f"Config file not found: {self.config_path}, using defaults")
        else:
            self._logger.debug(f"Config file not found: {self.config_path}")

        config_dict.update(self._load_from_env())

        if overrides:
            for k, v in overrides.items():
                if v is None:
                    continue
                config_dict[k] = v

        valid_fields = {f.name for f in fields(VerifierConfig)}
        unknown = sorted(set(config_dict) - valid_fields)
        if unknown:
            self._logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}

        try:
            return VerifierConfig(**filtered_config)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        if executable := os.getenv("MCMAS_EXECUTABLE"):
            env_config["executable"] = Path(executable)

        if models_dir := os.getenv("MCMAS_MODELS_DIR"):
            env_config["models_dir"] = Path(models_dir)

        if extension := os.getenv("MCMAS_EXTENSION"):
            env_config["file_extension"] = extension

        if success_marker := os.getenv("MCMAS_SUCCESS_MARKER"):
            env_config["success_marker"] = success_marker

        if failure_marker := os.getenv("MCMAS_FAILURE_MARKER"):
            env_config["failure_marker"] = failure_marker

        if scratch_dir := os.getenv("MCMAS_SCRATCH_DIR"):
            env_config["scratch_dir"] = Path(scratch_dir)

        if log_file := os.getenv("MCMAS_LOG_FILE"):
            env_config["log_file"] = Path(log_file)

        numeric = (
            ("MCMAS_TIMEOUT", "timeout_seconds", float),
            ("MCMAS_SUCCESS_EXIT_CODE", "success_exit_code", int),
            ("MCMAS_SETTLE_SECONDS", "settle_seconds", float),
            ("MCMAS_TIMEOUT_SLACK", "timeout_slack_seconds", float),
        )
        for env_name, key, cast in numeric:
            if raw := os.getenv(env_name):
                try:
                    env_config[key] = cast(raw)
                except ValueError:
                    self._logger.warning(f"Invalid {env_name} value: {raw}")

        return env_config

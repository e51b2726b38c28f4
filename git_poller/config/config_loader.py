"""Configuration loading with file, environment and override precedence."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..poller_logging import get_logger
from .legacy import load_xml_block, normalize_keys
from .models import GitSourceConfig

logger = get_logger()

ENV_VARS = {
    "GIT_POLLER_REPOSITORY": "repository",
    "GIT_POLLER_BRANCH": "branch",
    "GIT_POLLER_EXECUTABLE": "executable",
    "GIT_POLLER_WORKING_DIRECTORY": "working_directory",
    "GIT_POLLER_TIMEOUT": "timeout",
}


class ConfigLoader:
    """Builds a GitSourceConfig from a config file, env vars and overrides."""

    def __init__(self, config_file: Path | None = None):
        self.config_file = Path(config_file) if config_file else None

    @property
    def base_dir(self) -> Path:
        """Directory that relative working directories are resolved against."""
        if self.config_file is not None:
            return self.config_file.resolve().parent
        return Path.cwd()

    def load(self, **overrides: Any) -> GitSourceConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables
        3. Config file (JSON or <git> XML block)
        4. Defaults

        Raises:
            ConfigurationError: If a source is unreadable or validation fails
        """
        config_dict: dict[str, Any] = {}

        # 1. Config file
        if self.config_file is not None:
            file_settings = self._load_file(self.config_file)
            config_dict.update(file_settings)
            logger.debug(f"Loaded {len(file_settings)} settings from {self.config_file}")

        # 2. Environment variables
        env_count = 0
        for env_var, key in ENV_VARS.items():
            value = os.environ.get(env_var)
            if value is not None:
                config_dict[key] = value.strip()
                env_count += 1
        if env_count > 0:
            logger.debug(f"Applied {env_count} environment variables")

        # 3. Explicit overrides
        overrides = {k: v for k, v in normalize_keys(overrides).items() if v is not None}
        config_dict.update(overrides)
        if overrides:
            logger.debug(f"Applied {len(overrides)} explicit overrides")

        try:
            return GitSourceConfig(**config_dict)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid git source configuration: {problems}",
                details={"config_file": str(self.config_file)} if self.config_file else None,
            ) from e

    def _load_file(self, config_file: Path) -> dict[str, Any]:
        try:
            text = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file {config_file}: {e}",
                details={"config_file": str(config_file)},
            ) from e

        if text.lstrip().startswith("<"):
            return load_xml_block(text)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in {config_file}: {e}",
                details={"config_file": str(config_file)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a JSON object in {config_file}")
        return normalize_keys(data)


def load_config(config_file: Path | None = None, **overrides: Any) -> GitSourceConfig:
    """Load a GitSourceConfig; see ConfigLoader.load for precedence."""
    return ConfigLoader(config_file).load(**overrides)

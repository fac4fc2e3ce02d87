"""Configuration loading service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    ENV_CONFIG_PATH,
    ENV_LOG_LEVEL,
    ENV_REGISTRY_DOMAIN,
    ENV_STATUS_FILE,
    PROJECT_CONFIG_FILE,
)
from ..models.config import ExportConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Loads ExportConfig from defaults, a YAML file and the environment"""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        """
        Initialize config service

        Args:
            environ: Environment mapping, os.environ when omitted
        """
        self.environ = os.environ if environ is None else environ

    def find_config_file(self, path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """
        Locate the configuration file

        Order: explicit path, EXPORT_TOOL_CONFIG, .export-tool.yaml in the cwd.

        Returns:
            Path of the file, or None when there is none
        """
        if path:
            config_file = Path(path).expanduser()
            if not config_file.exists():
                raise ConfigError(f"Configuration file not found: {config_file}")
            return config_file

        env_path = self.environ.get(ENV_CONFIG_PATH)
        if env_path:
            config_file = Path(env_path).expanduser()
            if not config_file.exists():
                raise ConfigError(f"Configuration file not found: {config_file} (from {ENV_CONFIG_PATH})")
            return config_file

        config_file = Path.cwd() / PROJECT_CONFIG_FILE
        if config_file.exists():
            return config_file

        return None

    def _read_file(self, config_file: Path) -> Dict[str, Any]:
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(os.path.expandvars(f.read()))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {config_file}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {config_file} must be a mapping")
        return data

    def _apply_environment(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.environ.get(ENV_LOG_LEVEL):
            data['log_level'] = self.environ[ENV_LOG_LEVEL]
        if self.environ.get(ENV_STATUS_FILE):
            data['status_file'] = self.environ[ENV_STATUS_FILE]
        if self.environ.get(ENV_REGISTRY_DOMAIN):
            images = dict(data.get('images') or {})
            images['registry_domain'] = self.environ[ENV_REGISTRY_DOMAIN]
            data['images'] = images
        return data

    def load(self, path: Optional[Union[str, Path]] = None) -> ExportConfig:
        """
        Load configuration

        Args:
            path: Explicit configuration file

        Returns:
            ExportConfig

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        data: Dict[str, Any] = {}
        config_file = self.find_config_file(path)
        if config_file:
            logger.debug(f"Loading configuration from {config_file}")
            data = self._read_file(config_file)

        data = self._apply_environment(data)
        try:
            return ExportConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save(self, config: ExportConfig, path: Union[str, Path]) -> Path:
        """Write configuration as YAML"""
        config_file = Path(path).expanduser()
        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        return config_file

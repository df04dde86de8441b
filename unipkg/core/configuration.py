"""
Configuration management for unipkg.

This module loads the optional YAML configuration file and turns it into an
AppConfig, validating every value it reads.
"""

import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from unipkg.core.exceptions import ConfigurationError
from unipkg.core.interfaces import AppConfig, BackendConfig, UIConfig


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.unipkg/config.yaml"
CONFIG_ENV_VAR = "UNIPKG_CONFIG"


class ConfigurationManager:
    """
    Loads unipkg configuration from YAML.

    The file is optional: when no path is given and the default file does not
    exist, built-in defaults are used. An explicitly requested file that does
    not exist is an error.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, uses
                $UNIPKG_CONFIG or ~/.unipkg/config.yaml.
        """
        self.explicit = config_path is not None or bool(os.getenv(CONFIG_ENV_VAR))
        raw_path = config_path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        self.config_path = Path(raw_path).expanduser()
        self._config_cache: Optional[AppConfig] = None

    def load(self) -> AppConfig:
        """
        Load and validate the configuration.

        Returns:
            The effective AppConfig.

        Raises:
            ConfigurationError: If the file cannot be read or holds invalid values.
        """
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            if self.explicit:
                raise ConfigurationError(f"Configuration file not found: {self.config_path}")
            logger.debug(f"No configuration file at {self.config_path}, using defaults")
            self._config_cache = AppConfig()
            return self._config_cache

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing configuration YAML: {e}")
        except IOError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        self._config_cache = parse_config(raw_data)
        logger.debug(f"Loaded configuration from {self.config_path}")
        return self._config_cache

    def write_defaults(self, force: bool = False) -> Path:
        """
        Write the default configuration file.

        Args:
            force: Overwrite an existing file.

        Returns:
            Path of the written file.

        Raises:
            ConfigurationError: If the file exists and force is False.
        """
        if self.config_path.exists() and not force:
            raise ConfigurationError(
                f"Configuration file already exists: {self.config_path} (use --force to overwrite)"
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            f.write(dump_config(AppConfig()))
        return self.config_path


def parse_config(raw_data: Any) -> AppConfig:
    """
    Build an AppConfig from parsed YAML data.

    Raises:
        ConfigurationError: On unknown backends or out-of-range values.
    """
    if raw_data is None:
        return AppConfig()
    if not isinstance(raw_data, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    config = AppConfig()

    backends = raw_data.get("backends")
    if backends is not None:
        if not isinstance(backends, list) or not all(isinstance(b, str) for b in backends):
            raise ConfigurationError("'backends' must be a list of backend names")
        # Imported here to avoid a cycle: the backend package imports core.
        from unipkg.backend.factory import backend_factory
        unknown = [b for b in backends if not backend_factory.is_backend_registered(b)]
        if unknown:
            raise ConfigurationError(f"Unknown backends in configuration: {', '.join(unknown)}")
        config.backends = list(backends)

    if "command_timeout" in raw_data:
        timeout = raw_data["command_timeout"]
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0):
            raise ConfigurationError("'command_timeout' must be a positive integer or null")
        config.backend.command_timeout = timeout

    dnf = _section(raw_data, "dnf")
    if "use_sudo" in dnf:
        if not isinstance(dnf["use_sudo"], bool):
            raise ConfigurationError("'dnf.use_sudo' must be true or false")
        config.backend.dnf_use_sudo = dnf["use_sudo"]

    flatpak = _section(raw_data, "flatpak")
    if "remote" in flatpak:
        if not isinstance(flatpak["remote"], str) or not flatpak["remote"].strip():
            raise ConfigurationError("'flatpak.remote' must be a non-empty string")
        config.backend.flatpak_remote = flatpak["remote"].strip()

    ui = _section(raw_data, "ui")
    if "max_panel_height" in ui:
        height = ui["max_panel_height"]
        if isinstance(height, bool) or not isinstance(height, int) or height < 3:
            raise ConfigurationError("'ui.max_panel_height' must be an integer of at least 3")
        config.ui.max_panel_height = height
    if "poll_interval" in ui:
        interval = ui["poll_interval"]
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
            raise ConfigurationError("'ui.poll_interval' must be a positive number")
        config.ui.poll_interval = float(interval)

    return config


def _section(raw_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw_data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' must be a mapping")
    return section


def config_to_dict(config: AppConfig) -> Dict[str, Any]:
    """Convert an AppConfig to the nested layout used by the YAML file."""
    backend: BackendConfig = config.backend
    ui: UIConfig = config.ui
    return {
        "backends": config.backends,
        "command_timeout": backend.command_timeout,
        "dnf": {"use_sudo": backend.dnf_use_sudo},
        "flatpak": {"remote": backend.flatpak_remote},
        "ui": asdict(ui),
    }


def dump_config(config: AppConfig) -> str:
    """Serialize an AppConfig to YAML."""
    return yaml.safe_dump(config_to_dict(config), default_flow_style=False, sort_keys=False)

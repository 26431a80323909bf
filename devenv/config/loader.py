"""
Configuration loader for YAML files.

Handles locating, loading, and merging a configuration file over the
built-in defaults.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from .defaults import get_default_config
from .models import DevenvConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEVENV_CONFIG"
DEFAULT_CONFIG_NAMES = ["devenv.yaml", "devenv.yml"]


class ConfigError(Exception):
    """Configuration loading or validation error."""
    pass


class ConfigLoader:
    """
    Loads and validates configuration from a YAML file.

    Sections present in the file are merged over the defaults. Tool
    entries are matched by name, so a file may override a single field of
    a built-in requirement without repeating the rest.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to config file. When omitted, DEVENV_CONFIG and
                ./devenv.yaml are tried before falling back to defaults.
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[DevenvConfig] = None
        self._source: Optional[Path] = None

    def load(self) -> "ConfigLoader":
        """
        Load configuration.

        Returns:
            Self for method chaining
        """
        path = self._resolve_path()
        data = get_default_config()

        if path is not None:
            logger.debug("Loading configuration from %s", path)
            data = merge_config(data, self._read_yaml(path))
            self._source = path
        else:
            logger.debug("No configuration file found, using defaults")

        self._config = self._parse(data)
        return self

    def _resolve_path(self) -> Optional[Path]:
        """Find the configuration file to load, if any."""
        if self.config_path is not None:
            if not self.config_path.is_file():
                raise ConfigError(f"Configuration file does not exist: {self.config_path}")
            return self.config_path

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)
            if not path.is_file():
                raise ConfigError(f"{CONFIG_ENV_VAR} points to a missing file: {path}")
            return path

        for name in DEFAULT_CONFIG_NAMES:
            path = Path.cwd() / name
            if path.is_file():
                return path

        return None

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"{file_path} is not valid UTF-8 text: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {file_path} must be a mapping")
        return data

    def _parse(self, data: Dict[str, Any]) -> DevenvConfig:
        """Parse the merged configuration."""
        try:
            return DevenvConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")

    @property
    def config(self) -> DevenvConfig:
        """Get loaded configuration, loading it on first access."""
        if self._config is None:
            self.load()
        return self._config

    @property
    def source(self) -> Optional[Path]:
        """File the configuration was read from, None for defaults."""
        return self._source

    def save(self, output_path: Union[str, Path]) -> Path:
        """
        Save the current configuration to a YAML file.

        Args:
            output_path: File to write

        Returns:
            The written path
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.config.model_dump(mode="json", exclude_none=True)
        # null disables the group check, so it must survive a reload
        data["docker_group"] = self.config.docker_group

        with open(output_path, "w") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                sort_keys=False,
            )
        return output_path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigLoader":
        """
        Create a ConfigLoader from a dictionary merged over the defaults.

        Useful for programmatic configuration.
        """
        loader = cls()
        loader._config = loader._parse(merge_config(get_default_config(), data))
        return loader


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge an override mapping over a base configuration.

    Mappings are merged one level deep, tool lists are merged by name,
    everything else is replaced.
    """
    merged = copy.deepcopy(base)

    for key, value in override.items():
        if key == "tools" and isinstance(value, list):
            merged["tools"] = _merge_tools(merged.get("tools", []), value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value

    return merged


def _merge_tools(base: List[Dict[str, Any]], override: List[Any]) -> List[Dict[str, Any]]:
    """Merge tool entries by name, appending unknown ones."""
    tools = [dict(t) for t in base]
    index = {t.get("name"): i for i, t in enumerate(tools)}

    for entry in override:
        if not isinstance(entry, dict):
            raise ConfigError(f"Tool entries must be mappings, got: {entry!r}")
        name = entry.get("name")
        if not isinstance(name, str):
            raise ConfigError(f"Tool entries need a string name, got: {name!r}")
        if name in index:
            tools[index[name]].update(entry)
        else:
            index[name] = len(tools)
            tools.append(dict(entry))

    return tools

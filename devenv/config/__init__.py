"""Configuration handling for the environment verifier."""

from .models import (
    Ecosystem,
    ToolRequirement,
    DisplayConfig,
    KeyPairConfig,
    BootstrapConfig,
    DevenvConfig,
)
from .loader import ConfigLoader, ConfigError

__all__ = [
    "Ecosystem",
    "ToolRequirement",
    "DisplayConfig",
    "KeyPairConfig",
    "BootstrapConfig",
    "DevenvConfig",
    "ConfigLoader",
    "ConfigError",
]

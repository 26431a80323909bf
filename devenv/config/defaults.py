"""
Default configuration values.

Provides the built-in requirements used when no configuration file is given.
"""

from typing import Any, Dict


REQUIRED_DOCKER_VERSION = "20.10"
REQUIRED_COMPOSE_VERSION = "2.0"


def get_default_tools() -> list:
    """Get default tool requirements."""
    return [
        {
            "name": "Docker",
            "executable": "docker",
            "version_args": ["--version"],
            "minimum_version": REQUIRED_DOCKER_VERSION,
            "install_hints": {
                "apk": "sudo apk add docker",
                "dnf": "sudo dnf install docker",
                "apt": "sudo apt install docker.io",
            },
        },
        {
            "name": "Docker Compose",
            "executable": "docker-compose",
            "version_args": ["--version"],
            "minimum_version": REQUIRED_COMPOSE_VERSION,
            "plugin_host": "docker",
            "plugin_version_args": ["compose", "version", "--short"],
            "install_hints": {
                "apk": "sudo apk add docker-compose",
                "dnf": "sudo dnf install docker-compose",
                "apt": "sudo apt install docker-compose",
            },
        },
        {
            "name": "Make",
            "executable": "make",
            "version_args": ["--version"],
            "install_hints": {
                "apk": "sudo apk add make",
                "dnf": "sudo dnf install make",
                "apt": "sudo apt install make",
            },
        },
    ]


def get_default_display() -> Dict[str, Any]:
    """Get default display server settings."""
    return {
        "env_var": "DISPLAY",
        "grant_command": ["xhost", "+local:docker"],
        "install_hints": {
            "apk": "sudo apk add xhost",
            "dnf": "sudo dnf install xorg-x11-server-utils",
            "apt": "sudo apt install x11-xserver-utils",
        },
    }


def get_default_keys() -> Dict[str, Any]:
    """Get default key pair lookup."""
    return {
        "directory": "~/.ssh",
        "filenames": ["id_rsa", "id_ed25519"],
    }


def get_default_bootstrap() -> Dict[str, Any]:
    """Get default bootstrap settings."""
    return {
        "image_name": "alpine-dev",
        "backup_dir": "backups",
        "make_command": "make",
        "build_target": "build",
        "up_target": "up",
        "clone_target": "clone-nvim",
    }


def get_default_config() -> Dict[str, Any]:
    """Get the complete default configuration."""
    return {
        "tools": get_default_tools(),
        "display": get_default_display(),
        "keys": get_default_keys(),
        "docker_group": "docker",
        "probe_timeout": 10.0,
        "bootstrap": get_default_bootstrap(),
    }

"""Container bootstrap sequence run after a passing pre-flight."""

from .runner import BootstrapError, BuildReport, CommandRunner, SetupRunner

__all__ = [
    "BootstrapError",
    "BuildReport",
    "CommandRunner",
    "SetupRunner",
]

"""
Pre-flight Check Implementations

Individual check modules for different validation areas.
"""

from .versions import InvalidVersionError, compare_versions, extract_version, parse_version
from .tools import check_tool, check_requirement, detect_ecosystem
from .docker import check_docker_engine, check_orchestration_cli, check_build_tool, check_docker_group
from .display import DisplayAccess, CommandDisplayAccess, GrantOutcome, check_display_server
from .keys import check_key_pair

__all__ = [
    "InvalidVersionError",
    "compare_versions",
    "extract_version",
    "parse_version",
    "check_tool",
    "check_requirement",
    "detect_ecosystem",
    "check_docker_engine",
    "check_orchestration_cli",
    "check_build_tool",
    "check_docker_group",
    "DisplayAccess",
    "CommandDisplayAccess",
    "GrantOutcome",
    "check_display_server",
    "check_key_pair",
]

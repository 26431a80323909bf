"""
Container Tooling Validation

Checks for the container engine, the compose CLI, the build tool, and
docker group membership.
"""

import getpass
import grp
import logging
import os
from typing import Optional

from ...config.defaults import get_default_tools
from ...config.models import Ecosystem, ToolRequirement
from ..models import CheckResult, CheckStatus
from .tools import DEFAULT_PROBE_TIMEOUT, check_requirement

logger = logging.getLogger(__name__)


def default_requirement(executable: str) -> ToolRequirement:
    """Get the built-in requirement for an executable."""
    for data in get_default_tools():
        if data["executable"] == executable:
            return ToolRequirement(**data)
    raise KeyError(f"No built-in requirement for {executable}")


def check_docker_engine(
    requirement: Optional[ToolRequirement] = None,
    search_path: Optional[str] = None,
    ecosystem: Optional[Ecosystem] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> CheckResult:
    """Check the Docker engine CLI is installed and recent enough."""
    return check_requirement(
        requirement or default_requirement("docker"),
        search_path=search_path,
        ecosystem=ecosystem,
        timeout=timeout,
    )


def check_orchestration_cli(
    requirement: Optional[ToolRequirement] = None,
    search_path: Optional[str] = None,
    ecosystem: Optional[Ecosystem] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> CheckResult:
    """
    Check Docker Compose is available.

    Either the "docker compose" plugin or a standalone docker-compose
    executable satisfies the requirement; the plugin is tried first.
    """
    return check_requirement(
        requirement or default_requirement("docker-compose"),
        search_path=search_path,
        ecosystem=ecosystem,
        timeout=timeout,
    )


def check_build_tool(
    requirement: Optional[ToolRequirement] = None,
    search_path: Optional[str] = None,
    ecosystem: Optional[Ecosystem] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> CheckResult:
    """Check make is installed."""
    return check_requirement(
        requirement or default_requirement("make"),
        search_path=search_path,
        ecosystem=ecosystem,
        timeout=timeout,
    )


def check_docker_group(group: str = "docker") -> CheckResult:
    """
    Check the current user is in the docker group.

    Advisory only: without the group, docker commands need sudo.
    """
    name = "Docker Group"
    remediation = f"Run: sudo usermod -aG {group} $USER && newgrp {group}"

    try:
        entry = grp.getgrnam(group)
    except KeyError:
        return CheckResult(
            tool=name,
            status=CheckStatus.WARNING,
            message=f"Group '{group}' does not exist",
            details=["Docker may not be installed as a system service"],
        )

    if entry.gr_gid in os.getgroups():
        return CheckResult(
            tool=name,
            status=CheckStatus.OK,
            message=f"User is in {group} group",
        )

    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        logger.debug("Cannot determine current user name")
        user = None

    if user is not None and user in entry.gr_mem:
        return CheckResult(
            tool=name,
            status=CheckStatus.WARNING,
            message=f"User was added to {group} group but the session predates it",
            details=[f"Log out and back in, or run: newgrp {group}"],
        )

    logger.debug("User %s not in group %s (gid %d)", user or "unknown", group, entry.gr_gid)
    return CheckResult(
        tool=name,
        status=CheckStatus.WARNING,
        message=f"User is not in {group} group",
        details=[remediation],
    )

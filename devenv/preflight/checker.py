"""
Pre-flight Checker

Main orchestrator for environment verification checks.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from ..config.models import DevenvConfig, Ecosystem, ToolRequirement
from .models import CheckResult, CheckSeverity
from .checks.tools import DEFAULT_PROBE_TIMEOUT, check_requirement, detect_ecosystem
from .checks.docker import (
    check_build_tool,
    check_docker_engine,
    check_docker_group,
    check_orchestration_cli,
)
from .checks.display import CommandDisplayAccess, DisplayAccess, check_display_server
from .checks.keys import check_key_pair

logger = logging.getLogger(__name__)

# Dedicated checks by executable, anything else goes through check_requirement
TOOL_CHECKS: Dict[str, Callable[..., CheckResult]] = {
    "docker": check_docker_engine,
    "docker-compose": check_orchestration_cli,
    "make": check_build_tool,
}


@dataclass
class PreflightResult:
    """Complete pre-flight check results."""
    checks: List[CheckResult] = field(default_factory=list)
    ecosystem: Optional[Ecosystem] = None

    @property
    def fatal_count(self) -> int:
        """Number of checks that block setup."""
        return sum(1 for c in self.checks if c.fatal)

    @property
    def passed(self) -> bool:
        """Check if no fatal check failed."""
        return self.fatal_count == 0

    @property
    def errors(self) -> List[CheckResult]:
        """Get all fatal failures."""
        return [c for c in self.checks if c.severity == CheckSeverity.ERROR]

    @property
    def warnings(self) -> List[CheckResult]:
        """Get all advisory issues."""
        return [c for c in self.checks if c.severity == CheckSeverity.WARNING]

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def summary(self) -> str:
        """Get summary string."""
        total = len(self.checks)
        passed = len([c for c in self.checks if c.passed])
        errors = len(self.errors)
        warnings = len(self.warnings)

        if errors > 0:
            status = "FAILED"
        elif warnings > 0:
            status = "PASSED with warnings"
        else:
            status = "PASSED"

        return f"{status}: {passed}/{total} checks passed ({errors} errors, {warnings} warnings)"


def run_checks(
    requirements: Iterable[ToolRequirement],
    search_path: Optional[str] = None,
    ecosystem: Optional[Ecosystem] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> List[CheckResult]:
    """
    Check every tool requirement in order.

    Returns:
        One CheckResult per requirement
    """
    return [
        check_tool_requirement(req, search_path=search_path, ecosystem=ecosystem, timeout=timeout)
        for req in requirements
    ]


def check_tool_requirement(
    requirement: ToolRequirement,
    search_path: Optional[str] = None,
    ecosystem: Optional[Ecosystem] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> CheckResult:
    """Check one requirement with the dedicated check for its executable."""
    check = TOOL_CHECKS.get(requirement.executable, check_requirement)
    return check(requirement, search_path=search_path, ecosystem=ecosystem, timeout=timeout)


def summarize(
    results: Iterable[CheckResult],
    ecosystem: Optional[Ecosystem] = None,
) -> PreflightResult:
    """Fold check results into a run summary."""
    return PreflightResult(checks=list(results), ecosystem=ecosystem)


class PreflightChecker:
    """
    Orchestrates environment verification.

    Runs a series of checks to validate:
    - Required tools are installed (Docker, Docker Compose, Make)
    - Installed versions meet their minimums
    - A display server is reachable (advisory)
    - An SSH key pair exists (advisory)
    - The user is in the docker group (advisory)
    """

    def __init__(
        self,
        config: DevenvConfig,
        search_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        display_access: Optional[DisplayAccess] = None,
        ssh_dir: Optional[Path] = None,
    ):
        """
        Initialize the checker.

        Args:
            config: Loaded configuration
            search_path: Directories searched for executables, defaults to PATH
            environ: Environment inspected for the display address
            display_access: Collaborator asked for display access
            ssh_dir: Directory searched for key pairs
        """
        self.config = config
        self.search_path = search_path
        self.environ = os.environ if environ is None else environ
        self.ecosystem = detect_ecosystem(search_path)
        self.display_access = display_access or CommandDisplayAccess(
            command=config.display.grant_command,
            search_path=search_path,
            install_hints=config.display.install_hints,
            ecosystem=self.ecosystem,
            timeout=config.probe_timeout,
        )
        self.ssh_dir = ssh_dir

    def run_all(self) -> PreflightResult:
        """
        Run all pre-flight checks.

        Returns:
            PreflightResult with all check results
        """
        logger.debug(
            "Running preflight (ecosystem=%s)",
            self.ecosystem.value if self.ecosystem else "unknown",
        )

        checks = run_checks(
            self.config.tools,
            search_path=self.search_path,
            ecosystem=self.ecosystem,
            timeout=self.config.probe_timeout,
        )

        if self.config.docker_group:
            checks.append(self._check_docker_group())
        checks.append(self._check_display())
        checks.append(self._check_keys())

        result = summarize(checks, ecosystem=self.ecosystem)
        logger.debug("Preflight finished with %d fatal result(s)", result.fatal_count)
        return result

    def run_check(self, check_name: str) -> Optional[CheckResult]:
        """
        Run a specific check by name.

        Args:
            check_name: Tool name or executable, or one of
                "display", "keys", "docker_group"

        Returns:
            CheckResult or None if check not found
        """
        check_map: Dict[str, Callable[[], CheckResult]] = {
            "display": self._check_display,
            "keys": self._check_keys,
            "docker_group": self._check_docker_group,
        }

        if check_name in check_map:
            return check_map[check_name]()

        requirement = self.config.get_tool(check_name)
        if requirement is not None:
            return check_tool_requirement(
                requirement,
                search_path=self.search_path,
                ecosystem=self.ecosystem,
                timeout=self.config.probe_timeout,
            )
        return None

    def _check_display(self) -> CheckResult:
        return check_display_server(
            environ=self.environ,
            access=self.display_access,
            env_var=self.config.display.env_var,
        )

    def _check_keys(self) -> CheckResult:
        return check_key_pair(
            ssh_dir=self.ssh_dir or self.config.keys.directory,
            filenames=self.config.keys.filenames,
        )

    def _check_docker_group(self) -> CheckResult:
        return check_docker_group(self.config.docker_group or "docker")

"""
Display Server Validation

Detects a reachable display server and requests container access to it.
Every outcome here is advisory.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from ...config.models import Ecosystem
from ..models import CheckResult, CheckStatus
from .tools import DEFAULT_PROBE_TIMEOUT, remediation_hints, resolve_tool

logger = logging.getLogger(__name__)


@dataclass
class GrantOutcome:
    """Result of asking for display access."""
    granted: bool
    message: str
    details: List[str] = field(default_factory=list)


class DisplayAccess(ABC):
    """Collaborator that can grant containers access to the display."""

    @abstractmethod
    def grant(self, display: str) -> GrantOutcome:
        """Request access to the given display."""
        pass


class CommandDisplayAccess(DisplayAccess):
    """Grants access by running a command such as "xhost +local:docker"."""

    def __init__(
        self,
        command: Sequence[str] = ("xhost", "+local:docker"),
        search_path: Optional[str] = None,
        install_hints: Optional[Dict[Ecosystem, str]] = None,
        ecosystem: Optional[Ecosystem] = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ):
        self.command = list(command)
        self.search_path = search_path
        self.install_hints = install_hints or {}
        self.ecosystem = ecosystem
        self.timeout = timeout

    def grant(self, display: str) -> GrantOutcome:
        tool = self.command[0]
        path = resolve_tool(tool, self.search_path)
        if path is None:
            return GrantOutcome(
                granted=False,
                message=f"{tool} command not found",
                details=[
                    f"Install {tool} for GUI support:",
                    *remediation_hints(self.install_hints, self.ecosystem),
                ],
            )

        env = dict(os.environ)
        env["DISPLAY"] = display
        logger.debug("Requesting display access: %s", " ".join(self.command))

        try:
            result = subprocess.run(
                [path, *self.command[1:]],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            return GrantOutcome(granted=False, message=f"{tool} timed out")
        except OSError as e:
            return GrantOutcome(granted=False, message=f"{tool} could not run: {e}")

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            return GrantOutcome(
                granted=False,
                message=f"{tool} failed with exit code {result.returncode}",
                details=[stderr] if stderr else [],
            )

        return GrantOutcome(granted=True, message="Display access configured")


def check_display_server(
    environ: Optional[Mapping[str, str]] = None,
    access: Optional[DisplayAccess] = None,
    env_var: str = "DISPLAY",
) -> CheckResult:
    """
    Check a display server address is set and request access to it.

    Args:
        environ: Environment to inspect, defaults to os.environ
        access: Collaborator asked for display access; skipped when None
        env_var: Display address variable

    Returns:
        OK when the display is set and access was granted, otherwise WARNING
    """
    name = "Display Server"
    environ = os.environ if environ is None else environ
    display = environ.get(env_var, "")

    if not display:
        return CheckResult(
            tool=name,
            status=CheckStatus.WARNING,
            message=f"{env_var} environment variable is not set",
            details=[
                "GUI applications will not work without X11",
                f"Set {env_var} before running: export {env_var}=:0",
            ],
        )

    if access is None:
        return CheckResult(
            tool=name,
            status=CheckStatus.OK,
            message=f"X11 is available ({env_var}={display})",
        )

    outcome = access.grant(display)
    if outcome.granted:
        return CheckResult(
            tool=name,
            status=CheckStatus.OK,
            message=f"X11 is available ({env_var}={display}), {outcome.message.lower()}",
            details=outcome.details,
        )

    return CheckResult(
        tool=name,
        status=CheckStatus.WARNING,
        message=f"X11 is available ({env_var}={display}) but access was not granted: {outcome.message}",
        details=outcome.details,
    )

"""
Pre-flight Check Models

Shared data types for environment verification.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CheckStatus(str, Enum):
    """Outcome of a single check."""
    OK = "ok"
    MISSING = "missing"
    BELOW_MINIMUM = "below_minimum"
    WARNING = "warning"


class CheckSeverity(str, Enum):
    """Severity levels for check results."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


FATAL_STATUSES = (CheckStatus.MISSING, CheckStatus.BELOW_MINIMUM)


@dataclass(frozen=True)
class CheckResult:
    """Result of a single pre-flight check."""
    tool: str
    status: CheckStatus
    message: str
    details: List[str] = field(default_factory=list)
    version: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.OK

    @property
    def fatal(self) -> bool:
        """Fatal results block the bootstrap sequence."""
        return self.status in FATAL_STATUSES

    @property
    def severity(self) -> CheckSeverity:
        if self.fatal:
            return CheckSeverity.ERROR
        if self.status == CheckStatus.WARNING:
            return CheckSeverity.WARNING
        return CheckSeverity.INFO

    def __str__(self) -> str:
        label = {
            CheckSeverity.ERROR: "FAIL",
            CheckSeverity.WARNING: "WARN",
            CheckSeverity.INFO: "PASS",
        }[self.severity]
        return f"[{label}] {self.tool}: {self.message}"

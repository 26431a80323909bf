"""
Pre-flight Check Module

Verifies host prerequisites before the development image is built.
"""

from .models import CheckResult, CheckSeverity, CheckStatus
from .checker import PreflightChecker, PreflightResult, run_checks, summarize

__all__ = [
    "PreflightChecker",
    "PreflightResult",
    "CheckResult",
    "CheckSeverity",
    "CheckStatus",
    "run_checks",
    "summarize",
]

"""
Tool Presence Validation

Resolves executables on the search path, probes their versions, and
checks them against a ToolRequirement.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence

from ...config.models import Ecosystem, ToolRequirement
from ..models import CheckResult, CheckStatus
from .versions import InvalidVersionError, compare_versions, extract_version

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 10.0


def check_tool(name: str, search_path: Optional[str] = None) -> bool:
    """
    Check whether an executable resolves on the search path.

    Args:
        name: Executable name
        search_path: os.pathsep separated directories, defaults to PATH

    Returns:
        True if the executable was found
    """
    return resolve_tool(name, search_path) is not None


def resolve_tool(name: str, search_path: Optional[str] = None) -> Optional[str]:
    """Return the absolute path of an executable, or None."""
    return shutil.which(name, path=search_path)


def detect_ecosystem(search_path: Optional[str] = None) -> Optional[Ecosystem]:
    """Detect the host package manager family from what is installed."""
    for ecosystem in Ecosystem:
        if check_tool(ecosystem.value, search_path):
            return ecosystem
    return None


def remediation_hints(
    hints: Dict[Ecosystem, str],
    ecosystem: Optional[Ecosystem] = None,
) -> List[str]:
    """
    Format install hints for the host.

    Only the detected ecosystem's hint is returned when one is known;
    otherwise every hint is listed.
    """
    if ecosystem is not None and ecosystem in hints:
        return [f"{ecosystem.distribution}: {hints[ecosystem]}"]
    return [f"{eco.distribution}: {cmd}" for eco, cmd in hints.items()]


def run_probe(argv: Sequence[str], timeout: float = DEFAULT_PROBE_TIMEOUT) -> Optional[str]:
    """
    Run a version command.

    Returns:
        Combined stdout and stderr when the command exits 0, otherwise None
    """
    logger.debug("Probing: %s", " ".join(argv))
    try:
        result = subprocess.run(
            list(argv),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Probe timed out after %ss: %s", timeout, argv[0])
        return None
    except OSError as e:
        logger.debug("Probe could not start %s: %s", argv[0], e)
        return None

    if result.returncode != 0:
        logger.debug("Probe %s exited with %d", argv[0], result.returncode)
        return None

    return (result.stdout or "") + (result.stderr or "")


def check_requirement(
    requirement: ToolRequirement,
    search_path: Optional[str] = None,
    ecosystem: Optional[Ecosystem] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> CheckResult:
    """
    Check a single tool requirement.

    Args:
        requirement: Tool to look for
        search_path: Directories to search, defaults to PATH
        ecosystem: Host package ecosystem used to pick install hints
        timeout: Seconds allowed for the version probe

    Returns:
        CheckResult for the tool
    """
    output = None
    located = None

    if requirement.plugin_host:
        host = resolve_tool(requirement.plugin_host, search_path)
        if host:
            output = run_probe([host, *requirement.plugin_version_args], timeout)
            if output is not None:
                located = f"{requirement.plugin_host} {requirement.plugin_version_args[0]}"

    if located is None:
        path = resolve_tool(requirement.executable, search_path)
        if path is None:
            return _missing(requirement, ecosystem)
        located = path
        output = run_probe([path, *requirement.version_args], timeout)

    version = extract_version(output)

    if requirement.minimum_version is None:
        return CheckResult(
            tool=requirement.name,
            status=CheckStatus.OK,
            message=f"{requirement.name} {version} is installed" if version
            else f"{requirement.name} is installed",
            details=[f"Found: {located}"],
            version=version,
        )

    if version is None:
        return CheckResult(
            tool=requirement.name,
            status=CheckStatus.WARNING,
            message=f"{requirement.name} is installed but its version is unknown",
            details=[
                f"Found: {located}",
                f"Could not verify minimum version {requirement.minimum_version}",
            ],
        )

    try:
        meets = compare_versions(version, requirement.minimum_version)
    except InvalidVersionError as e:
        return CheckResult(
            tool=requirement.name,
            status=CheckStatus.WARNING,
            message=f"{requirement.name} is installed but its version is unknown",
            details=[str(e)],
        )

    if not meets:
        return CheckResult(
            tool=requirement.name,
            status=CheckStatus.BELOW_MINIMUM if requirement.mandatory else CheckStatus.WARNING,
            message=(
                f"{requirement.name} version {version} is older than "
                f"required {requirement.minimum_version}"
            ),
            details=remediation_hints(requirement.install_hints, ecosystem),
            version=version,
        )

    return CheckResult(
        tool=requirement.name,
        status=CheckStatus.OK,
        message=f"{requirement.name} {version} is installed",
        details=[f"Found: {located}"],
        version=version,
    )


def _missing(requirement: ToolRequirement, ecosystem: Optional[Ecosystem]) -> CheckResult:
    """Build the result for a tool that is not on the search path."""
    return CheckResult(
        tool=requirement.name,
        status=CheckStatus.MISSING if requirement.mandatory else CheckStatus.WARNING,
        message=f"{requirement.name} is not installed",
        details=[
            f"Please install {requirement.name}:",
            *remediation_hints(requirement.install_hints, ecosystem),
        ],
    )

"""
Version Handling

Extracts, parses, and compares dotted numeric version strings.
"""

import re
from typing import Optional, Tuple

VERSION_IN_TEXT = re.compile(r"\d+(?:\.\d+)+")
DOTTED_VERSION = re.compile(r"^v?(\d+(?:\.\d+)*)$")


class InvalidVersionError(ValueError):
    """Raised when a version string is not a dotted number."""
    pass


def extract_version(text: Optional[str]) -> Optional[str]:
    """
    Find the first dotted version number in tool output.

    Args:
        text: Output of a tool's version command

    Returns:
        Version string such as "24.0.5", or None if nothing looks like one
    """
    if not text:
        return None
    match = VERSION_IN_TEXT.search(text)
    return match.group(0) if match else None


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Parse a dotted numeric version into a tuple of integers.

    A leading "v" is accepted ("v2.20.2").

    Raises:
        InvalidVersionError: If the string is not a dotted number
    """
    if version is None:
        raise InvalidVersionError("Version is missing")

    match = DOTTED_VERSION.match(str(version).strip())
    if not match:
        raise InvalidVersionError(f"Malformed version: {version!r}")

    return tuple(int(part) for part in match.group(1).split("."))


def compare_versions(installed: str, required: str) -> bool:
    """
    Check whether an installed version meets a minimum.

    Components are compared numerically from left to right; missing
    trailing components count as zero, so "20.10" equals "20.10.0".
    Equal versions meet the requirement.

    Raises:
        InvalidVersionError: If either version is malformed
    """
    have = parse_version(installed)
    need = parse_version(required)

    width = max(len(have), len(need))
    have = have + (0,) * (width - len(have))
    need = need + (0,) * (width - len(need))

    return have >= need

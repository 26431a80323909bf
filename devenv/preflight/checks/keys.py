"""
Key Pair Validation

Looks for an SSH key pair to mount into the container.
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from ..models import CheckResult, CheckStatus

DEFAULT_KEY_NAMES = ("id_rsa", "id_ed25519")


def check_key_pair(
    ssh_dir: Optional[Union[str, Path]] = None,
    filenames: Iterable[str] = DEFAULT_KEY_NAMES,
) -> CheckResult:
    """
    Check for either conventional private key file.

    Missing keys are a warning: they can be generated later.
    """
    ssh_dir = Path(ssh_dir).expanduser() if ssh_dir else Path.home() / ".ssh"
    filenames = list(filenames)

    found = [name for name in filenames if (ssh_dir / name).is_file()]
    if found:
        return CheckResult(
            tool="SSH Keys",
            status=CheckStatus.OK,
            message=f"SSH keys found in {ssh_dir}: {', '.join(found)}",
            details=["These will be mounted read-only in the container"],
        )

    return CheckResult(
        tool="SSH Keys",
        status=CheckStatus.WARNING,
        message=f"No SSH keys found in {ssh_dir}",
        details=[
            f"Looked for: {', '.join(filenames)}",
            "You can generate them later with: make ssh-keygen",
        ],
    )

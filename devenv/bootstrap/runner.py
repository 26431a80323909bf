"""
Bootstrap Runner

Builds and starts the development container once pre-flight checks pass.
The build/run subsystem is driven through its Makefile targets.
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

from ..config.models import BootstrapConfig

logger = logging.getLogger(__name__)


class BootstrapError(Exception):
    """A bootstrap step failed."""
    pass


class CommandRunner:
    """Runs external commands from the project directory."""

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = Path(cwd) if cwd else Path.cwd()

    def run(self, argv: Sequence[str], capture: bool = False) -> subprocess.CompletedProcess:
        """
        Run a command.

        Args:
            argv: Command and arguments
            capture: Capture output instead of streaming it to the terminal

        Raises:
            BootstrapError: If the executable cannot be started
        """
        logger.debug("Running in %s: %s", self.cwd, " ".join(argv))
        try:
            return subprocess.run(
                list(argv),
                cwd=self.cwd,
                capture_output=capture,
                text=True,
            )
        except OSError as e:
            raise BootstrapError(f"Cannot run {argv[0]}: {e}")


@dataclass
class BuildReport:
    """Outcome of the image build."""
    duration_seconds: int
    image_size: Optional[str] = None


class SetupRunner:
    """
    Runs the setup sequence after a passing pre-flight.

    Steps: create directories, build image, start container, clone the
    Neovim configuration, show next steps.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        console: Optional[Console] = None,
        project_dir: Optional[Path] = None,
        runner: Optional[CommandRunner] = None,
        confirm: Optional[Callable[[str, bool], bool]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.console = console or Console()
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.runner = runner or CommandRunner(self.project_dir)
        self._confirm = confirm or self._ask
        self._clock = clock

    def _ask(self, question: str, default: bool) -> bool:
        return Confirm.ask(question, default=default, console=self.console)

    def _make(self, target: str) -> List[str]:
        return [self.config.make_command, target]

    def run(self, assume_yes: bool = False, clone: bool = True) -> bool:
        """
        Run the full setup sequence.

        Args:
            assume_yes: Skip confirmation prompts
            clone: Offer to clone the Neovim configuration

        Returns:
            True if setup completed, False if the user cancelled

        Raises:
            BootstrapError: If the image build or container start fails
        """
        if not assume_yes and not self._confirm("Do you want to proceed with the setup?", True):
            self.console.print("[blue]ℹ[/blue] Setup cancelled")
            return False

        self._require_makefile()
        self.create_directories()

        self.console.print("\n[cyan]▶[/cyan] Starting Alpine Docker setup...\n")
        self.build_image()
        self.start_container()

        if clone:
            self.clone_nvim_config(ask=not assume_yes)

        self.print_next_steps()
        return True

    def _require_makefile(self) -> None:
        if not (self.project_dir / "Makefile").is_file():
            raise BootstrapError(f"No Makefile found in {self.project_dir}")

    def create_directories(self) -> Path:
        """Create the local backup directory."""
        self.console.print("[blue]ℹ[/blue] Creating necessary directories...")
        backup_dir = self.project_dir / self.config.backup_dir
        backup_dir.mkdir(parents=True, exist_ok=True)
        self.console.print(f"[green]✓[/green] Created {self.config.backup_dir} directory")
        return backup_dir

    def build_image(self) -> BuildReport:
        """Build the Docker image and report how long it took."""
        self.console.print("[cyan]▶[/cyan] Building Alpine Docker image...")
        self.console.print("This may take 5-8 minutes on first run...\n")

        start = self._clock()
        result = self.runner.run(self._make(self.config.build_target))
        if result.returncode != 0:
            self.console.print("[red]✗[/red] Failed to build Docker image")
            raise BootstrapError(
                f"'{self.config.make_command} {self.config.build_target}' "
                f"exited with status {result.returncode}"
            )

        report = BuildReport(
            duration_seconds=int(self._clock() - start),
            image_size=self.image_size(),
        )
        self.console.print(
            f"[green]✓[/green] Docker image built successfully in {report.duration_seconds}s"
        )
        if report.image_size:
            self.console.print(f"\n[cyan]▶[/cyan] Image size: {report.image_size}\n")
        return report

    def image_size(self) -> Optional[str]:
        """Ask docker for the size of the built image."""
        try:
            result = self.runner.run(
                ["docker", "images", f"{self.config.image_name}:latest", "--format", "{{.Size}}"],
                capture=True,
            )
        except BootstrapError as e:
            logger.debug("Could not query image size: %s", e)
            return None

        if result.returncode != 0:
            return None
        size = (result.stdout or "").strip().splitlines()
        return size[0] if size else None

    def start_container(self) -> None:
        """Start the container in detached mode."""
        self.console.print("[blue]ℹ[/blue] Starting container...")
        result = self.runner.run(self._make(self.config.up_target))
        if result.returncode != 0:
            self.console.print("[red]✗[/red] Failed to start container")
            raise BootstrapError(
                f"'{self.config.make_command} {self.config.up_target}' "
                f"exited with status {result.returncode}"
            )
        self.console.print("[green]✓[/green] Container started successfully")

    def clone_nvim_config(self, ask: bool = True) -> bool:
        """
        Clone the Neovim configuration into the container.

        Failure is reported as a warning; the clone can be retried later.

        Returns:
            True if the configuration was cloned
        """
        self.console.print("[blue]ℹ[/blue] Cloning Neovim configuration...")

        if ask and not self._confirm("Do you want to clone the Neovim configuration now?", True):
            self.console.print("[blue]ℹ[/blue] Skipping Neovim configuration clone")
            return False

        result = self.runner.run(self._make(self.config.clone_target))
        if result.returncode != 0:
            self.console.print("[yellow]⚠[/yellow] Failed to clone Neovim configuration")
            self.console.print(
                f"You can clone it later with: {self.config.make_command} {self.config.clone_target}"
            )
            return False

        self.console.print("[green]✓[/green] Neovim configuration cloned")
        return True

    def print_next_steps(self) -> None:
        """Show the commands available after setup."""
        self.console.print(Panel.fit(
            "Your Alpine environment is ready!\n\n"
            "[bold cyan]Quick Start:[/bold cyan]\n"
            "  make shell              # Access the shell\n"
            "  make nvim               # Start Neovim\n"
            "  make gui                # Start GUI session\n\n"
            "[bold cyan]Essential Commands:[/bold cyan]\n"
            "  make help               # View all commands\n"
            "  make backup             # Backup your work\n"
            "  make size               # Check image size\n"
            "  make update-packages    # Update packages\n\n"
            "[bold cyan]Inside Container:[/bold cyan]\n"
            "  cd /workspace           # Your project directory\n"
            "  sudo apk add <pkg>      # Install packages\n"
            "  apk search <term>       # Search packages",
            title="Setup Complete!",
            border_style="green",
        ))

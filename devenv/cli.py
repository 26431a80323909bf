"""
Command-line interface for the Alpine development environment.

Provides commands for verifying host prerequisites, bootstrapping the
container, and managing the checker configuration.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from . import __version__
from .bootstrap import BootstrapError, SetupRunner
from .config import ConfigError, ConfigLoader, DevenvConfig
from .log import setup_logging
from .preflight import CheckSeverity, PreflightChecker, PreflightResult

console = Console()

BANNER = """
╔═══════════════════════════════════════════════╗
║   Alpine Development Environment Setup        ║
╚═══════════════════════════════════════════════╝
"""


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="devenv")
@click.pass_context
def cli(ctx):
    """
    Alpine Development Environment

    Verify host prerequisites and bootstrap the development container.
    """
    ctx.ensure_object(dict)


def _load_config(config: Optional[str]) -> DevenvConfig:
    """Load configuration or exit with an error."""
    try:
        loader = ConfigLoader(config).load()
    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)

    if loader.source:
        console.print(f"Configuration: [cyan]{loader.source}[/cyan]\n")
    return loader.config


def _run_preflight(config: DevenvConfig, verbose: bool) -> PreflightResult:
    """Run checks and render the result table."""
    checker = PreflightChecker(config)
    result = checker.run_all()

    if result.ecosystem:
        console.print(f"Package manager: [cyan]{result.ecosystem.value}[/cyan]\n")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")

    for check in result.checks:
        if check.severity == CheckSeverity.ERROR:
            status = "[red]FAIL[/red]"
        elif check.severity == CheckSeverity.WARNING:
            status = "[yellow]WARN[/yellow]"
        else:
            status = "[green]PASS[/green]"

        details = escape(check.message)
        if check.details and (verbose or not check.passed):
            details += "\n" + "\n".join(f"  {escape(line)}" for line in check.details)

        table.add_row(escape(check.tool), status, details)

    console.print(table)
    console.print()

    if result.passed:
        console.print(f"[green]{result.summary()}[/green]")
    else:
        console.print(f"[red]{result.summary()}[/red]")
        console.print(f"[red]✗[/red] Fatal checks failed: {result.fatal_count}")

    return result


# ============================================================
# CHECK Command
# ============================================================

@cli.command("check")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (or set DEVENV_CONFIG)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def check(config: Optional[str], verbose: bool):
    """
    Run pre-flight checks.

    Exits with status 1 when a mandatory tool is missing or too old.
    """
    setup_logging(verbose)
    console.print("\n[bold blue]Running Pre-flight Checks[/bold blue]\n")

    cfg = _load_config(config)
    result = _run_preflight(cfg, verbose)

    if result.passed:
        console.print("\n[bold]Ready to build the environment![/bold]")
        console.print("  [dim]devenv setup[/dim]")
    else:
        console.print("\n[bold]Please fix the errors above before continuing.[/bold]")
    sys.exit(result.exit_code)


# ============================================================
# SETUP Command
# ============================================================

@cli.command("setup")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (or set DEVENV_CONFIG)",
)
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory containing the Makefile and Dockerfile",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.option("--skip-clone", is_flag=True, help="Do not clone the Neovim configuration")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def setup(config: Optional[str], project_dir: str, yes: bool, skip_clone: bool, verbose: bool):
    """
    Verify prerequisites, then build and start the container.

    The build does not start unless every mandatory check passes.
    """
    setup_logging(verbose)
    console.print(BANNER, style="bold cyan")

    cfg = _load_config(config)
    result = _run_preflight(cfg, verbose)

    if not result.passed:
        console.print("\n[red]✗[/red] Please fix the above errors before continuing")
        sys.exit(result.exit_code)

    console.print()
    runner = SetupRunner(cfg.bootstrap, console=console, project_dir=Path(project_dir))

    try:
        runner.run(assume_yes=yes, clone=not skip_clone)
    except BootstrapError as e:
        console.print(f"[red]Setup failed: {escape(str(e))}[/red]")
        sys.exit(1)


# ============================================================
# INIT Command
# ============================================================

@cli.command("init")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default="devenv.yaml",
    help="Configuration file to write",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
def init(output: str, force: bool):
    """Write the built-in defaults to a configuration file."""
    output_path = Path(output)

    if output_path.exists() and not force:
        if not Confirm.ask(f"[yellow]{output} already exists. Overwrite?[/yellow]", console=console):
            console.print("[red]Aborted.[/red]")
            return

    written = ConfigLoader.from_dict({}).save(output_path)

    console.print(Panel.fit(
        f"[green]Configuration written to[/green] [cyan]{written}[/cyan]\n\n"
        f"[bold]Next steps:[/bold]\n"
        f"1. Edit minimum versions or install hints in [cyan]{written.name}[/cyan]\n"
        f"2. Run: [yellow]devenv check --config {written}[/yellow]",
        title="Initialization Complete",
    ))


# ============================================================
# SHOW-CONFIG Command
# ============================================================

@cli.command("show-config")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (or set DEVENV_CONFIG)",
)
def show_config(config: Optional[str]):
    """Show the effective tool requirements."""
    cfg = _load_config(config)

    table = Table(title="Tool Requirements")
    table.add_column("Tool", style="cyan")
    table.add_column("Executable", style="white")
    table.add_column("Minimum", style="green")
    table.add_column("Mandatory", style="yellow")

    for tool in cfg.tools:
        executable = tool.executable
        if tool.plugin_host:
            executable += f" / {tool.plugin_host} {tool.plugin_version_args[0]}"
        table.add_row(
            escape(tool.name),
            executable,
            tool.minimum_version or "-",
            "yes" if tool.mandatory else "no",
        )

    console.print(table)
    console.print(f"\nDisplay variable: [cyan]{cfg.display.env_var}[/cyan]")
    console.print(f"Key pairs: [cyan]{cfg.keys.directory}[/cyan] ({', '.join(cfg.keys.filenames)})")
    console.print(f"Image: [cyan]{cfg.bootstrap.image_name}[/cyan]")


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    cli()

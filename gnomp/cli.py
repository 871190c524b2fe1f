"""Command Line Interface for gnomp."""

import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .backup import BackupExecutor, BackupResult, RestoreExecutor, RestoreReport
from .config import GnompConfig, get_config, load_config
from .errors import DependencyError, GnompError
from .system import CommandRunner, DependencyChecker
from .util import format_duration, format_size, get_logger, setup_logging

console = Console()

MENU_BACKUP = "1"
MENU_RESTORE = "2"


def setup_cli_logging(config: GnompConfig, verbose: bool = False):
    """Setup logging for CLI."""
    level = "DEBUG" if verbose else config.log_level
    setup_logging(level=level, log_file=config.log_file, console=console)


def _runner(config: GnompConfig) -> CommandRunner:
    return CommandRunner(timeout=config.command_timeout, privilege_command=config.privilege_command)


def _check_dependencies(config: GnompConfig) -> None:
    checker = DependencyChecker(
        _runner(config),
        required=config.required_tools,
        package_manager=config.package_manager,
        aliases=config.package_aliases,
    )
    try:
        installed = checker.ensure()
    except DependencyError as e:
        console.print(f"[red]Dependency error: {e}[/red]")
        sys.exit(1)

    if installed:
        console.print(f"[green]Installed: {', '.join(installed)}[/green]")


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Configuration file path")
@click.option("--skip-deps", is_flag=True, help="Do not check for required system tools")
@click.version_option(__version__, prog_name="gnomp")
@click.pass_context
def cli(ctx, verbose: bool, config: Optional[Path], skip_deps: bool):
    """gnomp - GNOME desktop configuration backup and restore.

    Run without a command for the interactive menu.
    """
    cfg = load_config(config) if config else get_config()
    setup_cli_logging(cfg, verbose)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg

    if not skip_deps and ctx.invoked_subcommand != "check":
        _check_dependencies(cfg)

    if ctx.invoked_subcommand is None:
        _run_menu(ctx, cfg)


def _run_menu(ctx, config: GnompConfig) -> None:
    """Interactive numeric menu."""
    console.print("======================================")
    console.print("[bold cyan]  GNOME Backup & Restore Tool[/bold cyan]")
    console.print("======================================")
    console.print(f"{MENU_BACKUP}) Backup GNOME")
    console.print(f"{MENU_RESTORE}) Restore GNOME")

    choice = click.prompt("Choose option (1/2)", default="", show_default=False).strip()

    if choice == MENU_BACKUP:
        _run_backup(config)
    elif choice == MENU_RESTORE:
        archive = click.prompt("Enter path to your backup .tar.gz file")
        _run_restore(config, archive)
    else:
        console.print("[red]Invalid option.[/red]")
        ctx.exit(2)


def _run_backup(config: GnompConfig) -> None:
    logger = get_logger(__name__)
    started = time.monotonic()
    try:
        result = BackupExecutor(config).execute_backup()
    except (GnompError, OSError) as e:
        logger.debug("Backup failed", exc_info=True)
        console.print(f"[red]Backup failed: {e}[/red]")
        sys.exit(1)

    _print_backup_summary(result, time.monotonic() - started)


def _run_restore(config: GnompConfig, archive: str) -> None:
    logger = get_logger(__name__)
    started = time.monotonic()
    try:
        report = RestoreExecutor(config).restore(archive)
    except (GnompError, OSError) as e:
        logger.debug("Restore failed", exc_info=True)
        console.print(f"[red]Restore failed: {e}[/red]")
        sys.exit(1)

    _print_restore_summary(report, time.monotonic() - started)


def _print_backup_summary(result: BackupResult, elapsed: float) -> None:
    table = Table(title="Backup Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Enabled extensions", str(len(result.extensions)))
    table.add_row("Extension directories", str(result.copied_extension_dirs))
    table.add_row("Theme/font paths", ", ".join(result.theme_paths) or "none")
    table.add_row("GDM theme", "Yes" if result.gdm_theme else "No")
    table.add_row("Archive size", format_size(result.archive_size))
    table.add_row("Duration", format_duration(elapsed))

    console.print(table)
    console.print(f"[bold green]Backup completed! File saved at: {result.archive}[/bold green]")


def _print_restore_summary(report: RestoreReport, elapsed: float) -> None:
    table = Table(title="Restore Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Extensions", str(len(report.extensions)))
    table.add_row("Already present", str(len(report.already_present)))
    table.add_row("Downloaded", str(len(report.installed)))
    table.add_row("Failed", str(len(report.failed)))
    table.add_row("Theme entries", str(report.theme_entries))
    table.add_row("GDM theme", "Yes" if report.gdm_theme else "No")
    table.add_row("Shell reloaded", "Yes" if report.reloaded else "No")
    table.add_row("Duration", format_duration(elapsed))

    console.print(table)

    if report.failed:
        console.print(f"[yellow]Could not fetch: {', '.join(report.failed)}[/yellow]")
    if not report.reloaded:
        console.print("[yellow]Please log out and back in manually.[/yellow]")

    console.print("[bold green]GNOME restore complete![/bold green]")


@cli.command("backup")
@click.pass_context
def backup(ctx):
    """Back up GNOME settings, extensions, themes and GDM theme."""
    _run_backup(ctx.obj["config"])


@cli.command("restore")
@click.argument("archive", required=False)
@click.pass_context
def restore(ctx, archive: Optional[str]):
    """Restore from a backup archive (prompts for the path when omitted)."""
    if not archive:
        archive = click.prompt("Enter path to your backup .tar.gz file")
    _run_restore(ctx.obj["config"], archive)


@cli.command("check")
@click.pass_context
def check(ctx):
    """Check for required system tools and install missing ones."""
    _check_dependencies(ctx.obj["config"])


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

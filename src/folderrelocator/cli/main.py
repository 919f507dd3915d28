"""Main CLI interface for FolderRelocator using Click."""

import sys
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..config import ConfigManager, RelocatorConfig
from ..core import MoveRequest
from ..links import create_directory_link
from ..mover import CancelToken, MoveOrchestrator, MoveResult
from ..utils.logging import get_logger, setup_logging
from ..validation import ValidationPipeline, ValidationReport

console = Console()
logger = get_logger(__name__)

EXIT_CANCELLED = 130


def _load_config(ctx) -> RelocatorConfig:
    """Load configuration (defaults when no file exists) and apply its logging settings."""
    config_manager = ConfigManager(ctx.obj.get("config_path"))
    config = config_manager.load(create_if_missing=True)

    setup_logging(
        level=config.logging.level,
        log_dir=config.logging.log_dir,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
        console_enabled=config.logging.console_enabled,
        file_enabled=config.logging.file_enabled,
    )
    return config


def _build_request(
    source: str,
    destination: str,
    config: RelocatorConfig,
    safe: Optional[bool],
    deep_check: Optional[bool],
) -> MoveRequest:
    """Request flags come from config unless given on the command line."""
    request = MoveRequest.from_config(source, destination, config)
    overrides = {}
    if safe is not None:
        overrides["safe_mode"] = safe
    if deep_check is not None:
        overrides["deep_permission_check"] = deep_check
    return replace(request, **overrides)


def print_report(report: ValidationReport):
    """Show validation problems as a table."""
    if report.is_clean:
        console.print("[bold green]✓ No problems found[/bold green]")
        return

    table = Table(title="Problems", show_header=True, header_style="bold red")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", style="yellow")
    table.add_column("Problem")
    table.add_column("Cause", style="dim")

    for index, problem in enumerate(report, start=1):
        cause = str(problem.cause) if problem.cause is not None else ""
        table.add_row(str(index), problem.category.value, problem.message, cause)

    console.print(table)


def _wait_for_move(future, cancel_token: CancelToken) -> MoveResult:
    """Block until the background move ends. Ctrl+C asks it to stop."""
    with console.status("[cyan]Moving files... (Ctrl+C to cancel)[/cyan]"):
        while True:
            try:
                return future.result(timeout=0.2)
            except FutureTimeoutError:
                continue
            except KeyboardInterrupt:
                if not cancel_token.is_cancelled():
                    console.print("[yellow]Cancelling after the current file...[/yellow]")
                    cancel_token.cancel()


safe_option = click.option(
    "--safe/--unsafe",
    "safe",
    default=None,
    help="Refuse to move application folders (overrides config)",
)
deep_check_option = click.option(
    "--deep-check/--no-deep-check",
    "deep_check",
    default=None,
    help="Check every file can be opened exclusively (overrides config)",
)


@click.group()
@click.version_option(version="0.1.0", prog_name="FolderRelocator")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx, config: Optional[Path]):
    """
    FolderRelocator - move a folder elsewhere and leave a link in its place.

    Programs that expect the folder at its old location keep working.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


@cli.command()
@click.argument("source")
@click.argument("destination")
@safe_option
@deep_check_option
@click.pass_context
def check(ctx, source: str, destination: str, safe: Optional[bool], deep_check: Optional[bool]):
    """
    Check whether SOURCE can be moved to DESTINATION without moving anything.
    """
    try:
        config = _load_config(ctx)
        request = _build_request(source, destination, config, safe, deep_check)
        report = ValidationPipeline.from_config(config).validate(request)
    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        logger.exception("Check command error")
        sys.exit(1)

    print_report(report)
    if not report.is_clean:
        sys.exit(1)


@cli.command()
@click.argument("source")
@click.argument("destination")
@safe_option
@deep_check_option
@click.option(
    "--link/--no-link",
    "link",
    default=None,
    help="Leave a directory link at SOURCE after moving (overrides config)",
)
@click.pass_context
def move(
    ctx,
    source: str,
    destination: str,
    safe: Optional[bool],
    deep_check: Optional[bool],
    link: Optional[bool],
):
    """
    Move SOURCE to DESTINATION and leave a link at SOURCE.

    DESTINATION is the full path of the new folder and must not exist yet.
    """
    try:
        config = _load_config(ctx)
        request = _build_request(source, destination, config, safe, deep_check)

        console.print(f"\n[bold cyan]Checking[/bold cyan] {source} → {destination}\n")
        report = ValidationPipeline.from_config(config).validate(request)
        print_report(report)
        if not report.is_clean:
            sys.exit(1)

        cancel_token = CancelToken()
        with MoveOrchestrator(verify_sizes=config.verify_sizes) as orchestrator:
            future = orchestrator.submit(request.source_path, request.destination_path, cancel_token)
            result = _wait_for_move(future, cancel_token)

        if result.cancelled:
            console.print(
                "[yellow]⚠ Move cancelled. The original folder is untouched; "
                f"partially copied files remain in {destination}[/yellow]"
            )
            sys.exit(EXIT_CANCELLED)

        if not result.success:
            console.print(f"[bold red]✗ Move failed:[/bold red] {result.error_message}")
            sys.exit(1)

        copied = result.copy_outcome.files_copied if result.copy_outcome else 0
        console.print(f"✓ Moved {copied} file(s) to [green]{destination}[/green]")

        if config.create_link if link is None else link:
            create_directory_link(request.source_path, request.destination_path.resolve())
            console.print(f"✓ Linked [green]{source}[/green] → {destination}")

        console.print("\n[bold green]✓ Done![/bold green]")

    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        logger.exception("Move command error")
        sys.exit(1)


@cli.group(name="config")
def config_group():
    """Manage FolderRelocator configuration."""
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Display current configuration."""
    console.print("\n[bold cyan]FolderRelocator Configuration[/bold cyan]\n")

    try:
        config_manager = ConfigManager(ctx.obj.get("config_path"))
        config = config_manager.load(create_if_missing=True)

        def flag(value: bool) -> str:
            return "[green]Enabled[/green]" if value else "[yellow]Disabled[/yellow]"

        console.print("[bold]Validation:[/bold]")
        console.print(f"  Safe mode: {flag(config.safe_mode)}")
        console.print(f"  Deep permission check: {flag(config.deep_permission_check)}")
        console.print(f"  Deep scan workers: {config.deep_scan_workers or 'auto'}")
        console.print(f"  Reject nested system folders: {flag(config.match_denied_subpaths)}")
        console.print(f"  Path pattern: {config.path_pattern or 'platform default'}")
        for path in config.extra_denied_paths:
            console.print(f"  • Denied: {path}")

        console.print("\n[bold]Move:[/bold]")
        console.print(f"  Verify sizes: {flag(config.verify_sizes)}")
        console.print(f"  Create link: {flag(config.create_link)}")

        console.print("\n[bold]Logging:[/bold]")
        console.print(f"  Level: {config.logging.level}")
        console.print(f"  Directory: {config.logging.log_dir}")

        source = config_manager.config_path or "defaults (no config file)"
        console.print(f"\n[dim]Config file: {source}[/dim]")

    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        logger.exception("Config show error")
        sys.exit(1)


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(path_type=Path),
    default=None,
    help="Where to write the configuration file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
def config_init(path: Optional[Path], force: bool):
    """Write a configuration file with default settings."""
    try:
        config_manager = ConfigManager()
        target = path or config_manager.DEFAULT_CONFIG_LOCATIONS[1]
        if target.exists() and not force:
            console.print(f"[yellow]⚠ {target} already exists. Use --force to overwrite.[/yellow]")
            sys.exit(1)

        saved = config_manager.save(RelocatorConfig(), target)
        console.print(f"✓ Created default configuration: [green]{saved}[/green]")

    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        logger.exception("Config init error")
        sys.exit(1)


if __name__ == "__main__":
    cli()

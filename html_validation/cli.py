"""CLI entry point for HTML validation."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from html_validation.errors import HTMLValidationError
from html_validation.models.config import ValidationConfig, with_show_warnings
from html_validation.session import HTMLValidation
from html_validation.validation_result import ValidationResult

console = Console()

DEFAULT_CONFIG = "html-validation.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str, data_folder: Optional[str]) -> ValidationConfig:
    # A missing default config is fine; an explicitly named one must exist
    if Path(config).exists() or config != DEFAULT_CONFIG:
        cfg = ValidationConfig.load(config)
    else:
        cfg = ValidationConfig()
    if data_folder:
        cfg.data_folder = data_folder
    return cfg


def _print_result(result: ValidationResult) -> None:
    console.print(f"\n[bold]{result.resource_name}[/bold] ({len(result.diagnostics)} new)")
    for line in result.diagnostics:
        console.print(f"  {line}", style="yellow", markup=False, highlight=False)
    if result.stale_diagnostics:
        console.print(f"  [dim]{len(result.stale_diagnostics)} accepted diagnostics no longer occur[/dim]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
@click.option("--data-folder", "-d", default=None, help="Folder holding exception files")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str, data_folder: Optional[str]) -> None:
    """Validate HTML with tidy and manage accepted exceptions."""
    setup_logging(verbose)
    if ctx.invoked_subcommand == "init":
        return
    try:
        ctx.obj = _load_config(config, data_folder)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'html-validation init' to create a default config.")
        sys.exit(1)


@cli.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--resource", "-r", default=None, help="Resource name for result files (defaults to the path)")
@click.option("--accept", is_flag=True, help="Accept any new diagnostics")
@click.option(
    "--ignore-proprietary/--report-proprietary", default=None, help="Override whether proprietary attribute warnings are dropped"
)
@click.option("--show-warnings/--hide-warnings", default=None, help="Override whether tidy reports warnings")
@click.pass_obj
def check(
    cfg: ValidationConfig,
    html_file: str,
    resource: Optional[str],
    accept: bool,
    ignore_proprietary: Optional[bool],
    show_warnings: Optional[bool],
) -> None:
    """Validate an HTML file against its accepted exceptions."""
    updates = {}
    if ignore_proprietary is not None:
        updates["ignore_proprietary"] = ignore_proprietary
    if show_warnings is not None:
        updates["tidy_flags"] = with_show_warnings(cfg.options.tidy_flags, show_warnings)
    if updates:
        cfg.options = cfg.options.model_copy(update=updates)

    try:
        html = Path(html_file).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        console.print(f"[red]{html_file} is not valid UTF-8: {e.reason} at byte {e.start}[/red]")
        sys.exit(2)

    try:
        session = HTMLValidation.from_config(cfg)
        result = session.validation(html, resource or html_file)
        if accept:
            result.accept()
    except HTMLValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)

    if accept:
        console.print(f"[green]Accepted:[/green] {result.resource_name}")
        return
    if result.is_valid():
        console.print(f"[green]Valid:[/green] {result.resource_name}")
        return
    _print_result(result)
    console.print("\nRun 'html-validation review' to accept these diagnostics.")
    sys.exit(1)


@cli.command()
@click.option("--accept-all", is_flag=True, help="Accept every pending resource without prompting")
@click.pass_obj
def review(cfg: ValidationConfig, accept_all: bool) -> None:
    """Review pending diagnostics and accept the acceptable ones."""
    session = HTMLValidation.from_config(cfg)
    reviewed = accepted = 0
    try:
        for result in session.each_exception():
            reviewed += 1
            _print_result(result)
            if accept_all or click.confirm("Accept these diagnostics?", default=False):
                result.accept()
                accepted += 1
    except HTMLValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)

    if reviewed == 0:
        console.print("[green]No pending diagnostics[/green]")
        return
    console.print(f"\n[green]Review complete:[/green] {accepted}/{reviewed} resources accepted")


@cli.command()
@click.pass_obj
def status(cfg: ValidationConfig) -> None:
    """List resources with pending diagnostics."""
    session = HTMLValidation.from_config(cfg)
    store = session.store

    table = Table(title=f"Pending diagnostics in {session.data_folder}")
    table.add_column("Resource", style="bold")
    table.add_column("Pending")
    table.add_column("Accepted")
    for identity in store.enumerate_pending_identities():
        accepted = (
            str(len(store.load_baseline(identity))) if store.has_baseline(identity) else "[dim]none[/dim]"
        )
        table.add_row(identity, f"[yellow]{len(store.load_pending(identity))}[/yellow]", accepted)

    if table.row_count == 0:
        console.print("[green]No pending diagnostics[/green]")
        return
    console.print(table)


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create a default configuration file."""
    config_path = Path(ctx.parent.params["config"])
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = ValidationConfig()
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nValidate a page with:")
    console.print("  [blue]html-validation check page.html[/blue]")


if __name__ == "__main__":
    cli()

#!/usr/bin/env python3
"""
Command-line interface for Record Lifecycle.

Shows configuration and reports lifecycle flag counts for database tables.
"""

import logging
import sys
from typing import List, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session

from . import __version__
from .config import get_config
from .lifecycle import LifecycleService, LifecycleSummary

console = Console()


def _resolve_database_url(database_url: Optional[str]) -> str:
    url = database_url or get_config().database_url
    if not url:
        raise click.UsageError(
            "No database configured: pass --database-url or set "
            "LIFECYCLE_DATABASE_URL"
        )
    return url


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Record Lifecycle - soft delete and active/inactive flags for SQLAlchemy."""
    try:
        log_level = get_config().log_level
    except ValidationError:
        # Reported by the subcommands that load configuration
        log_level = "WARNING"
    logging.basicConfig(level=log_level)

    if ctx.invoked_subcommand is None:
        console.print(
            Panel.fit(
                f"[bold blue]Record Lifecycle[/bold blue] v{__version__}\n"
                "[dim]Soft delete and active/inactive flags for SQLAlchemy[/dim]\n\n"
                "Use [bold]lifecycle --help[/bold] to see available commands.",
                border_style="blue",
            )
        )


@cli.group()
def config() -> None:
    """Inspect lifecycle configuration."""
    pass


@config.command("show")
@click.option("--format", type=click.Choice(["table", "json", "yaml"]), default="table")
def config_show(format: str) -> None:
    """Display current configuration."""
    try:
        config_dict = get_config().to_dict()

        if format == "json":
            console.print_json(data=config_dict)
        elif format == "yaml":
            import yaml  # type: ignore[import-untyped]

            console.print(yaml.dump(config_dict, default_flow_style=False))
        else:
            table = Table(title="Lifecycle Configuration", show_header=True)
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")

            for setting, value in config_dict.items():
                if value is None:
                    value = "[dim]Not configured[/dim]"
                elif isinstance(value, bool):
                    value = "✓" if value else "✗"
                table.add_row(setting, str(value))

            console.print(table)

    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)


@config.command("validate")
def config_validate() -> None:
    """Validate current configuration."""
    try:
        config = get_config()
    except Exception as e:
        console.print(f"[red]✗ Configuration validation failed: {e}[/red]")
        sys.exit(1)

    warnings = []

    if not config.filter_default_reads:
        warnings.append(
            "Default-read filtering is disabled - deleted and inactive "
            "records will be returned by ordinary queries"
        )

    if not config.commit_on_change and config.environment == "production":
        warnings.append(
            "commit_on_change is off - lifecycle changes are only flushed "
            "and need an explicit commit"
        )

    if not config.database_url:
        warnings.append("No database_url configured for the inspect command")

    console.print("[green]✓ Configuration is valid[/green]")

    if warnings:
        console.print("\n[yellow]⚠ Warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  [yellow]• {warning}[/yellow]")


@cli.command("inspect")
@click.argument("tables", nargs=-1, required=True)
@click.option("--database-url", help="SQLAlchemy database URL")
@click.option("--format", type=click.Choice(["table", "json"]), default="table")
def inspect_tables(
    tables: List[str], database_url: Optional[str], format: str
) -> None:
    """Count active, inactive and deleted rows in TABLES."""
    url = _resolve_database_url(database_url)

    summaries: List[LifecycleSummary] = []
    try:
        engine = create_engine(url)
        with Session(engine) as session:
            service = LifecycleService(session)
            for table_name in tables:
                summaries.append(service.summarize_table(table_name))
    except Exception as e:
        console.print(f"[red]Error inspecting tables: {e}[/red]")
        sys.exit(1)

    if format == "json":
        console.print_json(data=[summary.model_dump() for summary in summaries])
        return

    table = Table(title="Lifecycle Summary", show_header=True)
    table.add_column("Table", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Active", justify="right", style="green")
    table.add_column("Inactive", justify="right", style="yellow")
    table.add_column("Deleted", justify="right", style="red")

    for summary in summaries:
        table.add_row(
            summary.table_name,
            str(summary.total),
            str(summary.active),
            str(summary.inactive),
            str(summary.deleted),
        )

    console.print(table)


@cli.command()
@click.option("--database-url", help="SQLAlchemy database URL")
def doctor(database_url: Optional[str]) -> None:
    """Run diagnostic checks on the lifecycle installation."""
    console.print("[bold]Running Record Lifecycle diagnostics...[/bold]\n")

    checks_passed = 0
    checks_failed = 0

    # Check 1: Configuration
    try:
        config = get_config()
        console.print("[green]✓[/green] Configuration loaded successfully")
        checks_passed += 1
    except Exception as e:
        console.print(f"[red]✗[/red] Configuration error: {e}")
        checks_failed += 1
        config = None

    # Check 2: Database connectivity (if configured)
    db_url = database_url or (config.database_url if config else None)
    if db_url:
        try:
            engine = create_engine(db_url)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            console.print("[green]✓[/green] Database connection successful")
            checks_passed += 1
        except Exception as e:
            console.print(f"[red]✗[/red] Database connection failed: {e}")
            checks_failed += 1
    else:
        console.print(
            "[yellow]⚠[/yellow] No database configured "
            "(LIFECYCLE_DATABASE_URL not set)"
        )

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Checks passed: [green]{checks_passed}[/green]")
    console.print(f"  Checks failed: [red]{checks_failed}[/red]")

    if checks_failed == 0:
        console.print("\n[green]✓ All systems operational[/green]")
    else:
        console.print("\n[yellow]⚠ Some issues detected - review output above[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    cli()

"""
Root Typer application for the resilience-config CLI.

Commands::

    resilience-config show FILE                 instance / shared config table
    resilience-config resolve FILE KIND NAME    resolved config for one instance
    resilience-config validate FILE             resolve everything, exit 1 on error
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from resilience_config.config.settings import ResilienceSettings, load_settings
from resilience_config.core.enums import PrimitiveKind
from resilience_config.core.errors import ConfigError
from resilience_config.core.logging import configure_logging

app = typer.Typer(
    name="resilience-config",
    help="Inspect and validate layered resilience configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("resilience-config")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"resilience-config {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for resolution traces."),
) -> None:
    """resilience-config CLI: resolve bulkhead, circuit breaker, rate limiter and retry configs."""
    configure_logging(level=log_level, json_format=False)


def _load(path: Path) -> ResilienceSettings:
    try:
        return load_settings(path)
    except ConfigError as e:
        err_console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command("show")
def show(
    path: Path = typer.Argument(..., help="Settings TOML file"),
    kind: PrimitiveKind | None = typer.Option(None, "--kind", "-k", help="Only this kind"),
) -> None:
    """List configured instances and shared configs per kind."""
    settings = _load(path)

    table = Table(title="Resilience Configuration")
    table.add_column("Kind")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Base Config")
    table.add_column("Overrides")

    for current, properties in settings.iter_properties():
        if kind is not None and current != kind:
            continue
        for name, shared in sorted(properties.get_configs().items()):
            table.add_row(current.value, "shared", name, "-", ", ".join(sorted(shared.explicit_fields())))
        for name, instance in sorted(properties.get_instances().items()):
            overrides = sorted(instance.explicit_fields() - {"base_config"})
            table.add_row(current.value, "instance", name, instance.base_config or "-", ", ".join(overrides))

    console.print(table)


@app.command("resolve")
def resolve(
    path: Path = typer.Argument(..., help="Settings TOML file"),
    kind: PrimitiveKind = typer.Argument(..., help="Primitive kind"),
    name: str = typer.Argument(..., help="Instance name"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Resolve and print the configuration of one instance."""
    settings = _load(path)
    properties = settings.properties_for(kind)

    try:
        config = properties.create_config(name)
    except ConfigError as e:
        err_console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1) from e

    values = config.to_dict()
    if format is OutputFormat.JSON:
        typer.echo(json.dumps(values, indent=2, sort_keys=True))
        return

    if name not in properties.get_instances():
        console.print(f"[yellow]'{name}' is not configured; showing {kind.value} defaults[/yellow]")

    table = Table(title=f"{kind.value} · {name}")
    table.add_column("Field")
    table.add_column("Value")
    for key, value in values.items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("validate")
def validate(
    path: Path = typer.Argument(..., help="Settings TOML file"),
) -> None:
    """Resolve every configured instance and report the first error."""
    settings = _load(path)

    count = 0
    for kind, properties in settings.iter_properties():
        for name in properties.get_instances():
            try:
                properties.create_config(name)
            except ConfigError as e:
                err_console.print(f"[red]✗ {kind.value}.{name}:[/red] {e}")
                raise typer.Exit(1) from e
            count += 1

    console.print(f"[green]✓ {count} instance(s) resolved[/green]")

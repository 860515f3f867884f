"""Typer CLI exposing the property binder."""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from propbind.binding import PlaceholderResolver, PropertyBinder, PropertyBindingError
from propbind.binding.members import read_members
from propbind.container import BindingContext
from propbind.domain import BindingOptions
from propbind.registry import ClassNotFoundError, resolve_class

from .deps import get_context, get_settings

app = typer.Typer(help="propbind command-line interface")
console = Console()

_SCALARS = (str, int, float, bool, type(None))


def _parse_pairs(values: list[str] | None, option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw in values or []:
        key, separator, value = raw.partition("=")
        if not separator or not key:
            raise typer.BadParameter(f"{option} expects key=value, got {raw!r}")
        pairs[key.strip()] = value
    return pairs


def _apply_properties(context: BindingContext, values: list[str] | None) -> None:
    context.properties.set_override_properties(_parse_pairs(values, "--property"))


def _snapshot(target: Any, depth: int = 4) -> Any:
    if isinstance(target, _SCALARS):
        return target
    if depth == 0:
        return repr(target)
    return {name: _snapshot(value, depth - 1) for name, value in read_members(target).items()}


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved binder settings."""

    settings = get_settings()
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Properties File:\t" + str(settings.properties_file or "-"))
    typer.echo("Environment Fallback:\t" + str(settings.environment_fallback))
    typer.echo("Ignore Case:\t" + str(settings.ignore_case))
    typer.echo("Mandatory:\t" + str(settings.mandatory))
    typer.echo("Option Prefix:\t" + (settings.option_prefix or "-"))


@app.command("bind")
def bind(
    target_class: str = typer.Argument(..., help="Fully-qualified class of the target"),
    assignments: list[str] = typer.Option(None, "--set", "-s", help="key=value to bind"),
    properties: list[str] = typer.Option(
        None, "--property", "-p", help="name=value available to placeholders"
    ),
    option_prefix: str | None = typer.Option(None, "--prefix", help="Only bind keys with prefix"),
    ignore_case: bool = typer.Option(False, "--ignore-case", help="Match names ignoring case"),
    mandatory: bool = typer.Option(False, "--mandatory", help="Fail on unbound keys"),
) -> None:
    """Create an instance of TARGET_CLASS, bind the assignments and print it."""

    settings = get_settings()
    context = get_context()
    _apply_properties(context, properties)
    try:
        target_type = resolve_class(target_class)
    except ClassNotFoundError as exc:
        raise typer.BadParameter(str(exc), param_hint="TARGET_CLASS") from exc

    options = BindingOptions(
        ignore_case=ignore_case or settings.ignore_case,
        mandatory=mandatory or settings.mandatory,
        option_prefix=option_prefix or settings.option_prefix,
    )
    try:
        target = context.injector.new_instance(target_type)
    except TypeError as exc:
        raise typer.BadParameter(
            f"Cannot create {target_class}: {exc}", param_hint="TARGET_CLASS"
        ) from exc

    values: dict[str, Any] = dict(_parse_pairs(assignments, "--set"))
    try:
        result = PropertyBinder(context, options).bind_all(target, values)
    except PropertyBindingError as exc:
        typer.echo(f"Binding failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(_snapshot(target), indent=2, default=str))
    if values:
        table = Table(title="Unbound properties")
        table.add_column("Key")
        table.add_column("Value")
        for key, value in values.items():
            table.add_row(key, str(value))
        console.print(table)
    if not result.complete:
        raise typer.Exit(code=1)


@app.command("resolve")
def resolve(
    text: str,
    properties: list[str] = typer.Option(
        None, "--property", "-p", help="name=value available to placeholders"
    ),
) -> None:
    """Print TEXT with its {{name}} placeholders resolved."""

    context = get_context()
    _apply_properties(context, properties)
    try:
        typer.echo(PlaceholderResolver(context.properties).resolve(text))
    except PropertyBindingError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

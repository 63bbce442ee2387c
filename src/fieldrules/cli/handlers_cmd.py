"""Handler CLI commands: check and handlers."""

import asyncio

import click
import yaml

from fieldrules.exceptions import FieldRulesError
from fieldrules.messages import interpolate
from fieldrules.registry import default_registry


def _scalar(text: str):
    """Read a command-line value as a YAML scalar (numbers, booleans, null)."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def _parse_options(pairs: tuple[str, ...]) -> dict:
    options = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="--option")
        options[key.strip()] = _scalar(value)
    return options


@click.command()
@click.argument("name")
@click.argument("value")
@click.option(
    "--option",
    "-o",
    "pairs",
    multiple=True,
    help="Handler option as key=value; repeat for several.",
)
@click.option(
    "--string",
    "as_string",
    is_flag=True,
    default=False,
    help="Pass VALUE as a string instead of reading it as a YAML scalar.",
)
def check(name: str, value: str, pairs: tuple[str, ...], as_string: bool):
    """Check VALUE against the handler NAME (prefix with not: to invert)."""
    options = _parse_options(pairs)
    subject = value if as_string else _scalar(value)
    params: dict = {}

    try:
        valid = asyncio.run(default_registry.is_valid(name, subject, options, params))
    except FieldRulesError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if valid:
        click.echo(click.style("valid", fg="green", bold=True))
        return

    message = interpolate(
        options.get("message") or default_registry.message(name),
        {**options, **params, "field": "value"},
    )
    click.echo(click.style(f"invalid: {message}", fg="red", bold=True))
    raise SystemExit(1)


@click.command()
def handlers():
    """List the built-in handlers with their default messages."""
    for name in default_registry.list_registered():
        message = default_registry.message(name)
        negated = f"not:{name}"
        click.echo(f"  {name:<15} {message}")
        if negated in default_registry.messages():
            click.echo(f"  {negated:<15} {default_registry.message(negated)}")

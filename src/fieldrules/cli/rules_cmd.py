"""Rule file CLI commands: validate and lint."""

import asyncio
import json
from pathlib import Path

import click

from fieldrules.exceptions import FieldRulesError
from fieldrules.loader import build_validator, lint_rules_file, load_data_file


@click.command()
@click.argument("rules", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--event",
    "-e",
    "events",
    multiple=True,
    help="Active event; repeat for several. Defaults to FIELDRULES_EVENTS.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print errors as JSON.")
@click.pass_obj
def validate(settings, rules: Path, data: Path, events: tuple[str, ...], as_json: bool):
    """Validate a JSON or YAML DATA file against a RULES file."""
    active = list(events) or list(settings.events if settings else [])

    try:
        validator = build_validator(rules)
        document = load_data_file(data)
        valid = asyncio.run(validator.validates(document, active))
    except FieldRulesError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    errors = validator.errors()

    if as_json:
        click.echo(json.dumps(errors, indent=2))
    else:
        for key, messages in errors.items():
            for message in messages:
                click.echo(click.style(f"{key}: {message}", fg="red"))
        if valid:
            click.echo(click.style("Data is valid.", fg="green", bold=True))
        else:
            count = sum(len(messages) for messages in errors.values())
            click.echo(
                click.style(
                    f"\n{count} error(s) in {len(errors)} field(s)", fg="red", bold=True
                )
            )

    if not valid:
        raise SystemExit(1)


@click.command()
@click.argument("rules", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
def lint(rules: Path, strict: bool):
    """Check a RULES file against the rule file JSON Schema."""
    issues = lint_rules_file(rules, strict=strict)

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    click.echo(click.style("Rule file is valid.", fg="green", bold=True))

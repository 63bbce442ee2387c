"""fieldrules CLI entry point."""

import logging

import click

from fieldrules.config import CliSettings


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """fieldrules: declarative field validation CLI."""
    settings = CliSettings.from_env()
    logging.basicConfig(
        level=settings.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


# Register subcommands
from fieldrules.cli.handlers_cmd import check, handlers  # noqa: E402
from fieldrules.cli.rules_cmd import lint, validate  # noqa: E402

cli.add_command(validate)
cli.add_command(lint)
cli.add_command(check)
cli.add_command(handlers)

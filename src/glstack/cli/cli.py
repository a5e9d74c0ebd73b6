import logging

import click

from glstack.cli.commands.config import config_group
from glstack.cli.commands.stack import stack_group
from glstack.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="glstack")
@click.option("--debug", is_flag=True, help="Log every git and GitLab call to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Stacked merge requests for GitLab."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(config_group)
cli.add_command(stack_group)


def main() -> None:
    """CLI entry point used by the `glstack` console script."""
    cli()

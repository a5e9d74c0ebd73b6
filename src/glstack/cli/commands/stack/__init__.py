"""Commands for managing stacked diffs."""

import click

from glstack.cli.commands.stack.create_cmd import create_stack_cmd
from glstack.cli.commands.stack.list_cmd import list_cmd
from glstack.cli.commands.stack.navigate_cmd import (
    first_cmd,
    last_cmd,
    move_cmd,
    next_cmd,
    prev_cmd,
)
from glstack.cli.commands.stack.reorder_cmd import reorder_cmd
from glstack.cli.commands.stack.save_cmd import amend_cmd, save_cmd
from glstack.cli.commands.stack.switch_cmd import switch_cmd
from glstack.cli.commands.stack.sync_cmd import sync_cmd


@click.group("stack")
def stack_group() -> None:
    """Create, stack, and manage merge requests as stacked diffs."""
    pass


# Register subcommands
stack_group.add_command(create_stack_cmd)
stack_group.add_command(save_cmd)
stack_group.add_command(amend_cmd)
stack_group.add_command(list_cmd)
stack_group.add_command(first_cmd)
stack_group.add_command(next_cmd)
stack_group.add_command(prev_cmd)
stack_group.add_command(last_cmd)
stack_group.add_command(move_cmd)
stack_group.add_command(switch_cmd)
stack_group.add_command(reorder_cmd)
stack_group.add_command(sync_cmd)

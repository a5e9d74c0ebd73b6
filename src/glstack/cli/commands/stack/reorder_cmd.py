import click

from glstack.cli.ensure import Ensure
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.stack.errors import StackError
from glstack.core.stack.reorder import reorder_stack


@click.command("reorder")
@click.pass_obj
def reorder_cmd(ctx: GlstackContext) -> None:
    """Reorder the diffs of the current stack.

    Opens your editor with one branch per line. Move the lines into the new
    order, save and close. Merge requests that were already created are
    retargeted to their new previous branch.
    """
    repo = Ensure.in_repo(ctx)

    try:
        result = reorder_stack(ctx, repo)
    except (StackError, RuntimeError) as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    for update in result.target_updates:
        user_output(f"Merge request !{update.iid} now targets {update.target_branch}.")
    for branch in result.skipped_branches:
        user_output(f"No open merge request for {branch}; its target was not changed.")
    user_output(click.style("✓", fg="green") + " Reordering complete")

import click

from glstack.cli.ensure import Ensure
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.stack.errors import StackError
from glstack.core.stack.sync import sync_stack


@click.command("sync")
@click.pass_obj
def sync_cmd(ctx: GlstackContext) -> None:
    """Sync and submit progress on the current stack.

    \b
    1. If working in a fork, choose whether to push to the fork or upstream.
    2. Pulls changes made to stack branches on the remote.
    3. Rebases the stack when a branch has diverged, then force-pushes it.
    4. Creates merge requests for diffs that do not have one yet.
    5. Removes diffs whose merge request has merged.
    """
    repo = Ensure.in_repo(ctx)

    try:
        sync_stack(ctx, repo)
    except (StackError, RuntimeError) as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    user_output(click.style("Sync finished!", fg="green"))

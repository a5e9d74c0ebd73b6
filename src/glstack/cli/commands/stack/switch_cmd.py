import click

from glstack.cli.ensure import Ensure
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.stack.current import set_current_stack_title
from glstack.core.stack.errors import StackError
from glstack.core.stack.navigation import switch_message
from glstack.core.stack.store import StackStore


@click.command("switch")
@click.argument("title")
@click.pass_obj
def switch_cmd(ctx: GlstackContext, title: str) -> None:
    """Make TITLE the current stack and check out its last diff."""
    repo = Ensure.in_repo(ctx)
    store = StackStore(repo.stacks_dir)

    available = store.list_stacks()
    if title not in available:
        user_output(click.style("Error: ", fg="red") + f"no stack named '{title}'.")
        if available:
            user_output("Available stacks:")
            for name in available:
                user_output(f"  {name}")
        raise SystemExit(1)

    try:
        stack = store.gather(title)
        set_current_stack_title(ctx.git, repo.root, title)
        if stack.is_empty():
            user_output(f'Switched to stack "{title}". It has no diffs yet.')
            return
        last = stack.last()
        ctx.git.checkout_branch(repo.root, last.branch)
    except (StackError, RuntimeError) as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    user_output(f'Switched to stack "{title}".')
    user_output(switch_message(last))

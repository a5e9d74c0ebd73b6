import click

from glstack.cli.ensure import Ensure
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.stack.errors import StackError
from glstack.core.stack.mutations import create_stack


@click.command("create")
@click.argument("title", nargs=-1)
@click.pass_obj
def create_stack_cmd(ctx: GlstackContext, title: tuple[str, ...]) -> None:
    """Create a new stacked diff and make it the current stack.

    Words of TITLE are joined with dashes. Characters git does not accept in
    branch names are replaced with dashes.

    \b
    Examples:
      glstack stack create cool new feature
      glstack stack create
    """
    repo = Ensure.in_repo(ctx)

    raw_title = "-".join(title)
    if not raw_title:
        Ensure.interactive(ctx, "a title is required. Pass it as an argument.")
        raw_title = ctx.prompter.ask("New stack title?").strip()
        Ensure.invariant(bool(raw_title), "a title is required.")

    try:
        result = create_stack(ctx, repo, raw_title)
    except (StackError, RuntimeError) as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    if result.sanitized:
        user_output(
            click.style("! warning: ", fg="yellow")
            + f"invalid characters have been replaced with dashes: {result.title}"
        )
    user_output(f'New stack created with title "{result.title}".')

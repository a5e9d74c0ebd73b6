import click

from glstack.cli.ensure import Ensure
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.stack.current import get_current_stack_title
from glstack.core.stack.errors import StackError
from glstack.core.stack.mutations import AmendOptions, SaveOptions, amend_changes, save_changes


def _resolve_description(description: str | None, message: str | None) -> str | None:
    Ensure.invariant(
        description is None or message is None,
        "specify either of --message or --description.",
    )
    return description if description is not None else message


description_option = click.option(
    "-d", "--description", default=None, help="Description of the change."
)
message_option = click.option(
    "-m", "--message", default=None, help="Alias for the description flag."
)


@click.command("save")
@click.argument("paths", nargs=-1, type=click.Path())
@description_option
@message_option
@click.pass_obj
def save_cmd(
    ctx: GlstackContext, paths: tuple[str, ...], description: str | None, message: str | None
) -> None:
    """Save your current progress as a new diff on the stack.

    Stages PATHS (default: the current directory), commits them on a new
    branch and appends that branch to the current stack.

    \b
    Examples:
      glstack stack save added_file
      glstack stack save . -m "added a function"
      glstack stack save -m "added a function"
    """
    repo = Ensure.in_repo(ctx)
    options = SaveOptions(
        description=_resolve_description(description, message),
        paths=list(paths) or ["."],
    )

    try:
        ref = save_changes(ctx, repo, options)
    except (StackError, RuntimeError) as e:
        user_output(click.style("Error: ", fg="red") + f"could not save: {e}")
        raise SystemExit(1) from e

    title = get_current_stack_title(ctx.git, repo.root)
    user_output(f'{click.style(title or "", fg="blue")}: Saved with message: "{ref.description}".')


@click.command("amend")
@click.argument("paths", nargs=-1, type=click.Path())
@description_option
@message_option
@click.pass_obj
def amend_cmd(
    ctx: GlstackContext, paths: tuple[str, ...], description: str | None, message: str | None
) -> None:
    """Add more changes to the diff of the checked-out stack branch.

    \b
    Examples:
      glstack stack amend modifiedfile
      glstack stack amend . -m "fixed a function"
      glstack stack amend newfile -d "forgot to add this"
    """
    repo = Ensure.in_repo(ctx)
    options = AmendOptions(
        description=_resolve_description(description, message),
        paths=list(paths) or ["."],
    )

    try:
        ref = amend_changes(ctx, repo, options)
    except (StackError, RuntimeError) as e:
        user_output(click.style("Error: ", fg="red") + f"could not run stack amend: {e}")
        raise SystemExit(1) from e

    user_output(f'Amended stack item with description: "{ref.description}".')

"""Commands that check out another branch of the current stack."""

import click

from glstack.cli.ensure import Ensure
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.repo_discovery import RepoContext
from glstack.core.stack.current import current_ref, load_current_stack
from glstack.core.stack.errors import StackBoundaryError, StackError
from glstack.core.stack.navigation import Direction, move_choices, neighbor_ref, switch_message
from glstack.core.stack.store import StackStore
from glstack.core.stack.types import Stack, StackRef


def _load_stack(ctx: GlstackContext) -> tuple[RepoContext, Stack]:
    repo = Ensure.in_repo(ctx)
    try:
        stack = load_current_stack(ctx.git, StackStore(repo.stacks_dir), repo.root)
    except StackError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e
    return repo, stack


def _checkout(ctx: GlstackContext, repo: RepoContext, ref: StackRef) -> None:
    try:
        ctx.git.checkout_branch(repo.root, ref.branch)
    except RuntimeError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e
    user_output(switch_message(ref))


def _step(ctx: GlstackContext, direction: Direction) -> None:
    repo, stack = _load_stack(ctx)
    try:
        ref = current_ref(ctx.git, stack, repo.root)
        target = neighbor_ref(stack, ref, direction)
    except StackBoundaryError as e:
        user_output(str(e))
        return
    except StackError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e
    _checkout(ctx, repo, target)


@click.command("first")
@click.pass_obj
def first_cmd(ctx: GlstackContext) -> None:
    """Move to the first diff in the stack and check out its branch."""
    repo, stack = _load_stack(ctx)
    Ensure.invariant(
        not stack.is_empty(), "you are on an empty stack. To use a stack, first save a diff."
    )
    _checkout(ctx, repo, stack.first())


@click.command("last")
@click.pass_obj
def last_cmd(ctx: GlstackContext) -> None:
    """Move to the last diff in the stack and check out its branch."""
    repo, stack = _load_stack(ctx)
    Ensure.invariant(not stack.is_empty(), "stack is empty until you save a diff.")
    _checkout(ctx, repo, stack.last())


@click.command("next")
@click.pass_obj
def next_cmd(ctx: GlstackContext) -> None:
    """Move to the next diff in the stack."""
    _step(ctx, "next")


@click.command("prev")
@click.pass_obj
def prev_cmd(ctx: GlstackContext) -> None:
    """Move to the previous diff in the stack."""
    _step(ctx, "prev")


@click.command("move")
@click.pass_obj
def move_cmd(ctx: GlstackContext) -> None:
    """Pick any diff in the stack from a searchable menu and check it out."""
    repo, stack = _load_stack(ctx)
    Ensure.invariant(not stack.is_empty(), "stack is empty until you save a diff.")
    Ensure.interactive(ctx, "choosing a diff requires an interactive terminal.")

    refs = stack.refs_in_order()
    current_branch = ctx.git.get_current_branch(repo.root)
    default_index = next((i for i, ref in enumerate(refs) if ref.branch == current_branch), 0)
    choice = ctx.prompter.choose(
        "Choose a diff to be checked out:", move_choices(stack), default_index
    )
    if choice is None:
        user_output("No diff selected.")
        return
    _checkout(ctx, repo, refs[choice])

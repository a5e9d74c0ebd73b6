"""The current-stack pointer and helpers that load it."""

from pathlib import Path

from glstack.core.git.abc import Git
from glstack.core.stack.errors import NoCurrentStackError, StackError
from glstack.core.stack.store import StackStore
from glstack.core.stack.types import Stack, StackRef

# Same key as `glab stack`.
CURRENT_STACK_KEY = "glab.currentstack"


def get_current_stack_title(git: Git, repo_root: Path) -> str | None:
    title = git.get_config_value(repo_root, CURRENT_STACK_KEY)
    if not title:
        return None
    return title


def set_current_stack_title(git: Git, repo_root: Path, title: str) -> None:
    """Record title as the current stack, skipping the write if unchanged."""
    if git.get_config_value(repo_root, CURRENT_STACK_KEY) == title:
        return
    git.set_local_config(repo_root, CURRENT_STACK_KEY, title)


def load_current_stack(git: Git, store: StackStore, repo_root: Path) -> Stack:
    title = get_current_stack_title(git, repo_root)
    if title is None:
        raise NoCurrentStackError()
    return store.gather(title)


def current_ref(git: Git, stack: Stack, repo_root: Path) -> StackRef:
    """The ref whose branch is checked out.

    Raises:
        StackRefNotFoundError: If the checked-out branch is not in the stack
    """
    branch = git.get_current_branch(repo_root)
    if branch is None:
        raise StackError("could not determine the current branch (detached HEAD?)")
    return stack.ref_for_branch(branch)


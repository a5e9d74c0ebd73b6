"""Reordering the refs of a stack.

Every listed branch is resolved and the new chain is computed in memory
before anything is written, so invalid input never touches the ref files.
Merge request targets are updated only after all files are persisted.
"""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from glstack.core.repo_discovery import RepoContext
from glstack.core.stack.current import current_ref, load_current_stack
from glstack.core.stack.errors import ReorderError, StackRefNotFoundError
from glstack.core.stack.remotes import project_default_branch, resolve_target_project
from glstack.core.stack.store import StackStore
from glstack.core.stack.types import Stack, StackRef

if TYPE_CHECKING:
    from glstack.core.context import GlstackContext

logger = logging.getLogger(__name__)

CURRENT_MARKER = "# current"

REORDER_INSTRUCTIONS = """
# Reorder the diffs of stack "{title}" by moving the branch lines above.
# The first line is the bottom of the stack: its merge request is merged first.
#
# Every branch must stay in the list, one per line.
# Lines starting with '#' are ignored, as is anything after a '#' on a line.
"""


@dataclass(frozen=True)
class TargetUpdate:
    branch: str
    iid: int
    target_branch: str


@dataclass(frozen=True)
class ReorderResult:
    stack: Stack
    relinked: list[StackRef]
    target_updates: list[TargetUpdate]
    skipped_branches: list[str]


def build_reorder_prompt(stack: Stack, current_branch: str | None) -> str:
    lines = []
    for ref in stack.refs_in_order():
        if ref.branch == current_branch:
            lines.append(f"{ref.branch} {CURRENT_MARKER}")
        else:
            lines.append(ref.branch)
    return "\n".join(lines) + "\n" + REORDER_INSTRUCTIONS.format(title=stack.title)


def has_comment(words: list[str]) -> bool:
    """True when the words after the branch name are a trailing comment."""
    return len(words) > 1 and words[1].startswith("#")


def parse_reorder_file(text: str) -> list[str]:
    """Extract the ordered branch names from the edited reorder file.

    Raises:
        ReorderError: If a line holds more than a branch name and a comment
    """
    branches: list[str] = []
    for number, line in enumerate(text.splitlines(), start=1):
        words = line.split()
        if not words or words[0].startswith("#"):
            continue
        if len(words) > 1 and not has_comment(words):
            raise ReorderError(
                f"could not parse line {number}: expected a single branch name, got '{line}'"
            )
        branches.append(words[0])
    return branches


def prompt_for_order(ctx: "GlstackContext", stack: Stack, current_branch: str | None) -> list[str]:
    if not ctx.prompter.is_interactive():
        raise ReorderError("reordering requires an interactive terminal to edit the order")
    edited = ctx.prompter.edit(build_reorder_prompt(stack, current_branch))
    if edited is None:
        raise ReorderError("reorder aborted: the editor was closed without saving")
    return parse_reorder_file(edited)


def match_branches_to_stack(stack: Stack, branches: list[str]) -> Stack:
    """Build the relinked stack for the given branch order.

    Links come purely from adjacency in branches; content fields are kept.
    Nothing is written.

    Raises:
        ReorderError: On unknown, duplicated or missing branches
    """
    ordered: list[StackRef] = []
    for branch in branches:
        try:
            ordered.append(stack.ref_for_branch(branch))
        except StackRefNotFoundError as e:
            raise ReorderError(f"could not match branch to stack ref: {branch}") from e

    seen: set[str] = set()
    duplicates: list[str] = []
    for branch in branches:
        if branch in seen:
            duplicates.append(branch)
        seen.add(branch)
    if duplicates:
        raise ReorderError(f"branches listed more than once: {', '.join(duplicates)}")

    missing = [branch for branch in stack.branches() if branch not in seen]
    if missing:
        raise ReorderError(
            f"missing one or more refs from the reordered list: {', '.join(missing)}"
        )

    updated = Stack(title=stack.title)
    for index, ref in enumerate(ordered):
        prev = ordered[index - 1].sha if index > 0 else ""
        following = ordered[index + 1].sha if index < len(ordered) - 1 else ""
        updated.refs[ref.sha] = replace(ref, prev=prev, next=following)
    return updated


def relinked_refs(original: Stack, updated: Stack) -> list[StackRef]:
    """Refs of updated whose prev or next differ from original, in new order."""
    changed = []
    for ref in updated.refs_in_order():
        before = original.refs[ref.sha]
        if (before.prev, before.next) != (ref.prev, ref.next):
            changed.append(ref)
    return changed


def update_merge_request_targets(
    ctx: "GlstackContext",
    repo: RepoContext,
    updated: Stack,
    relinked: list[StackRef],
) -> tuple[list[TargetUpdate], list[str]]:
    """Point each relinked ref's open merge request at its new previous branch.

    A ref that became first targets the target project's default branch.

    Returns:
        (updates made, branches skipped because no open merge request exists)
    """
    with_mr = [ref for ref in relinked if ref.mr]
    if not with_mr:
        return [], []

    target_project = resolve_target_project(ctx, repo)
    updates: list[TargetUpdate] = []
    skipped: list[str] = []
    default_branch: str | None = None

    for ref in with_mr:
        merge_request = ctx.gitlab.get_merge_request_for_branch(
            repo.root, target_project, ref.branch, state="opened"
        )
        if merge_request is None:
            logger.debug("No open merge request for %s, skipping", ref.branch)
            skipped.append(ref.branch)
            continue

        if ref.is_first():
            if default_branch is None:
                default_branch = project_default_branch(ctx, repo, target_project)
            target = default_branch
        else:
            target = updated.refs[ref.prev].branch

        logger.debug("Retargeting !%d (%s) to %s", merge_request.iid, ref.branch, target)
        ctx.gitlab.update_merge_request_target(
            repo.root, target_project, merge_request.iid, target
        )
        updates.append(TargetUpdate(branch=ref.branch, iid=merge_request.iid, target_branch=target))

    return updates, skipped


def reorder_stack(
    ctx: "GlstackContext", repo: RepoContext, branches: list[str] | None = None
) -> ReorderResult:
    """Reorder the current stack.

    Args:
        ctx: Application context
        repo: Repository the stack lives in
        branches: New order; when None the user edits it in the editor

    Raises:
        ReorderError: On invalid input or when the order is unchanged
    """
    store = StackStore(repo.stacks_dir)
    stack = load_current_stack(ctx.git, store, repo.root)
    current = current_ref(ctx.git, stack, repo.root)

    if branches is None:
        branches = prompt_for_order(ctx, stack, current.branch)

    updated = match_branches_to_stack(stack, branches)
    if updated == stack:
        raise ReorderError("no updates needed")

    relinked = relinked_refs(stack, updated)
    for ref in relinked:
        logger.debug("Relinking %s: prev=%r next=%r", ref.sha, ref.prev, ref.next)
        store.update_ref(stack.title, ref)

    updates, skipped = update_merge_request_targets(ctx, repo, updated, relinked)
    return ReorderResult(
        stack=updated, relinked=relinked, target_updates=updates, skipped_branches=skipped
    )

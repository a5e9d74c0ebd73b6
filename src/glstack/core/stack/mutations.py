"""Operations that add, change or remove refs.

Git failures abort the operation as they happen. Nothing is rolled back, so a
failed save can leave a new branch behind without a ref file.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from glstack.core.repo_discovery import RepoContext
from glstack.core.stack.current import (
    current_ref,
    get_current_stack_title,
    load_current_stack,
    set_current_stack_title,
)
from glstack.core.stack.errors import (
    NoCurrentStackError,
    SaveError,
    StackError,
    StackRefNotFoundError,
)
from glstack.core.stack.naming import (
    generate_stack_sha,
    resolve_branch_prefix,
    sanitize_title,
    stack_branch_name,
)
from glstack.core.stack.store import StackStore
from glstack.core.stack.types import Stack, StackRef

if TYPE_CHECKING:
    from glstack.core.context import GlstackContext

DESCRIPTION_TEMPLATE = """
# Describe this change. Lines starting with '#' are ignored,
# and an empty description aborts the save.
"""


@dataclass(frozen=True)
class CreateResult:
    title: str
    sanitized: bool
    base_branch: str | None


@dataclass(frozen=True)
class SaveOptions:
    """Per-invocation options for `stack save`."""

    description: str | None = None
    paths: list[str] = field(default_factory=lambda: ["."])


@dataclass(frozen=True)
class AmendOptions:
    """Per-invocation options for `stack amend`."""

    description: str | None = None
    paths: list[str] = field(default_factory=lambda: ["."])


def create_stack(ctx: "GlstackContext", repo: RepoContext, raw_title: str) -> CreateResult:
    """Create (or re-select) a stack and make it current.

    The checked-out branch becomes the base branch, or the remote default
    branch on a detached HEAD. Running it again for an existing title only
    re-selects it; the recorded base branch is kept.
    """
    title, sanitized = sanitize_title(raw_title)
    if not title:
        raise StackError(f"'{raw_title}' does not contain any usable characters for a title")

    store = StackStore(repo.stacks_dir)
    store.create_stack_dir(title)

    base_branch = store.read_base_branch(title)
    if base_branch is None:
        base_branch = ctx.git.get_current_branch(repo.root)
        if base_branch is None:
            base_branch = ctx.git.get_default_branch(repo.root, ctx.global_config.remote)
        if base_branch is not None:
            store.write_base_branch(title, base_branch)

    set_current_stack_title(ctx.git, repo.root, title)
    return CreateResult(title=title, sanitized=sanitized, base_branch=base_branch)


def _strip_comments(text: str) -> str:
    lines = [line for line in text.splitlines() if not line.startswith("#")]
    return "\n".join(lines).strip()


def _description_from_editor(ctx: "GlstackContext") -> str:
    if not ctx.prompter.is_interactive():
        raise SaveError("a description is required. Pass one with --description or --message.")
    edited = ctx.prompter.edit(DESCRIPTION_TEMPLATE)
    description = _strip_comments(edited or "")
    if not description:
        raise SaveError("aborting save due to empty description.")
    return description


def _stage_paths(ctx: "GlstackContext", paths: list[str]) -> None:
    missing = [path for path in paths if not (ctx.cwd / path).exists()]
    if missing:
        raise SaveError(f"path does not exist: {', '.join(missing)}")
    ctx.git.add_paths(ctx.cwd, paths)


def save_changes(ctx: "GlstackContext", repo: RepoContext, options: SaveOptions) -> StackRef:
    """Commit the working tree changes as a new ref at the tail of the stack.

    Returns:
        The newly added ref
    """
    if not ctx.git.has_uncommitted_changes(repo.root):
        raise SaveError("no changes to save.")

    title = get_current_stack_title(ctx.git, repo.root)
    if title is None:
        raise NoCurrentStackError()

    store = StackStore(repo.stacks_dir)
    stack = store.gather(title)

    description = options.description or _description_from_editor(ctx)
    _stage_paths(ctx, options.paths)

    author = ctx.git.get_user_name(repo.root) or ""
    sha = generate_stack_sha(description, title, author, ctx.time.now())
    if sha in stack.refs:
        raise SaveError(f"a ref with id {sha} already exists in stack '{title}'. Try again.")

    prefix = resolve_branch_prefix(ctx.global_config.branch_prefix)
    branch = stack_branch_name(prefix, title, sha)

    ctx.git.checkout_new_branch(repo.root, branch)
    ctx.git.commit(repo.root, description)

    if stack.is_empty():
        ref = StackRef(sha=sha, branch=branch, description=description)
    else:
        last = stack.last()
        store.update_ref(title, replace(last, next=sha))
        ref = StackRef(sha=sha, branch=branch, prev=last.sha, description=description)

    store.add_ref(title, ref)
    return ref


def amend_changes(ctx: "GlstackContext", repo: RepoContext, options: AmendOptions) -> StackRef:
    """Fold the working tree changes into the commit of the checked-out ref.

    The ref keeps its id, branch and links; only the description may change.
    """
    if not ctx.git.has_uncommitted_changes(repo.root):
        raise SaveError("no changes to save.")

    store = StackStore(repo.stacks_dir)
    stack = load_current_stack(ctx.git, store, repo.root)
    try:
        ref = current_ref(ctx.git, stack, repo.root)
    except StackRefNotFoundError as e:
        raise SaveError(
            "not currently in a stack. Change to the branch you want to amend."
        ) from e

    description = options.description
    if not description:
        if not ctx.prompter.is_interactive():
            raise SaveError("a description is required. Pass one with --description or --message.")
        description = ctx.prompter.ask(
            "How would you describe this change?", default=ref.description
        ).strip()
        if not description:
            raise SaveError("aborting amend due to empty description.")

    _stage_paths(ctx, options.paths)
    ctx.git.amend_commit(repo.root, description)

    if description == ref.description:
        return ref
    amended = replace(ref, description=description)
    store.update_ref(stack.title, amended)
    stack.refs[amended.sha] = amended
    return amended


def unlink_ref(stack: Stack, ref: StackRef) -> list[StackRef]:
    """Drop ref from the in-memory chain, joining its neighbours.

    Returns:
        The neighbours whose links changed, already updated in stack.refs
    """
    changed: list[StackRef] = []
    if ref.prev:
        prev = replace(stack.refs[ref.prev], next=ref.next)
        stack.refs[prev.sha] = prev
        changed.append(prev)
    if ref.next:
        following = replace(stack.refs[ref.next], prev=ref.prev)
        stack.refs[following.sha] = following
        changed.append(following)
    del stack.refs[ref.sha]
    return changed


def remove_ref(
    ctx: "GlstackContext",
    repo: RepoContext,
    store: StackStore,
    stack: Stack,
    ref: StackRef,
    base_branch: str | None,
) -> None:
    """Remove a ref from the stack, its file and its local branch.

    The previous ref's branch (or base_branch when ref is first) is checked
    out before the branch is deleted.
    """
    if ref.is_first():
        if base_branch is None:
            raise StackError(f"no branch to return to after removing {ref.branch}")
        fallback = base_branch
    else:
        fallback = stack.refs[ref.prev].branch

    for neighbor in unlink_ref(stack, ref):
        store.update_ref(stack.title, neighbor)
    store.delete_ref(stack.title, ref)

    ctx.git.checkout_branch(repo.root, fallback)
    if ctx.git.local_branch_exists(repo.root, ref.branch):
        ctx.git.delete_local_branch(repo.root, ref.branch)

"""Synchronizing a stack with its remote and its merge requests.

Refs are processed strictly from first to last. For each ref the branch is
checked out and its `git status` decides what happens:

- behind: pull the remote changes
- diverged: rebase the last branch onto this one, updating every branch in between
- clean: nothing to do locally
- ahead or unrecognized: stop, since choosing between squash and force-push
  could lose work

Then the ref gets a merge request if it has none, or is removed from the
stack when its merge request has merged. When any rebase happened, all
branches are force-pushed together in one command after the pass.

Any failure aborts the pass. Every step re-derives its state from git and
the ref files, so running sync again after fixing the problem is safe.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from glstack.core.git.abc import BranchStatus
from glstack.core.gitlab.types import GitLabUser, MergeRequestCreate, ProjectInfo
from glstack.core.repo_discovery import RepoContext
from glstack.core.stack.current import load_current_stack
from glstack.core.stack.errors import StackError, SyncError
from glstack.core.stack.mutations import remove_ref
from glstack.core.stack.remotes import SyncRemotes, first_ref_target_branch, resolve_sync_remotes
from glstack.core.stack.store import StackStore
from glstack.core.stack.types import Stack, StackRef

if TYPE_CHECKING:
    from glstack.core.context import GlstackContext

logger = logging.getLogger(__name__)

MAX_MR_TITLE_SIZE = 252


@dataclass
class SyncResult:
    """What a sync pass did, for reporting and tests."""

    pulled: list[str] = field(default_factory=list)
    rebased: list[str] = field(default_factory=list)
    created: list[tuple[str, str]] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    closed: list[str] = field(default_factory=list)
    force_pushed: list[str] = field(default_factory=list)


def merge_request_title(description: str) -> str:
    if len(description) <= MAX_MR_TITLE_SIZE:
        return description
    return description[: MAX_MR_TITLE_SIZE - 3] + "..."


class StackSyncer:
    """Runs one sync pass over a stack.

    Remote lookups that are only needed when a merge request is created
    (current user, target project, first-ref target branch) are fetched
    lazily and at most once.
    """

    def __init__(
        self,
        ctx: "GlstackContext",
        repo: RepoContext,
        store: StackStore,
        stack: Stack,
        remotes: SyncRemotes,
    ) -> None:
        self._ctx = ctx
        self._repo = repo
        self._store = store
        self._stack = stack
        self._remotes = remotes
        self._result = SyncResult()
        self._needs_push = False

        self._user: GitLabUser | None = None
        self._target_project: ProjectInfo | None = None
        self._first_target: str | None = None

    def run(self) -> SyncResult:
        git = self._ctx.git
        root = self._repo.root

        logger.debug("Fetching %s", self._remotes.push_remote)
        git.fetch(root, self._remotes.push_remote)

        # Neighbours can be relinked by removals during the pass, so refs are
        # looked up again by sha instead of iterating a snapshot.
        for sha in [ref.sha for ref in self._stack.refs_in_order()]:
            ref = self._stack.refs[sha]
            self._sync_branch_state(ref)
            ref = self._stack.refs[sha]
            if ref.mr:
                self._reconcile_merge_request(ref)
            else:
                self._populate_merge_request(ref)

        branches = self._stack.branches()
        # Every ref may have merged away; an empty push would push the checked-out base.
        if self._needs_push and branches:
            self._ctx.feedback.info(f"Updating branches: {', '.join(branches)}")
            logger.debug("Force pushing %s to %s", branches, self._remotes.push_remote)
            git.force_push_with_lease(root, self._remotes.push_remote, branches)
            self._result.force_pushed = branches

        return self._result

    def _sync_branch_state(self, ref: StackRef) -> None:
        git = self._ctx.git
        root = self._repo.root

        git.checkout_branch(root, ref.branch)
        status = git.get_branch_status(root)
        logger.debug("Status of %s: %s", ref.branch, status.value)

        if status == BranchStatus.BEHIND:
            self._ctx.feedback.info(f"{ref.branch} is behind - pulling updates.")
            git.pull(root)
            self._result.pulled.append(ref.branch)
        elif status == BranchStatus.DIVERGED:
            self._rebase_onto(ref)
        elif status == BranchStatus.CLEAN:
            return
        elif status == BranchStatus.AHEAD:
            raise SyncError(
                f"your branch {ref.branch} is ahead, but it shouldn't be. "
                "You might need to squash your commits."
            )
        else:
            raise SyncError(
                f"could not determine the state of branch {ref.branch}. "
                "Check `git status` and run `glstack stack sync` again."
            )

    def _rebase_onto(self, ref: StackRef) -> None:
        git = self._ctx.git
        root = self._repo.root
        last = self._stack.last()

        self._ctx.feedback.info(f"{ref.branch} has diverged. Rebasing...")
        git.checkout_branch(root, last.branch)
        try:
            git.rebase_with_update_refs(root, ref.branch)
        except RuntimeError as e:
            raise SyncError(
                "could not rebase, likely due to a merge conflict. "
                "Fix the issues with git and run `glstack stack sync` again."
            ) from e

        self._needs_push = True
        self._result.rebased.append(ref.branch)

    def _current_user(self) -> GitLabUser:
        if self._user is None:
            self._user = self._ctx.gitlab.get_current_user(self._repo.root)
        return self._user

    def _target(self) -> ProjectInfo:
        if self._target_project is None:
            self._target_project = self._ctx.gitlab.get_project(
                self._repo.root, self._remotes.target_project
            )
        return self._target_project

    def _first_ref_target(self) -> str:
        if self._first_target is None:
            self._first_target = first_ref_target_branch(
                self._ctx,
                self._repo,
                self._store,
                self._stack.title,
                self._remotes.target_project,
            )
        return self._first_target

    def _wait_for_remote_branch(self, branch: str) -> None:
        config = self._ctx.global_config
        git = self._ctx.git
        for attempt in range(config.poll_attempts):
            if git.remote_branch_exists(self._repo.root, self._remotes.push_remote, branch):
                return
            logger.debug("Waiting for %s on remote (attempt %d)", branch, attempt + 1)
            self._ctx.time.sleep(config.poll_interval)
        self._ctx.feedback.warning(
            f"{branch} is not visible on {self._remotes.push_remote} yet; continuing anyway."
        )

    def _populate_merge_request(self, ref: StackRef) -> None:
        git = self._ctx.git
        root = self._repo.root
        self._ctx.feedback.info(f"{ref.branch} needs a merge request. Creating it now.")

        target_project = self._target()
        git.push_set_upstream(root, self._remotes.push_remote, ref.branch)
        self._wait_for_remote_branch(ref.branch)

        if ref.is_first():
            target_branch = self._first_ref_target()
            if not git.remote_branch_exists(root, self._remotes.target_remote, target_branch):
                raise SyncError(
                    f'branch "{target_branch}" does not exist on remote '
                    f'"{self._remotes.target_remote}". Push the branch before syncing.'
                )
        else:
            target_branch = self._stack.refs[ref.prev].branch

        request = MergeRequestCreate(
            title=merge_request_title(ref.description),
            source_branch=ref.branch,
            target_branch=target_branch,
            target_project_id=target_project.id,
            assignee_id=self._current_user().id,
        )
        logger.debug("Creating merge request %s", request)
        merge_request = self._ctx.gitlab.create_merge_request(
            root, self._remotes.source_project, request
        )

        updated = replace(ref, mr=merge_request.web_url)
        self._store.update_ref(self._stack.title, updated)
        self._stack.refs[updated.sha] = updated

        self._ctx.feedback.success(f"Merge request created: {merge_request.web_url}")
        self._result.created.append((ref.branch, merge_request.web_url))

    def _reconcile_merge_request(self, ref: StackRef) -> None:
        merge_request = self._ctx.gitlab.get_merge_request_for_branch(
            self._repo.root, self._remotes.target_project, ref.branch
        )
        if merge_request is None:
            raise SyncError(
                f"could not find the merge request for branch {ref.branch} ({ref.mr}). "
                "Does it still exist?"
            )

        logger.debug(
            "Merge request !%d for %s is %s", merge_request.iid, ref.branch, merge_request.state
        )
        if merge_request.state == "merged":
            self._ctx.feedback.info(
                f"Merge request !{merge_request.iid} has merged. Removing reference..."
            )
            base_branch = self._first_ref_target() if ref.is_first() else None
            remove_ref(self._ctx, self._repo, self._store, self._stack, ref, base_branch)
            self._result.removed.append(ref.branch)
        elif merge_request.state == "closed":
            self._ctx.feedback.info(f"Merge request !{merge_request.iid} has closed.")
            self._result.closed.append(ref.branch)


def sync_stack(ctx: "GlstackContext", repo: RepoContext) -> SyncResult:
    """Synchronize the current stack.

    Raises:
        StackError: When not authenticated or the remotes cannot be resolved
        SyncError: On a state that needs manual intervention
    """
    if not ctx.gitlab.check_auth_status(repo.root):
        raise StackError("not authenticated with GitLab. Run `glab auth login` first.")

    store = StackStore(repo.stacks_dir)
    stack = load_current_stack(ctx.git, store, repo.root)
    remotes = resolve_sync_remotes(ctx, repo)
    logger.debug("Resolved remotes: %s", remotes)

    return StackSyncer(ctx, repo, store, stack, remotes).run()

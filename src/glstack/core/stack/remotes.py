"""Mapping git remotes to GitLab projects for sync and reorder."""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from glstack.core.git.abc import RemoteInfo
from glstack.core.repo_discovery import RepoContext
from glstack.core.stack.errors import StackError
from glstack.core.stack.store import StackStore

if TYPE_CHECKING:
    from glstack.core.context import GlstackContext

UPSTREAM_REMOTE = "upstream"

_SCP_LIKE = re.compile(r"^(?:[^@/]+@)?[^:/]+:(?P<path>.+)$")


@dataclass(frozen=True)
class SyncRemotes:
    """Where stack branches are pushed and where their merge requests land.

    For a fork workflow the push remote is the fork (source project) while
    merge requests target the upstream project.
    """

    push_remote: str
    target_remote: str
    source_project: str
    target_project: str


def parse_project_path(url: str) -> str | None:
    """Extract the namespaced project path from a git remote URL.

    Handles scp-like (git@host:group/repo.git), https:// and ssh:// URLs.
    """
    if "://" in url:
        path = urlparse(url).path
    else:
        match = _SCP_LIKE.match(url)
        if match is None:
            return None
        path = match.group("path")

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if "/" not in path:
        return None
    return path


def _project_for(remote: RemoteInfo) -> str:
    project = parse_project_path(remote.url)
    if project is None:
        raise StackError(f"could not determine the GitLab project of remote '{remote.name}'")
    return project


def _choose_push_remote(ctx: "GlstackContext", remotes: list[RemoteInfo]) -> RemoteInfo:
    if len(remotes) == 1:
        return remotes[0]

    names = [remote.name for remote in remotes]
    configured = ctx.global_config.remote
    if not ctx.prompter.is_interactive():
        if configured not in names:
            raise StackError(
                f"remote '{configured}' not found; available remotes: {', '.join(names)}"
            )
        return remotes[names.index(configured)]

    default_index = names.index(configured) if configured in names else 0
    options = [f"{remote.name} ({remote.url})" for remote in remotes]
    choice = ctx.prompter.choose("Choose a remote to push to:", options, default_index)
    if choice is None:
        raise StackError("no remote selected")
    return remotes[choice]


def _target_remote(ctx: "GlstackContext", remotes: list[RemoteInfo]) -> RemoteInfo | None:
    by_name = {remote.name: remote for remote in remotes}
    if UPSTREAM_REMOTE in by_name:
        return by_name[UPSTREAM_REMOTE]
    return by_name.get(ctx.global_config.remote)


def resolve_target_project(ctx: "GlstackContext", repo: RepoContext) -> str:
    """Project whose merge requests the stack targets."""
    remotes = ctx.git.list_remotes(repo.root)
    if not remotes:
        raise StackError("this repository has no git remotes")
    target = _target_remote(ctx, remotes)
    if target is None:
        target = remotes[0]
    return _project_for(target)


def resolve_sync_remotes(ctx: "GlstackContext", repo: RepoContext) -> SyncRemotes:
    remotes = ctx.git.list_remotes(repo.root)
    if not remotes:
        raise StackError("this repository has no git remotes")

    push = _choose_push_remote(ctx, remotes)
    target = _target_remote(ctx, remotes) or push
    return SyncRemotes(
        push_remote=push.name,
        target_remote=target.name,
        source_project=_project_for(push),
        target_project=_project_for(target),
    )


def first_ref_target_branch(
    ctx: "GlstackContext", repo: RepoContext, store: StackStore, title: str, target_project: str
) -> str:
    """Target branch for the merge request of the first ref.

    The branch the stack was created from, else the target project's default.
    """
    base = store.read_base_branch(title)
    if base is not None:
        return base
    return project_default_branch(ctx, repo, target_project)


def project_default_branch(ctx: "GlstackContext", repo: RepoContext, target_project: str) -> str:
    project = ctx.gitlab.get_project(repo.root, target_project)
    if project.default_branch is None:
        raise StackError(f"project '{target_project}' has no default branch")
    return project.default_branch

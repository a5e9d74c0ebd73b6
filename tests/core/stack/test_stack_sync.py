"""Tests for the sync pass over a stack."""

from pathlib import Path

import pytest

from glstack.core.git.abc import BranchStatus, RemoteInfo
from glstack.core.gitlab.fake import FakeGitLab
from glstack.core.gitlab.types import ProjectInfo
from glstack.core.prompter.fake import FakePrompter
from glstack.core.repo_discovery import RepoContext
from glstack.core.stack.errors import StackError, SyncError
from glstack.core.stack.sync import MAX_MR_TITLE_SIZE, merge_request_title, sync_stack
from glstack.core.time.fake import FakeTime
from glstack.core.user_feedback import FakeUserFeedback
from tests.test_utils.gitlab_helpers import merge_request, mr_url
from tests.test_utils.stack_helpers import (
    snapshot,
    stack_context,
    stack_git,
    stack_store,
    write_chain,
)


def _repo(root: Path) -> RepoContext:
    return RepoContext(root=root, stacks_dir=root / ".git" / "stacked")


def test_merge_request_title_truncation() -> None:
    assert merge_request_title("short") == "short"

    title = merge_request_title("x" * 300)
    assert len(title) == MAX_MR_TITLE_SIZE
    assert title.endswith("...")


def test_clean_stack_gets_merge_requests(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a", "b"])
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="b",
        branches=["a", "b"],
        remote_branches={"origin/main"},
    )
    gitlab = FakeGitLab()
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    result = sync_stack(ctx, _repo(tmp_path))

    assert git.fetches == ["origin"]
    assert git.pushes == [("origin", "a"), ("origin", "b")]
    requests = [request for _, request in gitlab.created_merge_requests]
    assert [(r.source_branch, r.target_branch) for r in requests] == [("a", "main"), ("b", "a")]
    assert all(r.assignee_id == 42 and r.target_project_id == 1 for r in requests)
    assert requests[0].title == "change on a"

    stack = stack_store(tmp_path).gather("feature")
    assert [ref.mr for ref in stack] == [mr_url(100), mr_url(101)]
    assert result.created == [("a", mr_url(100)), ("b", mr_url(101))]
    assert git.force_pushes == []


def test_diverged_ref_rebases_and_force_pushes_once(tmp_path: Path) -> None:
    mrs = {"a": mr_url(1), "b": mr_url(2), "c": mr_url(3)}
    write_chain(tmp_path, "feature", ["a", "b", "c"], mrs=mrs)
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="c",
        branches=["a", "b", "c"],
        branch_statuses={"a": BranchStatus.DIVERGED},
    )
    gitlab = FakeGitLab(
        merge_requests={
            "a": merge_request("a", 1),
            "b": merge_request("b", 2, target_branch="a"),
            "c": merge_request("c", 3, target_branch="b"),
        }
    )
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    result = sync_stack(ctx, _repo(tmp_path))

    assert git.rebases == [("c", "a")]
    assert git.force_pushes == [("origin", ["a", "b", "c"])]
    assert result.rebased == ["a"]
    assert gitlab.created_merge_requests == []


def test_behind_ref_is_pulled(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"], mrs={"a": mr_url(1)})
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="a",
        branches=["a"],
        branch_statuses={"a": BranchStatus.BEHIND},
    )
    gitlab = FakeGitLab(merge_requests={"a": merge_request("a", 1)})
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    result = sync_stack(ctx, _repo(tmp_path))

    assert git.pulls == ["a"]
    assert result.pulled == ["a"]
    assert git.force_pushes == []


def test_merged_ref_is_removed(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a", "b"], mrs={"a": mr_url(1), "b": mr_url(2)})
    git = stack_git(tmp_path, "feature", current_branch="b", branches=["a", "b"])
    gitlab = FakeGitLab(
        merge_requests={
            "a": merge_request("a", 1, state="merged"),
            "b": merge_request("b", 2, target_branch="a"),
        }
    )
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    result = sync_stack(ctx, _repo(tmp_path))

    assert result.removed == ["a"]
    assert git.deleted_branches == ["a"]
    stack = stack_store(tmp_path).gather("feature")
    assert stack.branches() == ["b"]
    assert stack.first().is_first()
    assert "a" not in git.local_branches


def test_sole_merged_ref_empties_stack(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"], mrs={"a": mr_url(1)})
    git = stack_git(tmp_path, "feature", current_branch="a", branches=["a"])
    gitlab = FakeGitLab(merge_requests={"a": merge_request("a", 1, state="merged")})
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    sync_stack(ctx, _repo(tmp_path))

    assert stack_store(tmp_path).gather("feature").is_empty()
    assert git.get_current_branch(tmp_path) == "main"
    assert git.deleted_branches == ["a"]


def test_closed_merge_request_is_reported(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"], mrs={"a": mr_url(1)})
    git = stack_git(tmp_path, "feature", current_branch="a", branches=["a"])
    gitlab = FakeGitLab(merge_requests={"a": merge_request("a", 1, state="closed")})
    feedback = FakeUserFeedback()
    ctx = stack_context(tmp_path, git, gitlab=gitlab, feedback=feedback)

    result = sync_stack(ctx, _repo(tmp_path))

    assert result.closed == ["a"]
    assert "INFO: Merge request !1 has closed." in feedback.messages
    assert stack_store(tmp_path).gather("feature").branches() == ["a"]


def test_ahead_ref_stops_sync(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a", "b"])
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="a",
        branches=["a", "b"],
        branch_statuses={"a": BranchStatus.AHEAD},
    )
    gitlab = FakeGitLab()
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    with pytest.raises(SyncError, match="your branch a is ahead"):
        sync_stack(ctx, _repo(tmp_path))

    assert gitlab.created_merge_requests == []
    assert git.pushes == []


def test_rebase_conflict_then_rerun(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a", "b"], mrs={"a": mr_url(1), "b": mr_url(2)})
    before = snapshot(tmp_path, "feature")
    gitlab = FakeGitLab(
        merge_requests={
            "a": merge_request("a", 1),
            "b": merge_request("b", 2, target_branch="a"),
        }
    )
    conflicted = stack_git(
        tmp_path,
        "feature",
        current_branch="b",
        branches=["a", "b"],
        branch_statuses={"a": BranchStatus.DIVERGED},
        rebase_raises=RuntimeError("CONFLICT (content): Merge conflict in file.txt"),
    )

    with pytest.raises(SyncError, match="could not rebase, likely due to a merge conflict"):
        sync_stack(stack_context(tmp_path, conflicted, gitlab=gitlab), _repo(tmp_path))

    assert conflicted.force_pushes == []
    assert snapshot(tmp_path, "feature") == before

    resolved = stack_git(
        tmp_path,
        "feature",
        current_branch="b",
        branches=["a", "b"],
        branch_statuses={"a": BranchStatus.DIVERGED},
    )
    sync_stack(stack_context(tmp_path, resolved, gitlab=gitlab), _repo(tmp_path))

    assert resolved.force_pushes == [("origin", ["a", "b"])]


def test_missing_merge_request_stops_sync(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"], mrs={"a": mr_url(1)})
    git = stack_git(tmp_path, "feature", current_branch="a", branches=["a"])
    ctx = stack_context(tmp_path, git, gitlab=FakeGitLab())

    with pytest.raises(SyncError, match="Does it still exist"):
        sync_stack(ctx, _repo(tmp_path))


def test_waits_for_pushed_branch(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="a",
        branches=["a"],
        remote_branches={"origin/main"},
        remote_branch_lag=2,
    )
    time = FakeTime()
    ctx = stack_context(tmp_path, git, time=time)

    sync_stack(ctx, _repo(tmp_path))

    assert time.sleep_calls == [0.5, 0.5]


def test_warns_when_pushed_branch_never_appears(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="a",
        branches=["a"],
        remote_branches={"origin/main"},
        remote_branch_lag=10,
    )
    feedback = FakeUserFeedback()
    time = FakeTime()
    ctx = stack_context(tmp_path, git, feedback=feedback, time=time)

    sync_stack(ctx, _repo(tmp_path))

    assert time.sleep_calls == [0.5, 0.5, 0.5]
    assert "WARNING: a is not visible on origin yet; continuing anyway." in feedback.messages


def test_base_branch_missing_on_remote(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(tmp_path, "feature", current_branch="a", branches=["a"])
    gitlab = FakeGitLab()
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    with pytest.raises(SyncError, match='branch "main" does not exist on remote "origin"'):
        sync_stack(ctx, _repo(tmp_path))

    assert gitlab.created_merge_requests == []


def test_requires_authentication(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(tmp_path, "feature", current_branch="a", branches=["a"])
    ctx = stack_context(tmp_path, git, gitlab=FakeGitLab(authenticated=False))

    with pytest.raises(StackError, match="not authenticated with GitLab"):
        sync_stack(ctx, _repo(tmp_path))

    assert git.fetches == []


def test_last_merged_ref_after_rebase_skips_force_push(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"], mrs={"a": mr_url(1)})
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="a",
        branches=["a"],
        branch_statuses={"a": BranchStatus.DIVERGED},
    )
    gitlab = FakeGitLab(merge_requests={"a": merge_request("a", 1, state="merged")})
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    result = sync_stack(ctx, _repo(tmp_path))

    assert result.rebased == ["a"]
    assert result.removed == ["a"]
    assert git.force_pushes == []
    assert result.force_pushed == []
    assert git.get_current_branch(tmp_path) == "main"
    assert stack_store(tmp_path).gather("feature").is_empty()


def test_merged_middle_ref_relinks_before_next_merge_request(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a", "b", "c"], mrs={"a": mr_url(1), "b": mr_url(2)})
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="c",
        branches=["a", "b", "c"],
        remote_branches={"origin/main"},
    )
    gitlab = FakeGitLab(
        merge_requests={
            "a": merge_request("a", 1),
            "b": merge_request("b", 2, state="merged", target_branch="a"),
        }
    )
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    result = sync_stack(ctx, _repo(tmp_path))

    assert result.removed == ["b"]
    assert git.deleted_branches == ["b"]
    requests = [request for _, request in gitlab.created_merge_requests]
    assert [(r.source_branch, r.target_branch) for r in requests] == [("c", "a")]
    stack = stack_store(tmp_path).gather("feature")
    assert stack.branches() == ["a", "c"]
    assert [ref.mr for ref in stack] == [mr_url(1), mr_url(100)]


def test_fork_pushes_to_fork_and_targets_upstream(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(
        tmp_path,
        "feature",
        current_branch="a",
        branches=["a"],
        remotes=[
            RemoteInfo(name="origin", url="git@gitlab.com:me/repo.git"),
            RemoteInfo(name="upstream", url="https://gitlab.com/owner/repo.git"),
        ],
        remote_branches={"upstream/main"},
    )
    gitlab = FakeGitLab(
        projects={
            "me/repo": ProjectInfo(id=2, path_with_namespace="me/repo", default_branch="main"),
            "owner/repo": ProjectInfo(
                id=1, path_with_namespace="owner/repo", default_branch="main"
            ),
        }
    )
    ctx = stack_context(tmp_path, git, gitlab=gitlab, prompter=FakePrompter(interactive=False))

    sync_stack(ctx, _repo(tmp_path))

    assert git.fetches == ["origin"]
    assert git.pushes == [("origin", "a")]
    source_project, request = gitlab.created_merge_requests[0]
    assert source_project == "me/repo"
    assert request.target_project_id == 1
    assert request.target_branch == "main"


def test_repository_without_remotes_stops_sync(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(tmp_path, "feature", current_branch="a", branches=["a"], remotes=[])
    gitlab = FakeGitLab()
    ctx = stack_context(tmp_path, git, gitlab=gitlab)

    with pytest.raises(StackError, match="no git remotes"):
        sync_stack(ctx, _repo(tmp_path))

    assert git.fetches == []
    assert gitlab.created_merge_requests == []

"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
stack subsystem testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

BRANCH_IS_BEHIND = "Your branch is behind"
BRANCH_HAS_DIVERGED = "have diverged"
BRANCH_IS_AHEAD = "Your branch is ahead"
NOTHING_TO_COMMIT = "nothing to commit"


class BranchStatus(Enum):
    """Relationship between the checked-out branch and its upstream."""

    BEHIND = "behind"
    DIVERGED = "diverged"
    AHEAD = "ahead"
    CLEAN = "clean"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RemoteInfo:
    """A configured git remote."""

    name: str
    url: str


def parse_branch_status(status_output: str) -> BranchStatus:
    """Classify `git status -uno` output.

    Order matters: a branch that is behind also reports "nothing to commit",
    and so does a branch that is ahead.
    """
    if BRANCH_IS_BEHIND in status_output:
        return BranchStatus.BEHIND
    if BRANCH_HAS_DIVERGED in status_output:
        return BranchStatus.DIVERGED
    if BRANCH_IS_AHEAD in status_output:
        return BranchStatus.AHEAD
    if NOTHING_TO_COMMIT in status_output:
        return BranchStatus.CLEAN
    return BranchStatus.UNKNOWN


def parse_default_branch(remote_show_output: str) -> str | None:
    """Extract the HEAD branch from `git remote show <remote>` output."""
    for line in remote_show_output.splitlines():
        stripped = line.strip()
        if stripped.startswith("HEAD branch:"):
            branch = stripped.split(":", 1)[1].strip()
            if branch and branch != "(unknown)":
                return branch
    return None


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the repository containing cwd.

        Returns None when cwd is not inside a git repository.
        """
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch (None when detached)."""
        ...

    @abstractmethod
    def get_config_value(self, cwd: Path, key: str) -> str | None:
        """Read a git config value, None when unset."""
        ...

    @abstractmethod
    def set_local_config(self, cwd: Path, key: str, value: str) -> None:
        """Write a repository-local git config value."""
        ...

    @abstractmethod
    def get_user_name(self, cwd: Path) -> str | None:
        """Get the configured author name (user.name)."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check whether the working tree has staged, modified or untracked files."""
        ...

    @abstractmethod
    def add_paths(self, cwd: Path, paths: list[str]) -> None:
        """Stage the given paths."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Check out an existing local branch."""
        ...

    @abstractmethod
    def checkout_new_branch(self, cwd: Path, branch: str) -> None:
        """Create a branch from HEAD and check it out."""
        ...

    @abstractmethod
    def local_branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        ...

    @abstractmethod
    def delete_local_branch(self, cwd: Path, branch: str) -> None:
        """Force-delete a local branch."""
        ...

    @abstractmethod
    def commit(self, cwd: Path, message: str) -> None:
        """Commit staged changes."""
        ...

    @abstractmethod
    def amend_commit(self, cwd: Path, message: str) -> None:
        """Amend HEAD with staged changes and a new message."""
        ...

    @abstractmethod
    def fetch(self, cwd: Path, remote: str) -> None:
        """Fetch from a remote."""
        ...

    @abstractmethod
    def pull(self, cwd: Path) -> None:
        """Pull the checked-out branch from its upstream."""
        ...

    @abstractmethod
    def get_branch_status(self, cwd: Path) -> BranchStatus:
        """Classify the checked-out branch against its upstream."""
        ...

    @abstractmethod
    def rebase_with_update_refs(self, cwd: Path, upstream: str) -> None:
        """Rebase the checked-out branch onto upstream with --fork-point --update-refs.

        Every local branch pointing into the rebased range is moved along, so a
        whole dependent chain is rewritten by a single call made from its tip.
        """
        ...

    @abstractmethod
    def push_set_upstream(self, cwd: Path, remote: str, branch: str) -> None:
        """Push a branch and record the remote branch as its upstream."""
        ...

    @abstractmethod
    def force_push_with_lease(self, cwd: Path, remote: str, branches: list[str]) -> None:
        """Force-push several branches in one command, gated by --force-with-lease."""
        ...

    @abstractmethod
    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        """Check whether a branch exists on the remote."""
        ...

    @abstractmethod
    def get_default_branch(self, cwd: Path, remote: str) -> str | None:
        """Get the remote's HEAD branch, None when it cannot be determined."""
        ...

    @abstractmethod
    def list_remotes(self, cwd: Path) -> list[RemoteInfo]:
        """List configured remotes with their fetch URLs."""
        ...

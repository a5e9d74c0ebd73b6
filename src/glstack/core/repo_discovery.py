"""Repository discovery functionality.

Resolves the git repository root for the invocation directory before the
context is built, so commands can fail fast outside a repository.
"""

from dataclasses import dataclass
from pathlib import Path

from glstack.core.git.abc import Git


@dataclass(frozen=True)
class RepoContext:
    """Represents a git repo root and the directory holding stack files."""

    root: Path
    stacks_dir: Path  # <root>/.git/stacked


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path, git: Git) -> RepoContext | NoRepoSentinel:
    """Ask git for the top-level directory containing `cwd`.

    Args:
        cwd: Current working directory to start search from
        git: Git operations interface

    Returns:
        RepoContext if inside a git repository, NoRepoSentinel otherwise
    """
    if not cwd.exists():
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    root = git.get_repository_root(cwd)
    if root is None:
        return NoRepoSentinel()

    return RepoContext(root=root, stacks_dir=root / ".git" / "stacked")

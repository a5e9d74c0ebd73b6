"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import logging
import subprocess
from pathlib import Path

from glstack.core.git.abc import (
    BranchStatus,
    Git,
    RemoteInfo,
    parse_branch_status,
    parse_default_branch,
)
from glstack.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def _run(self, cwd: Path, args: list[str], operation_context: str) -> str:
        result = run_subprocess_with_context(
            ["git", *args],
            operation_context=operation_context,
            cwd=cwd,
        )
        logger.debug("git %s: %s", " ".join(args), result.stdout.strip())
        return result.stdout

    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the repository containing cwd."""
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def get_config_value(self, cwd: Path, key: str) -> str | None:
        """Read a git config value, None when unset."""
        # git config exits 1 for a missing key
        result = subprocess.run(
            ["git", "config", "--get", key],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        value = result.stdout.strip()
        return value or None

    def set_local_config(self, cwd: Path, key: str, value: str) -> None:
        """Write a repository-local git config value."""
        self._run(cwd, ["config", "--local", key, value], f"set git config '{key}'")

    def get_user_name(self, cwd: Path) -> str | None:
        """Get the configured author name (user.name)."""
        return self.get_config_value(cwd, "user.name")

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check whether the working tree has staged, modified or untracked files."""
        output = self._run(cwd, ["status", "--porcelain"], "check git status")
        return bool(output.strip())

    def add_paths(self, cwd: Path, paths: list[str]) -> None:
        """Stage the given paths."""
        self._run(cwd, ["add", *paths], "stage files")

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Check out an existing local branch."""
        self._run(cwd, ["checkout", branch], f"checkout branch '{branch}'")

    def checkout_new_branch(self, cwd: Path, branch: str) -> None:
        """Create a branch from HEAD and check it out."""
        self._run(cwd, ["checkout", "-b", branch], f"create branch '{branch}'")

    def local_branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
            cwd=cwd,
            capture_output=True,
            check=False,
        )
        return result.returncode == 0

    def delete_local_branch(self, cwd: Path, branch: str) -> None:
        """Force-delete a local branch."""
        self._run(cwd, ["branch", "-D", branch], f"delete branch '{branch}'")

    def commit(self, cwd: Path, message: str) -> None:
        """Commit staged changes."""
        self._run(cwd, ["commit", "-m", message], "commit changes")

    def amend_commit(self, cwd: Path, message: str) -> None:
        """Amend HEAD with staged changes and a new message."""
        self._run(cwd, ["commit", "--amend", "-m", message], "amend commit")

    def fetch(self, cwd: Path, remote: str) -> None:
        """Fetch from a remote."""
        self._run(cwd, ["fetch", remote], f"fetch from '{remote}'")

    def pull(self, cwd: Path) -> None:
        """Pull the checked-out branch from its upstream."""
        self._run(cwd, ["pull"], "pull updates")

    def get_branch_status(self, cwd: Path) -> BranchStatus:
        """Classify the checked-out branch against its upstream."""
        output = self._run(cwd, ["status", "-uno"], "read branch status")
        return parse_branch_status(output)

    def rebase_with_update_refs(self, cwd: Path, upstream: str) -> None:
        """Rebase the checked-out branch onto upstream with --fork-point --update-refs."""
        self._run(
            cwd,
            ["rebase", "--fork-point", "--update-refs", upstream],
            f"rebase onto '{upstream}'",
        )

    def push_set_upstream(self, cwd: Path, remote: str, branch: str) -> None:
        """Push a branch and record the remote branch as its upstream."""
        self._run(
            cwd,
            ["push", "--set-upstream", remote, branch],
            f"push branch '{branch}' to '{remote}'",
        )

    def force_push_with_lease(self, cwd: Path, remote: str, branches: list[str]) -> None:
        """Force-push several branches in one command, gated by --force-with-lease."""
        if not branches:
            raise ValueError("force_push_with_lease needs at least one branch")
        self._run(
            cwd,
            ["push", remote, "--force-with-lease", *branches],
            f"force-push {len(branches)} branches to '{remote}'",
        )

    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        """Check whether a branch exists on the remote."""
        result = subprocess.run(
            ["git", "ls-remote", "--exit-code", "--heads", remote, branch],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def get_default_branch(self, cwd: Path, remote: str) -> str | None:
        """Get the remote's HEAD branch, None when it cannot be determined."""
        output = self._run(cwd, ["remote", "show", remote], f"show remote '{remote}'")
        return parse_default_branch(output)

    def list_remotes(self, cwd: Path) -> list[RemoteInfo]:
        """List configured remotes with their fetch URLs."""
        output = self._run(cwd, ["remote", "-v"], "list remotes")

        remotes: list[RemoteInfo] = []
        seen: set[str] = set()
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            if len(parts) >= 3 and parts[2] != "(fetch)":
                continue
            name, url = parts[0], parts[1]
            if name in seen:
                continue
            seen.add(name)
            remotes.append(RemoteInfo(name=name, url=url))
        return remotes

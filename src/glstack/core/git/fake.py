"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from glstack.core.git.abc import BranchStatus, Git, RemoteInfo


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    -----------------
    This fake models a single working tree. Operations like checkout,
    commit and delete_local_branch modify internal state, and the changes
    are visible to subsequent calls within the same test.

    Constructor Injection:
    ---------------------
    All INITIAL state is provided via constructor. Runtime mutations occur
    through operation methods only.

    Mutation Tracking:
    -----------------
    Read-only properties expose what happened for test assertions:
    checkouts, commits, amended_commits, deleted_branches, fetches, pulls,
    rebases, pushes, force_pushes, staged_paths.

    Examples:
    ---------
        git = FakeGit(
            repository_root=repo,
            current_branch="main",
            local_branches=["main"],
            dirty=True,
        )
        git.checkout_new_branch(repo, "feature")
        assert git.get_current_branch(repo) == "feature"
    """

    def __init__(
        self,
        *,
        repository_root: Path | None = None,
        current_branch: str | None = None,
        local_branches: list[str] | None = None,
        config: dict[str, str] | None = None,
        user_name: str | None = "Test User",
        dirty: bool = False,
        branch_statuses: dict[str, BranchStatus] | None = None,
        remote_branches: set[str] | None = None,
        remotes: list[RemoteInfo] | None = None,
        default_branches: dict[str, str] | None = None,
        remote_branch_lag: int = 0,
        rebase_raises: Exception | None = None,
        pull_raises: Exception | None = None,
        commit_raises: Exception | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repository_root: Root returned by get_repository_root (None = not a repo)
            current_branch: Initially checked-out branch
            local_branches: Existing local branches (current_branch is added)
            config: Initial git config key -> value
            user_name: Value of user.name
            dirty: Whether the working tree has uncommitted changes
            branch_statuses: Mapping of branch -> status reported when checked out
                (branches not listed report CLEAN)
            remote_branches: Existing remote branches as "remote/branch"
            remotes: Configured remotes
            default_branches: Mapping of remote name -> HEAD branch
            remote_branch_lag: Number of remote_branch_exists() calls that report
                False for a freshly pushed branch before it becomes visible
            rebase_raises: Exception raised by rebase_with_update_refs()
            pull_raises: Exception raised by pull()
            commit_raises: Exception raised by commit() and amend_commit()
        """
        self._repository_root = repository_root
        self._current_branch = current_branch
        self._local_branches: list[str] = list(local_branches or [])
        if current_branch is not None and current_branch not in self._local_branches:
            self._local_branches.append(current_branch)
        self._config = dict(config or {})
        self._user_name = user_name
        self._dirty = dirty
        self._branch_statuses = branch_statuses or {}
        self._remote_branches: set[str] = set(remote_branches or set())
        if remotes is None:
            remotes = [RemoteInfo(name="origin", url="git@gitlab.com:owner/repo.git")]
        self._remotes = remotes
        self._default_branches = default_branches or {}
        self._remote_branch_lag = remote_branch_lag
        self._rebase_raises = rebase_raises
        self._pull_raises = pull_raises
        self._commit_raises = commit_raises

        # Mutation tracking
        self._lagging: dict[str, int] = {}
        self._checkouts: list[str] = []
        self._commits: list[tuple[str | None, str]] = []
        self._amended_commits: list[tuple[str | None, str]] = []
        self._deleted_branches: list[str] = []
        self._fetches: list[str] = []
        self._pulls: list[str | None] = []
        self._rebases: list[tuple[str | None, str]] = []
        self._pushes: list[tuple[str, str]] = []
        self._force_pushes: list[tuple[str, list[str]]] = []
        self._staged_paths: list[str] = []

    @property
    def checkouts(self) -> list[str]:
        """Branches checked out (including newly created ones), in order."""
        return self._checkouts

    @property
    def commits(self) -> list[tuple[str | None, str]]:
        """List of (branch, message) for each commit()."""
        return self._commits

    @property
    def amended_commits(self) -> list[tuple[str | None, str]]:
        """List of (branch, message) for each amend_commit()."""
        return self._amended_commits

    @property
    def deleted_branches(self) -> list[str]:
        """Branches removed via delete_local_branch()."""
        return self._deleted_branches

    @property
    def fetches(self) -> list[str]:
        """Remotes fetched."""
        return self._fetches

    @property
    def pulls(self) -> list[str | None]:
        """Branches that were checked out when pull() ran."""
        return self._pulls

    @property
    def rebases(self) -> list[tuple[str | None, str]]:
        """List of (checked-out branch, upstream) for each rebase."""
        return self._rebases

    @property
    def pushes(self) -> list[tuple[str, str]]:
        """List of (remote, branch) for each push_set_upstream()."""
        return self._pushes

    @property
    def force_pushes(self) -> list[tuple[str, list[str]]]:
        """List of (remote, branches) for each force_push_with_lease()."""
        return self._force_pushes

    @property
    def staged_paths(self) -> list[str]:
        """Paths passed to add_paths()."""
        return self._staged_paths

    @property
    def local_branches(self) -> list[str]:
        """Current local branches."""
        return list(self._local_branches)

    @property
    def config(self) -> dict[str, str]:
        """Current git config."""
        return dict(self._config)

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repository_root

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def get_config_value(self, cwd: Path, key: str) -> str | None:
        return self._config.get(key)

    def set_local_config(self, cwd: Path, key: str, value: str) -> None:
        self._config[key] = value

    def get_user_name(self, cwd: Path) -> str | None:
        return self._user_name

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._dirty

    def add_paths(self, cwd: Path, paths: list[str]) -> None:
        self._staged_paths.extend(paths)

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        if branch not in self._local_branches:
            raise RuntimeError(f"Failed to checkout branch '{branch}'\nbranch does not exist")
        self._current_branch = branch
        self._checkouts.append(branch)

    def checkout_new_branch(self, cwd: Path, branch: str) -> None:
        if branch in self._local_branches:
            raise RuntimeError(f"Failed to create branch '{branch}'\nbranch already exists")
        self._local_branches.append(branch)
        self._current_branch = branch
        self._checkouts.append(branch)

    def local_branch_exists(self, cwd: Path, branch: str) -> bool:
        return branch in self._local_branches

    def delete_local_branch(self, cwd: Path, branch: str) -> None:
        if branch not in self._local_branches:
            raise RuntimeError(f"Failed to delete branch '{branch}'\nbranch not found")
        if branch == self._current_branch:
            raise RuntimeError(f"Failed to delete branch '{branch}'\nbranch is checked out")
        self._local_branches.remove(branch)
        self._deleted_branches.append(branch)

    def commit(self, cwd: Path, message: str) -> None:
        if self._commit_raises is not None:
            raise self._commit_raises
        self._commits.append((self._current_branch, message))
        self._dirty = False

    def amend_commit(self, cwd: Path, message: str) -> None:
        if self._commit_raises is not None:
            raise self._commit_raises
        self._amended_commits.append((self._current_branch, message))
        self._dirty = False

    def fetch(self, cwd: Path, remote: str) -> None:
        self._fetches.append(remote)

    def pull(self, cwd: Path) -> None:
        if self._pull_raises is not None:
            raise self._pull_raises
        self._pulls.append(self._current_branch)

    def get_branch_status(self, cwd: Path) -> BranchStatus:
        if self._current_branch is None:
            return BranchStatus.UNKNOWN
        return self._branch_statuses.get(self._current_branch, BranchStatus.CLEAN)

    def rebase_with_update_refs(self, cwd: Path, upstream: str) -> None:
        if self._rebase_raises is not None:
            raise self._rebase_raises
        self._rebases.append((self._current_branch, upstream))

    def push_set_upstream(self, cwd: Path, remote: str, branch: str) -> None:
        self._pushes.append((remote, branch))
        key = f"{remote}/{branch}"
        self._remote_branches.add(key)
        if self._remote_branch_lag:
            self._lagging[key] = self._remote_branch_lag

    def force_push_with_lease(self, cwd: Path, remote: str, branches: list[str]) -> None:
        if not branches:
            raise ValueError("force_push_with_lease needs at least one branch")
        self._force_pushes.append((remote, list(branches)))

    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        key = f"{remote}/{branch}"
        remaining = self._lagging.get(key, 0)
        if remaining > 0:
            self._lagging[key] = remaining - 1
            return False
        return key in self._remote_branches

    def get_default_branch(self, cwd: Path, remote: str) -> str | None:
        return self._default_branches.get(remote)

    def list_remotes(self, cwd: Path) -> list[RemoteInfo]:
        return list(self._remotes)

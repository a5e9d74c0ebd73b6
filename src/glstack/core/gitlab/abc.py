"""Abstract base class for GitLab operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from glstack.core.gitlab.types import (
    GitLabUser,
    MergeRequestCreate,
    MergeRequestInfo,
    MergeRequestState,
    ProjectInfo,
)


class GitLab(ABC):
    """Abstract interface for the GitLab review API.

    All implementations (real and fake) must implement this interface.
    Failures propagate as RuntimeError with context; nothing is swallowed.
    """

    @abstractmethod
    def check_auth_status(self, repo_root: Path) -> bool:
        """Return True when the GitLab CLI is authenticated."""
        ...

    @abstractmethod
    def get_current_user(self, repo_root: Path) -> GitLabUser:
        """Get the authenticated user."""
        ...

    @abstractmethod
    def get_project(self, repo_root: Path, project_path: str) -> ProjectInfo:
        """Look up a project by its namespaced path."""
        ...

    @abstractmethod
    def create_merge_request(
        self, repo_root: Path, source_project: str, request: MergeRequestCreate
    ) -> MergeRequestInfo:
        """Open a merge request from source_project.

        Args:
            repo_root: Repository root directory
            source_project: Namespaced path of the project holding the source branch
            request: Title, branches, target project, assignee and flags

        Returns:
            The created merge request
        """
        ...

    @abstractmethod
    def get_merge_request_for_branch(
        self,
        repo_root: Path,
        project_path: str,
        branch: str,
        *,
        state: MergeRequestState | None = None,
    ) -> MergeRequestInfo | None:
        """Find the most recent merge request whose source branch is branch.

        Args:
            repo_root: Repository root directory
            project_path: Namespaced path of the target project
            branch: Source branch name
            state: Restrict to this state; None searches all states

        Returns:
            The merge request, or None if there is none
        """
        ...

    @abstractmethod
    def update_merge_request_target(
        self, repo_root: Path, project_path: str, iid: int, target_branch: str
    ) -> MergeRequestInfo:
        """Point an existing merge request at a new target branch."""
        ...

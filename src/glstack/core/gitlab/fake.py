"""Fake GitLab operations for testing.

FakeGitLab is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from dataclasses import replace
from pathlib import Path

from glstack.core.gitlab.abc import GitLab
from glstack.core.gitlab.types import (
    GitLabUser,
    MergeRequestCreate,
    MergeRequestInfo,
    MergeRequestState,
    ProjectInfo,
)


class FakeGitLab(GitLab):
    """In-memory fake implementation of GitLab operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.
    """

    def __init__(
        self,
        *,
        authenticated: bool = True,
        user: GitLabUser | None = None,
        projects: dict[str, ProjectInfo] | None = None,
        merge_requests: dict[str, MergeRequestInfo] | None = None,
        next_iid: int = 100,
    ) -> None:
        """Create FakeGitLab with pre-configured state.

        Args:
            authenticated: Result of check_auth_status()
            user: Authenticated user (defaults to id 42 "stack_guy")
            projects: Mapping of project path -> ProjectInfo. Unknown paths raise.
                Defaults to a single "owner/repo" project with default branch "main".
            merge_requests: Mapping of source branch -> MergeRequestInfo
            next_iid: IID assigned to the next created merge request
        """
        self._authenticated = authenticated
        self._user = user if user is not None else GitLabUser(id=42, username="stack_guy")
        if projects is None:
            projects = {
                "owner/repo": ProjectInfo(
                    id=1, path_with_namespace="owner/repo", default_branch="main"
                )
            }
        self._projects = projects
        self._merge_requests = dict(merge_requests or {})
        self._next_iid = next_iid

        self._created_merge_requests: list[tuple[str, MergeRequestCreate]] = []
        self._updated_targets: list[tuple[str, int, str]] = []
        self._branch_lookups: list[tuple[str, str, MergeRequestState | None]] = []

    @property
    def created_merge_requests(self) -> list[tuple[str, MergeRequestCreate]]:
        """List of (source_project, request) for each created merge request."""
        return self._created_merge_requests

    @property
    def updated_targets(self) -> list[tuple[str, int, str]]:
        """List of (project_path, iid, target_branch) for each target update."""
        return self._updated_targets

    @property
    def branch_lookups(self) -> list[tuple[str, str, MergeRequestState | None]]:
        """List of (project_path, branch, state) for each merge request lookup."""
        return self._branch_lookups

    def check_auth_status(self, repo_root: Path) -> bool:
        return self._authenticated

    def get_current_user(self, repo_root: Path) -> GitLabUser:
        return self._user

    def get_project(self, repo_root: Path, project_path: str) -> ProjectInfo:
        project = self._projects.get(project_path)
        if project is None:
            raise RuntimeError(f"Failed to get project '{project_path}'\n404 Project Not Found")
        return project

    def create_merge_request(
        self, repo_root: Path, source_project: str, request: MergeRequestCreate
    ) -> MergeRequestInfo:
        self.get_project(repo_root, source_project)
        self._created_merge_requests.append((source_project, request))

        iid = self._next_iid
        self._next_iid += 1
        merge_request = MergeRequestInfo(
            iid=iid,
            project_id=request.target_project_id,
            state="opened",
            web_url=f"https://gitlab.com/{source_project}/-/merge_requests/{iid}",
            title=request.title,
            source_branch=request.source_branch,
            target_branch=request.target_branch,
        )
        self._merge_requests[request.source_branch] = merge_request
        return merge_request

    def get_merge_request_for_branch(
        self,
        repo_root: Path,
        project_path: str,
        branch: str,
        *,
        state: MergeRequestState | None = None,
    ) -> MergeRequestInfo | None:
        self._branch_lookups.append((project_path, branch, state))
        merge_request = self._merge_requests.get(branch)
        if merge_request is None:
            return None
        if state is not None and merge_request.state != state:
            return None
        return merge_request

    def update_merge_request_target(
        self, repo_root: Path, project_path: str, iid: int, target_branch: str
    ) -> MergeRequestInfo:
        for branch, merge_request in self._merge_requests.items():
            if merge_request.iid == iid:
                updated = replace(merge_request, target_branch=target_branch)
                self._merge_requests[branch] = updated
                self._updated_targets.append((project_path, iid, target_branch))
                return updated
        raise RuntimeError(f"Failed to update merge request !{iid}\n404 Not Found")

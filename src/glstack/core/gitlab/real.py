"""Production GitLab implementation using the glab CLI.

Every call goes through `glab api`, which reuses glab's stored credentials
and host resolution, so glstack never handles tokens itself.
"""

import logging
from pathlib import Path
from urllib.parse import urlencode

from glstack.core.gitlab.abc import GitLab
from glstack.core.gitlab.parsing import (
    encode_project_path,
    parse_merge_request,
    parse_merge_request_list,
    parse_project,
    parse_user,
)
from glstack.core.gitlab.types import (
    GitLabUser,
    MergeRequestCreate,
    MergeRequestInfo,
    MergeRequestState,
    ProjectInfo,
)
from glstack.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealGitLab(GitLab):
    """Production implementation using `glab api`."""

    def _api(self, repo_root: Path, args: list[str], operation_context: str) -> str:
        cmd = ["glab", "api", *args]
        logger.debug("Running: %s", " ".join(cmd))
        result = run_subprocess_with_context(
            cmd, operation_context=operation_context, cwd=repo_root
        )
        logger.debug("Response: %s", result.stdout.strip())
        return result.stdout

    def check_auth_status(self, repo_root: Path) -> bool:
        """Return True when `glab auth status` succeeds."""
        result = run_subprocess_with_context(
            ["glab", "auth", "status"],
            operation_context="check GitLab authentication status",
            cwd=repo_root,
            check=False,
        )
        return result.returncode == 0

    def get_current_user(self, repo_root: Path) -> GitLabUser:
        stdout = self._api(repo_root, ["user"], "get current GitLab user")
        return parse_user(stdout)

    def get_project(self, repo_root: Path, project_path: str) -> ProjectInfo:
        stdout = self._api(
            repo_root,
            [f"projects/{encode_project_path(project_path)}"],
            f"get project '{project_path}'",
        )
        return parse_project(stdout)

    def create_merge_request(
        self, repo_root: Path, source_project: str, request: MergeRequestCreate
    ) -> MergeRequestInfo:
        remove_source = "true" if request.remove_source_branch else "false"
        stdout = self._api(
            repo_root,
            [
                "--method",
                "POST",
                f"projects/{encode_project_path(source_project)}/merge_requests",
                "-f",
                f"title={request.title}",
                "-f",
                f"source_branch={request.source_branch}",
                "-f",
                f"target_branch={request.target_branch}",
                "-F",
                f"target_project_id={request.target_project_id}",
                "-F",
                f"assignee_id={request.assignee_id}",
                "-F",
                f"remove_source_branch={remove_source}",
            ],
            f"create merge request for '{request.source_branch}'",
        )
        return parse_merge_request(stdout)

    def get_merge_request_for_branch(
        self,
        repo_root: Path,
        project_path: str,
        branch: str,
        *,
        state: MergeRequestState | None = None,
    ) -> MergeRequestInfo | None:
        query = {
            "source_branch": branch,
            "state": state if state is not None else "all",
            "order_by": "created_at",
            "sort": "desc",
        }
        endpoint = f"projects/{encode_project_path(project_path)}/merge_requests?{urlencode(query)}"
        stdout = self._api(repo_root, [endpoint], f"list merge requests for '{branch}'")
        merge_requests = parse_merge_request_list(stdout)
        if not merge_requests:
            return None
        return merge_requests[0]

    def update_merge_request_target(
        self, repo_root: Path, project_path: str, iid: int, target_branch: str
    ) -> MergeRequestInfo:
        stdout = self._api(
            repo_root,
            [
                "--method",
                "PUT",
                f"projects/{encode_project_path(project_path)}/merge_requests/{iid}",
                "-f",
                f"target_branch={target_branch}",
            ],
            f"update target branch of merge request !{iid}",
        )
        return parse_merge_request(stdout)

"""Parsing helpers for GitLab REST API responses."""

import json
import re
from typing import Any, cast
from urllib.parse import quote

from glstack.core.gitlab.types import GitLabUser, MergeRequestInfo, MergeRequestState, ProjectInfo

_MERGE_REQUEST_URL_PATTERN = re.compile(r"/-/merge_requests/(\d+)(?:[/?#].*)?$")


def encode_project_path(project_path: str) -> str:
    """URL-encode a namespaced project path for use as an API :id."""
    return quote(project_path, safe="")


def parse_user(json_str: str) -> GitLabUser:
    """Parse the response of GET /user."""
    data = json.loads(json_str)
    return GitLabUser(id=int(data["id"]), username=data["username"])


def parse_project(json_str: str) -> ProjectInfo:
    """Parse the response of GET /projects/:id."""
    data = json.loads(json_str)
    return ProjectInfo(
        id=int(data["id"]),
        path_with_namespace=data["path_with_namespace"],
        default_branch=data.get("default_branch"),
    )


def _merge_request_from_dict(data: dict[str, Any]) -> MergeRequestInfo:
    return MergeRequestInfo(
        iid=int(data["iid"]),
        project_id=int(data["project_id"]),
        state=cast(MergeRequestState, data["state"]),
        web_url=data["web_url"],
        title=data.get("title") or "",
        source_branch=data["source_branch"],
        target_branch=data["target_branch"],
    )


def parse_merge_request(json_str: str) -> MergeRequestInfo:
    """Parse a single merge request object."""
    return _merge_request_from_dict(json.loads(json_str))


def parse_merge_request_list(json_str: str) -> list[MergeRequestInfo]:
    """Parse a list of merge request objects."""
    return [_merge_request_from_dict(item) for item in json.loads(json_str)]


def merge_request_iid_from_url(url: str) -> int | None:
    """Extract the merge request IID from its web URL.

    Example:
        >>> merge_request_iid_from_url("https://gitlab.com/g/p/-/merge_requests/12")
        12
    """
    match = _MERGE_REQUEST_URL_PATTERN.search(url)
    if match is None:
        return None
    return int(match.group(1))

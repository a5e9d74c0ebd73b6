"""Type definitions for GitLab operations."""

from dataclasses import dataclass
from typing import Literal

MergeRequestState = Literal["opened", "closed", "merged", "locked"]


@dataclass(frozen=True)
class GitLabUser:
    """The authenticated GitLab user."""

    id: int
    username: str


@dataclass(frozen=True)
class ProjectInfo:
    """A GitLab project as needed for merge request routing."""

    id: int
    path_with_namespace: str  # e.g. "group/subgroup/project"
    default_branch: str | None


@dataclass(frozen=True)
class MergeRequestInfo:
    """Information about a GitLab merge request."""

    iid: int
    project_id: int
    state: MergeRequestState
    web_url: str
    title: str
    source_branch: str
    target_branch: str


@dataclass(frozen=True)
class MergeRequestCreate:
    """Parameters for opening a merge request."""

    title: str
    source_branch: str
    target_branch: str
    target_project_id: int
    assignee_id: int
    remove_source_branch: bool = True

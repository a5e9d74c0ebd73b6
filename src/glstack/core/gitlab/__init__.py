"""GitLab review API subpackage."""

from glstack.core.gitlab.abc import GitLab
from glstack.core.gitlab.fake import FakeGitLab
from glstack.core.gitlab.real import RealGitLab
from glstack.core.gitlab.types import (
    GitLabUser,
    MergeRequestCreate,
    MergeRequestInfo,
    MergeRequestState,
    ProjectInfo,
)

__all__ = [
    "FakeGitLab",
    "GitLab",
    "GitLabUser",
    "MergeRequestCreate",
    "MergeRequestInfo",
    "MergeRequestState",
    "ProjectInfo",
    "RealGitLab",
]

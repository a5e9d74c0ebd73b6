"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes.
"""

from glstack.core.git.abc import BranchStatus, Git, RemoteInfo, parse_branch_status
from glstack.core.git.fake import FakeGit
from glstack.core.git.real import RealGit

__all__ = [
    "BranchStatus",
    "FakeGit",
    "Git",
    "RealGit",
    "RemoteInfo",
    "parse_branch_status",
]

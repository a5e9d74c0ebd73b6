"""Pydantic models for JSON output schemas.

These models validate the documents printed by commands that support --json.
"""

from pydantic import BaseModel, ConfigDict, Field

from glstack.core.stack.types import Stack


class StackRefEntry(BaseModel):
    """One ref of `glstack stack list --json`.

    Attributes:
        position: 1-based position from the bottom of the stack
        sha: Ref id
        branch: Branch holding the diff
        description: Full description of the diff
        merge_request: Merge request URL, or None before the first sync
        current: Whether the branch is checked out
    """

    model_config = ConfigDict(strict=True)

    position: int = Field(..., ge=1)
    sha: str = Field(..., min_length=1)
    branch: str
    description: str
    merge_request: str | None
    current: bool


class StackListResponse(BaseModel):
    """JSON response schema for `glstack stack list --json`."""

    model_config = ConfigDict(strict=True)

    title: str
    base_branch: str | None
    refs: list[StackRefEntry]


def stack_list_response(
    stack: Stack, base_branch: str | None, current_branch: str | None
) -> StackListResponse:
    entries = [
        StackRefEntry(
            position=index,
            sha=ref.sha,
            branch=ref.branch,
            description=ref.description,
            merge_request=ref.mr or None,
            current=ref.branch == current_branch,
        )
        for index, ref in enumerate(stack.refs_in_order(), start=1)
    ]
    return StackListResponse(title=stack.title, base_branch=base_branch, refs=entries)

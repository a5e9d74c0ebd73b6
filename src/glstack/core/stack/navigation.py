"""Moving between the refs of a stack."""

from typing import Literal

from glstack.core.stack.errors import StackBoundaryError, StackError
from glstack.core.stack.types import Stack, StackRef

Direction = Literal["next", "prev"]


def neighbor_ref(stack: Stack, ref: StackRef, direction: Direction) -> StackRef:
    """Hop exactly one link from ref.

    Raises:
        StackBoundaryError: If ref is already the last (next) or first (prev) ref
    """
    link = ref.next if direction == "next" else ref.prev
    if not link:
        raise StackBoundaryError(direction)
    neighbor = stack.refs.get(link)
    if neighbor is None:
        raise StackError(f"ref {ref.sha} links to unknown ref {link}")
    return neighbor


def move_choices(stack: Stack) -> list[str]:
    """Menu entries for picking any ref, numbered from 1 in stack order."""
    return [
        f"{index}: {ref.subject()} ({ref.branch})"
        for index, ref in enumerate(stack.refs_in_order(), start=1)
    ]


def switch_message(ref: StackRef) -> str:
    return f"Switched to branch: {ref.branch} - {ref.description}"

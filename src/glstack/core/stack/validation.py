"""Chain invariant checks run on every stack load.

Violations are never repaired: guessing the right links could silently
discard review history.
"""

from glstack.core.stack.errors import StackCorruptedError
from glstack.core.stack.types import Stack


def validate_stack(stack: Stack) -> None:
    """Raise StackCorruptedError unless the refs form a single linear chain.

    An empty stack is valid. Otherwise there must be exactly one head and one
    tail, every link must point at an existing ref that links back, and the
    walk from the head must visit every ref exactly once.
    """
    if stack.is_empty():
        return

    heads = [ref for ref in stack.refs.values() if ref.is_first()]
    tails = [ref for ref in stack.refs.values() if ref.is_last()]
    if len(heads) > 1 or len(tails) > 1:
        raise StackCorruptedError("More than one end or start ref detected")
    if len(heads) != 1:
        raise StackCorruptedError("expected exactly one start ref")
    if len(tails) != 1:
        raise StackCorruptedError("expected exactly one end ref")

    for sha, ref in stack.refs.items():
        if sha != ref.sha:
            raise StackCorruptedError(f"ref stored as {sha} declares sha {ref.sha}")
        if ref.prev:
            prev = stack.refs.get(ref.prev)
            if prev is None:
                raise StackCorruptedError(f"ref {sha} points to missing previous ref {ref.prev}")
            if prev.next != sha:
                raise StackCorruptedError(f"ref {ref.prev} does not link forward to {sha}")
        if ref.next:
            following = stack.refs.get(ref.next)
            if following is None:
                raise StackCorruptedError(f"ref {sha} points to missing next ref {ref.next}")
            if following.prev != sha:
                raise StackCorruptedError(f"ref {ref.next} does not link back to {sha}")

    walked = stack.refs_in_order()
    if len(walked) != len(stack.refs):
        raise StackCorruptedError(
            f"walking the chain reached {len(walked)} of {len(stack.refs)} refs"
        )

    branches = [ref.branch for ref in walked]
    if len(set(branches)) != len(branches):
        raise StackCorruptedError("the same branch appears in more than one ref")

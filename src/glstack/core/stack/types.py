"""Core data types for stacked diffs."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from glstack.core.stack.errors import StackCorruptedError, StackError, StackRefNotFoundError

SUBJECT_LIMIT = 72


@dataclass(frozen=True)
class StackRef:
    """One node of a stack: a branch holding a single diff.

    prev/next hold the sha of the neighbouring refs ("" at the ends);
    mr holds the merge request URL once one has been created.
    """

    sha: str
    branch: str
    prev: str = ""
    next: str = ""
    mr: str = ""
    description: str = ""

    def is_empty(self) -> bool:
        return self.sha == ""

    def is_first(self) -> bool:
        return self.prev == ""

    def is_last(self) -> bool:
        return self.next == ""

    def subject(self) -> str:
        """First description line, truncated for space-limited places."""
        line = self.description.split("\n", 1)[0]
        if len(line) <= SUBJECT_LIMIT:
            return line
        return line[: SUBJECT_LIMIT - 3] + "..."


@dataclass
class Stack:
    """A titled chain of refs keyed by sha.

    Build stacks through StackStore.gather(), which validates the chain.
    """

    title: str
    refs: dict[str, StackRef] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.refs

    def _empty_message(self) -> str:
        return f"stack '{self.title}' is empty. Add a diff with `glstack stack save`."

    def first(self) -> StackRef:
        if self.is_empty():
            raise StackError(self._empty_message())
        for ref in self.refs.values():
            if ref.is_first():
                return ref
        raise StackCorruptedError("can't find the first ref in the chain")

    def last(self) -> StackRef:
        if self.is_empty():
            raise StackError(self._empty_message())
        for ref in self.refs.values():
            if ref.is_last():
                return ref
        raise StackCorruptedError("can't find the last ref in the chain")

    def __iter__(self) -> Iterator[StackRef]:
        if self.is_empty():
            return
        ref = self.first()
        seen: set[str] = set()
        while True:
            if ref.sha in seen:
                raise StackCorruptedError(f"cycle detected at ref {ref.sha}")
            seen.add(ref.sha)
            yield ref
            if ref.is_last():
                return
            following = self.refs.get(ref.next)
            if following is None:
                raise StackCorruptedError(f"ref {ref.sha} points to missing next ref {ref.next}")
            ref = following

    def refs_in_order(self) -> list[StackRef]:
        return list(self)

    def branches(self) -> list[str]:
        return [ref.branch for ref in self]

    def ref_for_branch(self, branch: str) -> StackRef:
        for ref in self:
            if ref.branch == branch:
                return ref
        raise StackRefNotFoundError(branch)

    def index_of(self, ref: StackRef) -> int:
        for index, candidate in enumerate(self):
            if candidate == ref:
                return index
        return -1

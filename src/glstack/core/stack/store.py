"""File-backed persistence for stack refs.

Each ref lives in its own JSON file at `.git/stacked/<title>/<sha>.json`.
The directory listing is the only index; there is no manifest to keep in sync.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from glstack.core.stack.errors import StackCorruptedError, StackError
from glstack.core.stack.types import Stack, StackRef
from glstack.core.stack.validation import validate_stack

BASE_BRANCH_FILE = "BASE_BRANCH"


class StackRefRecord(BaseModel):
    """On-disk schema of a ref file.

    Field order is the serialization order and matches files written by
    other stacked-diff clients.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    prev: str
    branch: str
    sha: str
    next: str
    mr: str
    description: str

    @staticmethod
    def from_ref(ref: StackRef) -> "StackRefRecord":
        return StackRefRecord(
            prev=ref.prev,
            branch=ref.branch,
            sha=ref.sha,
            next=ref.next,
            mr=ref.mr,
            description=ref.description,
        )

    def to_ref(self) -> StackRef:
        return StackRef(
            sha=self.sha,
            branch=self.branch,
            prev=self.prev,
            next=self.next,
            mr=self.mr,
            description=self.description,
        )


class StackStore:
    """CRUD over the ref files of every stack in one repository."""

    def __init__(self, stacks_dir: Path) -> None:
        self._stacks_dir = stacks_dir

    @property
    def stacks_dir(self) -> Path:
        return self._stacks_dir

    def stack_dir(self, title: str) -> Path:
        return self._stacks_dir / title

    def ref_path(self, title: str, ref: StackRef) -> Path:
        return self.stack_dir(title) / f"{ref.sha}.json"

    def create_stack_dir(self, title: str) -> Path:
        directory = self.stack_dir(title)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def stack_exists(self, title: str) -> bool:
        return self.stack_dir(title).is_dir()

    def list_stacks(self) -> list[str]:
        """Titles of all stacks, sorted."""
        if not self._stacks_dir.is_dir():
            return []
        return sorted(entry.name for entry in self._stacks_dir.iterdir() if entry.is_dir())

    def add_ref(self, title: str, ref: StackRef) -> None:
        path = self.ref_path(title, ref)
        if path.exists():
            raise StackError(f"ref {ref.sha} already exists in stack '{title}'")
        self.create_stack_dir(title)
        self._write(path, ref)

    def update_ref(self, title: str, ref: StackRef) -> None:
        path = self.ref_path(title, ref)
        if not path.exists():
            raise StackError(f"ref {ref.sha} does not exist in stack '{title}'")
        self._write(path, ref)

    def delete_ref(self, title: str, ref: StackRef) -> None:
        path = self.ref_path(title, ref)
        if not path.exists():
            raise StackError(f"ref {ref.sha} does not exist in stack '{title}'")
        path.unlink()

    def gather(self, title: str) -> Stack:
        """Load and validate every ref of a stack.

        A stack directory that does not exist yet loads as an empty stack.

        Raises:
            StackCorruptedError: If a file is malformed or the chain is invalid
        """
        stack = Stack(title=title)
        directory = self.stack_dir(title)
        if not directory.is_dir():
            return stack

        for path in sorted(directory.glob("*.json")):
            try:
                record = StackRefRecord.model_validate_json(path.read_text(encoding="utf-8"))
            except ValidationError as e:
                raise StackCorruptedError(f"could not read ref file {path}: {e}") from e
            if path.stem != record.sha:
                raise StackCorruptedError(f"ref file {path.name} holds ref {record.sha}")
            stack.refs[record.sha] = record.to_ref()

        validate_stack(stack)
        return stack

    def read_base_branch(self, title: str) -> str | None:
        path = self.stack_dir(title) / BASE_BRANCH_FILE
        if not path.is_file():
            return None
        branch = path.read_text(encoding="utf-8").strip()
        return branch or None

    def write_base_branch(self, title: str, branch: str) -> None:
        self.create_stack_dir(title)
        (self.stack_dir(title) / BASE_BRANCH_FILE).write_text(branch, encoding="utf-8")

    def _write(self, path: Path, ref: StackRef) -> None:
        path.write_text(StackRefRecord.from_ref(ref).model_dump_json(), encoding="utf-8")

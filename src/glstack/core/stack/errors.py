"""Exceptions raised by stack operations.

Commands catch StackError (and gateway RuntimeErrors) at the top level and
report the message with a non-zero exit.
"""

CORRUPTION_SUFFIX = "Data might be corrupted."


class StackError(Exception):
    """Base class for all stack failures."""


class StackCorruptedError(StackError):
    """The ref files on disk violate the chain invariants."""

    def __init__(self, message: str) -> None:
        super().__init__(f"{message.rstrip('.')}. {CORRUPTION_SUFFIX}")


class StackRefNotFoundError(StackError):
    """A branch is not part of the stack."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"could not find stack ref for branch: {branch}")
        self.branch = branch


class NoCurrentStackError(StackError):
    """No current stack is recorded in the local git config."""

    def __init__(self) -> None:
        super().__init__(
            "no current stack is set. Create one with `glstack stack create` "
            "or select one with `glstack stack switch`."
        )


class StackBoundaryError(StackError):
    """Navigation hit the first or last ref."""

    def __init__(self, direction: str) -> None:
        position = "last" if direction == "next" else "first"
        super().__init__(
            f"You are already at the {position} diff. "
            "Use `glstack stack list` to see the complete list."
        )
        self.direction = direction


class ReorderError(StackError):
    """The requested order cannot be applied."""


class SyncError(StackError):
    """Sync stopped on a state that needs manual intervention."""


class SaveError(StackError):
    """A save or amend precondition failed."""

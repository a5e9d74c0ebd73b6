"""User-facing progress output for core operations.

Core modules report progress through ctx.feedback so they never print directly
and tests can assert on what the user would have seen.
"""

from abc import ABC, abstractmethod

import click

from glstack.cli.output import user_output


class UserFeedback(ABC):
    """Progress and notice output for long-running stack operations."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show a non-fatal warning."""


class InteractiveFeedback(UserFeedback):
    """Writes all messages to stderr with styling."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))


class FakeUserFeedback(UserFeedback):
    """Records messages instead of printing them.

    Each entry is prefixed with its level ("INFO: ", "SUCCESS: ", "WARNING: ").
    """

    def __init__(self) -> None:
        self._messages: list[str] = []

    @property
    def messages(self) -> list[str]:
        """All recorded messages in order."""
        return self._messages

    def info(self, message: str) -> None:
        self._messages.append(f"INFO: {message}")

    def success(self, message: str) -> None:
        self._messages.append(f"SUCCESS: {message}")

    def warning(self, message: str) -> None:
        self._messages.append(f"WARNING: {message}")

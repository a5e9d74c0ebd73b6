"""Interactive user input abstraction.

Commands never call click.prompt, click.edit or a terminal menu directly;
they go through ctx.prompter so that tests can script the answers.
"""

from abc import ABC, abstractmethod


class Prompter(ABC):
    """Abstract interface for interactive input."""

    @abstractmethod
    def is_interactive(self) -> bool:
        """Return True when a user is attached to the terminal."""
        ...

    @abstractmethod
    def ask(self, question: str, default: str | None = None) -> str:
        """Ask for a single line of text."""
        ...

    @abstractmethod
    def edit(self, content: str) -> str | None:
        """Open content in the user's editor.

        Returns:
            The edited text, or None if the editor was closed without saving
        """
        ...

    @abstractmethod
    def choose(self, title: str, options: list[str], default_index: int = 0) -> int | None:
        """Let the user pick one of options.

        Returns:
            Index of the chosen option, or None if the selection was cancelled
        """
        ...

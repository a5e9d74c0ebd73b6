"""Fake Prompter for testing."""

from glstack.core.prompter.abc import Prompter


class FakePrompter(Prompter):
    """Scripted answers for interactive prompts.

    This class has NO public setup methods. All answers are provided via
    constructor; every prompt shown is recorded for assertions.
    """

    def __init__(
        self,
        *,
        interactive: bool = True,
        answers: list[str] | None = None,
        edited_text: str | None = None,
        choice: int | None = 0,
    ) -> None:
        """Create FakePrompter.

        Args:
            interactive: Result of is_interactive()
            answers: Answers returned by ask(), consumed in order
            edited_text: Text returned by edit() (None simulates an aborted editor)
            choice: Index returned by choose() (None simulates cancellation)
        """
        self._interactive = interactive
        self._answers = list(answers or [])
        self._edited_text = edited_text
        self._choice = choice

        self._questions: list[str] = []
        self._edits: list[str] = []
        self._menus: list[tuple[str, list[str]]] = []

    @property
    def questions(self) -> list[str]:
        """Questions passed to ask()."""
        return self._questions

    @property
    def edits(self) -> list[str]:
        """Initial content passed to edit()."""
        return self._edits

    @property
    def menus(self) -> list[tuple[str, list[str]]]:
        """List of (title, options) passed to choose()."""
        return self._menus

    def is_interactive(self) -> bool:
        return self._interactive

    def ask(self, question: str, default: str | None = None) -> str:
        self._questions.append(question)
        if not self._answers:
            return default or ""
        return self._answers.pop(0)

    def edit(self, content: str) -> str | None:
        self._edits.append(content)
        return self._edited_text

    def choose(self, title: str, options: list[str], default_index: int = 0) -> int | None:
        self._menus.append((title, list(options)))
        return self._choice

"""Production Prompter backed by click and simple-term-menu."""

import sys

import click
from simple_term_menu import TerminalMenu

from glstack.core.prompter.abc import Prompter


class RealPrompter(Prompter):
    """Prompts on the controlling terminal."""

    def is_interactive(self) -> bool:
        return sys.stdin.isatty() and sys.stdout.isatty()

    def ask(self, question: str, default: str | None = None) -> str:
        return click.prompt(question, default=default, err=True)

    def edit(self, content: str) -> str | None:
        return click.edit(content, extension=".txt")

    def choose(self, title: str, options: list[str], default_index: int = 0) -> int | None:
        # "/" starts an incremental search over the entries
        menu = TerminalMenu(options, title=title, cursor_index=default_index)
        index = menu.show()
        if index is None:
            return None
        return int(index)

"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from typing import TYPE_CHECKING

import click

from glstack.cli.output import user_output
from glstack.core.repo_discovery import NoRepoSentinel, RepoContext

if TYPE_CHECKING:
    from glstack.core.context import GlstackContext


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def in_repo(ctx: "GlstackContext") -> RepoContext:
        """Ensure the command runs inside a git repository.

        Returns:
            The discovered repository
        """
        if isinstance(ctx.repo, NoRepoSentinel):
            user_output(click.style("Error: ", fg="red") + ctx.repo.message)
            raise SystemExit(1)
        return ctx.repo

    @staticmethod
    def interactive(ctx: "GlstackContext", error_message: str) -> None:
        """Ensure a terminal is attached for prompts, otherwise exit."""
        if not ctx.prompter.is_interactive():
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)


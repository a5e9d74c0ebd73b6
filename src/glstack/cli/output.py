"""Output helpers with explicit stream intent.

user_output: human-facing messages, routed to stderr so stdout stays clean.
machine_output: structured data (JSON) for scripts, routed to stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True, color: bool | None = None) -> None:
    """Write a user-facing message to stderr."""
    click.echo(message, nl=nl, err=True, color=color)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Write machine-readable output to stdout."""
    click.echo(message, nl=nl)

"""Stack titles, ref ids and branch names."""

import hashlib
import os
import re
from datetime import datetime

DEFAULT_BRANCH_PREFIX = "glab-stack"

_INVALID_TITLE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def sanitize_title(title: str) -> tuple[str, bool]:
    """Turn free text into a stack title usable in paths and branch names.

    Returns:
        (sanitized title, whether any character was replaced)
    """
    sanitized = _INVALID_TITLE_CHARS.sub("-", title.strip()).strip("-")
    return sanitized, sanitized != title


def generate_stack_sha(description: str, title: str, author: str, timestamp: datetime) -> str:
    """Derive the 8-character id of a new ref."""
    digest = hashlib.shake_256()
    digest.update((description + title + author + timestamp.isoformat()).encode("utf-8"))
    return digest.hexdigest(4)


def stack_branch_name(prefix: str, title: str, sha: str) -> str:
    return f"{prefix}-{title}-{sha}"


def resolve_branch_prefix(configured: str | None) -> str:
    """Configured prefix, else $USER, else the stock prefix."""
    if configured:
        return configured
    user = os.environ.get("USER")
    if user:
        return user
    return DEFAULT_BRANCH_PREFIX

"""Tests for titles, ref ids and branch names."""

from datetime import datetime

import pytest

from glstack.core.stack.naming import (
    DEFAULT_BRANCH_PREFIX,
    generate_stack_sha,
    resolve_branch_prefix,
    sanitize_title,
    stack_branch_name,
)


@pytest.mark.parametrize(
    ("raw", "expected", "changed"),
    [
        ("my-feature", "my-feature", False),
        ("snake_case_ok", "snake_case_ok", False),
        ("oh ok fine how about blah blah", "oh-ok-fine-how-about-blah-blah", True),
        ("hey@#$!^$#)()*1234hmm", "hey-1234hmm", True),
        ("  padded  ", "padded", True),
        ("@@@", "", True),
    ],
)
def test_sanitize_title(raw: str, expected: str, changed: bool) -> None:
    assert sanitize_title(raw) == (expected, changed)


def test_stack_sha_is_eight_hex_chars() -> None:
    sha = generate_stack_sha("desc", "title", "author", datetime(2024, 1, 1))

    assert len(sha) == 8
    int(sha, 16)


def test_stack_sha_depends_on_time() -> None:
    first = generate_stack_sha("desc", "title", "author", datetime(2024, 1, 1, 12, 0, 0))
    again = generate_stack_sha("desc", "title", "author", datetime(2024, 1, 1, 12, 0, 0))
    later = generate_stack_sha("desc", "title", "author", datetime(2024, 1, 1, 12, 0, 1))

    assert first == again
    assert first != later


def test_stack_branch_name() -> None:
    assert stack_branch_name("me", "feature", "abcd1234") == "me-feature-abcd1234"


def test_branch_prefix_prefers_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("USER", "someone")

    assert resolve_branch_prefix("configured") == "configured"
    assert resolve_branch_prefix(None) == "someone"


def test_branch_prefix_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("USER", raising=False)

    assert resolve_branch_prefix(None) == DEFAULT_BRANCH_PREFIX

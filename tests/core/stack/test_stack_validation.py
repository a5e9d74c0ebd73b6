"""Tests for chain validation."""

import pytest

from glstack.core.stack.errors import StackCorruptedError
from glstack.core.stack.types import Stack, StackRef
from glstack.core.stack.validation import validate_stack
from tests.test_utils.stack_helpers import chain


def _stack(refs: list[StackRef]) -> Stack:
    return Stack(title="check", refs={ref.sha: ref for ref in refs})


def test_valid_chain_passes() -> None:
    validate_stack(_stack(chain(["a", "b", "c"])))


def test_empty_stack_is_valid() -> None:
    validate_stack(Stack(title="empty"))


def test_two_heads_are_rejected() -> None:
    refs = [StackRef(sha="1", branch="one"), StackRef(sha="2", branch="two")]

    with pytest.raises(StackCorruptedError, match="More than one end or start ref detected"):
        validate_stack(_stack(refs))


def test_two_tails_are_rejected() -> None:
    refs = [
        StackRef(sha="1", branch="one", next="2"),
        StackRef(sha="2", branch="two", prev="1"),
        StackRef(sha="3", branch="three", prev="1"),
    ]

    with pytest.raises(StackCorruptedError, match="More than one end or start ref detected"):
        validate_stack(_stack(refs))


def test_asymmetric_link_is_rejected() -> None:
    refs = [
        StackRef(sha="1", branch="one", next="2"),
        StackRef(sha="2", branch="two", prev="1", next="3"),
        StackRef(sha="3", branch="three", prev="1"),
    ]

    with pytest.raises(StackCorruptedError, match="does not link"):
        validate_stack(_stack(refs))


def test_missing_link_target_is_rejected() -> None:
    refs = [
        StackRef(sha="1", branch="one", next="2"),
        StackRef(sha="2", branch="two", prev="1"),
        StackRef(sha="3", branch="three", prev="9", next="2"),
    ]

    with pytest.raises(StackCorruptedError, match="missing previous ref 9"):
        validate_stack(_stack(refs))


def test_key_must_match_sha() -> None:
    stack = Stack(title="check", refs={"other": StackRef(sha="1", branch="one")})

    with pytest.raises(StackCorruptedError, match="declares sha 1"):
        validate_stack(stack)


def test_duplicate_branches_are_rejected() -> None:
    refs = chain(["same", "other"])
    refs[1] = StackRef(sha=refs[1].sha, branch="same", prev=refs[1].prev)

    with pytest.raises(StackCorruptedError, match="more than one ref"):
        validate_stack(_stack(refs))

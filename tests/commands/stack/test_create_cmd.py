"""Tests for `glstack stack create`."""

from pathlib import Path

from click.testing import CliRunner

from glstack.cli.cli import cli
from glstack.core.git.fake import FakeGit
from glstack.core.prompter.fake import FakePrompter
from glstack.core.stack.current import CURRENT_STACK_KEY
from tests.test_utils.stack_helpers import stack_context, stack_store


def test_create_joins_words_with_dashes(tmp_path: Path) -> None:
    git = FakeGit(repository_root=tmp_path, current_branch="main")
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "create", "cool", "new", "feature"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert 'New stack created with title "cool-new-feature".' in result.output
    assert "warning" not in result.output
    assert git.config[CURRENT_STACK_KEY] == "cool-new-feature"
    assert stack_store(tmp_path).stack_exists("cool-new-feature")


def test_create_prompts_for_title_and_warns(tmp_path: Path) -> None:
    git = FakeGit(repository_root=tmp_path, current_branch="main")
    prompter = FakePrompter(answers=["oh ok fine how about blah blah"])
    ctx = stack_context(tmp_path, git, prompter=prompter)

    result = CliRunner().invoke(cli, ["stack", "create"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert prompter.questions == ["New stack title?"]
    assert (
        "invalid characters have been replaced with dashes: oh-ok-fine-how-about-blah-blah"
        in result.output
    )
    assert git.config[CURRENT_STACK_KEY] == "oh-ok-fine-how-about-blah-blah"


def test_create_replaces_special_characters(tmp_path: Path) -> None:
    git = FakeGit(repository_root=tmp_path, current_branch="main")
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "create", "hey@#$!^$#)()*1234hmm"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "! warning: " in result.output
    assert 'New stack created with title "hey-1234hmm".' in result.output


def test_create_without_title_non_interactive(tmp_path: Path) -> None:
    git = FakeGit(repository_root=tmp_path, current_branch="main")
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "create"], obj=ctx)

    assert result.exit_code == 1
    assert "a title is required" in result.output
    assert CURRENT_STACK_KEY not in git.config


def test_create_outside_repository(tmp_path: Path) -> None:
    ctx = stack_context(tmp_path, FakeGit())

    result = CliRunner().invoke(cli, ["stack", "create", "feature"], obj=ctx)

    assert result.exit_code == 1
    assert "Not inside a git repository" in result.output

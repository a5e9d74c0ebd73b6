"""Tests for `glstack stack save` and `glstack stack amend`."""

from pathlib import Path

from click.testing import CliRunner

from glstack.cli.cli import cli
from glstack.core.prompter.fake import FakePrompter
from tests.test_utils.stack_helpers import stack_context, stack_git, stack_store, write_chain


def test_save_with_message(tmp_path: Path) -> None:
    stack_store(tmp_path).create_stack_dir("feature")
    git = stack_git(tmp_path, "feature", current_branch="main", branches=[], dirty=True)
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "save", "-m", "added a function"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert 'Saved with message: "added a function".' in result.output
    stack = stack_store(tmp_path).gather("feature")
    assert [ref.description for ref in stack] == ["added a function"]


def test_save_stages_given_paths(tmp_path: Path) -> None:
    (tmp_path / "added_file").write_text("content")
    git = stack_git(tmp_path, "feature", current_branch="main", branches=[], dirty=True)
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "save", "added_file", "-d", "new file"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.staged_paths == ["added_file"]


def test_save_rejects_both_description_flags(tmp_path: Path) -> None:
    git = stack_git(tmp_path, "feature", current_branch="main", branches=[], dirty=True)
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "save", "-m", "one", "-d", "two"], obj=ctx)

    assert result.exit_code == 1
    assert "specify either of --message or --description." in result.output
    assert git.commits == []


def test_save_with_clean_tree(tmp_path: Path) -> None:
    git = stack_git(tmp_path, "feature", current_branch="main", branches=[])
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "save", "-m", "nothing"], obj=ctx)

    assert result.exit_code == 1
    assert "could not save: no changes to save." in result.output


def test_save_opens_editor_without_message(tmp_path: Path) -> None:
    git = stack_git(tmp_path, "feature", current_branch="main", branches=[], dirty=True)
    prompter = FakePrompter(edited_text="From the editor\n")
    ctx = stack_context(tmp_path, git, prompter=prompter)

    result = CliRunner().invoke(cli, ["stack", "save"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert 'Saved with message: "From the editor".' in result.output


def test_amend_with_description(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a", "b"])
    git = stack_git(tmp_path, "feature", current_branch="b", branches=["a", "b"], dirty=True)
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "amend", "-d", "forgot to add this"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert 'Amended stack item with description: "forgot to add this".' in result.output
    assert git.amended_commits == [("b", "forgot to add this")]


def test_amend_off_stack(tmp_path: Path) -> None:
    write_chain(tmp_path, "feature", ["a"])
    git = stack_git(tmp_path, "feature", current_branch="main", branches=["a"], dirty=True)
    ctx = stack_context(tmp_path, git)

    result = CliRunner().invoke(cli, ["stack", "amend", "-m", "x"], obj=ctx)

    assert result.exit_code == 1
    assert "could not run stack amend: not currently in a stack." in result.output
    assert git.amended_commits == []

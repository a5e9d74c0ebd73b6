"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from glstack.cli.output import user_output
from glstack.core.git.abc import Git
from glstack.core.git.real import RealGit
from glstack.core.gitlab.abc import GitLab
from glstack.core.gitlab.real import RealGitLab
from glstack.core.global_config import GlobalConfig, global_config_path, load_global_config
from glstack.core.prompter.abc import Prompter
from glstack.core.prompter.real import RealPrompter
from glstack.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from glstack.core.time.abc import Time
from glstack.core.time.real import RealTime
from glstack.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class GlstackContext:
    """Immutable context holding all dependencies for glstack operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    gitlab: GitLab
    time: Time
    prompter: Prompter
    feedback: UserFeedback
    cwd: Path  # Current working directory at CLI invocation
    global_config: GlobalConfig
    repo: RepoContext | NoRepoSentinel

    @staticmethod
    def for_test(
        git: Git | None = None,
        gitlab: GitLab | None = None,
        time: Time | None = None,
        prompter: Prompter | None = None,
        feedback: UserFeedback | None = None,
        cwd: Path | None = None,
        global_config: GlobalConfig | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
    ) -> "GlstackContext":
        """Create test context with optional pre-configured integration classes.

        Any dependency left as None gets its fake. When repo is None it is
        discovered from the git fake, so a FakeGit constructed with
        repository_root yields a RepoContext for that root.

        Example:
            >>> git = FakeGit(repository_root=tmp_path, current_branch="main")
            >>> ctx = GlstackContext.for_test(git=git, cwd=tmp_path)
        """
        from glstack.core.git.fake import FakeGit
        from glstack.core.gitlab.fake import FakeGitLab
        from glstack.core.prompter.fake import FakePrompter
        from glstack.core.time.fake import FakeTime
        from glstack.core.user_feedback import FakeUserFeedback

        if git is None:
            git = FakeGit()

        if gitlab is None:
            gitlab = FakeGitLab()

        if time is None:
            time = FakeTime()

        if prompter is None:
            prompter = FakePrompter(interactive=False)

        if feedback is None:
            feedback = FakeUserFeedback()

        if cwd is None:
            cwd = Path("/test/default/cwd")

        if global_config is None:
            global_config = GlobalConfig(
                branch_prefix="tester",
                remote="origin",
                poll_attempts=3,
                poll_interval=0.5,
            )

        if repo is None:
            root = git.get_repository_root(cwd)
            if root is None:
                repo = NoRepoSentinel()
            else:
                repo = RepoContext(root=root, stacks_dir=root / ".git" / "stacked")

        return GlstackContext(
            git=git,
            gitlab=gitlab,
            time=time,
            prompter=prompter,
            feedback=feedback,
            cwd=cwd,
            global_config=global_config,
            repo=repo,
        )


def create_context() -> GlstackContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    # 1. Capture cwd (no deps)
    cwd = Path.cwd()

    # 2. Load global config (defaults when the file does not exist)
    try:
        global_config = load_global_config()
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        user_output(f"Fix or remove {global_config_path()} and try again.")
        raise SystemExit(1) from e

    # 3. Create integration classes (need git for repo discovery)
    git: Git = RealGit()

    # 4. Discover repo
    repo = discover_repo_or_sentinel(cwd, git)

    return GlstackContext(
        git=git,
        gitlab=RealGitLab(),
        time=RealTime(),
        prompter=RealPrompter(),
        feedback=InteractiveFeedback(),
        cwd=cwd,
        global_config=global_config,
        repo=repo,
    )

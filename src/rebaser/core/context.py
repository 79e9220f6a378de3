"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from rebaser.core.config import ConfigStore, FilesystemConfigStore, RebaserConfig
from rebaser.core.git.abc import Git
from rebaser.core.git.dry_run import DryRunGit
from rebaser.core.git.real import RealGit
from rebaser.core.github.abc import GitHub
from rebaser.core.github.real import RealGitHub


@dataclass(frozen=True)
class RebaserContext:
    """Immutable context holding all dependencies for a run.

    Created at CLI entry point and threaded through the application. The git
    handle is the only way the engine touches the repository, so tests can
    substitute an in-memory repository.
    """

    git: Git
    github: GitHub
    config: RebaserConfig
    cwd: Path
    dry_run: bool

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        config: RebaserConfig | None = None,
        cwd: Path | None = None,
        dry_run: bool = False,
    ) -> "RebaserContext":
        """Create test context with optional pre-configured integration classes.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            github: Optional GitHub implementation. If None, creates empty FakeGitHub.
            config: Optional RebaserConfig. If None, uses defaults.
            cwd: Optional current working directory. If None, uses Path("/fake/repo").
            dry_run: Whether to wrap git in DryRunGit (default False).
        """
        from rebaser.core.git.fake import FakeGit
        from rebaser.core.github.fake import FakeGitHub

        resolved_git: Git = git if git is not None else FakeGit()
        if dry_run:
            resolved_git = DryRunGit(resolved_git)

        return RebaserContext(
            git=resolved_git,
            github=github if github is not None else FakeGitHub(),
            config=config if config is not None else RebaserConfig(),
            cwd=cwd if cwd is not None else Path("/fake/repo"),
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool, config_store: ConfigStore | None = None) -> RebaserContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap git with DryRunGit to print writes instead of
            executing them
        config_store: Where to load configuration from (default ~/.rebaser/config.toml)

    Raises:
        ValueError: If the configuration file is malformed
    """
    store = config_store if config_store is not None else FilesystemConfigStore()
    config = store.load()

    git: Git = RealGit()
    if dry_run:
        git = DryRunGit(git)

    return RebaserContext(
        git=git,
        github=RealGitHub(tokens=config.tokens),
        config=config,
        cwd=Path.cwd(),
        dry_run=dry_run,
    )

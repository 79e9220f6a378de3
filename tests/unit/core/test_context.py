"""Tests for context construction."""

from pathlib import Path

from rebaser.core.config import InMemoryConfigStore, RebaserConfig
from rebaser.core.context import RebaserContext, create_context
from rebaser.core.git.dry_run import DryRunGit
from rebaser.core.git.fake import FakeGit
from rebaser.core.git.real import RealGit
from rebaser.core.github.fake import FakeGitHub
from rebaser.core.github.real import RealGitHub


def test_create_context_wires_real_implementations() -> None:
    config = RebaserConfig(remote="origin", tokens={"github.com": "secret"})

    ctx = create_context(dry_run=False, config_store=InMemoryConfigStore(config))

    assert isinstance(ctx.git, RealGit)
    assert isinstance(ctx.github, RealGitHub)
    assert ctx.config is config
    assert ctx.cwd == Path.cwd()
    assert not ctx.dry_run


def test_create_context_dry_run_wraps_git() -> None:
    ctx = create_context(dry_run=True, config_store=InMemoryConfigStore())

    assert isinstance(ctx.git, DryRunGit)
    assert ctx.dry_run


def test_for_test_fills_in_fakes() -> None:
    ctx = RebaserContext.for_test()

    assert isinstance(ctx.git, FakeGit)
    assert isinstance(ctx.github, FakeGitHub)
    assert ctx.config == RebaserConfig()
    assert ctx.cwd == Path("/fake/repo")


def test_for_test_dry_run_wraps_given_git() -> None:
    git = FakeGit()

    ctx = RebaserContext.for_test(git=git, dry_run=True)

    assert isinstance(ctx.git, DryRunGit)
    assert ctx.dry_run

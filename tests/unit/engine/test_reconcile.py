"""Tests for publish-or-recover reconciliation."""

from rebaser.core.context import RebaserContext
from rebaser.core.engine.reconcile import reconcile
from rebaser.core.git.fake import FakeGit

# a1: what origin/feat had at the last fetch
# a2: the local rebase of a1
# x1: a commit someone else pushed on top of a1 afterwards
COMMITS = {"m1": [], "a1": ["m1"], "a2": ["m1"], "x1": ["a1"]}


def _git(*, local: str, tracking: str, server: str | None = None) -> FakeGit:
    return FakeGit(
        commits=COMMITS,
        local_branches={"feat": local},
        remote_branches={"origin/feat": tracking},
        server_branches={"origin/feat": server if server is not None else tracking},
    )


def test_nothing_to_publish_when_local_matches_remote() -> None:
    git = _git(local="a1", tracking="a1")
    ctx = RebaserContext.for_test(git=git)

    assert reconcile(ctx, "feat") is False
    assert git.push_calls == []


def test_publishes_with_lease_on_tracking_tip() -> None:
    git = _git(local="a2", tracking="a1")
    ctx = RebaserContext.for_test(git=git)

    assert reconcile(ctx, "feat") is True

    assert git.push_calls == [("origin", "feat", "a1", True)]
    assert git.server_branches["origin/feat"] == "a2"
    assert git.remote_branches["origin/feat"] == "a2"
    assert git.local_branches["feat"] == "a2"


def test_rejected_publish_resets_local_branch_to_remote_tip() -> None:
    git = _git(local="a2", tracking="a1", server="x1")
    ctx = RebaserContext.for_test(git=git)

    assert reconcile(ctx, "feat") is False

    assert git.push_calls == [("origin", "feat", "a1", False)]
    assert git.fetch_calls == [("origin", "feat")]
    assert git.reset_calls == [("feat", "x1")]
    assert git.local_branches["feat"] == "x1"
    assert git.server_branches["origin/feat"] == "x1"


def test_rejected_publish_for_deleted_remote_branch_leaves_local_alone() -> None:
    git = FakeGit(
        commits=COMMITS,
        local_branches={"feat": "a2"},
        remote_branches={"origin/feat": "a1"},
        server_branches={},
    )
    ctx = RebaserContext.for_test(git=git)

    assert reconcile(ctx, "feat") is False

    assert git.reset_calls == []
    assert git.local_branches["feat"] == "a2"
    assert "origin/feat" not in git.remote_branches


def test_branch_without_upstream_is_never_published() -> None:
    git = FakeGit(commits=COMMITS, local_branches={"feat": "a2"})
    ctx = RebaserContext.for_test(git=git)

    assert reconcile(ctx, "feat") is False
    assert git.push_calls == []


def test_branch_tracking_a_differently_named_branch_is_not_published() -> None:
    git = FakeGit(
        commits=COMMITS,
        local_branches={"feat": "a2"},
        remote_branches={"origin/other": "a1"},
        upstreams={"feat": "origin/other"},
    )
    ctx = RebaserContext.for_test(git=git)

    assert reconcile(ctx, "feat") is False
    assert git.push_calls == []

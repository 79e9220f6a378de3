"""Tests for depth-first rebase propagation."""

import pytest

from rebaser.core.context import RebaserContext
from rebaser.core.engine.graph import build_graph
from rebaser.core.engine.propagate import propagate, rewritten_branches
from rebaser.core.errors import UnsupportedRebaseOperationError
from rebaser.core.git.abc import EDIT, FIXUP, SQUASH, RebaseStatus
from rebaser.core.git.fake import FakeGit
from tests.test_utils.stacks import chain_change_requests, chain_git, change_request, contains


def test_chain_rebases_each_head_onto_rebased_base() -> None:
    git = chain_git(2, main_commits=2)
    ctx = RebaserContext.for_test(git=git)
    requests = chain_change_requests(2)

    outcomes = propagate(ctx, build_graph(requests), "main")

    assert git.rebase_calls == [("b1", "main"), ("b2", "b1")]
    assert [(o.change_request.head_branch, o.status, o.published) for o in outcomes] == [
        ("b1", RebaseStatus.REBASED, True),
        ("b2", RebaseStatus.REBASED, True),
    ]
    assert rewritten_branches(outcomes) == ["b1", "b2"]
    assert contains(git, "b1", "m2")
    assert contains(git, "b2", git.local_branches["b1"])
    assert git.server_branches["origin/b2"] == git.local_branches["b2"]


def test_up_to_date_stack_changes_nothing() -> None:
    git = chain_git(2)
    ctx = RebaserContext.for_test(git=git)

    outcomes = propagate(ctx, build_graph(chain_change_requests(2)), "main")

    assert [o.status for o in outcomes] == [RebaseStatus.UP_TO_DATE, RebaseStatus.UP_TO_DATE]
    assert not any(o.published for o in outcomes)
    assert rewritten_branches(outcomes) == []
    assert git.push_calls == []


def test_failed_rebase_is_aborted_and_subtree_skipped() -> None:
    git = FakeGit(
        commits={"m1": [], "m2": ["m1"], "c1": ["m1"], "c2": ["c1"], "c3": ["m1"]},
        local_branches={"main": "m2", "b1": "c1", "b2": "c2", "b3": "c3"},
        remote_branches={
            "origin/main": "m2",
            "origin/b1": "c1",
            "origin/b2": "c2",
            "origin/b3": "c3",
        },
        current_branch="main",
        conflicting_branches={"b1"},
    )
    ctx = RebaserContext.for_test(git=git)
    requests = [*chain_change_requests(2), change_request(3, "b3", "main")]

    outcomes = propagate(ctx, build_graph(requests), "main")

    assert git.aborted_rebases == ["b1"]
    assert git.rebase_calls == [("b1", "main"), ("b3", "main")]
    assert [(o.change_request.head_branch, o.status) for o in outcomes] == [
        ("b1", RebaseStatus.FAILED),
        ("b3", RebaseStatus.REBASED),
    ]
    assert git.local_branches["b1"] == "c1"
    assert git.local_branches["b2"] == "c2"


@pytest.mark.parametrize(
    ("subject", "kind"),
    [("fixup! c0", FIXUP), ("amend! c0", FIXUP), ("squash! c0", SQUASH)],
)
def test_autosquash_commit_is_fatal(subject: str, kind: str) -> None:
    git = chain_git(1, main_commits=2, subjects={"c1": subject}, autosquash=True)
    ctx = RebaserContext.for_test(git=git)

    with pytest.raises(UnsupportedRebaseOperationError) as exc_info:
        propagate(ctx, build_graph(chain_change_requests(1)), "main")

    assert exc_info.value.branch == "b1"
    assert exc_info.value.commit == "c1"
    assert exc_info.value.kind == kind
    assert git.rebase_calls == []


def test_autosquash_marker_is_picked_when_autosquash_is_off() -> None:
    git = chain_git(1, main_commits=2, subjects={"c1": "fixup! c0"})
    ctx = RebaserContext.for_test(git=git)

    outcomes = propagate(ctx, build_graph(chain_change_requests(1)), "main")

    assert [o.status for o in outcomes] == [RebaseStatus.REBASED]
    assert git.rebase_calls == [("b1", "main")]


def test_merge_commit_in_head_is_fatal() -> None:
    git = FakeGit(
        commits={"m1": [], "m2": ["m1"], "side": ["m1"], "c1": ["m1", "side"]},
        local_branches={"main": "m2", "b1": "c1"},
        remote_branches={"origin/main": "m2", "origin/b1": "c1"},
        current_branch="main",
    )
    ctx = RebaserContext.for_test(git=git)

    with pytest.raises(UnsupportedRebaseOperationError, match="'edit'") as exc_info:
        propagate(ctx, build_graph(chain_change_requests(1)), "main")

    assert exc_info.value.kind == EDIT


def test_autosquash_commit_already_on_base_is_not_replayed() -> None:
    git = chain_git(1, subjects={"c1": "fixup! c0"})
    ctx = RebaserContext.for_test(git=git)

    outcomes = propagate(ctx, build_graph(chain_change_requests(1)), "main")

    assert [o.status for o in outcomes] == [RebaseStatus.UP_TO_DATE]


def test_dependents_build_on_reset_tip_after_rejected_publish() -> None:
    # Someone pushed x1 on top of b1 after our last fetch
    git = FakeGit(
        commits={"m1": [], "m2": ["m1"], "c1": ["m1"], "x1": ["c1"], "c2": ["c1"]},
        local_branches={"main": "m2", "b1": "c1", "b2": "c2"},
        remote_branches={"origin/main": "m2", "origin/b1": "c1", "origin/b2": "c2"},
        server_branches={"origin/main": "m2", "origin/b1": "x1", "origin/b2": "c2"},
        current_branch="main",
    )
    ctx = RebaserContext.for_test(git=git)

    outcomes = propagate(ctx, build_graph(chain_change_requests(2)), "main")

    assert git.local_branches["b1"] == "x1"
    assert [(o.change_request.head_branch, o.rebased, o.published) for o in outcomes] == [
        ("b1", True, False),
        ("b2", True, True),
    ]
    assert contains(git, "b2", "x1")
    assert git.server_branches["origin/b1"] == "x1"

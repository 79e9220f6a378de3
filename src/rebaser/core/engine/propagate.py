"""Rebase every change request onto its base, walking outward from the root."""

import logging
from dataclasses import dataclass

from rebaser.core.context import RebaserContext
from rebaser.core.engine.graph import DependencyGraph
from rebaser.core.engine.reconcile import reconcile
from rebaser.core.errors import UnsupportedRebaseOperationError
from rebaser.core.git.abc import PICK, RebaseStatus
from rebaser.core.github.types import ChangeRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebaseOutcome:
    """What happened to one change request's head branch during a pass."""

    change_request: ChangeRequest
    status: RebaseStatus
    published: bool

    @property
    def rebased(self) -> bool:
        return self.status is RebaseStatus.REBASED

    @property
    def changed(self) -> bool:
        return self.rebased and self.published


def rewritten_branches(outcomes: list[RebaseOutcome]) -> list[str]:
    return [outcome.change_request.head_branch for outcome in outcomes if outcome.rebased]


def ensure_linear_replay(ctx: RebaserContext, change_request: ChangeRequest) -> None:
    """Refuse to rebase a branch whose replay is anything but plain picks.

    Raises:
        UnsupportedRebaseOperationError: On the first non-pick step
    """
    head = change_request.head_branch
    base = change_request.base_branch
    _, behind = ctx.git.get_ahead_behind(ctx.cwd, head, base)
    if behind == 0:
        # Base already contained in head: rebase replays nothing
        return
    for step in ctx.git.list_rebase_steps(ctx.cwd, head, base):
        if step.kind != PICK:
            raise UnsupportedRebaseOperationError(head, step.kind, step.commit)


def propagate(ctx: RebaserContext, graph: DependencyGraph, root: str) -> list[RebaseOutcome]:
    """Rebase the change requests reachable from root, depth first.

    Each head is rebased onto its base's current tip and reconciled with its
    remote before its own dependents are visited, so dependents always build
    on the head's final position for this pass. A failed rebase is aborted and
    its whole subtree is skipped.

    Raises:
        UnsupportedRebaseOperationError: If a replay plan is not linear
    """
    git = ctx.git
    repo_root = ctx.cwd

    outcomes: list[RebaseOutcome] = []
    visited = {root}
    stack = list(reversed(graph.get(root, [])))
    while stack:
        change_request = stack.pop()
        head = change_request.head_branch
        base = change_request.base_branch
        if head in visited:
            logger.warning("Skipping #%d: %s was already visited", change_request.number, head)
            continue
        visited.add(head)

        ensure_linear_replay(ctx, change_request)
        result = git.rebase(repo_root, head, base)
        if not result.succeeded:
            git.abort_rebase(repo_root)
            logger.error(
                "Failed to rebase %s onto %s, leaving it unchanged: %s",
                head,
                base,
                result.message or "unknown error",
            )
            outcomes.append(RebaseOutcome(change_request, result.status, published=False))
            continue

        if result.status is RebaseStatus.REBASED:
            logger.info("Rebased %s onto %s", head, base)
        else:
            logger.debug("%s is already up to date with %s", head, base)

        published = reconcile(ctx, head)
        outcomes.append(RebaseOutcome(change_request, result.status, published=published))
        stack.extend(reversed(graph.get(head, [])))

    return outcomes

"""Decide which branches may be rewritten.

A branch is safe only when its local tip and its remote-tracking tip are the
same commit. Anything ahead means unpushed local work a rebase could mangle;
anything behind means the remote moved and the branch is about to change
underneath us.
"""

import logging
from dataclasses import dataclass

from rebaser.core.context import RebaserContext
from rebaser.core.github.types import ChangeRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BranchState:
    """Local branch compared with its remote-tracking ref.

    ``reason`` is set when the comparison could not be made at all, in which
    case ``ahead`` and ``behind`` are None.
    """

    branch: str
    upstream: str | None
    ahead: int | None
    behind: int | None
    reason: str | None = None

    @property
    def is_safe(self) -> bool:
        return self.reason is None and self.ahead == 0 and self.behind == 0


def describe_branch_state(ctx: RebaserContext, branch: str) -> BranchState:
    git = ctx.git
    repo_root = ctx.cwd

    if git.get_branch_head(repo_root, branch) is None:
        return BranchState(branch, None, None, None, reason="no local branch")

    upstream = git.get_upstream(repo_root, branch)
    if upstream is None:
        return BranchState(branch, None, None, None, reason="no upstream configured")

    if git.get_branch_head(repo_root, upstream) is None:
        return BranchState(branch, upstream, None, None, reason=f"{upstream} does not exist")

    ahead, behind = git.get_ahead_behind(repo_root, branch, upstream)
    return BranchState(branch, upstream, ahead, behind)


def is_safe_branch(ctx: RebaserContext, branch: str) -> bool:
    state = describe_branch_state(ctx, branch)
    if state.reason is not None:
        logger.info("Branch %s is not safe to rewrite: %s", branch, state.reason)
        return False

    logger.debug(
        "Branch %s vs %s: %d ahead, %d behind", branch, state.upstream, state.ahead, state.behind
    )
    return state.is_safe


def is_safe_change_request(ctx: RebaserContext, change_request: ChangeRequest) -> bool:
    """Both endpoints must be safe: the base is checked first, then the head."""
    for branch in (change_request.base_branch, change_request.head_branch):
        if not is_safe_branch(ctx, branch):
            logger.info(
                "Skipping #%d %s: %s differs from its remote",
                change_request.number,
                change_request.label,
                branch,
            )
            return False
    return True


def filter_safe_change_requests(
    ctx: RebaserContext, change_requests: list[ChangeRequest]
) -> list[ChangeRequest]:
    return [cr for cr in change_requests if is_safe_change_request(ctx, cr)]

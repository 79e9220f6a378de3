"""Publish a rebased branch, or yield to the remote when it moved."""

import logging

from rebaser.core.context import RebaserContext
from rebaser.core.git.abc import split_remote_ref

logger = logging.getLogger(__name__)


def reconcile(ctx: RebaserContext, branch: str) -> bool:
    """Make the remote branch and the local branch agree.

    When the local tip differs from the remote-tracking tip, the local tip is
    pushed with a lease on the tracking tip. If the remote has moved since it
    was last fetched the push is rejected, and the local branch is reset to
    the remote's current tip instead: local rewrites are discarded, remote
    work never is.

    Returns:
        True iff the remote branch was updated
    """
    git = ctx.git
    repo_root = ctx.cwd

    upstream = git.get_upstream(repo_root, branch)
    if upstream is None:
        logger.info("Not publishing %s: no upstream configured", branch)
        return False

    remote, remote_branch = split_remote_ref(upstream)
    if remote_branch != branch:
        logger.info("Not publishing %s: it tracks differently named %s", branch, upstream)
        return False

    local_sha = git.get_branch_head(repo_root, branch)
    expected_sha = git.get_branch_head(repo_root, upstream)
    if expected_sha is None:
        logger.info("Not publishing %s: %s does not exist", branch, upstream)
        return False
    if local_sha == expected_sha:
        logger.debug("%s matches %s at %s; nothing to publish", branch, upstream, local_sha)
        return False

    if git.push_with_lease(repo_root, remote, branch, expected_sha):
        logger.info("Published %s: %s -> %s", branch, expected_sha, local_sha)
        return True

    git.fetch_branch(repo_root, remote, branch)
    remote_sha = git.get_branch_head(repo_root, upstream)
    if remote_sha is None:
        logger.error(
            "Publishing %s was rejected and %s no longer exists; leaving %s at %s",
            branch,
            upstream,
            branch,
            local_sha,
        )
        return False

    logger.error(
        "Publishing %s was rejected because %s moved to %s; resetting %s to it",
        branch,
        upstream,
        remote_sha,
        branch,
    )
    git.reset_hard(repo_root, branch, remote_sha)
    return False

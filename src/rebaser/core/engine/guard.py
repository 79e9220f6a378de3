"""Keep the user's checkout intact around a run."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from rebaser.core.context import RebaserContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositorySnapshot:
    """Checkout state recorded before any rewriting starts.

    Exactly one of ``branch`` and ``detached_commit`` is set, except in a
    repository without commits where both are None.
    """

    branch: str | None
    detached_commit: str | None
    stashed: bool


@contextmanager
def preserve_checkout(ctx: RebaserContext) -> Iterator[RepositorySnapshot]:
    """Stash uncommitted work and restore the original checkout on exit.

    On every exit path, including exceptions raised by the body, the original
    branch (or detached commit) is force-checked-out first and the stash is
    popped afterwards, so the stashed changes are re-applied on the branch
    they came from. If the checkout cannot be restored, the stash is left in
    place and reported.

    Example:
        with preserve_checkout(ctx):
            run_until_converged(ctx, change_requests, "main")
    """
    git = ctx.git
    repo_root = ctx.cwd

    branch = git.get_current_branch(repo_root)
    detached_commit = git.get_branch_head(repo_root, "HEAD") if branch is None else None
    stashed = git.stash_push(repo_root)
    if stashed:
        logger.info("Stashed uncommitted changes")
    snapshot = RepositorySnapshot(branch=branch, detached_commit=detached_commit, stashed=stashed)
    logger.debug("Recorded checkout: %s", snapshot)

    try:
        yield snapshot
    finally:
        try:
            # An exception raised mid-rebase leaves the rebase in progress
            git.abort_rebase(repo_root)
            if branch is not None:
                git.checkout_branch(repo_root, branch, force=True)
            elif detached_commit is not None:
                git.checkout_detached(repo_root, detached_commit)
        except RuntimeError:
            if stashed:
                logger.error(
                    "Could not restore the checkout of %s; uncommitted changes are still "
                    "in the stash (git stash list)",
                    branch or detached_commit,
                )
            raise
        logger.debug("Restored checkout to %s", branch or detached_commit)
        if stashed:
            git.stash_pop(repo_root)
            logger.info("Restored stashed changes")

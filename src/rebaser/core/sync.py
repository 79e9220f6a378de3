"""End-to-end sync of a user's stack of pull requests.

Discovery (repository, remote, hosting repository, default branch, open pull
requests) is shared by sync_stack, which rewrites branches, and plan_stack,
which only reports what a sync would look at.
"""

import dataclasses
import logging
from dataclasses import dataclass

from rebaser.core.config import DEFAULT_MAX_PASSES
from rebaser.core.context import RebaserContext
from rebaser.core.engine.convergence import ConvergenceReport, run_until_converged
from rebaser.core.engine.graph import build_graph, traversal_order
from rebaser.core.engine.guard import preserve_checkout
from rebaser.core.engine.safety import BranchState, describe_branch_state
from rebaser.core.errors import NotInRepositoryError
from rebaser.core.github.types import ChangeRequest, GitHubRepo
from rebaser.core.remotes import resolve_hosting_repo, resolve_primary_remote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackDiscovery:
    """Everything learned about the stack before touching any branch."""

    repo: GitHubRepo
    remote: str
    default_branch: str
    change_requests: list[ChangeRequest]


@dataclass(frozen=True)
class SyncReport:
    discovery: StackDiscovery
    default_branch_updated: bool
    convergence: ConvergenceReport


@dataclass(frozen=True)
class StackPlan:
    """Read-only view of the stack.

    Attributes:
        discovery: Repository and pull requests found
        branch_states: State of every branch named by a pull request, keyed by name
        order: Pull requests a sync would rebase, in the order it visits them
    """

    discovery: StackDiscovery
    branch_states: dict[str, BranchState]
    order: list[ChangeRequest]


def _enter_repository(ctx: RebaserContext) -> RebaserContext:
    repo_root = ctx.git.get_repository_root(ctx.cwd)
    if repo_root is None:
        raise NotInRepositoryError(ctx.cwd)
    logger.debug("Repository root: %s", repo_root)
    return dataclasses.replace(ctx, cwd=repo_root)


def discover_stack(ctx: RebaserContext, *, fetch: bool, remote: str | None) -> StackDiscovery:
    """Resolve the primary remote and ask the hosting API about the stack.

    ``ctx.cwd`` must be the repository root.
    """
    git = ctx.git
    repo_root = ctx.cwd

    primary_remote = resolve_primary_remote(git, repo_root, remote)
    logger.debug("Primary remote: %s", primary_remote)

    if fetch:
        logger.info("Fetching all remotes")
        git.fetch_all(repo_root)

    repo = resolve_hosting_repo(git, repo_root, primary_remote)
    default_branch = ctx.github.get_default_branch(repo)
    change_requests = ctx.github.list_my_open_change_requests(repo)

    logger.info(
        "Found %d open pull requests in %s/%s (default branch %s)",
        len(change_requests),
        repo.host,
        repo.full_name,
        default_branch,
    )
    for change_request in change_requests:
        logger.info("  #%d %s", change_request.number, change_request.label)

    return StackDiscovery(
        repo=repo,
        remote=primary_remote,
        default_branch=default_branch,
        change_requests=change_requests,
    )


def update_default_branch(ctx: RebaserContext, default_branch: str) -> bool:
    """Fast-forward the default branch to its remote-tracking ref.

    A default branch that cannot be fast-forwarded is left untouched; it then
    counts as unsafe and nothing based on it is rebased.

    Returns:
        True if the branch moved
    """
    git = ctx.git
    repo_root = ctx.cwd

    local_sha = git.get_branch_head(repo_root, default_branch)
    if local_sha is None:
        logger.warning("Default branch %s does not exist locally", default_branch)
        return False

    upstream = git.get_upstream(repo_root, default_branch)
    if upstream is None:
        logger.warning("Default branch %s has no upstream; not updating it", default_branch)
        return False

    upstream_sha = git.get_branch_head(repo_root, upstream)
    if upstream_sha is None or upstream_sha == local_sha:
        logger.debug("Default branch %s is up to date with %s", default_branch, upstream)
        return False

    if not git.fast_forward_branch(repo_root, default_branch, upstream):
        logger.warning(
            "Default branch %s has diverged from %s; leaving it untouched",
            default_branch,
            upstream,
        )
        return False

    logger.info("Fast-forwarded %s to %s (%s)", default_branch, upstream, upstream_sha)
    return True


def sync_stack(
    ctx: RebaserContext,
    *,
    fetch: bool = True,
    remote: str | None = None,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> SyncReport:
    """Rebase and publish every safe pull request until the stack is current.

    Raises:
        NotInRepositoryError: If ctx.cwd is not inside a git repository
        AmbiguousRemoteError: If the primary remote cannot be determined
        RemoteUrlError: If the primary remote's URL names no repository
        UnsupportedRebaseOperationError: If a replay plan is not linear
        ConvergenceLimitError: If the stack is still changing after max_passes
    """
    session = _enter_repository(ctx)
    discovery = discover_stack(session, fetch=fetch, remote=remote)

    with preserve_checkout(session):
        default_branch_updated = update_default_branch(session, discovery.default_branch)
        convergence = run_until_converged(
            session,
            discovery.change_requests,
            discovery.default_branch,
            max_passes=max_passes,
        )

    logger.info(
        "Stack converged after %d passes; published: %s",
        convergence.pass_count,
        ", ".join(convergence.published_branches) or "none",
    )
    return SyncReport(
        discovery=discovery,
        default_branch_updated=default_branch_updated,
        convergence=convergence,
    )


def plan_stack(ctx: RebaserContext, *, fetch: bool = True, remote: str | None = None) -> StackPlan:
    """Describe the stack without rewriting anything.

    The default branch is treated as safe when it is only behind its remote,
    since a sync fast-forwards it before rebasing.
    """
    session = _enter_repository(ctx)
    discovery = discover_stack(session, fetch=fetch, remote=remote)

    branch_states: dict[str, BranchState] = {}
    names = [discovery.default_branch]
    for change_request in discovery.change_requests:
        names.extend([change_request.base_branch, change_request.head_branch])
    for name in names:
        if name not in branch_states:
            branch_states[name] = describe_branch_state(session, name)

    def will_be_safe(branch: str) -> bool:
        state = branch_states[branch]
        if branch == discovery.default_branch:
            return state.reason is None and state.ahead == 0
        return state.is_safe

    candidates = [
        change_request
        for change_request in discovery.change_requests
        if will_be_safe(change_request.base_branch) and will_be_safe(change_request.head_branch)
    ]
    order = traversal_order(build_graph(candidates), discovery.default_branch)
    return StackPlan(discovery=discovery, branch_states=branch_states, order=order)

"""No-op Git wrapper for dry-run mode.

This module provides a Git wrapper that prevents execution of destructive
operations while delegating read-only operations to the wrapped implementation.
"""

from pathlib import Path

from rebaser.cli.output import user_output
from rebaser.core.git.abc import Git, RebaseResult, RebaseStatus, RebaseStep


class DryRunGit(Git):
    """Wrapper that prints destructive operations instead of running them.

    Fetches are delegated: they only move remote-tracking refs and the run
    needs current remote state to report anything meaningful. Every write to
    local branches, the work tree, the stash or a remote is printed and skipped.

    A fast-forward that would succeed is remembered, and later reads of that
    branch resolve to the target commit, so the rest of the run sees the
    default branch where a real run would have moved it.

    Usage:
        real_ops = RealGit()
        dry_run_ops = DryRunGit(real_ops)

        # Prints "[DRY RUN] Would rebase ..." and reports nothing changed
        dry_run_ops.rebase(repo_root, "feat", "main")
    """

    def __init__(self, wrapped: Git) -> None:
        """Create a dry-run wrapper around a Git implementation.

        Args:
            wrapped: The Git implementation to wrap (usually RealGit or FakeGit)
        """
        self._wrapped = wrapped
        self._simulated_heads: dict[str, str] = {}

    def _ref(self, ref: str) -> str:
        return self._simulated_heads.get(ref, ref)

    # Read-only operations: delegate to wrapped implementation

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._wrapped.get_repository_root(cwd)

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._wrapped.get_current_branch(cwd)

    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        if ref in self._simulated_heads:
            return self._simulated_heads[ref]
        return self._wrapped.get_branch_head(repo_root, ref)

    def get_upstream(self, repo_root: Path, branch: str) -> str | None:
        return self._wrapped.get_upstream(repo_root, branch)

    def get_ahead_behind(self, repo_root: Path, ref: str, other: str) -> tuple[int, int]:
        return self._wrapped.get_ahead_behind(repo_root, self._ref(ref), self._ref(other))

    def list_remotes(self, repo_root: Path) -> list[str]:
        return self._wrapped.list_remotes(repo_root)

    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        return self._wrapped.get_remote_url(repo_root, remote)

    def fetch_all(self, repo_root: Path) -> None:
        self._wrapped.fetch_all(repo_root)

    def fetch_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        self._wrapped.fetch_branch(repo_root, remote, branch)

    def list_rebase_steps(self, repo_root: Path, head: str, base: str) -> list[RebaseStep]:
        return self._wrapped.list_rebase_steps(repo_root, self._ref(head), self._ref(base))

    # Destructive operations: print what would happen

    def fast_forward_branch(self, repo_root: Path, branch: str, target: str) -> bool:
        target_sha = self.get_branch_head(repo_root, target)
        if target_sha is None or self.get_branch_head(repo_root, branch) is None:
            return False
        ahead, _ = self.get_ahead_behind(repo_root, branch, target_sha)
        if ahead > 0:
            return False
        user_output(f"[DRY RUN] Would fast-forward {branch} to {target}")
        self._simulated_heads[branch] = target_sha
        return True

    def rebase(self, repo_root: Path, head: str, base: str) -> RebaseResult:
        user_output(f"[DRY RUN] Would rebase {head} onto {base}")
        return RebaseResult(status=RebaseStatus.UP_TO_DATE)

    def abort_rebase(self, repo_root: Path) -> None:
        return None

    def push_with_lease(self, repo_root: Path, remote: str, branch: str, expected: str) -> bool:
        user_output(f"[DRY RUN] Would push {branch} to {remote} (lease {expected[:12]})")
        return False

    def reset_hard(self, repo_root: Path, branch: str, target: str) -> None:
        user_output(f"[DRY RUN] Would reset {branch} to {target}")

    def checkout_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        return None

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        return None

    def stash_push(self, repo_root: Path) -> bool:
        return False

    def stash_pop(self, repo_root: Path) -> None:
        return None

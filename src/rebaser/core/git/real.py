"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from rebaser.core.git.abc import (
    Git,
    RebaseResult,
    RebaseStatus,
    RebaseStep,
    classify_commit,
)
from rebaser.core.subprocess import run_subprocess_with_context

STASH_MESSAGE = "rebaser: auto-stash before sync"


def _run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )


# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the work tree."""
        result = _run_git(["rev-parse", "--show-toplevel"], cwd)
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = _run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd)
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        """Resolve a short ref name to a commit SHA."""
        result = _run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], repo_root)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def get_upstream(self, repo_root: Path, branch: str) -> str | None:
        """Get the remote-tracking ref a local branch tracks."""
        result = _run_git(
            ["rev-parse", "--abbrev-ref", "--verify", "--quiet", f"{branch}@{{upstream}}"],
            repo_root,
        )
        if result.returncode != 0:
            return None
        upstream = result.stdout.strip()
        return upstream or None

    def get_ahead_behind(self, repo_root: Path, ref: str, other: str) -> tuple[int, int]:
        """Count commits by which two refs differ."""
        result = run_subprocess_with_context(
            ["git", "rev-list", "--left-right", "--count", f"{ref}...{other}"],
            operation_context=f"compare '{ref}' with '{other}'",
            cwd=repo_root,
        )

        parts = result.stdout.strip().split()
        if len(parts) != 2:
            raise RuntimeError(f"Unexpected rev-list output comparing {ref} and {other}: {parts}")
        return int(parts[0]), int(parts[1])

    def list_remotes(self, repo_root: Path) -> list[str]:
        """List configured remote names."""
        result = run_subprocess_with_context(
            ["git", "remote"],
            operation_context="list remotes",
            cwd=repo_root,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        """Get the fetch URL of a remote."""
        result = _run_git(["remote", "get-url", remote], repo_root)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def fetch_all(self, repo_root: Path) -> None:
        """Fetch every configured remote."""
        run_subprocess_with_context(
            ["git", "fetch", "--all"],
            operation_context="fetch all remotes",
            cwd=repo_root,
        )

    def fetch_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Refresh the remote-tracking ref for one branch."""
        refspec = f"+refs/heads/{branch}:refs/remotes/{remote}/{branch}"
        run_subprocess_with_context(
            ["git", "fetch", remote, refspec],
            operation_context=f"fetch branch '{branch}' from remote '{remote}'",
            cwd=repo_root,
        )

    def fast_forward_branch(self, repo_root: Path, branch: str, target: str) -> bool:
        """Move a local branch forward to target if that is a fast-forward."""
        branch_sha = self.get_branch_head(repo_root, branch)
        target_sha = self.get_branch_head(repo_root, target)
        if branch_sha is None or target_sha is None:
            return False
        if branch_sha == target_sha:
            return True

        ancestor_check = _run_git(
            ["merge-base", "--is-ancestor", branch_sha, target_sha], repo_root
        )
        if ancestor_check.returncode != 0:
            return False

        if self.get_current_branch(repo_root) == branch:
            run_subprocess_with_context(
                ["git", "merge", "--ff-only", target_sha],
                operation_context=f"fast-forward checked-out branch '{branch}' to '{target}'",
                cwd=repo_root,
            )
        else:
            run_subprocess_with_context(
                ["git", "update-ref", f"refs/heads/{branch}", target_sha, branch_sha],
                operation_context=f"fast-forward branch '{branch}' to '{target}'",
                cwd=repo_root,
            )
        return True

    def list_rebase_steps(self, repo_root: Path, head: str, base: str) -> list[RebaseStep]:
        """List the commits a rebase of head onto base would replay."""
        result = run_subprocess_with_context(
            ["git", "log", "--reverse", "--format=%H%x00%P%x00%s", f"{base}..{head}"],
            operation_context=f"list commits of '{head}' not in '{base}'",
            cwd=repo_root,
        )

        autosquash = self._autosquash_enabled(repo_root)
        steps: list[RebaseStep] = []
        for line in result.stdout.splitlines():
            if not line:
                continue
            sha, parents, subject = line.split("\x00", 2)
            kind = classify_commit(subject, len(parents.split()), autosquash=autosquash)
            steps.append(RebaseStep(kind=kind, commit=sha, subject=subject))
        return steps

    def rebase(self, repo_root: Path, head: str, base: str) -> RebaseResult:
        """Replay head onto base with `git rebase --no-autosquash <base> <head>`."""
        before = self.get_branch_head(repo_root, head)

        result = _run_git(["rebase", "--no-autosquash", base, head], repo_root)
        if result.returncode != 0:
            message = (result.stderr.strip() or result.stdout.strip()).splitlines()
            return RebaseResult(
                status=RebaseStatus.FAILED,
                message=message[-1] if message else f"exit code {result.returncode}",
            )

        after = self.get_branch_head(repo_root, head)
        if after == before:
            return RebaseResult(status=RebaseStatus.UP_TO_DATE)
        return RebaseResult(status=RebaseStatus.REBASED)

    def abort_rebase(self, repo_root: Path) -> None:
        """Abort an in-progress rebase."""
        if not self._rebase_in_progress(repo_root):
            return
        run_subprocess_with_context(
            ["git", "rebase", "--abort"],
            operation_context="abort rebase",
            cwd=repo_root,
        )

    def _autosquash_enabled(self, repo_root: Path) -> bool:
        # Exit status 1 means the key is unset
        result = _run_git(["config", "--type=bool", "--get", "rebase.autoSquash"], repo_root)
        return result.returncode == 0 and result.stdout.strip() == "true"

    def _rebase_in_progress(self, repo_root: Path) -> bool:
        for state_dir in ("rebase-merge", "rebase-apply"):
            result = _run_git(["rev-parse", "--git-path", state_dir], repo_root)
            if result.returncode != 0:
                continue
            path = Path(result.stdout.strip())
            if not path.is_absolute():
                path = repo_root / path
            if path.exists():
                return True
        return False

    def push_with_lease(self, repo_root: Path, remote: str, branch: str, expected: str) -> bool:
        """Push branch only if the remote still points at expected."""
        cmd = [
            "git",
            "push",
            "--porcelain",
            f"--force-with-lease=refs/heads/{branch}:{expected}",
            remote,
            f"refs/heads/{branch}:refs/heads/{branch}",
        ]
        result = _run_git(cmd[1:], repo_root)
        if result.returncode == 0:
            return True

        # Porcelain output flags each rejected ref with a leading "!"
        rejected = any(line.startswith("!") for line in result.stdout.splitlines())
        if rejected:
            return False

        error_msg = f"Failed to push branch '{branch}' to remote '{remote}'"
        error_msg += f"\nCommand: {' '.join(cmd)}"
        error_msg += f"\nExit code: {result.returncode}"
        if result.stderr.strip():
            error_msg += f"\nstderr: {result.stderr.strip()}"
        raise RuntimeError(error_msg)

    def reset_hard(self, repo_root: Path, branch: str, target: str) -> None:
        """Point branch at target, discarding local commits."""
        if self.get_current_branch(repo_root) == branch:
            cmd = ["git", "reset", "--hard", target]
        else:
            cmd = ["git", "branch", "--force", branch, target]
        run_subprocess_with_context(
            cmd,
            operation_context=f"reset branch '{branch}' to '{target}'",
            cwd=repo_root,
        )

    def checkout_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Checkout a branch in the given directory."""
        cmd = ["git", "checkout"]
        if force:
            cmd.append("--force")
        cmd.append(branch)
        run_subprocess_with_context(
            cmd,
            operation_context=f"checkout branch '{branch}'",
            cwd=cwd,
        )

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout a detached HEAD at the given ref."""
        run_subprocess_with_context(
            ["git", "checkout", "--force", "--detach", ref],
            operation_context=f"checkout detached HEAD at '{ref}'",
            cwd=cwd,
        )

    def stash_push(self, repo_root: Path) -> bool:
        """Stash uncommitted changes, including untracked files."""
        before = self.get_branch_head(repo_root, "refs/stash")
        run_subprocess_with_context(
            ["git", "stash", "push", "--include-untracked", "--message", STASH_MESSAGE],
            operation_context="stash uncommitted changes",
            cwd=repo_root,
        )
        after = self.get_branch_head(repo_root, "refs/stash")
        return after is not None and after != before

    def stash_pop(self, repo_root: Path) -> None:
        """Re-apply and drop the most recent stash entry."""
        run_subprocess_with_context(
            ["git", "stash", "pop"],
            operation_context="restore stashed changes",
            cwd=repo_root,
        )

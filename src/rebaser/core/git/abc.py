"""High-level git operations interface.

This module provides a clean abstraction over the git operations the rebase
engine needs, making the engine testable against an in-memory repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory commit graph for tests
- DryRunGit: Wrapper that delegates reads and skips writes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Replay step kinds. Only "pick" is a plain linear replay.
PICK = "pick"
REWORD = "reword"
EDIT = "edit"
SQUASH = "squash"
FIXUP = "fixup"
EXEC = "exec"

UNSUPPORTED_STEP_KINDS = frozenset({REWORD, EDIT, SQUASH, FIXUP, EXEC})


@dataclass(frozen=True)
class RebaseStep:
    """One commit in a rebase replay plan."""

    kind: str
    commit: str
    subject: str


class RebaseStatus(Enum):
    REBASED = "rebased"
    UP_TO_DATE = "up_to_date"
    FAILED = "failed"


@dataclass(frozen=True)
class RebaseResult:
    """Outcome of replaying a head branch onto a base.

    A FAILED result leaves the repository mid-rebase; callers must invoke
    Git.abort_rebase() before running any other operation.
    """

    status: RebaseStatus
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is not RebaseStatus.FAILED


def classify_commit(subject: str, parent_count: int, *, autosquash: bool) -> str:
    """Map a commit to the replay step kind a rebase would use for it.

    Merge commits cannot be replayed linearly. Autosquash markers are folded
    into earlier commits only when rebase.autoSquash is enabled; otherwise
    such commits are picked like any other.
    """
    if parent_count > 1:
        return EDIT
    if not autosquash:
        return PICK
    if subject.startswith("fixup! ") or subject.startswith("amend! "):
        return FIXUP
    if subject.startswith("squash! "):
        return SQUASH
    return PICK


def split_remote_ref(remote_ref: str) -> tuple[str, str]:
    """Split 'origin/feat/a' into ('origin', 'feat/a')."""
    remote, _, branch = remote_ref.partition("/")
    return remote, branch


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the work tree containing cwd.

        Returns:
            Repository root, or None if cwd is not inside a git repository
        """
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None for a detached HEAD."""
        ...

    @abstractmethod
    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        """Resolve a short ref name to a commit SHA.

        Args:
            repo_root: Path to the repository root
            ref: Local branch ('feat'), remote-tracking ref ('origin/feat') or 'HEAD'

        Returns:
            Commit SHA, or None if the ref does not exist
        """
        ...

    @abstractmethod
    def get_upstream(self, repo_root: Path, branch: str) -> str | None:
        """Get the remote-tracking ref a local branch tracks.

        Returns:
            Remote-qualified ref name (e.g., 'origin/feat'), or None if the
            branch has no upstream configured
        """
        ...

    @abstractmethod
    def get_ahead_behind(self, repo_root: Path, ref: str, other: str) -> tuple[int, int]:
        """Count commits by which two refs differ.

        Args:
            repo_root: Path to the repository root
            ref: The ref being measured
            other: The ref it is compared against

        Returns:
            Tuple of (ahead, behind): commits reachable from ref but not other,
            and commits reachable from other but not ref
        """
        ...

    @abstractmethod
    def list_remotes(self, repo_root: Path) -> list[str]:
        """List configured remote names."""
        ...

    @abstractmethod
    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        """Get the fetch URL of a remote, or None if the remote does not exist."""
        ...

    @abstractmethod
    def fetch_all(self, repo_root: Path) -> None:
        """Fetch every configured remote."""
        ...

    @abstractmethod
    def fetch_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Refresh the remote-tracking ref for one branch.

        Args:
            repo_root: Path to the repository root
            remote: Remote name (e.g., "origin")
            branch: Branch name on the remote
        """
        ...

    @abstractmethod
    def fast_forward_branch(self, repo_root: Path, branch: str, target: str) -> bool:
        """Move a local branch forward to target if that is a fast-forward.

        Returns:
            True if the branch now points at target (including when it already
            did), False if the move would not be a fast-forward
        """
        ...

    @abstractmethod
    def list_rebase_steps(self, repo_root: Path, head: str, base: str) -> list[RebaseStep]:
        """List the commits a rebase of head onto base would replay, oldest first."""
        ...

    @abstractmethod
    def rebase(self, repo_root: Path, head: str, base: str) -> RebaseResult:
        """Replay the commits of head that are not in base on top of base.

        Commits whose changes are already present in base are skipped. On
        failure the repository is left mid-rebase and abort_rebase() must be
        called.
        """
        ...

    @abstractmethod
    def abort_rebase(self, repo_root: Path) -> None:
        """Abort an in-progress rebase, restoring the pre-rebase state."""
        ...

    @abstractmethod
    def push_with_lease(self, repo_root: Path, remote: str, branch: str, expected: str) -> bool:
        """Update a remote branch to the local tip if it still points at expected.

        Args:
            repo_root: Path to the repository root
            remote: Remote name
            branch: Branch name (same name locally and on the remote)
            expected: SHA the remote branch must currently point at

        Returns:
            True if the remote accepted the update, False if it was rejected
            because the remote branch moved
        """
        ...

    @abstractmethod
    def reset_hard(self, repo_root: Path, branch: str, target: str) -> None:
        """Point branch at target, discarding its local commits and work tree changes."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Checkout a branch in the given directory.

        Args:
            cwd: Working directory
            branch: Branch to check out
            force: Discard local modifications that would block the checkout
        """
        ...

    @abstractmethod
    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout a detached HEAD at the given ref."""
        ...

    @abstractmethod
    def stash_push(self, repo_root: Path) -> bool:
        """Stash uncommitted changes, including untracked files.

        Returns:
            True if a stash entry was created, False if there was nothing to stash
        """
        ...

    @abstractmethod
    def stash_pop(self, repo_root: Path) -> None:
        """Re-apply and drop the most recent stash entry."""
        ...

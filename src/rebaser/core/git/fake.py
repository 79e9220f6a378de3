"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

import hashlib
from pathlib import Path

from rebaser.core.git.abc import (
    Git,
    RebaseResult,
    RebaseStatus,
    RebaseStep,
    classify_commit,
)


class FakeGit(Git):
    """In-memory commit graph with a simulated remote side.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.

    Three sets of refs are modelled:
    - local_branches: refs/heads/* in the local repository
    - remote_branches: remote-tracking refs ("origin/feat") as last fetched
    - server_branches: what the remote actually holds right now; defaults to
      remote_branches. A difference between the two models someone pushing
      to the remote after our last fetch.

    Rebased commits get deterministic SHAs derived from the patch they carry
    and their new parent, so replaying the same patch onto the same base twice
    yields the same commit, like an idempotent real rebase would converge.

    Examples:
        >>> git = FakeGit(
        ...     commits={"m1": [], "a1": ["m1"]},
        ...     local_branches={"main": "m1", "feat": "a1"},
        ...     remote_branches={"origin/main": "m1", "origin/feat": "a1"},
        ...     current_branch="main",
        ... )
        >>> git.get_ahead_behind(Path("/fake/repo"), "feat", "main")
        (1, 0)
    """

    def __init__(
        self,
        *,
        repository_root: Path | None = None,
        in_repository: bool = True,
        commits: dict[str, list[str]] | None = None,
        subjects: dict[str, str] | None = None,
        local_branches: dict[str, str] | None = None,
        remote_branches: dict[str, str] | None = None,
        server_branches: dict[str, str] | None = None,
        upstreams: dict[str, str] | None = None,
        remotes: dict[str, str] | None = None,
        current_branch: str | None = None,
        detached_head: str | None = None,
        uncommitted_changes: bool = False,
        conflicting_branches: set[str] | None = None,
        autosquash: bool = False,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repository_root: Root returned by get_repository_root (default /fake/repo)
            in_repository: When False, get_repository_root reports no repository
            commits: Mapping of commit SHA -> parent SHAs
            subjects: Mapping of commit SHA -> subject line (default: the SHA)
            local_branches: Mapping of local branch name -> SHA
            remote_branches: Mapping of remote-tracking ref ("origin/x") -> SHA
            server_branches: Actual remote state, keyed like remote_branches
            upstreams: Mapping of local branch -> tracking ref. When None, each
                local branch tracks "<remote>/<branch>" if that ref exists
            remotes: Mapping of remote name -> URL
            current_branch: Checked-out branch
            detached_head: SHA of a detached HEAD (when current_branch is None)
            uncommitted_changes: Whether the work tree has pending modifications
            conflicting_branches: Head branches whose rebase stops on a conflict
            autosquash: Whether rebase.autoSquash is enabled, making fixup!,
                amend! and squash! commits non-pick steps
        """
        self._repository_root = repository_root or Path("/fake/repo")
        self._in_repository = in_repository
        self._commits: dict[str, tuple[str, ...]] = {
            sha: tuple(parents) for sha, parents in (commits or {}).items()
        }
        self._subjects = dict(subjects or {})
        self._patch_ids: dict[str, str] = {sha: sha for sha in self._commits}
        self._local = dict(local_branches or {})
        self._tracking = dict(remote_branches or {})
        self._server = dict(server_branches if server_branches is not None else self._tracking)
        self._remotes = dict(
            remotes if remotes is not None else {"origin": "git@github.com:owner/repo.git"}
        )
        if upstreams is None:
            upstreams = {}
            for branch in self._local:
                for remote in self._remotes:
                    if f"{remote}/{branch}" in self._tracking:
                        upstreams[branch] = f"{remote}/{branch}"
                        break
        self._upstreams = dict(upstreams)
        self._current_branch = current_branch
        self._detached_head = detached_head
        self._uncommitted_changes = uncommitted_changes
        self._conflicting_branches = set(conflicting_branches or ())
        self._autosquash = autosquash
        self._rebase_in_progress: str | None = None
        self._stash_depth = 0

        self._fetch_calls: list[tuple[str, str] | None] = []
        self._rebase_calls: list[tuple[str, str]] = []
        self._aborted_rebases: list[str] = []
        self._push_calls: list[tuple[str, str, str, bool]] = []
        self._reset_calls: list[tuple[str, str]] = []
        self._checkout_calls: list[str] = []
        self._fast_forward_calls: list[tuple[str, str]] = []

    # ------------------------------------------------------------------
    # Read-only access for test assertions
    # ------------------------------------------------------------------

    @property
    def local_branches(self) -> dict[str, str]:
        return dict(self._local)

    @property
    def remote_branches(self) -> dict[str, str]:
        """Remote-tracking refs as currently known locally."""
        return dict(self._tracking)

    @property
    def server_branches(self) -> dict[str, str]:
        """What the simulated remote holds."""
        return dict(self._server)

    @property
    def has_uncommitted_changes(self) -> bool:
        return self._uncommitted_changes

    @property
    def stash_depth(self) -> int:
        return self._stash_depth

    @property
    def fetch_calls(self) -> list[tuple[str, str] | None]:
        """Fetches performed: (remote, branch) for single-branch fetches, None for fetch_all."""
        return list(self._fetch_calls)

    @property
    def rebase_calls(self) -> list[tuple[str, str]]:
        """List of (head, base) tuples passed to rebase()."""
        return list(self._rebase_calls)

    @property
    def aborted_rebases(self) -> list[str]:
        """Head branches whose in-progress rebase was aborted."""
        return list(self._aborted_rebases)

    @property
    def push_calls(self) -> list[tuple[str, str, str, bool]]:
        """List of (remote, branch, expected_sha, accepted) tuples."""
        return list(self._push_calls)

    @property
    def reset_calls(self) -> list[tuple[str, str]]:
        """List of (branch, target) tuples passed to reset_hard()."""
        return list(self._reset_calls)

    @property
    def checkout_calls(self) -> list[str]:
        return list(self._checkout_calls)

    @property
    def fast_forward_calls(self) -> list[tuple[str, str]]:
        return list(self._fast_forward_calls)

    def contains_patch(self, ref: str, commit: str) -> bool:
        """Whether ref reaches commit or a rebased copy of it."""
        patch_id = self._patch_ids.get(commit, commit)
        tip = self._require_ref(ref)
        return any(self._patch_ids.get(sha, sha) == patch_id for sha in self._ancestors(tip))

    # ------------------------------------------------------------------
    # Commit graph helpers
    # ------------------------------------------------------------------

    def _resolve(self, ref: str) -> str | None:
        if ref == "HEAD":
            if self._current_branch is not None:
                return self._local.get(self._current_branch)
            return self._detached_head
        if ref in self._local:
            return self._local[ref]
        if ref in self._tracking:
            return self._tracking[ref]
        if ref in self._commits:
            return ref
        return None

    def _ancestors(self, sha: str) -> set[str]:
        seen: set[str] = set()
        stack = [sha]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._commits.get(current, ()))
        return seen

    def _oldest_first(self, tip: str, exclude: set[str]) -> list[str]:
        """Commits reachable from tip and not in exclude, parents before children."""
        ordered: list[str] = []
        visited: set[str] = set()
        stack: list[tuple[str, bool]] = [(tip, False)]
        while stack:
            sha, expanded = stack.pop()
            if sha in exclude:
                continue
            if expanded:
                ordered.append(sha)
                continue
            if sha in visited:
                continue
            visited.add(sha)
            stack.append((sha, True))
            for parent in reversed(self._commits.get(sha, ())):
                if parent not in visited:
                    stack.append((parent, False))
        return ordered

    def _require_ref(self, ref: str) -> str:
        sha = self._resolve(ref)
        if sha is None:
            raise RuntimeError(f"Failed to resolve ref '{ref}'")
        return sha

    def _ensure_no_rebase_in_progress(self, operation: str) -> None:
        if self._rebase_in_progress is not None:
            raise RuntimeError(
                f"Cannot {operation}: rebase of '{self._rebase_in_progress}' is in progress"
            )

    def _replay(self, patch_id: str, parent: str, subject: str) -> str:
        sha = hashlib.sha1(f"{patch_id}\x00{parent}".encode()).hexdigest()[:12]
        if sha not in self._commits:
            self._commits[sha] = (parent,)
            self._patch_ids[sha] = patch_id
            self._subjects[sha] = subject
        return sha

    # ------------------------------------------------------------------
    # Git interface
    # ------------------------------------------------------------------

    def get_repository_root(self, cwd: Path) -> Path | None:
        if not self._in_repository:
            return None
        return self._repository_root

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        return self._resolve(ref)

    def get_upstream(self, repo_root: Path, branch: str) -> str | None:
        if branch not in self._local:
            return None
        return self._upstreams.get(branch)

    def get_ahead_behind(self, repo_root: Path, ref: str, other: str) -> tuple[int, int]:
        mine = self._ancestors(self._require_ref(ref))
        theirs = self._ancestors(self._require_ref(other))
        return len(mine - theirs), len(theirs - mine)

    def list_remotes(self, repo_root: Path) -> list[str]:
        return list(self._remotes)

    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        return self._remotes.get(remote)

    def fetch_all(self, repo_root: Path) -> None:
        self._fetch_calls.append(None)
        self._tracking = dict(self._server)

    def fetch_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        self._fetch_calls.append((remote, branch))
        key = f"{remote}/{branch}"
        if key in self._server:
            self._tracking[key] = self._server[key]
        else:
            self._tracking.pop(key, None)

    def fast_forward_branch(self, repo_root: Path, branch: str, target: str) -> bool:
        self._ensure_no_rebase_in_progress("fast-forward")
        self._fast_forward_calls.append((branch, target))
        branch_sha = self._resolve(branch)
        target_sha = self._resolve(target)
        if branch_sha is None or target_sha is None:
            return False
        if branch_sha not in self._ancestors(target_sha):
            return False
        self._local[branch] = target_sha
        return True

    def list_rebase_steps(self, repo_root: Path, head: str, base: str) -> list[RebaseStep]:
        head_sha = self._require_ref(head)
        base_ancestors = self._ancestors(self._require_ref(base))
        return [
            RebaseStep(
                kind=classify_commit(
                    self._subjects.get(sha, sha),
                    len(self._commits.get(sha, ())),
                    autosquash=self._autosquash,
                ),
                commit=sha,
                subject=self._subjects.get(sha, sha),
            )
            for sha in self._oldest_first(head_sha, base_ancestors)
        ]

    def rebase(self, repo_root: Path, head: str, base: str) -> RebaseResult:
        self._ensure_no_rebase_in_progress("rebase")
        self._rebase_calls.append((head, base))

        if self._uncommitted_changes:
            return RebaseResult(
                status=RebaseStatus.FAILED,
                message="cannot rebase: You have unstaged changes.",
            )
        if head not in self._local:
            return RebaseResult(status=RebaseStatus.FAILED, message=f"invalid upstream '{head}'")
        base_sha = self._resolve(base)
        if base_sha is None:
            return RebaseResult(status=RebaseStatus.FAILED, message=f"invalid upstream '{base}'")

        head_sha = self._local[head]
        self._current_branch = head
        self._detached_head = None

        if base_sha in self._ancestors(head_sha):
            return RebaseResult(status=RebaseStatus.UP_TO_DATE)

        if head in self._conflicting_branches:
            self._rebase_in_progress = head
            return RebaseResult(
                status=RebaseStatus.FAILED,
                message=f"CONFLICT (content): Merge conflict while rebasing '{head}'",
            )

        base_ancestors = self._ancestors(base_sha)
        applied = {self._patch_ids.get(sha, sha) for sha in base_ancestors}
        new_tip = base_sha
        for sha in self._oldest_first(head_sha, base_ancestors):
            if len(self._commits.get(sha, ())) > 1:
                continue
            patch_id = self._patch_ids.get(sha, sha)
            if patch_id in applied:
                continue
            new_tip = self._replay(patch_id, new_tip, self._subjects.get(sha, sha))
            applied.add(patch_id)

        self._local[head] = new_tip
        if new_tip == head_sha:
            return RebaseResult(status=RebaseStatus.UP_TO_DATE)
        return RebaseResult(status=RebaseStatus.REBASED)

    def abort_rebase(self, repo_root: Path) -> None:
        if self._rebase_in_progress is None:
            return
        self._aborted_rebases.append(self._rebase_in_progress)
        self._rebase_in_progress = None

    def push_with_lease(self, repo_root: Path, remote: str, branch: str, expected: str) -> bool:
        self._ensure_no_rebase_in_progress("push")
        key = f"{remote}/{branch}"
        local_sha = self._require_ref(branch)
        accepted = self._server.get(key) == expected
        self._push_calls.append((remote, branch, expected, accepted))
        if not accepted:
            return False
        self._server[key] = local_sha
        self._tracking[key] = local_sha
        return True

    def reset_hard(self, repo_root: Path, branch: str, target: str) -> None:
        self._ensure_no_rebase_in_progress("reset")
        self._reset_calls.append((branch, target))
        self._local[branch] = self._require_ref(target)
        if self._current_branch == branch:
            self._uncommitted_changes = False

    def checkout_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        self._ensure_no_rebase_in_progress("checkout")
        if branch not in self._local:
            raise RuntimeError(f"Failed to checkout branch '{branch}': no such branch")
        self._checkout_calls.append(branch)
        self._current_branch = branch
        self._detached_head = None
        if force:
            self._uncommitted_changes = False

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        self._ensure_no_rebase_in_progress("checkout")
        self._checkout_calls.append(ref)
        self._detached_head = self._require_ref(ref)
        self._current_branch = None
        self._uncommitted_changes = False

    def stash_push(self, repo_root: Path) -> bool:
        if not self._uncommitted_changes:
            return False
        self._stash_depth += 1
        self._uncommitted_changes = False
        return True

    def stash_pop(self, repo_root: Path) -> None:
        if self._stash_depth == 0:
            raise RuntimeError("Failed to restore stashed changes: no stash entries found")
        self._stash_depth -= 1
        self._uncommitted_changes = True


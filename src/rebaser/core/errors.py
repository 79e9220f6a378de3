"""Fatal error types.

Recoverable conditions (unsafe branches, rebase conflicts, rejected pushes) are
handled where they occur and only logged. Everything here stops the run.
"""


class RebaserError(Exception):
    """Base class for conditions that terminate a run with a non-zero status."""


class NotInRepositoryError(RebaserError):
    def __init__(self, cwd: object) -> None:
        self.cwd = cwd
        super().__init__(f"Not inside a git repository: {cwd}")


class AmbiguousRemoteError(RebaserError):
    """Raised when the primary remote cannot be determined."""

    def __init__(self, remotes: list[str], reason: str) -> None:
        self.remotes = remotes
        super().__init__(reason)


class RemoteUrlError(RebaserError):
    def __init__(self, remote: str, url: str | None) -> None:
        self.remote = remote
        self.url = url
        super().__init__(f"Cannot determine host/owner/repository from remote '{remote}': {url!r}")


class UnsupportedRebaseOperationError(RebaserError):
    """Raised when a replay plan contains anything other than plain picks.

    The propagation engine only knows how to replay a linear series of
    commits. A reword/edit/squash/fixup/exec step means the stack has a shape
    it cannot rewrite safely.
    """

    def __init__(self, branch: str, kind: str, commit: str) -> None:
        self.branch = branch
        self.kind = kind
        self.commit = commit
        super().__init__(
            f"Unsupported rebase operation '{kind}' for commit {commit[:12]} "
            f"while rebasing branch '{branch}'"
        )


class ConvergenceLimitError(RebaserError):
    def __init__(self, max_passes: int, changed_branches: list[str]) -> None:
        self.max_passes = max_passes
        self.changed_branches = changed_branches
        branches = ", ".join(changed_branches) or "(none)"
        super().__init__(
            f"Stack did not converge after {max_passes} passes; "
            f"still changing in the last pass: {branches}"
        )

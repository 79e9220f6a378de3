"""Fake GitHub operations for testing.

FakeGitHub is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from rebaser.core.github.abc import GitHub
from rebaser.core.github.types import ChangeRequest, GitHubRepo


class FakeGitHub(GitHub):
    """In-memory fake implementation of GitHub operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.
    """

    def __init__(
        self,
        *,
        default_branch: str = "main",
        change_requests: list[ChangeRequest] | None = None,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            default_branch: Value returned by get_default_branch
            change_requests: Pull requests returned by list_my_open_change_requests
        """
        self._default_branch = default_branch
        self._change_requests = list(change_requests or [])
        self._queried_repos: list[GitHubRepo] = []

    @property
    def queried_repos(self) -> list[GitHubRepo]:
        """Repositories passed to any query, for test assertions."""
        return list(self._queried_repos)

    def get_default_branch(self, repo: GitHubRepo) -> str:
        self._queried_repos.append(repo)
        return self._default_branch

    def list_my_open_change_requests(self, repo: GitHubRepo) -> list[ChangeRequest]:
        self._queried_repos.append(repo)
        return list(self._change_requests)

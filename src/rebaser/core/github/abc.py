"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod

from rebaser.core.github.types import ChangeRequest, GitHubRepo


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def get_default_branch(self, repo: GitHubRepo) -> str:
        """Get the repository's configured default branch name.

        Raises:
            RuntimeError: If the repository cannot be queried
        """
        ...

    @abstractmethod
    def list_my_open_change_requests(self, repo: GitHubRepo) -> list[ChangeRequest]:
        """List open pull requests authored by the authenticated user.

        Args:
            repo: Repository to query

        Returns:
            Pull requests in listing order (most recently created first)

        Raises:
            RuntimeError: If the listing fails
        """
        ...

"""Type definitions for GitHub operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GitHubRepo:
    """A repository on a GitHub (or GitHub Enterprise) host."""

    host: str  # e.g., "github.com" or "github.example.com"
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class ChangeRequest:
    """Snapshot of an open pull request, fetched once at the start of a run."""

    number: int
    title: str
    head_branch: str
    base_branch: str
    author: str

    @property
    def label(self) -> str:
        """How log lines and messages name this pull request."""
        return f'"{self.title}" {self.base_branch} <- {self.head_branch}'

"""GitHub operations subpackage."""

from rebaser.core.github.abc import GitHub
from rebaser.core.github.real import RealGitHub
from rebaser.core.github.types import ChangeRequest, GitHubRepo

__all__ = ["GitHub", "RealGitHub", "ChangeRequest", "GitHubRepo"]

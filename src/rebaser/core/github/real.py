"""Real GitHub implementation using gh CLI.

This module provides a real implementation of the GitHub interface that uses
the gh CLI for all operations. It requires gh to be installed and either
authenticated for the host or given a token through configuration.
"""

import json
import os
from collections.abc import Mapping

from rebaser.core.github.abc import GitHub
from rebaser.core.github.types import ChangeRequest, GitHubRepo
from rebaser.core.subprocess import run_subprocess_with_context

PR_LIST_LIMIT = 1000
PR_JSON_FIELDS = "number,title,headRefName,baseRefName,author"


def parse_change_requests(payload: str) -> list[ChangeRequest]:
    """Parse `gh pr list --json` output into ChangeRequests, keeping listing order."""
    data = json.loads(payload)
    change_requests: list[ChangeRequest] = []
    for pr in data:
        author = pr.get("author") or {}
        change_requests.append(
            ChangeRequest(
                number=pr["number"],
                title=pr.get("title") or "",
                head_branch=pr["headRefName"],
                base_branch=pr["baseRefName"],
                author=author.get("login", ""),
            )
        )
    return change_requests


class RealGitHub(GitHub):
    """Real implementation using gh CLI.

    This implementation calls the gh CLI for all GitHub operations.
    """

    def __init__(self, tokens: Mapping[str, str] | None = None) -> None:
        """Initialize RealGitHub.

        Args:
            tokens: Optional mapping of host -> token. When a token exists for
                the queried host it is handed to gh through the environment
                instead of relying on `gh auth login` state.
        """
        self._tokens = dict(tokens or {})

    def _env_for(self, host: str) -> dict[str, str] | None:
        token = self._tokens.get(host)
        if token is None:
            return None
        env = dict(os.environ)
        env["GH_HOST"] = host
        if host == "github.com":
            env["GH_TOKEN"] = token
        else:
            env["GH_ENTERPRISE_TOKEN"] = token
        return env

    def get_default_branch(self, repo: GitHubRepo) -> str:
        """Get the repository's default branch via the REST API."""
        result = run_subprocess_with_context(
            [
                "gh",
                "api",
                "--hostname",
                repo.host,
                f"repos/{repo.full_name}",
                "--jq",
                ".default_branch",
            ],
            operation_context=f"get default branch of {repo.host}/{repo.full_name}",
            env=self._env_for(repo.host),
        )
        branch = result.stdout.strip()
        if not branch:
            msg = f"GitHub returned no default branch for {repo.host}/{repo.full_name}"
            raise RuntimeError(msg)
        return branch

    def list_my_open_change_requests(self, repo: GitHubRepo) -> list[ChangeRequest]:
        """List my open pull requests with `gh pr list --author @me`."""
        result = run_subprocess_with_context(
            [
                "gh",
                "pr",
                "list",
                "--repo",
                f"{repo.host}/{repo.full_name}",
                "--state",
                "open",
                "--author",
                "@me",
                "--limit",
                str(PR_LIST_LIMIT),
                "--json",
                PR_JSON_FIELDS,
            ],
            operation_context=f"list open pull requests of {repo.host}/{repo.full_name}",
            env=self._env_for(repo.host),
        )
        try:
            return parse_change_requests(result.stdout)
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            msg = f"Unexpected pull request listing from gh: {e}"
            raise RuntimeError(msg) from e

"""Parsing helpers for remote URLs."""

import re

from rebaser.core.github.types import GitHubRepo

# git@github.com:owner/repo.git
_SCP_LIKE = re.compile(
    r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"
)
# ssh://git@host[:port]/owner/repo.git, https://host/owner/repo(.git)
_URL = re.compile(
    r"^(?:ssh|https?|git)://(?:[^@/]+@)?(?P<host>[^:/]+)(?::\d+)?/"
    r"(?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"
)


def parse_remote_url(url: str) -> GitHubRepo | None:
    """Extract host, owner and repository name from a remote URL.

    Returns None for URLs that do not name an owner/repository pair, such as
    local paths.

    Example:
        >>> parse_remote_url("git@github.com:octo-org/widgets.git")
        GitHubRepo(host='github.com', owner='octo-org', name='widgets')
    """
    url = url.strip()
    match = _URL.match(url) or _SCP_LIKE.match(url)
    if match is None:
        return None
    return GitHubRepo(host=match["host"], owner=match["owner"], name=match["name"])

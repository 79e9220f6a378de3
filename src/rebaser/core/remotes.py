"""Primary remote selection."""

import logging
from pathlib import Path

from rebaser.core.errors import AmbiguousRemoteError, RemoteUrlError
from rebaser.core.git.abc import Git
from rebaser.core.github.parsing import parse_remote_url
from rebaser.core.github.types import GitHubRepo

logger = logging.getLogger(__name__)


def resolve_primary_remote(git: Git, repo_root: Path, configured: str | None) -> str:
    """Pick the remote whose hosting repository the run works against.

    A repository with a single remote needs no configuration. With several
    remotes the choice must be made explicitly.

    Raises:
        AmbiguousRemoteError: If there is no remote, the configured remote does
            not exist, or several remotes exist and none is configured
    """
    remotes = git.list_remotes(repo_root)
    if not remotes:
        raise AmbiguousRemoteError(remotes, "Repository does not have any remote")

    if configured is not None:
        if configured not in remotes:
            raise AmbiguousRemoteError(
                remotes,
                f"Configured remote '{configured}' does not exist "
                f"(available: {', '.join(remotes)})",
            )
        return configured

    if len(remotes) > 1:
        raise AmbiguousRemoteError(
            remotes,
            f"Repository has {len(remotes)} remotes ({', '.join(remotes)}); "
            "choose one with --remote or 'remote' in the config file",
        )

    return remotes[0]


def resolve_hosting_repo(git: Git, repo_root: Path, remote: str) -> GitHubRepo:
    """Derive host/owner/name of the hosting repository from a remote's URL.

    Raises:
        RemoteUrlError: If the URL does not name an owner/repository
    """
    url = git.get_remote_url(repo_root, remote)
    logger.debug("remote %s url: %s", remote, url)
    if url is None:
        raise RemoteUrlError(remote, url)
    repo = parse_remote_url(url)
    if repo is None:
        raise RemoteUrlError(remote, url)
    return repo

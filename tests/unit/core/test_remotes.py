"""Tests for primary remote selection."""

import pytest

from rebaser.core.errors import AmbiguousRemoteError, RemoteUrlError
from rebaser.core.git.fake import FakeGit
from rebaser.core.github.types import GitHubRepo
from rebaser.core.remotes import resolve_hosting_repo, resolve_primary_remote
from tests.test_utils.stacks import REPO_ROOT

TWO_REMOTES = {
    "origin": "git@github.com:me/repo.git",
    "upstream": "https://github.com/owner/repo.git",
}


def test_single_remote_is_primary() -> None:
    git = FakeGit(remotes={"fork": "git@github.com:me/repo.git"})

    assert resolve_primary_remote(git, REPO_ROOT, None) == "fork"


def test_configured_remote_wins() -> None:
    git = FakeGit(remotes=TWO_REMOTES)

    assert resolve_primary_remote(git, REPO_ROOT, "upstream") == "upstream"


def test_several_remotes_without_configuration_is_ambiguous() -> None:
    git = FakeGit(remotes=TWO_REMOTES)

    with pytest.raises(AmbiguousRemoteError, match="origin, upstream") as exc_info:
        resolve_primary_remote(git, REPO_ROOT, None)

    assert exc_info.value.remotes == ["origin", "upstream"]


def test_configured_remote_must_exist() -> None:
    git = FakeGit(remotes=TWO_REMOTES)

    with pytest.raises(AmbiguousRemoteError, match="'mirror' does not exist"):
        resolve_primary_remote(git, REPO_ROOT, "mirror")


def test_repository_without_remotes_is_rejected() -> None:
    git = FakeGit(remotes={})

    with pytest.raises(AmbiguousRemoteError, match="does not have any remote"):
        resolve_primary_remote(git, REPO_ROOT, None)


def test_hosting_repo_comes_from_remote_url() -> None:
    git = FakeGit(remotes=TWO_REMOTES)

    repo = resolve_hosting_repo(git, REPO_ROOT, "upstream")

    assert repo == GitHubRepo(host="github.com", owner="owner", name="repo")


def test_remote_url_without_owner_is_rejected() -> None:
    git = FakeGit(remotes={"origin": "/srv/git/repo.git"})

    with pytest.raises(RemoteUrlError, match="'origin'"):
        resolve_hosting_repo(git, REPO_ROOT, "origin")

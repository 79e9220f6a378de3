"""Real git repositories for integration tests.

Builds a bare repository standing in for the hosting server, the user's
clone, and a second clone for a collaborator who pushes concurrently.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StackRepos:
    """Paths of the repositories making up one test scenario.

    Attributes:
        server: Bare repository acting as the remote
        work: The user's clone, with main <- feat/a <- feat/b pushed and tracked
        other: A collaborator's clone of the same remote
    """

    server: Path
    work: Path
    other: Path


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
    """Write a file, commit it and return the new commit's SHA."""
    (repo / name).write_text(content, encoding="utf-8")
    run_git(repo, "add", name)
    run_git(repo, "commit", "-m", message)
    return run_git(repo, "rev-parse", "HEAD")


def rev(repo: Path, ref: str) -> str:
    return run_git(repo, "rev-parse", ref)


def is_ancestor(repo: Path, ancestor: str, descendant: str) -> bool:
    result = subprocess.run(
        ["git", "merge-base", "--is-ancestor", ancestor, descendant],
        cwd=repo,
        capture_output=True,
    )
    return result.returncode == 0


def create_stack_repos(tmp_path: Path) -> StackRepos:
    """Create server, work and other clones with a two-branch stack pushed."""
    server = tmp_path / "server.git"
    run_git(tmp_path, "init", "--bare", "-b", "main", str(server))

    work = tmp_path / "work"
    run_git(tmp_path, "clone", str(server), str(work))
    commit_file(work, "README.md", "# project\n", "Initial commit")
    run_git(work, "push", "-u", "origin", "main")

    run_git(work, "checkout", "-b", "feat/a")
    commit_file(work, "a.txt", "a\n", "Add a")
    run_git(work, "push", "-u", "origin", "feat/a")

    run_git(work, "checkout", "-b", "feat/b")
    commit_file(work, "b.txt", "b\n", "Add b")
    run_git(work, "push", "-u", "origin", "feat/b")

    run_git(work, "checkout", "main")

    other = tmp_path / "other"
    run_git(tmp_path, "clone", str(server), str(other))

    return StackRepos(server=server, work=work, other=other)


def advance_remote_main(repos: StackRepos, name: str = "main.txt") -> str:
    """Have the collaborator push a new commit to main; returns its SHA."""
    run_git(repos.other, "checkout", "main")
    run_git(repos.other, "pull", "--ff-only", "origin", "main")
    sha = commit_file(repos.other, name, "more\n", "Advance main")
    run_git(repos.other, "push", "origin", "main")
    return sha

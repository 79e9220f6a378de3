"""Sync command implementation."""

import dataclasses

import click

from rebaser.cli.core import configure_logging, error_boundary
from rebaser.cli.output import user_output
from rebaser.core.context import RebaserContext
from rebaser.core.git.dry_run import DryRunGit
from rebaser.core.sync import sync_stack


@click.command("sync")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the rebases and pushes that would happen without performing them.",
)
@click.option("--remote", help="Remote whose repository hosts the pull requests.")
@click.option(
    "--max-passes",
    type=click.IntRange(min=1),
    help="Give up if the stack is still changing after this many passes.",
)
@click.option("--no-fetch", is_flag=True, help="Use remote-tracking refs as they are.")
@click.option("-v", "--verbose", is_flag=True, help="Log ref comparisons and git details.")
@error_boundary
@click.pass_obj
def sync_cmd(
    ctx: RebaserContext,
    dry_run: bool,
    remote: str | None,
    max_passes: int | None,
    no_fetch: bool,
    verbose: bool,
) -> None:
    """Rebase my open pull requests onto their bases and push them.

    Starting from the repository's default branch, every pull request whose
    head and base both match their remote-tracking refs is rebased onto its
    base and pushed. Pull requests based on a rebased branch follow, and the
    whole stack is swept again until a sweep pushes nothing.

    A push only succeeds if nobody else updated the branch in the meantime;
    otherwise the local branch is reset to what the remote has. Your
    checked-out branch and uncommitted changes are restored afterwards.

    A pull request containing a merge commit stops the run. So does one with
    fixup!, amend! or squash! commits when rebase.autoSquash is enabled;
    otherwise those commits are rebased like any other.
    """
    configure_logging(verbose)

    if dry_run and not ctx.dry_run:
        ctx = dataclasses.replace(ctx, git=DryRunGit(ctx.git), dry_run=True)

    report = sync_stack(
        ctx,
        fetch=ctx.config.fetch and not no_fetch,
        remote=remote if remote is not None else ctx.config.remote,
        max_passes=max_passes if max_passes is not None else ctx.config.max_passes,
    )

    convergence = report.convergence
    change_requests = report.discovery.change_requests
    prefix = "[DRY RUN] " if ctx.dry_run else ""
    user_output(
        f"{prefix}Checked {len(change_requests)} pull requests in "
        f"{convergence.pass_count} passes."
    )
    for branch in convergence.published_branches:
        user_output(click.style(f"  pushed {branch}", fg="green"))
    for branch in convergence.failed_branches:
        user_output(click.style(f"  could not rebase {branch}, left unchanged", fg="yellow"))

"""Status command implementation."""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rebaser.cli.core import configure_logging, error_boundary
from rebaser.cli.output import user_output
from rebaser.core.context import RebaserContext
from rebaser.core.engine.safety import BranchState
from rebaser.core.sync import plan_stack


def format_branch_state(state: BranchState) -> str:
    """Render a branch state as Rich markup for a table cell."""
    if state.reason is not None:
        return f"[red]{escape(state.reason)}[/red]"
    if state.is_safe:
        return "[green]in sync[/green]"
    parts = []
    if state.ahead:
        parts.append(f"{state.ahead} ahead")
    if state.behind:
        parts.append(f"{state.behind} behind")
    return f"[yellow]{', '.join(parts)}[/yellow]"


@click.command("status")
@click.option("--remote", help="Remote whose repository hosts the pull requests.")
@click.option("--no-fetch", is_flag=True, help="Use remote-tracking refs as they are.")
@click.option("-v", "--verbose", is_flag=True, help="Log ref comparisons and git details.")
@error_boundary
@click.pass_obj
def status_cmd(ctx: RebaserContext, remote: str | None, no_fetch: bool, verbose: bool) -> None:
    """Show my open pull requests and what a sync would rebase."""
    configure_logging(verbose)

    plan = plan_stack(
        ctx,
        fetch=ctx.config.fetch and not no_fetch,
        remote=remote if remote is not None else ctx.config.remote,
    )
    discovery = plan.discovery
    default_state = plan.branch_states[discovery.default_branch]

    # Output to stderr (consistent with user_output convention)
    console = Console(stderr=True, width=200)
    console.print(
        f"{escape(discovery.repo.host)}/{escape(discovery.repo.full_name)} "
        f"via {escape(discovery.remote)}, default branch {escape(discovery.default_branch)}: "
        + format_branch_state(default_state)
    )

    if not discovery.change_requests:
        user_output("No open pull requests.")
        return

    positions = {cr.number: index for index, cr in enumerate(plan.order, start=1)}

    table = Table(show_header=True, header_style="bold")
    table.add_column("pr", style="cyan", no_wrap=True)
    table.add_column("title", no_wrap=True)
    table.add_column("base", no_wrap=True)
    table.add_column("base state", no_wrap=True)
    table.add_column("head", no_wrap=True)
    table.add_column("head state", no_wrap=True)
    table.add_column("order", justify="right", no_wrap=True)

    for change_request in discovery.change_requests:
        position = positions.get(change_request.number)
        table.add_row(
            f"#{change_request.number}",
            escape(change_request.title),
            escape(change_request.base_branch),
            format_branch_state(plan.branch_states[change_request.base_branch]),
            escape(change_request.head_branch),
            format_branch_state(plan.branch_states[change_request.head_branch]),
            str(position) if position is not None else "[dim]skipped[/dim]",
        )

    console.print(table)

import click

from rebaser.cli.commands.status import status_cmd
from rebaser.cli.commands.sync import sync_cmd
from rebaser.cli.core import fail
from rebaser.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="git-rebaser")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Keep a stack of dependent pull requests rebased onto their bases."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context(dry_run=False)
        except ValueError as e:
            fail(str(e))


cli.add_command(sync_cmd)
cli.add_command(status_cmd)


def main() -> None:
    """CLI entry point used by the `rebaser` console script."""
    cli()

"""permminer CLI - pmine command."""

import click

from permminer.cli.guard import guard_command
from permminer.cli.mine import mine_command
from permminer.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="pmine")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """permminer - mine permission definitions and locate missing guards."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(mine_command, name="mine")
cli.add_command(guard_command, name="guard")


if __name__ == "__main__":
    cli()

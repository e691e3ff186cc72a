"""semtok CLI."""

import click

from semtok import __version__
from semtok.cli.legend import legend_command
from semtok.cli.tokens import tokens_command
from semtok.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="semtok")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """semtok - tree-sitter semantic tokens for editors."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(tokens_command, name="tokens")
cli.add_command(legend_command, name="legend")


if __name__ == "__main__":
    cli()

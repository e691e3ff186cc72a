"""semtok legend command - print the configured token legend."""

import json
from pathlib import Path

import click

from semtok.config.loader import load_config
from semtok.core.errors import SemtokError
from semtok.tokens.legend import Legend


@click.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: .semtok/config.yaml in the current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def legend_command(config_file: Path | None, as_json: bool) -> None:
    """Show token type and modifier codes."""
    try:
        config = load_config(config_file=config_file)
        legend = Legend.from_names(config.legend.token_types, config.legend.token_modifiers)
    except SemtokError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                {
                    "tokenTypes": list(legend.token_types),
                    "tokenModifiers": list(legend.token_modifiers),
                }
            )
        )
        return

    click.echo("Token types:")
    for i, name in enumerate(legend.token_types):
        click.echo(f"  {i:>3}  {name}")
    click.echo("Token modifiers:")
    if not legend.token_modifiers:
        click.echo("  (none)")
    for i, name in enumerate(legend.token_modifiers):
        click.echo(f"  {1 << i:>6}  {name}")

"""semtok tokens command - print the semantic tokens of a file."""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from semtok.config.loader import load_config
from semtok.core.errors import SemtokError
from semtok.provider import SemanticTokensProvider
from semtok.tokens.models import SemanticToken


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: .semtok/config.yaml in the current directory)",
)
@click.option("--grammar", "grammar_module", help="Grammar package, e.g. tree_sitter_rust")
@click.option(
    "--query",
    "queries",
    multiple=True,
    help="Query source (module:ATTRIBUTE, .scm path or inline). Repeatable.",
)
@click.option("--json", "as_json", is_flag=True, help="Output tokens as JSON")
@click.option("--delta", is_flag=True, help="Output the delta-encoded integer array")
def tokens_command(
    path: Path,
    config_file: Path | None,
    grammar_module: str | None,
    queries: tuple[str, ...],
    as_json: bool,
    delta: bool,
) -> None:
    """Show the semantic tokens for PATH."""
    text = path.read_text(encoding="utf-8")
    try:
        config = load_config(config_file=config_file)
        if grammar_module or queries:
            grammar = config.grammar.model_copy(
                update={
                    k: v
                    for k, v in (("module", grammar_module), ("queries", list(queries)))
                    if v
                }
            )
            config = config.model_copy(update={"grammar": grammar})
        provider = SemanticTokensProvider(config)
        uri = path.resolve().as_uri()
        if delta:
            encoded = asyncio.run(provider.provide_semantic_tokens(uri, text))
            click.echo(json.dumps(encoded.data))
            return
        tokens = asyncio.run(provider.request_tokens(uri, text))
    except SemtokError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps([_token_dict(t) for t in tokens], indent=2))
        return

    lines = text.splitlines()
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("line", justify="right")
    table.add_column("col", justify="right")
    table.add_column("len", justify="right")
    table.add_column("type", style="cyan")
    table.add_column("text", overflow="ellipsis", no_wrap=True)
    for token in tokens:
        line_text = lines[token.line] if token.line < len(lines) else ""
        excerpt = line_text[token.start_character : token.start_character + token.length]
        table.add_row(
            str(token.line),
            str(token.start_character),
            str(token.length),
            token.type,
            excerpt,
        )
    Console().print(table)


def _token_dict(token: SemanticToken) -> dict[str, object]:
    return {
        "line": token.line,
        "startCharacter": token.start_character,
        "length": token.length,
        "type": token.type,
        "modifiers": sorted(token.modifiers),
    }

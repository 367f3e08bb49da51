"""Qubit command line: dump tokens, dump the AST, or just check a rule."""

from __future__ import annotations

import json
import logging
from typing import IO

import click

from qubitlib import __version__
from qubitlib.config import ConfigError, ParserOptions, load_options
from qubitlib.diagnostics.collector import DiagnosticCollector
from qubitlib.parser.lexer import lex
from qubitlib.parser.parser import parse
from qubitlib.parser.printer import format_program
from qubitlib.parser.serialize import to_dict

_source_argument = click.argument("file", required=False, type=click.File("r"))
_expr_option = click.option(
    "-e", "--expr", default=None, help="Use EXPR as the source instead of reading FILE."
)


def _read_source(file: IO[str] | None, expr: str | None, options: ParserOptions) -> tuple[str, str]:
    """Return ``(source, filename)`` from ``--expr`` or FILE."""
    if expr is not None:
        return expr, options.filename
    if file is None:
        raise click.UsageError("provide a FILE or --expr")
    return file.read(), file.name


def _report(diag: DiagnosticCollector) -> None:
    """Print diagnostics to stderr and exit 1 if any is an error."""
    for d in diag:
        click.echo(str(d), err=True)
    if diag.has_errors():
        raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="qubit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML file with parser options.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """The Qubit rule language front end."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    options = ParserOptions()
    if config_path is not None:
        try:
            options = load_options(config_path)
        except ConfigError as e:
            ctx.fail(str(e))
    ctx.obj = options


@main.command()
@_source_argument
@_expr_option
@click.pass_obj
def tokens(options: ParserOptions, file: IO[str] | None, expr: str | None) -> None:
    """Print the token stream, one token per line."""
    source, filename = _read_source(file, expr, options)
    toks, diag = lex(source, filename)
    for tok in toks:
        click.echo(f"{tok.span.line}:{tok.span.column} {tok.kind.name} {tok.lexeme}".rstrip())
    _report(diag)


@main.command(name="parse")
@_source_argument
@_expr_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "source"]),
    default="json",
    show_default=True,
    help="Print the AST as JSON or as re-serialized source.",
)
@click.option("--no-spans", is_flag=True, help="Leave source spans out of the JSON.")
@click.pass_obj
def parse_command(
    options: ParserOptions,
    file: IO[str] | None,
    expr: str | None,
    output_format: str,
    no_spans: bool,
) -> None:
    """Parse the source and print the resulting tree."""
    source, filename = _read_source(file, expr, options)
    program, diag = parse(source, filename, options)
    if output_format == "json":
        click.echo(json.dumps(to_dict(program, include_spans=not no_spans), indent=2))
    else:
        click.echo(format_program(program), nl=False)
    _report(diag)


@main.command()
@_source_argument
@_expr_option
@click.pass_obj
def check(options: ParserOptions, file: IO[str] | None, expr: str | None) -> None:
    """Report diagnostics without printing the tree."""
    source, filename = _read_source(file, expr, options)
    program, diag = parse(source, filename, options)
    _report(diag)
    click.echo(f"{filename}: {len(program.statements)} statements, no errors")

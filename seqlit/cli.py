"""seqlit CLI application with Typer."""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import click
import typer

from seqlit import __version__
from seqlit.app.ports import MatcherPort
from seqlit.bootstrap import ApplicationContainer, bootstrap_application
from seqlit.config import MalformedPolicy, get_settings, set_settings
from seqlit.exceptions import (
    ConfigurationError,
    MalformedRecordError,
    PatternError,
    SpanInvariantError,
)
from seqlit.logging_config import configure_logging

app = typer.Typer(
    name="seqlit",
    help="Sequence processing toolchain: import, mark, print, and mask text records",
    add_completion=False,
    no_args_is_help=True,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"seqlit version {__version__}")
        raise typer.Exit()


@contextmanager
def _abort_on_failure() -> Iterator[None]:
    """Turn I/O, input, and span invariant failures into exit code 1."""
    try:
        yield
    except (OSError, MalformedRecordError, SpanInvariantError) as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _compile_pattern(container: ApplicationContainer, pattern: str) -> MatcherPort:
    try:
        return container.annotation_service.compile_pattern(pattern)
    except PatternError as exc:
        raise typer.BadParameter(exc.reason, param_hint="'--regex'") from exc


InputFile = Annotated[
    Path,
    typer.Argument(help="Input file", resolve_path=True),
]
Regex = Annotated[
    str,
    typer.Option("--regex", "-r", help="Regular expression to match"),
]


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Diagnostic log level written to stderr",
            click_type=click.Choice(LOG_LEVELS, case_sensitive=False),
        ),
    ] = None,
    on_malformed: Annotated[
        MalformedPolicy | None,
        typer.Option(
            "--on-malformed",
            help="Abort on, or skip, input lines that cannot be decoded",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """seqlit - annotate line-oriented text with non-overlapping spans."""
    # Update settings with CLI flags
    settings = get_settings()
    if log_level:
        settings.log_level = log_level.upper()
    if on_malformed:
        settings.on_malformed = on_malformed
    set_settings(settings)

    try:
        configure_logging(settings.log_level)
    except ConfigurationError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc


@app.command("import")
def import_records(
    input_path: InputFile,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output NDJSON file (defaults to stdout)"),
    ] = None,
) -> None:
    """Import examples in NDJSON format, one record per line."""

    container = bootstrap_application()
    service = container.annotation_service

    with _abort_on_failure():
        if output is not None:
            service.import_lines(input_path, output=output.expanduser())
        else:
            service.import_lines(input_path, stream=sys.stdout)


@app.command("print")
def print_matches(
    input_path: InputFile,
    regex: Regex,
    only_new: Annotated[
        bool,
        typer.Option("--new", "-n", help="Print only matches not covered by an existing span"),
    ] = False,
) -> None:
    """Print every match, one per line."""

    container = bootstrap_application()
    matcher = _compile_pattern(container, regex)

    with _abort_on_failure():
        container.annotation_service.print_matches(
            input_path,
            matcher,
            stream=sys.stdout,
            only_new=only_new,
        )


@app.command("mark")
def mark_matches(
    input_path: InputFile,
    regex: Regex,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file, '-' for stdout (defaults to rewriting INPUT in place)",
        ),
    ] = None,
) -> None:
    """Mark matches as spans, skipping any that overlap an existing span."""

    container = bootstrap_application()
    service = container.annotation_service
    matcher = _compile_pattern(container, regex)

    with _abort_on_failure():
        if output == "-":
            service.mark(input_path, matcher, stream=sys.stdout)
        elif output:
            service.mark(input_path, matcher, output=Path(output).expanduser())
        else:
            service.mark(input_path, matcher)


@app.command("mask")
def mask_spans(
    input_path: InputFile,
    label: Annotated[
        str,
        typer.Option("--label", "-l", help="Label substituted for every marked span"),
    ],
) -> None:
    """Mask marked spans and print the resulting text as JSON strings."""

    container = bootstrap_application()

    with _abort_on_failure():
        container.annotation_service.mask(input_path, label, stream=sys.stdout)


if __name__ == "__main__":
    app()

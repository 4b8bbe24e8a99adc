"""Output and failure reporting for forexa commands."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import typer

from forexa.core.exceptions import (
    AggregationError,
    DataValidationError,
    ForexaError,
    ModelInvocationError,
    ProviderError,
)

from .constants import PROVIDER_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .formatters import OutputFormatter, create_formatter

# first match wins
EXIT_CODES: tuple[tuple[type[ForexaError], int], ...] = (
    (DataValidationError, VALIDATION_EXIT_CODE),
    (ProviderError, PROVIDER_EXIT_CODE),
    (AggregationError, PROVIDER_EXIT_CODE),
    (ModelInvocationError, PROVIDER_EXIT_CODE),
)


def exit_code_for(error: ForexaError) -> int:
    for error_type, code in EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return SYSTEM_EXIT_CODE


def report_failure(error: ForexaError) -> typer.Exit:
    """Write ``error`` to stderr as one JSON object and return the matching exit.

    The payload is :meth:`ForexaError.to_payload`, so the CLI, the web layer and
    batch outcomes all describe a failure the same way.
    """

    typer.echo(json.dumps(error.to_payload(), ensure_ascii=False, default=str), err=True)
    return typer.Exit(code=exit_code_for(error))


@contextmanager
def output_stream(ctx: typer.Context) -> Iterator[tuple[OutputFormatter, TextIO]]:
    """Yield the formatter chosen by the global options and the stream to render into."""

    options = ctx.find_root().obj or {}
    formatter = create_formatter(options.get("format", "table"), no_color=options.get("no_color", False))
    path = options.get("output_path")
    if path is None:
        yield formatter, sys.stdout
        return

    try:
        handle = open(path, "w", encoding="utf-8")
    except OSError as exc:
        error = DataValidationError(f"Unable to open '{path}': {exc}", details={"output_path": str(path)})
        raise report_failure(error) from exc
    with handle:
        yield formatter, handle


__all__ = ["EXIT_CODES", "exit_code_for", "report_failure", "output_stream"]

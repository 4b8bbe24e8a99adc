"""Main entry point for the forexa command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from forexa.core.logging import configure_logging

from .commands import register as register_commands
from .constants import LOG_LEVELS
from .formatters import create_formatter


def create_app() -> typer.Typer:
    """Create a Typer application instance for forexa."""

    app = typer.Typer(add_completion=False, help="forexa command line interface")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="Logging level for the structured stderr log.",
            show_default=True,
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        level = log_level.strip().upper()
        if level not in LOG_LEVELS:
            raise typer.BadParameter(
                f"Unsupported log level '{log_level}'. Available levels: {', '.join(LOG_LEVELS)}.",
                param_hint="--log-level",
            )

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "log_level": level,
                "no_color": no_color,
            }
        )
        configure_logging(level=level)

    register_commands(app)
    return app


app = create_app()

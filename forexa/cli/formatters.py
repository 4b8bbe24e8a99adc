"""Output formatter abstractions for CLI commands."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

MAX_CELL_WIDTH = 80


class OutputFormatter:
    """Protocol-like base class for CLI output formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        """Render the provided rows to the target stream."""

        raise NotImplementedError


def _resolve_columns(rows: Sequence[Mapping[str, object]], columns: Sequence[str] | None) -> list[str]:
    if columns:
        return list(columns)
    if rows:
        return list(rows[0].keys())
    return []


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render output as a Rich table. Long text cells are shortened."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        resolved_columns = _resolve_columns(rows, columns)

        table = Table(box=SIMPLE, show_lines=False)
        header_style = "" if self.no_color else "bold"
        for column in resolved_columns:
            table.add_column(column, header_style=header_style, overflow="fold")
        for row in rows:
            table.add_row(*(self._format_cell(row.get(column)) for column in resolved_columns))

        if resolved_columns:
            console.print(table)
        if not rows:
            console.print("No data available.")

    def _format_cell(self, value: object) -> str:
        if value is None:
            return "-"
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, float):
            return f"{value:.4g}"
        if isinstance(value, datetime):
            return value.isoformat(timespec="seconds")
        text = str(value)
        if len(text) > MAX_CELL_WIDTH:
            return text[: MAX_CELL_WIDTH - 3] + "..."
        return text


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render output as JSON Lines, one object per row, without shortening."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        for row in rows:
            record = {column: row.get(column) for column in columns} if columns else dict(row)
            json.dump(record, stream, ensure_ascii=False, default=_json_default)
            stream.write("\n")
        stream.flush()


def _json_default(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: table, jsonl."
    raise ValueError(msg)


__all__ = ["OutputFormatter", "TableFormatter", "JSONLFormatter", "create_formatter"]

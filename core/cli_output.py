"""CLI output formatting for pylon commands.

Text is the default; ``--output`` switches to JSON, YAML or a bordered table.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence, TextIO

import yaml


class OutputFormat(str, Enum):
    """Output format options."""
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False
    quiet: bool = False
    file: Optional[TextIO] = None

    @property
    def stream(self) -> TextIO:
        """Get the output stream."""
        return self.file or sys.stdout


def normalize(data: Any) -> Any:
    """Turn dataclasses, enums and datetimes into plain JSON/YAML values."""
    if is_dataclass(data) and not isinstance(data, type):
        return normalize(asdict(data))
    if isinstance(data, dict):
        return {k: normalize(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [normalize(v) for v in data]
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    return data


class OutputWriter:
    """Handles formatted output for CLI commands."""

    def __init__(self, config: Optional[OutputConfig] = None):
        self.config = config or OutputConfig()

    @property
    def structured(self) -> bool:
        """True when the caller asked for JSON or YAML."""
        return self.config.format in (OutputFormat.JSON, OutputFormat.YAML)

    def print(self, *args, **kwargs) -> None:
        """Print to the configured output stream."""
        if self.config.quiet:
            return
        kwargs.setdefault("file", self.config.stream)
        print(*args, **kwargs)

    def print_data(self, data: Any) -> None:
        """Print a value as JSON/YAML; text and table fall back to str()."""
        fmt = self.config.format
        if fmt == OutputFormat.JSON:
            self.print(json.dumps(normalize(data), indent=2, default=str))
        elif fmt == OutputFormat.YAML:
            self.print(yaml.safe_dump(normalize(data), default_flow_style=False, sort_keys=False), end="")
        elif isinstance(data, dict):
            self.print_dict(data)
        else:
            self.print(str(data))

    def print_dict(self, data: Dict[str, Any], *, title: Optional[str] = None, indent: int = 2) -> None:
        """Print key-value pairs with aligned values.

        Args:
            data: Pairs to print; keys are labels.
            title: Optional heading line printed first.
            indent: Spaces before each label.
        """
        if self.structured:
            self.print_data(data)
            return
        if title:
            self.print(title)
        width = max((len(str(k)) for k in data), default=0) + 1
        prefix = " " * indent
        for key, value in data.items():
            self.print(f"{prefix}{(str(key) + ':').ljust(width)} {'' if value is None else value}")

    def print_rows(
        self,
        records: Sequence[Any],
        columns: Sequence[str],
        headers: Sequence[str],
        *,
        empty: str = "",
    ) -> None:
        """Print records as aligned columns.

        Args:
            records: Dataclasses or dicts; structured formats dump them whole.
            columns: Keys to pull from each record for text/table output.
            headers: Column titles, same length as ``columns``.
            empty: Message printed (text/table only) when there are no records.
        """
        if self.structured:
            self.print_data(list(records))
            return
        if not records:
            if empty:
                self.print(empty)
            return
        rows = [[_cell(normalize(r).get(c)) for c in columns] for r in records]
        widths = [len(h) for h in headers]
        for row in rows:
            for i, val in enumerate(row):
                widths[i] = max(widths[i], len(val))

        if self.config.format == OutputFormat.TABLE:
            header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
            self.print(header_line)
            self.print("-" * len(header_line))
            for row in rows:
                self.print(" | ".join(v.ljust(widths[i]) for i, v in enumerate(row)).rstrip())
            return

        self.print("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)).rstrip())
        for row in rows:
            self.print("  ".join(v.ljust(widths[i]) for i, v in enumerate(row)).rstrip())


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for rendering the diagnostic store."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final
from urllib.parse import unquote, urlparse

from rich.console import Console
from rich.text import Text

from .models import DiagnosticRecord
from .severity import DiagnosticSeverity
from .store import DiagnosticStore

LOCATION_SEPARATOR: Final[str] = ":"


def severity_color(sev: DiagnosticSeverity) -> str:
    """Return the rich colour name associated with a severity level."""

    return {
        DiagnosticSeverity.ERROR: "red",
        DiagnosticSeverity.WARNING: "yellow",
        DiagnosticSeverity.INFORMATION: "blue",
        DiagnosticSeverity.HINT: "cyan",
    }.get(sev, "yellow")


def key_to_path(key: str) -> str:
    """Return the filesystem path of a store key."""

    parsed = urlparse(key)
    if parsed.scheme != "file":
        return key
    return str(Path(unquote(parsed.path)))


def raw_location(path: str, record: DiagnosticRecord) -> str:
    """Return ``path:line`` for ``record``."""

    return f"{path}{LOCATION_SEPARATOR}{record.line}"


def format_diagnostic_line(
    record: DiagnosticRecord,
    location: str,
    location_width: int,
    *,
    color: bool,
) -> Text:
    """Return a formatted diagnostic line for concise output."""

    severity_text = Text(record.severity.value)
    if color:
        severity_text.stylize(severity_color(record.severity))
    line = Text("  ")
    line.append_text(severity_text)
    line.append(" ")
    line.append(location.ljust(location_width) if location_width else location)
    line.append(" ")
    line.append(record.text)
    code_text = Text(record.code, style="bold magenta" if color else "")
    line.append(" [")
    line.append_text(code_text)
    line.append("]")
    return line


def dump_diagnostics(
    store: DiagnosticStore,
    console: Console,
    *,
    color: bool,
    keys: Iterable[str] | None = None,
) -> int:
    """Print stored diagnostics; return how many were printed.

    Args:
        store: Store to render.
        console: Console receiving the output.
        color: Whether severities and codes are styled.
        keys: Restrict output to these file keys; ``None`` prints everything.

    Returns:
        int: Number of diagnostics printed.
    """

    selected = None if keys is None else set(keys)
    rows: list[tuple[str, DiagnosticRecord]] = []
    for key, records in store.items():
        if selected is not None and key not in selected:
            continue
        path = key_to_path(key)
        rows.extend((raw_location(path, record), record) for record in records)
    if not rows:
        return 0
    width = max(len(location) for location, _ in rows)
    for location, record in rows:
        console.print(format_diagnostic_line(record, location, width, color=color), soft_wrap=True)
    return len(rows)


def _record_payload(path: str, record: DiagnosticRecord) -> dict[str, object]:
    return {
        "file": path,
        "line": record.line,
        "start_line": record.start_line,
        "severity": record.severity.value,
        "kind": record.kind.value,
        "code": record.code,
        "message": record.text,
        "source": record.source,
    }


def store_to_json(store: DiagnosticStore) -> str:
    """Return the store contents as a JSON document keyed by file URI."""

    payload: dict[str, Sequence[dict[str, object]]] = {
        key: [_record_payload(key_to_path(key), record) for record in records] for key, records in store.items()
    }
    return json.dumps(payload, indent=2)


__all__ = [
    "LOCATION_SEPARATOR",
    "dump_diagnostics",
    "format_diagnostic_line",
    "key_to_path",
    "raw_location",
    "severity_color",
    "store_to_json",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for problems-list rendering."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console

from pycheckpatch.models import DiagnosticRecord
from pycheckpatch.reporting import dump_diagnostics, key_to_path, store_to_json
from pycheckpatch.severity import DiagnosticSeverity
from pycheckpatch.store import DiagnosticStore, file_key


def _record(line: int, code: str, message: str) -> DiagnosticRecord:
    return DiagnosticRecord(
        file_path="a.c",
        line=line,
        kind="WARNING",
        code=code,
        message=message,
        severity=DiagnosticSeverity.WARNING,
    )


def test_key_to_path_round_trips_spaces(tmp_path: Path) -> None:
    path = tmp_path / "with space" / "a.c"
    assert key_to_path(file_key(path)) == str(path)
    assert key_to_path("untitled:1") == "untitled:1"


def test_dump_prints_selected_keys(tmp_path: Path) -> None:
    store = DiagnosticStore()
    first = file_key(tmp_path / "a.c")
    store.set(first, [_record(3, "LONG_LINE", "line too long")])
    store.set(file_key(tmp_path / "b.c"), [_record(1, "SPACING", "space required")])
    console = Console(record=True, width=200, no_color=True)

    printed = dump_diagnostics(store, console, color=False, keys=[first])

    assert printed == 1
    output = console.export_text()
    assert f"{tmp_path / 'a.c'}:3" in output
    assert "WARNING:line too long [LONG_LINE]" in output
    assert "b.c" not in output


def test_dump_of_empty_store_prints_nothing() -> None:
    console = Console(record=True, width=80)
    assert dump_diagnostics(DiagnosticStore(), console, color=True) == 0
    assert console.export_text() == ""


def test_store_to_json(tmp_path: Path) -> None:
    store = DiagnosticStore()
    key = file_key(tmp_path / "a.c")
    store.set(key, [_record(2, "LONG_LINE", "line too long")])

    payload = json.loads(store_to_json(store))

    (entry,) = payload[key]
    assert entry["file"] == str(tmp_path / "a.c")
    assert entry["start_line"] == 1
    assert entry["message"] == "WARNING:line too long"
    assert entry["severity"] == DiagnosticSeverity.WARNING.value
    assert entry["source"] == "checkpatch"

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-document collection of the current checkpatch diagnostics."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from pydantic import TypeAdapter

from .models import DiagnosticRecord

_SNAPSHOT_ADAPTER = TypeAdapter(dict[str, list[DiagnosticRecord]])


def file_key(path: str | os.PathLike[str], base_path: str | os.PathLike[str] = "") -> str:
    """Return the store key (an absolute ``file://`` URI) for ``path``.

    Args:
        path: File path as known to the caller or emitted by the checker.
        base_path: Directory ``path`` is relative to; empty for paths that are
            already absolute or relative to the current directory.

    Returns:
        str: Absolute file URI.
    """

    joined = os.path.join(os.fspath(base_path), os.fspath(path))
    return Path(os.path.abspath(joined)).as_uri()


class DiagnosticStore:
    """Mapping of file URI to the ordered diagnostics of its latest check.

    Every populating call replaces the entry for the keys it touches; there is
    no merge. All mutations are expected to happen on the event loop thread.
    """

    def __init__(self, name: str = "checkpatch") -> None:
        self.name = name
        self._entries: dict[str, tuple[DiagnosticRecord, ...]] = {}
        self._disposed = False

    def set(self, key: str, records: Iterable[DiagnosticRecord]) -> None:
        """Replace the diagnostics stored under ``key``.

        An empty ``records`` removes the key so absent files never linger
        with zero findings.
        """

        if self._disposed:
            return
        materialised = tuple(records)
        if materialised:
            self._entries[key] = materialised
        else:
            self._entries.pop(key, None)

    def delete(self, key: str) -> None:
        """Remove the diagnostics stored under ``key`` if any."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every stored diagnostic."""
        self._entries.clear()

    def get(self, key: str) -> Sequence[DiagnosticRecord]:
        """Return the diagnostics stored under ``key`` (empty when absent)."""
        return self._entries.get(key, ())

    def keys(self) -> list[str]:
        return list(self._entries)

    def items(self) -> Iterator[tuple[str, Sequence[DiagnosticRecord]]]:
        yield from self._entries.items()

    def total(self) -> int:
        """Return the number of diagnostics across all files."""
        return sum(len(records) for records in self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Clear the store and ignore any later population."""
        self.clear()
        self._disposed = True

    def save(self, path: Path) -> None:
        """Write a JSON snapshot of the store to ``path``."""

        payload = {key: list(records) for key, records in self._entries.items()}
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(_SNAPSHOT_ADAPTER.dump_json(payload, indent=2))

    def load(self, path: Path) -> None:
        """Replace the store contents with a snapshot written by :meth:`save`.

        A missing or unreadable snapshot leaves the store empty.
        """

        self.clear()
        if not path.is_file():
            return
        try:
            payload = _SNAPSHOT_ADAPTER.validate_json(path.read_bytes())
        except (OSError, ValueError):
            return
        for key, records in payload.items():
            self.set(key, records)


__all__ = ["DiagnosticStore", "file_key"]

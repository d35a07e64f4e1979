# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from pydantic import ValidationError

from ..models import DiagnosticRecord
from ..severity import CheckKind, DiagnosticSeverity

# Named groups every grammar must define.
REQUIRED_GROUPS: frozenset[str] = frozenset({"file", "line", "kind", "code", "message"})


@dataclass(frozen=True, slots=True)
class CheckpatchGrammar:
    """A named regular expression describing one generation of checker output.

    The pattern is applied repeatedly over the whole accumulated text, so a
    single match may span several lines.
    """

    name: str
    pattern: re.Pattern[str]

    def __post_init__(self) -> None:
        missing = REQUIRED_GROUPS - set(self.pattern.groupindex)
        if missing:
            raise ValueError(f"grammar {self.name!r} lacks named groups: {', '.join(sorted(missing))}")

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        """Yield every non-overlapping match of the grammar in ``text``."""
        return self.pattern.finditer(text)

    def count(self, text: str) -> int:
        """Return how many records the grammar recognises in ``text``."""
        return sum(1 for _ in self.finditer(text))


def build_record(match: re.Match[str], severity: DiagnosticSeverity) -> DiagnosticRecord | None:
    """Return a :class:`DiagnosticRecord` for ``match`` or ``None`` when malformed.

    Args:
        match: Match produced by a :class:`CheckpatchGrammar`.
        severity: Severity configured for every record.

    Returns:
        DiagnosticRecord | None: Record, or ``None`` for fragments that do not
        carry a usable location (e.g. line ``0``).
    """

    try:
        return DiagnosticRecord(
            file_path=match.group("file").strip(),
            line=int(match.group("line")),
            kind=CheckKind(match.group("kind")),
            code=match.group("code"),
            message=match.group("message"),
            severity=severity,
        )
    except (ValidationError, ValueError):
        return None


def iter_records(
    text: str,
    grammar: CheckpatchGrammar,
    severity: DiagnosticSeverity,
) -> Iterator[DiagnosticRecord]:
    """Yield records for every well-formed match of ``grammar`` in ``text``."""

    for match in grammar.finditer(text):
        record = build_record(match, severity)
        if record is not None:
            yield record


__all__ = [
    "CheckpatchGrammar",
    "REQUIRED_GROUPS",
    "build_record",
    "iter_records",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse checkpatch text output into file-keyed diagnostics.

Two output generations are recognised:

* ``single-line`` (``--showfile``, current checkpatch)::

      drivers/foo.c:42: ERROR:TRAILING_WHITESPACE: trailing whitespace

* ``two-line`` (older checkpatch, location on a ``#<n>: FILE:`` line)::

      WARNING:LONG_LINE: line length of 104 exceeds 100 columns
      #12: FILE: drivers/foo.c:42:

Text that matches neither form (context lines, summaries, blank lines) is
ignored.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Final

from ..models import DiagnosticRecord, GrammarChoice
from ..severity import DEFAULT_SEVERITY, DiagnosticSeverity
from ..store import DiagnosticStore, file_key
from .base import CheckpatchGrammar, iter_records

_KINDS: Final[str] = r"(?P<kind>WARNING|ERROR|CHECK)"
_CATEGORY: Final[str] = r" ?(?P<code>[^:\n]+):(?P<message>[^\n]+)"

SINGLE_LINE_GRAMMAR: Final[CheckpatchGrammar] = CheckpatchGrammar(
    name=GrammarChoice.SINGLE_LINE.value,
    pattern=re.compile(
        rf"^(?P<file>[^\n]+?):(?P<line>\d+): {_KINDS}:{_CATEGORY}$",
        re.MULTILINE,
    ),
)

TWO_LINE_GRAMMAR: Final[CheckpatchGrammar] = CheckpatchGrammar(
    name=GrammarChoice.TWO_LINE.value,
    pattern=re.compile(
        rf"^{_KINDS}:{_CATEGORY}\r?\n#\d+: FILE: (?P<file>[^\n]+?):(?P<line>\d+):",
        re.MULTILINE,
    ),
)

GRAMMARS: Final[Mapping[GrammarChoice, CheckpatchGrammar]] = {
    GrammarChoice.SINGLE_LINE: SINGLE_LINE_GRAMMAR,
    GrammarChoice.TWO_LINE: TWO_LINE_GRAMMAR,
}

# Both summary generations: with and without the "checks" count.
SUMMARY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"total: \d+ errors, \d+ warnings,( \d+ checks,)? \d+ lines checked",
)


def has_summary(text: str) -> bool:
    """Return ``True`` when ``text`` contains a checkpatch summary line."""
    return SUMMARY_PATTERN.search(text) is not None


def select_grammar(
    text: str,
    choice: GrammarChoice | CheckpatchGrammar = GrammarChoice.AUTO,
) -> CheckpatchGrammar:
    """Return the grammar used to parse ``text``.

    ``AUTO`` trial-parses ``text`` with every known grammar and keeps the one
    recognising the most records; the single-line grammar wins ties.
    """

    if isinstance(choice, CheckpatchGrammar):
        return choice
    if choice is not GrammarChoice.AUTO:
        return GRAMMARS[choice]
    best = SINGLE_LINE_GRAMMAR
    best_count = best.count(text)
    for grammar in GRAMMARS.values():
        count = grammar.count(text)
        if count > best_count:
            best, best_count = grammar, count
    return best


@dataclass(slots=True)
class ParsedOutput:
    """Diagnostics grouped by the file path captured from the output."""

    grammar: str
    files: dict[str, list[DiagnosticRecord]] = field(default_factory=dict)

    @property
    def count(self) -> int:
        """Return the number of records across all files."""
        return sum(len(records) for records in self.files.values())


@dataclass(slots=True)
class CheckpatchParser:
    """Turn accumulated checker output into grouped diagnostics."""

    grammar: GrammarChoice | CheckpatchGrammar = GrammarChoice.AUTO
    severity: DiagnosticSeverity = DEFAULT_SEVERITY

    def parse(self, text: str) -> ParsedOutput:
        """Parse ``text``; never raises on unrecognised content."""

        grammar = select_grammar(text, self.grammar)
        parsed = ParsedOutput(grammar=grammar.name)
        for record in iter_records(text, grammar, self.severity):
            parsed.files.setdefault(record.file_path, []).append(record)
        return parsed

    def publish(self, text: str, store: DiagnosticStore, *, base_path: str = "") -> int:
        """Parse ``text`` and write each file's records into ``store``.

        Args:
            text: Accumulated checker stdout.
            store: Store receiving one replacement per reported file.
            base_path: Directory captured paths are relative to; empty for
                single-file checks, the repository root for commit checks.

        Returns:
            int: Number of diagnostics produced.
        """

        parsed = self.parse(text)
        publish_diagnostics(parsed.files, store, base_path=base_path)
        return parsed.count


def publish_diagnostics(
    files: Mapping[str, Sequence[DiagnosticRecord]],
    store: DiagnosticStore,
    *,
    base_path: str = "",
) -> None:
    """Replace the store entry of every file in ``files``."""

    for captured, records in files.items():
        store.set(file_key(captured, base_path), records)


def parse_checkpatch(
    text: str,
    *,
    grammar: GrammarChoice | CheckpatchGrammar = GrammarChoice.AUTO,
    severity: DiagnosticSeverity = DEFAULT_SEVERITY,
) -> dict[str, list[DiagnosticRecord]]:
    """Return the diagnostics in ``text`` grouped by captured file path."""

    return CheckpatchParser(grammar=grammar, severity=severity).parse(text).files


__all__ = [
    "CheckpatchParser",
    "GRAMMARS",
    "ParsedOutput",
    "SINGLE_LINE_GRAMMAR",
    "SUMMARY_PATTERN",
    "TWO_LINE_GRAMMAR",
    "has_summary",
    "parse_checkpatch",
    "publish_diagnostics",
    "select_grammar",
]

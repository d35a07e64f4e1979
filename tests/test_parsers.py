# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for checkpatch output parsing."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from pycheckpatch.constants import END_OF_LINE
from pycheckpatch.models import GrammarChoice
from pycheckpatch.parsers import (
    SINGLE_LINE_GRAMMAR,
    TWO_LINE_GRAMMAR,
    CheckpatchGrammar,
    CheckpatchParser,
    has_summary,
    parse_checkpatch,
    select_grammar,
)
from pycheckpatch.severity import CheckKind, DiagnosticSeverity
from pycheckpatch.store import DiagnosticStore, file_key

SINGLE_LINE_OUTPUT = """\
drivers/foo.c:42: ERROR:TRAILING_WHITESPACE: trailing whitespace
+int x = 1; $
drivers/foo.c:57: WARNING:LONG_LINE: line length of 104 exceeds 100 columns
drivers/bar.h:3: CHECK:SPACING: spaces preferred around that '+' (ctx:VxV)

total: 1 errors, 1 warnings, 1 checks, 120 lines checked
"""

TWO_LINE_OUTPUT = """\
ERROR: TRAILING_WHITESPACE: trailing whitespace
#12: FILE: drivers/foo.c:42:
+int x = 1; $

WARNING: LONG_LINE: line over 80 characters
#20: FILE: drivers/foo.c:57:
+\tpr_info("a very long line");

total: 1 errors, 1 warnings, 60 lines checked
"""


def test_single_line_record_fields() -> None:
    groups = parse_checkpatch(
        "drivers/foo.c:42: ERROR: CODING_STYLE:trailing whitespace\n",
        severity=DiagnosticSeverity.WARNING,
    )

    assert list(groups) == ["drivers/foo.c"]
    (record,) = groups["drivers/foo.c"]
    assert record.line == 42
    assert record.start_line == 41
    assert record.end_column == END_OF_LINE
    assert record.kind is CheckKind.ERROR
    assert record.code == "CODING_STYLE"
    assert record.text == "ERROR:trailing whitespace"
    assert record.severity is DiagnosticSeverity.WARNING
    assert record.source == "checkpatch"


def test_groups_by_captured_file_in_order() -> None:
    groups = parse_checkpatch(SINGLE_LINE_OUTPUT)

    assert list(groups) == ["drivers/foo.c", "drivers/bar.h"]
    assert [record.line for record in groups["drivers/foo.c"]] == [42, 57]
    assert [record.kind for record in groups["drivers/foo.c"]] == [CheckKind.ERROR, CheckKind.WARNING]
    assert groups["drivers/bar.h"][0].code == "SPACING"
    assert groups["drivers/bar.h"][0].message == "spaces preferred around that '+' (ctx:VxV)"


def test_unrecognised_text_yields_nothing() -> None:
    text = "some banner\n\nNO_TYPE: not a finding\ntotal: 0 errors, 0 warnings, 3 lines checked\n"
    assert parse_checkpatch(text) == {}
    assert parse_checkpatch("") == {}


def test_line_zero_is_skipped() -> None:
    text = "foo.c:0: WARNING:MISSING_EOF: no newline\nfoo.c:2: WARNING:OTHER: real\n"
    groups = parse_checkpatch(text)
    assert [record.line for record in groups["foo.c"]] == [2]


def test_two_line_grammar_matches_legacy_output() -> None:
    groups = parse_checkpatch(TWO_LINE_OUTPUT, grammar=GrammarChoice.TWO_LINE)

    records = groups["drivers/foo.c"]
    assert [record.line for record in records] == [42, 57]
    assert records[0].code == "TRAILING_WHITESPACE"
    assert records[0].text == "ERROR:trailing whitespace"
    assert records[1].text == "WARNING:line over 80 characters"


def test_auto_selects_the_grammar_with_most_matches() -> None:
    assert select_grammar(TWO_LINE_OUTPUT) is TWO_LINE_GRAMMAR
    assert select_grammar(SINGLE_LINE_OUTPUT) is SINGLE_LINE_GRAMMAR
    # No matches at all: the current grammar wins the tie.
    assert select_grammar("nothing here") is SINGLE_LINE_GRAMMAR
    assert len(parse_checkpatch(TWO_LINE_OUTPUT)["drivers/foo.c"]) == 2


def test_explicit_grammar_is_honoured() -> None:
    assert parse_checkpatch(TWO_LINE_OUTPUT, grammar=GrammarChoice.SINGLE_LINE) == {}


def test_custom_grammar_can_be_injected() -> None:
    grammar = CheckpatchGrammar(
        name="custom",
        pattern=re.compile(
            r"^(?P<kind>ERROR|WARNING|CHECK)\|(?P<code>\w+)\|(?P<file>[^|]+)\|(?P<line>\d+)\|(?P<message>.+)$",
            re.MULTILINE,
        ),
    )
    groups = parse_checkpatch("WARNING|LONG_LINE|a.c|7|too long\n", grammar=grammar)
    assert groups["a.c"][0].text == "WARNING:too long"


def test_grammar_requires_named_groups() -> None:
    with pytest.raises(ValueError, match="lacks named groups"):
        CheckpatchGrammar(name="broken", pattern=re.compile(r"(?P<file>.+):(?P<line>\d+)"))


def test_summary_detection_accepts_both_generations() -> None:
    assert has_summary("total: 0 errors, 0 warnings, 1 lines checked")
    assert has_summary("x\ntotal: 2 errors, 1 warnings, 4 checks, 17 lines checked\n")
    assert not has_summary("total: errors, warnings")


def test_publish_replaces_store_entries_and_counts(tmp_path: Path) -> None:
    store = DiagnosticStore()
    parser = CheckpatchParser()

    first = parser.publish(SINGLE_LINE_OUTPUT, store, base_path=str(tmp_path))
    second = parser.publish(SINGLE_LINE_OUTPUT, store, base_path=str(tmp_path))

    assert first == second == 3
    assert store.total() == 3
    assert sorted(store.keys()) == sorted(
        [file_key("drivers/foo.c", tmp_path), file_key("drivers/bar.h", tmp_path)],
    )
    assert len(store.get(file_key(tmp_path / "drivers" / "foo.c"))) == 2

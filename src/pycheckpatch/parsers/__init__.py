# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Public parser exports for converting checkpatch output into diagnostics."""

from __future__ import annotations

from .base import CheckpatchGrammar, build_record, iter_records
from .checkpatch import (
    GRAMMARS,
    SINGLE_LINE_GRAMMAR,
    SUMMARY_PATTERN,
    TWO_LINE_GRAMMAR,
    CheckpatchParser,
    ParsedOutput,
    has_summary,
    parse_checkpatch,
    publish_diagnostics,
    select_grammar,
)

__all__ = [
    "CheckpatchGrammar",
    "CheckpatchParser",
    "GRAMMARS",
    "ParsedOutput",
    "SINGLE_LINE_GRAMMAR",
    "SUMMARY_PATTERN",
    "TWO_LINE_GRAMMAR",
    "build_record",
    "has_summary",
    "iter_records",
    "parse_checkpatch",
    "publish_diagnostics",
    "select_grammar",
]

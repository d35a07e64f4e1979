# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class DiagnosticSeverity(str, Enum):
    """Severity attached to every diagnostic surfaced to the host."""

    ERROR = "Error"
    WARNING = "Warning"
    INFORMATION = "Information"
    HINT = "Hint"


class CheckKind(str, Enum):
    """Finding type printed by checkpatch in front of each category."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    CHECK = "CHECK"


DEFAULT_SEVERITY: Final[DiagnosticSeverity] = DiagnosticSeverity.INFORMATION

_SEVERITY_LABELS: Final[dict[str, DiagnosticSeverity]] = {
    severity.value.lower(): severity for severity in DiagnosticSeverity
}


def severity_from_label(
    label: str | None,
    default: DiagnosticSeverity = DEFAULT_SEVERITY,
) -> DiagnosticSeverity:
    """Return the severity named by ``label`` (case-insensitive).

    Unknown or missing labels fall back to ``default`` so a typo in the
    settings never disables diagnostics altogether.

    Args:
        label: Severity name such as ``"Warning"``.
        default: Severity returned when ``label`` is not recognised.

    Returns:
        DiagnosticSeverity: Matching severity or ``default``.
    """

    if not label:
        return default
    return _SEVERITY_LABELS.get(label.strip().lower(), default)


__all__ = [
    "CheckKind",
    "DEFAULT_SEVERITY",
    "DiagnosticSeverity",
    "severity_from_label",
]

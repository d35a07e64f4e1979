# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the pycheckpatch package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DIAGNOSTIC_SOURCE, END_OF_LINE
from .severity import DEFAULT_SEVERITY, CheckKind, DiagnosticSeverity


class GrammarChoice(str, Enum):
    """Selects how checker output is interpreted."""

    AUTO = "auto"
    SINGLE_LINE = "single-line"
    TWO_LINE = "two-line"


class InvocationMode(str, Enum):
    """Scope of a single checker invocation."""

    FILE = "file"
    COMMIT = "commit"


class LinterConfig(BaseModel):
    """Effective, immutable checker configuration for one scope."""

    model_config = ConfigDict(frozen=True)

    executable_path: str
    args: tuple[str, ...] = Field(default_factory=tuple)
    exclude_globs: tuple[str, ...] = Field(default_factory=tuple)
    use_folder_as_cwd: bool = False
    diagnostic_severity: DiagnosticSeverity = DEFAULT_SEVERITY
    grammar: GrammarChoice = GrammarChoice.AUTO


class FolderOverride(BaseModel):
    """Folder-level configuration values; ``None`` inherits the common value."""

    model_config = ConfigDict(frozen=True)

    folder: Path
    executable_path: str | None = None
    args: tuple[str, ...] | None = None
    exclude_globs: tuple[str, ...] | None = None
    use_folder_as_cwd: bool | None = None
    diagnostic_severity: DiagnosticSeverity | None = None
    grammar: GrammarChoice | None = None

    @property
    def has_path_override(self) -> bool:
        """Return ``True`` when the folder names its own checker executable."""
        return bool(self.executable_path)


class DiagnosticRecord(BaseModel):
    """A single checkpatch finding anchored to a file line."""

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(min_length=1)
    line: int = Field(ge=1)
    kind: CheckKind
    code: str
    message: str
    severity: DiagnosticSeverity = DEFAULT_SEVERITY

    @field_validator("code", "message", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @property
    def start_line(self) -> int:
        """Return the zero-based line index used by editor ranges."""
        return self.line - 1

    @property
    def end_column(self) -> int:
        """Return the end column; diagnostics always cover the whole line."""
        return END_OF_LINE

    @property
    def text(self) -> str:
        """Return the rendered message shown in the problems list."""
        return f"{self.kind.value}:{self.message}"

    @property
    def source(self) -> str:
        """Return the source tag attached to every diagnostic."""
        return DIAGNOSTIC_SOURCE


class InvocationContext(BaseModel):
    """Everything needed to run one check; discarded once parsed."""

    model_config = ConfigDict(frozen=True)

    mode: InvocationMode
    target: str
    cwd: Path | None = None
    config: LinterConfig
    base_path: str = ""
    workspace_folder: Path | None = None

    @property
    def description(self) -> str:
        """Return a short label used in log and notification messages."""
        if self.mode is InvocationMode.COMMIT:
            return f"commit {self.target} @ \"{self.base_path}\""
        return f"file \"{self.target}\""


class InvocationFailure(BaseModel):
    """Structured failure for an invocation that never produced output."""

    model_config = ConfigDict(frozen=True)

    executable: str
    reason: str
    stderr: str = ""
    cancelled: bool = False

    def describe(self) -> str:
        """Return a human-readable summary naming the executable and stderr."""
        detail = f'failed to call "{self.executable}": {self.reason}'
        if self.stderr:
            detail += f'. Stderr: "{self.stderr.strip()}"'
        return detail


class CheckResult(BaseModel):
    """Outcome of a file or commit check."""

    model_config = ConfigDict(frozen=True)

    context: InvocationContext
    count: int = 0
    failure: InvocationFailure | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the checker ran and its output was parsed."""
        return self.failure is None


__all__ = [
    "CheckResult",
    "DiagnosticRecord",
    "FolderOverride",
    "GrammarChoice",
    "InvocationContext",
    "InvocationFailure",
    "InvocationMode",
    "LinterConfig",
]

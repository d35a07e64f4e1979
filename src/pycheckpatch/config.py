# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings models describing the checkpatch configuration surface."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_PROBE_TIMEOUT
from .models import GrammarChoice
from .severity import DEFAULT_SEVERITY, DiagnosticSeverity, severity_from_label


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class RunMode(str, Enum):
    """When file checks are triggered automatically."""

    MANUAL = "manual"
    ON_SAVE = "onSave"

    def toggled(self) -> RunMode:
        """Return the opposite run mode."""
        return RunMode.MANUAL if self is RunMode.ON_SAVE else RunMode.ON_SAVE


def _coerce_string_sequence(value: Any, context: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items: list[Any] = [value]
    elif isinstance(value, Iterable) and not isinstance(value, bytes):
        items = list(value)
    else:
        raise ConfigError(f"{context} must be a string or array of strings")
    result: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ConfigError(f"{context} entries must be strings")
        trimmed = item.strip()
        if trimmed:
            result.append(trimmed)
    return result


class CheckpatchSettings(BaseModel):
    """Complete settings for the common (global) scope."""

    model_config = ConfigDict(extra="forbid")

    checkpatch_path: str = "checkpatch.pl"
    checkpatch_args: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    use_folder_as_cwd: bool = False
    diagnostic_level: DiagnosticSeverity = DEFAULT_SEVERITY
    run: RunMode = RunMode.ON_SAVE
    grammar: GrammarChoice = GrammarChoice.AUTO
    probe_timeout: float = Field(default=DEFAULT_PROBE_TIMEOUT, gt=0)

    @field_validator("checkpatch_args", "exclude", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> list[str]:
        return _coerce_string_sequence(value, "checkpatch_args/exclude")

    @field_validator("diagnostic_level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> DiagnosticSeverity:
        if isinstance(value, DiagnosticSeverity):
            return value
        return severity_from_label(str(value) if value is not None else None)


class FolderSettings(BaseModel):
    """Values explicitly set for one workspace folder."""

    model_config = ConfigDict(extra="forbid")

    checkpatch_path: str | None = None
    checkpatch_args: list[str] | None = None
    exclude: list[str] | None = None
    use_folder_as_cwd: bool | None = None
    diagnostic_level: DiagnosticSeverity | None = None
    grammar: GrammarChoice | None = None

    @field_validator("checkpatch_args", "exclude", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return _coerce_string_sequence(value, "checkpatch_args/exclude")

    @field_validator("diagnostic_level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> DiagnosticSeverity | None:
        if value is None or isinstance(value, DiagnosticSeverity):
            return value
        return severity_from_label(str(value))


__all__ = [
    "CheckpatchSettings",
    "ConfigError",
    "FolderSettings",
    "RunMode",
]

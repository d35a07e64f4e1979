# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Interfaces the host environment provides to the checkpatch provider."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Protocol, TypeVar, runtime_checkable

ValueT = TypeVar("ValueT")


@dataclass(frozen=True, slots=True)
class CommitEntry:
    """One entry of a repository log."""

    message: str
    hash: str


@dataclass(frozen=True, slots=True)
class PickItem(Generic[ValueT]):
    """Entry offered to the user in a pick list."""

    label: str
    description: str
    value: ValueT


@runtime_checkable
class Repository(Protocol):
    """Version-controlled repository known to the host."""

    @property
    def root_path(self) -> Path:
        """Return the absolute repository root."""
        ...

    def log(self, max_entries: int) -> Sequence[CommitEntry]:
        """Return up to ``max_entries`` commits, newest first.

        Args:
            max_entries: Upper bound on the number of entries returned.

        Returns:
            Sequence[CommitEntry]: Commit messages and hashes.
        """
        ...


@runtime_checkable
class VersionControl(Protocol):
    """Source of repositories for commit-mode checks."""

    def repositories(self) -> Sequence[Repository]:
        """Return the repositories open in the workspace."""
        ...


@runtime_checkable
class HostUI(Protocol):
    """User-facing notifications and selection prompts."""

    def show_error(self, message: str) -> None:
        """Display a blocking error notification."""
        ...

    def show_info(self, message: str) -> None:
        """Display an informational notification."""
        ...

    async def pick(
        self,
        items: Sequence[PickItem[ValueT]],
        *,
        placeholder: str,
    ) -> PickItem[ValueT] | None:
        """Let the user choose one of ``items``.

        Args:
            items: Candidate entries in display order.
            placeholder: Prompt shown above the list.

        Returns:
            PickItem | None: Chosen entry, or ``None`` when dismissed.
        """
        ...

    def reveal_problems(self) -> None:
        """Bring the diagnostics list into view."""
        ...


__all__ = [
    "CommitEntry",
    "HostUI",
    "PickItem",
    "Repository",
    "VersionControl",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Glob-based suppression of files from checking."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import Path


class ExclusionFilter:
    """Decide whether a target file is excluded by any configured glob.

    Patterns use :mod:`fnmatch` semantics (``*`` also crosses directory
    separators) and are tested against the absolute POSIX form of the file
    and, when a workspace folder is given, against the folder-relative path.
    """

    def __init__(self, globs: Iterable[str]) -> None:
        self.globs = tuple(pattern for pattern in globs if pattern)

    def _candidates(self, path: Path, folder: Path | None) -> list[str]:
        candidates = [path.as_posix()]
        if folder is not None and path.is_relative_to(folder):
            candidates.append(path.relative_to(folder).as_posix())
        return candidates

    def matching_glob(self, path: Path, *, folder: Path | None = None) -> str | None:
        """Return the first glob that excludes ``path``, or ``None``."""

        candidates = self._candidates(path, folder)
        for pattern in self.globs:
            normalised = pattern.replace("\\", "/")
            if any(fnmatchcase(candidate, normalised) for candidate in candidates):
                return pattern
        return None

    def is_excluded(self, path: Path, *, folder: Path | None = None) -> bool:
        """Return ``True`` when any glob matches ``path``."""
        return self.matching_glob(path, folder=folder) is not None


__all__ = ["ExclusionFilter"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-backed version-control collaborator for commit-mode checks."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final

from .interfaces import CommitEntry, Repository
from .process import CommandOptions, run_command

GitRunner = Callable[[Sequence[str], Path], list[str]]

_FIELD_SEPARATOR: Final[str] = "\x1f"
_LOG_FORMAT: Final[str] = f"--format=%H{_FIELD_SEPARATOR}%s"


def default_git_runner(cmd: Sequence[str], root: Path) -> list[str]:
    """Execute ``cmd`` in ``root`` returning stdout lines while swallowing failures.

    Args:
        cmd: Git command to execute.
        root: Directory the command runs in.

    Returns:
        list[str]: Raw stdout lines, empty when git is missing or failed.
    """

    try:
        cp = run_command(cmd, options=CommandOptions(cwd=root, capture_output=True, text=True))
    except (FileNotFoundError, OSError):
        return []
    if cp.returncode != 0:
        return []
    return (cp.stdout or "").splitlines()


class GitRepository:
    """A git work tree rooted at ``root_path``."""

    def __init__(self, root_path: Path, *, runner: GitRunner | None = None) -> None:
        self._root_path = root_path
        self._runner = runner or default_git_runner

    @property
    def root_path(self) -> Path:
        return self._root_path

    def log(self, max_entries: int) -> list[CommitEntry]:
        """Return up to ``max_entries`` commits reachable from ``HEAD``, newest first."""

        cmd = ["git", "log", f"--max-count={max_entries}", _LOG_FORMAT]
        entries: list[CommitEntry] = []
        for raw in self._runner(cmd, self._root_path):
            commit_hash, sep, message = raw.partition(_FIELD_SEPARATOR)
            if not sep or not commit_hash.strip():
                continue
            entries.append(CommitEntry(message=message.strip(), hash=commit_hash.strip()))
        return entries[:max_entries]

    def __repr__(self) -> str:
        return f"GitRepository({str(self._root_path)!r})"


class GitVersionControl:
    """Discover the git repositories containing the workspace folders."""

    def __init__(self, folders: Sequence[Path], *, runner: GitRunner | None = None) -> None:
        self._folders = tuple(folders)
        self._runner = runner or default_git_runner

    def repositories(self) -> list[Repository]:
        """Return one repository per distinct top-level work tree."""

        seen: set[Path] = set()
        repositories: list[Repository] = []
        for folder in self._folders:
            output = self._runner(["git", "rev-parse", "--show-toplevel"], folder)
            if not output or not output[0].strip():
                continue
            root = Path(output[0].strip())
            if root in seen:
                continue
            seen.add(root)
            repositories.append(GitRepository(root, runner=self._runner))
        return repositories


__all__ = ["GitRepository", "GitRunner", "GitVersionControl", "default_git_runner"]

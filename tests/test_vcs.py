# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for git repository discovery and commit logs."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pycheckpatch.interfaces import CommitEntry
from pycheckpatch.vcs import GitRepository, GitVersionControl, default_git_runner


class ScriptedGit:
    """Answer git commands from a table keyed by (subcommand, cwd)."""

    def __init__(self, answers: dict[tuple[str, Path], list[str]]) -> None:
        self.answers = answers
        self.commands: list[tuple[list[str], Path]] = []

    def __call__(self, cmd: Sequence[str], root: Path) -> list[str]:
        self.commands.append((list(cmd), root))
        return self.answers.get((cmd[1], root), [])


def test_log_splits_hash_and_subject(tmp_path: Path) -> None:
    git = ScriptedGit(
        {
            ("log", tmp_path): [
                "abc123\x1fnet: fix: handle colons: here",
                "garbage without separator",
                "def456\x1f  Initial import  ",
            ],
        },
    )

    entries = GitRepository(tmp_path, runner=git).log(8)

    assert entries == [
        CommitEntry(message="net: fix: handle colons: here", hash="abc123"),
        CommitEntry(message="Initial import", hash="def456"),
    ]
    assert "--max-count=8" in git.commands[0][0]


def test_repositories_are_deduplicated(tmp_path: Path) -> None:
    first = tmp_path / "linux"
    nested = first / "drivers"
    loose = tmp_path / "notes"
    git = ScriptedGit(
        {
            ("rev-parse", first): [str(first)],
            ("rev-parse", nested): [str(first)],
        },
    )

    repositories = GitVersionControl([first, nested, loose], runner=git).repositories()

    assert [repo.root_path for repo in repositories] == [first]


def test_default_runner_returns_nothing_outside_a_repository(tmp_path: Path) -> None:
    assert default_git_runner(["git", "rev-parse", "--show-toplevel"], tmp_path / "absent") == []

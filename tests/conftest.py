# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from pycheckpatch.interfaces import PickItem

_FAKE_CHECKER = r'''
import json
import os
import pathlib
import sys
import time

here = pathlib.Path(__file__)
args = sys.argv[1:]
with open(here.with_suffix(".calls"), "a", encoding="utf-8") as handle:
    handle.write(json.dumps({"args": args, "cwd": os.getcwd()}) + "\n")

if "--no-tree" in args and "-" in args:
    sys.stdin.read()
    probe = here.with_suffix(".probe")
    if probe.exists():
        sys.stdout.write(probe.read_text(encoding="utf-8"))
    else:
        sys.stdout.write("total: 0 errors, 0 warnings, 1 lines checked\n")
    sys.exit(0)

delay = here.with_suffix(".sleep")
if delay.exists():
    time.sleep(float(delay.read_text(encoding="utf-8")))

flag = "-f" if "-f" in args else "-g"
target = args[args.index(flag) + 1]
output = here.with_suffix(".out")
template = output.read_text(encoding="utf-8") if output.exists() else ""
sys.stdout.write(template.replace("{target}", target))
sys.stderr.write("fake checkpatch done\n")
sys.exit(1 if template else 0)
'''


class FakeCheckpatch:
    """A Python script standing in for ``checkpatch.pl``."""

    def __init__(self, root: Path) -> None:
        root.mkdir(parents=True, exist_ok=True)
        self.script = root / "fake_checkpatch.py"
        self.script.write_text(_FAKE_CHECKER, encoding="utf-8")

    def set_output(self, text: str) -> None:
        """Set the check output; ``{target}`` expands to the file or commit."""
        self.script.with_suffix(".out").write_text(text, encoding="utf-8")

    def set_probe_output(self, text: str) -> None:
        self.script.with_suffix(".probe").write_text(text, encoding="utf-8")

    def set_delay(self, seconds: float) -> None:
        self.script.with_suffix(".sleep").write_text(str(seconds), encoding="utf-8")

    @property
    def executable(self) -> str:
        return sys.executable

    @property
    def args(self) -> list[str]:
        return [shlex.quote(str(self.script))]

    def calls(self) -> list[dict[str, Any]]:
        log = self.script.with_suffix(".calls")
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]

    def check_calls(self) -> list[dict[str, Any]]:
        return [call for call in self.calls() if "--no-tree" not in call["args"]]

    def settings_toml(self, **extra: str) -> str:
        """Return a ``[checkpatch]`` table running this script."""

        values = {
            "checkpatch_path": json.dumps(self.executable),
            "checkpatch_args": json.dumps(self.args),
            **extra,
        }
        lines = ["[checkpatch]", *(f"{key} = {value}" for key, value in values.items())]
        return "\n".join(lines) + "\n"


class RecordingHost:
    """Host UI double recording notifications and answering picks by index."""

    def __init__(self, picks: Sequence[int | None] = ()) -> None:
        self.errors: list[str] = []
        self.infos: list[str] = []
        self.revealed = 0
        self.placeholders: list[str] = []
        self.offered: list[list[PickItem[Any]]] = []
        self._picks = list(picks)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def show_info(self, message: str) -> None:
        self.infos.append(message)

    async def pick(self, items: Sequence[PickItem[Any]], *, placeholder: str) -> PickItem[Any] | None:
        self.placeholders.append(placeholder)
        self.offered.append(list(items))
        if not self._picks:
            return None
        index = self._picks.pop(0)
        return None if index is None else items[index]

    def reveal_problems(self) -> None:
        self.revealed += 1


@pytest.fixture
def fake_checkpatch(tmp_path: Path) -> FakeCheckpatch:
    """Return a fake checker living outside the workspace folders."""
    return FakeCheckpatch(tmp_path / "tools")


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return an empty workspace folder."""

    root = tmp_path / "ws"
    root.mkdir()
    return root


@pytest.fixture
def user_config(tmp_path: Path) -> Path:
    """Return a user settings path that does not exist yet."""
    return tmp_path / "home" / ".checkpatch.toml"


@pytest.fixture
def make_host() -> type[RecordingHost]:
    """Return the host double class for tests scripting their own picks."""
    return RecordingHost

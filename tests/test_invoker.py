# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for asynchronous checker invocations."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from pycheckpatch.invoker import (
    LinterInvocation,
    LinterInvoker,
    build_command,
    build_commit_args,
    build_file_args,
    slot_key,
)
from pycheckpatch.models import InvocationContext, InvocationFailure, InvocationMode, LinterConfig


def _context(fake_checkpatch, target: str, *, mode: InvocationMode = InvocationMode.FILE) -> InvocationContext:
    return InvocationContext(
        mode=mode,
        target=target,
        config=LinterConfig(executable_path=fake_checkpatch.executable, args=tuple(fake_checkpatch.args)),
    )


def test_file_args_append_type_and_file_flags() -> None:
    assert build_file_args(["--strict", "--ignore FOO,BAR"], "C:\\src\\a.c") == [
        "--strict",
        "--ignore",
        "FOO,BAR",
        "--show-types",
        "--showfile",
        "-f",
        "C:/src/a.c",
    ]


def test_commit_args_append_commit_flag() -> None:
    assert build_commit_args([], "abc123") == ["--show-types", "--showfile", "-g", "abc123"]


def test_build_command_and_slot_keys(tmp_path: Path) -> None:
    config = LinterConfig(executable_path="/opt/checkpatch.pl")
    file_context = InvocationContext(mode=InvocationMode.FILE, target=str(tmp_path / "a.c"), config=config)
    commit_context = InvocationContext(mode=InvocationMode.COMMIT, target="abc", config=config)

    assert build_command(file_context)[0] == "/opt/checkpatch.pl"
    assert slot_key(file_context) == (tmp_path / "a.c").as_uri()
    assert slot_key(commit_context) == slot_key(
        InvocationContext(mode=InvocationMode.COMMIT, target="def", config=config),
    )


def test_run_returns_stdout_even_with_nonzero_exit(fake_checkpatch, tmp_path: Path) -> None:
    fake_checkpatch.set_output("{target}:3: WARNING:LONG_LINE: too long\n")
    target = str(tmp_path / "a.c")

    outcome = asyncio.run(LinterInvoker().run(_context(fake_checkpatch, target)))

    assert outcome == f"{target}:3: WARNING:LONG_LINE: too long\n"
    (call,) = fake_checkpatch.calls()
    assert call["args"][-4:] == ["--show-types", "--showfile", "-f", target]


def test_commit_mode_passes_commit(fake_checkpatch) -> None:
    fake_checkpatch.set_output("{target}\n")
    outcome = asyncio.run(LinterInvoker().run(_context(fake_checkpatch, "abc123", mode=InvocationMode.COMMIT)))

    assert outcome == "abc123\n"
    assert fake_checkpatch.calls()[0]["args"][-2:] == ["-g", "abc123"]


def test_spawn_failure_is_structured(tmp_path: Path) -> None:
    missing = str(tmp_path / "no" / "checkpatch.pl")
    context = InvocationContext(
        mode=InvocationMode.FILE,
        target=str(tmp_path / "a.c"),
        config=LinterConfig(executable_path=missing),
    )

    outcome = asyncio.run(LinterInvoker().run(context))

    assert isinstance(outcome, InvocationFailure)
    assert outcome.executable == missing
    assert not outcome.cancelled
    assert missing in outcome.describe()


def test_newer_invocation_cancels_superseded_one(fake_checkpatch, tmp_path: Path) -> None:
    fake_checkpatch.set_output("{target}:1: ERROR:X: y\n")
    fake_checkpatch.set_delay(0.5)
    target = str(tmp_path / "a.c")
    invoker = LinterInvoker()

    async def scenario() -> tuple[object, object]:
        first = asyncio.create_task(invoker.run(_context(fake_checkpatch, target)))
        await asyncio.sleep(0.1)
        second = asyncio.create_task(invoker.run(_context(fake_checkpatch, target)))
        return await first, await second

    first, second = asyncio.run(scenario())

    assert isinstance(first, InvocationFailure)
    assert first.cancelled
    assert second == f"{target}:1: ERROR:X: y\n"
    assert invoker.active == 0


def test_disjoint_targets_run_side_by_side(fake_checkpatch, tmp_path: Path) -> None:
    fake_checkpatch.set_output("{target}:1: ERROR:X: y\n")
    invoker = LinterInvoker()
    targets = [str(tmp_path / "a.c"), str(tmp_path / "b.c")]

    async def scenario() -> list[object]:
        return await asyncio.gather(*(invoker.run(_context(fake_checkpatch, target)) for target in targets))

    outcomes = asyncio.run(scenario())

    assert outcomes == [f"{target}:1: ERROR:X: y\n" for target in targets]


def test_cancelled_task_reaps_the_checker(fake_checkpatch, tmp_path: Path) -> None:
    fake_checkpatch.set_output("{target}:1: ERROR:X: y\n")
    fake_checkpatch.set_delay(5)
    invocation = LinterInvocation(_context(fake_checkpatch, str(tmp_path / "a.c")))

    async def scenario() -> None:
        task = asyncio.create_task(invocation.run())
        while not fake_checkpatch.script.with_suffix(".calls").exists():
            await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert invocation.cancelled
    assert invocation.returncode is not None

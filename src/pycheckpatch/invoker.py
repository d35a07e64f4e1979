# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous checker invocations for single files and commits."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Final

from .constants import COMMIT_FLAG, FILE_FLAG, SHOW_FILE_FLAG, SHOW_TYPES_FLAG
from .models import InvocationContext, InvocationFailure, InvocationMode
from .process import normalize_args, split_arguments
from .store import file_key

LOGGER = logging.getLogger(__name__)

_CHUNK_SIZE: Final[int] = 64 * 1024
_COMMIT_SLOT: Final[str] = "commit"


def build_file_args(args: Sequence[str], path: str) -> list[str]:
    """Return the argument vector checking a single file."""

    normalized = path.replace("\\", "/")
    return [*split_arguments(args), SHOW_TYPES_FLAG, SHOW_FILE_FLAG, FILE_FLAG, normalized]


def build_commit_args(args: Sequence[str], commit: str) -> list[str]:
    """Return the argument vector checking one commit."""

    return [*split_arguments(args), SHOW_TYPES_FLAG, SHOW_FILE_FLAG, COMMIT_FLAG, commit]


def build_command(context: InvocationContext) -> list[str]:
    """Return the full command line for ``context``, executable first."""

    config = context.config
    if context.mode is InvocationMode.COMMIT:
        tail = build_commit_args(config.args, context.target)
    else:
        tail = build_file_args(config.args, context.target)
    return [config.executable_path, *tail]


def slot_key(context: InvocationContext) -> str:
    """Return the key under which overlapping invocations supersede each other."""

    if context.mode is InvocationMode.COMMIT:
        return _COMMIT_SLOT
    return file_key(context.target)


class LinterInvocation:
    """One run of the checker; stdout is accumulated until end-of-stream."""

    def __init__(self, context: InvocationContext) -> None:
        self.context = context
        self._proc: asyncio.subprocess.Process | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def executable(self) -> str:
        return self.context.config.executable_path

    @property
    def returncode(self) -> int | None:
        """Return the exit status, or ``None`` while running or never started."""
        return self._proc.returncode if self._proc is not None else None

    def cancel(self) -> None:
        """Stop the invocation; its output will never be parsed."""

        self._cancelled = True
        self._terminate()

    def _terminate(self) -> None:
        proc = self._proc
        if proc is None or proc.returncode is not None:
            return
        try:
            proc.terminate()
        except ProcessLookupError:
            LOGGER.debug("checker process %s already exited", proc.pid)

    def _cancelled_failure(self, stderr: str = "") -> InvocationFailure:
        return InvocationFailure(
            executable=self.executable,
            reason="superseded by a newer check",
            stderr=stderr,
            cancelled=True,
        )

    async def run(self) -> str | InvocationFailure:
        """Spawn the checker and return its stdout text.

        A non-zero exit status is not a failure.

        Returns:
            str | InvocationFailure: Accumulated stdout, or a structured failure
            when the process could not start or the invocation was cancelled.
        """

        if self._cancelled:
            return self._cancelled_failure()
        try:
            command = normalize_args(build_command(self.context))
            self._proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.context.cwd) if self.context.cwd is not None else None,
            )
        except (OSError, ValueError) as exc:
            return InvocationFailure(executable=self.executable, reason=str(exc) or type(exc).__name__)

        if self._cancelled:
            self._terminate()
        proc = self._proc
        assert proc.stdout is not None and proc.stderr is not None
        stderr_task = asyncio.create_task(proc.stderr.read())
        chunks: list[bytes] = []
        try:
            while chunk := await proc.stdout.read(_CHUNK_SIZE):
                chunks.append(chunk)
            stderr = (await stderr_task).decode("utf-8", errors="replace")
            await proc.wait()
        except asyncio.CancelledError:
            self._cancelled = True
            stderr_task.cancel()
            self._terminate()
            # Reap the child even when this task is cancelled again.
            await asyncio.shield(proc.wait())
            raise

        LOGGER.debug("%s exited with status %s", self.context.description, proc.returncode)
        if self._cancelled:
            return self._cancelled_failure(stderr)
        return b"".join(chunks).decode("utf-8", errors="replace")


class LinterInvoker:
    """Start invocations, cancelling any superseded one for the same target.

    File checks are keyed per file; all commit checks share one slot.
    """

    def __init__(self) -> None:
        self._active: dict[str, LinterInvocation] = {}

    def prepare(self, context: InvocationContext) -> LinterInvocation:
        """Register a new invocation for ``context`` and cancel its predecessor."""

        key = slot_key(context)
        previous = self._active.get(key)
        if previous is not None:
            LOGGER.debug("cancelling superseded %s", previous.context.description)
            previous.cancel()
        invocation = LinterInvocation(context)
        self._active[key] = invocation
        return invocation

    async def run(self, context: InvocationContext) -> str | InvocationFailure:
        """Run the checker for ``context`` and return its stdout or failure."""

        key = slot_key(context)
        invocation = self.prepare(context)
        try:
            return await invocation.run()
        finally:
            if self._active.get(key) is invocation:
                del self._active[key]

    @property
    def active(self) -> int:
        """Return the number of invocations still running."""
        return len(self._active)

    def cancel_all(self) -> None:
        """Cancel every running invocation."""

        for invocation in list(self._active.values()):
            invocation.cancel()
        self._active.clear()


__all__ = [
    "LinterInvocation",
    "LinterInvoker",
    "build_command",
    "build_commit_args",
    "build_file_args",
    "slot_key",
]

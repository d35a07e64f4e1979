# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shlex
import shutil

# Bandit: argument lists only, never ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess

TIMEOUT_RETURNCODE = 124


@dataclass(slots=True, frozen=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    capture_output: bool = True
    text: bool = True
    timeout: float | None = None
    input: str | None = None


def _ensure_text(value: str | bytes | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def split_arguments(args: Iterable[str]) -> list[str]:
    """Split each configured argument the way a POSIX shell would.

    Settings commonly hold entries such as ``"--ignore FOO,BAR"`` or a bare
    ``"--no-tree -"``; splitting them keeps that behaviour without spawning a
    shell.

    Args:
        args: Argument entries as written in the settings.

    Returns:
        list[str]: Flat argument vector.
    """

    result: list[str] = []
    for entry in args:
        result.extend(shlex.split(entry))
    return result


def normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        if not head_path.exists():
            msg = f"Executable '{head}' does not exist"
            raise FileNotFoundError(msg)
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata. A timeout is reported
        with return code ``124`` and a note appended to stderr.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
    """

    normalized = normalize_args(args)
    resolved_options = options or CommandOptions()

    try:
        # Bandit: commands originate from vetted settings; we pass argument
        # lists directly without shell expansion.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=resolved_options.text,
            timeout=resolved_options.timeout,
            input=resolved_options.input,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = _ensure_text(exc.stdout) or ""
        stderr = _ensure_text(exc.stderr)
        timeout_value = resolved_options.timeout
        timeout_msg = (
            f"Command timed out after {timeout_value:.1f}s" if timeout_value is not None else "Command timed out"
        )
        combined_stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_RETURNCODE,
            stdout=stdout,
            stderr=combined_stderr,
        )

    return completed


__all__ = [
    "CommandOptions",
    "TIMEOUT_RETURNCODE",
    "normalize_args",
    "run_command",
    "split_arguments",
]

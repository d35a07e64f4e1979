# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers and the checker output channel."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rich.console import Console
from rich.text import Text

from .console import detect_tty, get_console_registry

LOGGER = logging.getLogger(__name__)


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_registry().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


class OutputChannel:
    """Append-only log pane mirroring what the checker integration is doing.

    Lines are always recorded and forwarded to the module logger at debug
    level; when a console is attached they are echoed there as well.
    """

    def __init__(self, name: str = "Checkpatch", *, console: Console | None = None) -> None:
        self.name = name
        self._console = console
        self._lines: list[str] = []

    @property
    def lines(self) -> Sequence[str]:
        """Return every line appended so far."""
        return tuple(self._lines)

    def append_line(self, value: str) -> None:
        """Record ``value``; multi-line values are split into separate lines."""

        for line in value.splitlines() or [""]:
            self._lines.append(line)
            LOGGER.debug("[%s] %s", self.name, line)
            if self._console is not None:
                self._console.print(Text(line, style="dim"))

    def clear(self) -> None:
        """Drop the recorded lines."""
        self._lines.clear()


__all__ = ["OutputChannel", "emoji", "fail", "info", "ok", "warn"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles shared by the message helpers, the CLI and the output channel."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True, slots=True)
class ConsolePreset:
    """Presentation flags a console is built for."""

    color: bool
    emoji: bool
    tty: bool

    @classmethod
    def current(cls, *, color: bool, emoji: bool) -> ConsolePreset:
        """Return the preset for ``color``/``emoji`` on the current stdout."""
        return cls(color=color, emoji=emoji, tty=detect_tty())

    @property
    def styled(self) -> bool:
        """Return ``True`` when ANSI styling actually reaches a terminal."""
        return self.color and self.tty

    def build(self) -> Console:
        return Console(
            color_system="auto" if self.styled else None,
            force_terminal=self.tty,
            no_color=not self.styled,
            emoji=self.emoji,
            highlight=False,
            soft_wrap=True,
        )


class ConsoleRegistry:
    """Hand out one console per preset.

    Status messages, rendered problems and echoed channel lines share the
    console of their preset, so their output interleaves in call order.
    """

    def __init__(self) -> None:
        self._consoles: dict[ConsolePreset, Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console for ``color``/``emoji`` on the current stdout."""

        preset = ConsolePreset.current(color=color, emoji=emoji)
        console = self._consoles.get(preset)
        if console is None:
            console = self._consoles[preset] = preset.build()
        return console

    def reset(self) -> None:
        """Forget every console built so far."""
        self._consoles.clear()


@cache
def get_console_registry() -> ConsoleRegistry:
    """Return the process-wide :class:`ConsoleRegistry`."""
    return ConsoleRegistry()


__all__ = ["ConsolePreset", "ConsoleRegistry", "detect_tty", "get_console_registry"]

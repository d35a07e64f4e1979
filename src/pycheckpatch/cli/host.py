# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Terminal implementation of the host UI used by the CLI."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import typer

from ..interfaces import PickItem
from .shared import CLILogger

ValueT = TypeVar("ValueT")


class ConsoleHost:
    """Render notifications through the CLI logger and prompt for picks."""

    def __init__(self, logger: CLILogger, *, interactive: bool = True) -> None:
        self.logger = logger
        self.interactive = interactive
        self.errors: list[str] = []
        self.notices: list[str] = []
        self.problems_requested = False

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        self.logger.fail(message)

    def show_info(self, message: str) -> None:
        self.notices.append(message)
        self.logger.ok(message)

    async def pick(
        self,
        items: Sequence[PickItem[ValueT]],
        *,
        placeholder: str,
    ) -> PickItem[ValueT] | None:
        """Prompt for one of ``items`` by number; ``0`` dismisses the list."""

        if not items or not self.interactive:
            return None
        self.logger.echo(f"{placeholder}:")
        for index, item in enumerate(items, start=1):
            self.logger.echo(f"  {index}. {item.label}  ({item.description})")
        choice = typer.prompt("Number (0 to cancel)", type=int, default=1)
        if not 1 <= choice <= len(items):
            return None
        return items[choice - 1]

    def reveal_problems(self) -> None:
        self.problems_requested = True


__all__ = ["ConsoleHost"]

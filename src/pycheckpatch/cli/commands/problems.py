# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Show the persisted problems list."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

import typer

from ...reporting import store_to_json
from ..workspace import EXIT_FINDINGS, open_session


class OutputFormat(str, Enum):
    """Rendering used by the ``problems`` command."""

    CONCISE = "concise"
    JSON = "json"


def problems(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", case_sensitive=False, help="Output format."),
    ] = OutputFormat.CONCISE,
) -> None:
    """Print the diagnostics left by the most recent checks."""

    session = open_session(ctx.obj)
    session.load_problems()
    store = session.provider.store
    if output_format is OutputFormat.JSON:
        session.logger.echo(store_to_json(store))
    elif not session.show_problems():
        session.logger.ok("No problems")
    raise typer.Exit(code=EXIT_FINDINGS if store.total() else 0)


def register(app: typer.Typer) -> None:
    """Register the ``problems`` command on ``app``."""

    app.command("problems")(problems)


__all__ = ["OutputFormat", "problems", "register"]

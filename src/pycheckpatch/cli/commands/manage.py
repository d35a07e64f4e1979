# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration and problems-list maintenance commands."""

from __future__ import annotations

import typer

from ...config import RunMode
from ..workspace import EXIT_FAILURE, open_session


def toggle_auto_run(ctx: typer.Context) -> None:
    """Switch the workspace run mode between manual and onSave."""

    session = open_session(ctx.obj)
    mode = session.provider.toggle_auto_run()
    session.save_problems()
    if not session.provider.configured:
        session.logger.warn(f"Run mode is {mode.value} but checkpatch is not configured")
        raise typer.Exit(code=EXIT_FAILURE)
    label = "on save" if mode is RunMode.ON_SAVE else "manually"
    session.logger.ok(f"Checkpatch now runs {label} ({mode.value})")
    raise typer.Exit(code=0)


def clear(ctx: typer.Context) -> None:
    """Remove every diagnostic from the problems list."""

    session = open_session(ctx.obj)
    session.load_problems()
    session.provider.clear_diagnostics()
    session.save_problems()
    session.logger.ok("Problems list cleared")
    raise typer.Exit(code=0)


def validate(ctx: typer.Context) -> None:
    """Probe the common and folder configurations."""

    session = open_session(ctx.obj)
    if not session.provider.reload():
        session.logger.fail("Checkpatch is not configured")
        raise typer.Exit(code=EXIT_FAILURE)
    session.logger.ok("Checkpatch configuration is usable")
    raise typer.Exit(code=0)


def register(app: typer.Typer) -> None:
    """Register the maintenance commands on ``app``."""

    app.command("toggle-auto-run")(toggle_auto_run)
    app.command("clear")(clear)
    app.command("validate")(validate)


__all__ = ["clear", "register", "toggle_auto_run", "validate"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..workspace import WorkspaceOptions
from . import check, manage, problems

__all__ = ["create_app", "register_commands"]


def _main(
    ctx: typer.Context,
    folder: Annotated[
        list[Path] | None,
        typer.Option("--folder", "-w", help="Workspace folder (repeatable); the first is the root."),
    ] = None,
    workspace_config: Annotated[
        Path | None,
        typer.Option("--workspace-config", help="Workspace settings file (default: <root>/checkpatch-workspace.toml)."),
    ] = None,
    user_config: Annotated[
        Path | None,
        typer.Option("--user-config", help="User settings file (default: ~/.checkpatch.toml)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Echo the output channel.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    no_input: Annotated[bool, typer.Option("--no-input", help="Never prompt; dismiss pick lists.")] = False,
) -> None:
    """Run checkpatch.pl on C files and commits."""

    ctx.obj = WorkspaceOptions(
        folders=tuple(folder or ()),
        workspace_config=workspace_config,
        user_config=user_config,
        verbose=verbose,
        emoji=not no_emoji,
        color=not no_color,
        interactive=not no_input,
    )


def register_commands(app: typer.Typer) -> None:
    """Register every command on ``app``."""

    check.register(app)
    manage.register(app)
    problems.register(app)


def create_app() -> typer.Typer:
    """Return the configured Typer application."""

    app = typer.Typer(
        name="pycheckpatch",
        help="Surface checkpatch.pl findings as file/line diagnostics.",
        no_args_is_help=True,
        add_completion=False,
    )
    app.callback()(_main)
    register_commands(app)
    return app

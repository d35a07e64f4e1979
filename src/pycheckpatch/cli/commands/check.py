# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Commands running checkpatch on a file or a commit."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from ...provider import is_c_document
from ...store import file_key
from ...vcs import GitRepository
from ..shared import CLIError
from ..workspace import CLISession, open_session


def _run_file_check(session: CLISession, path: Path) -> int:
    target = path.absolute()
    if not is_c_document(target):
        session.logger.warn(f"{target} is not a C source or header; skipped")
        return 0
    result = asyncio.run(session.provider.check_file(target))
    if result is None:
        session.logger.info(f"{target} is excluded from checking")
    elif result.ok:
        session.show_problems([file_key(target)])
        message = f"{target}: {result.count} problem(s)"
        if result.count:
            session.logger.warn(message)
        else:
            session.logger.ok(message)
    return session.finish(result)


def check_file(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="C source or header to check.")],
) -> None:
    """Check one C file and update the problems list."""

    session = open_session(ctx.obj)
    try:
        session.start()
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=_run_file_check(session, path))


def on_save(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File that was just saved.")],
) -> None:
    """Editor save hook: check ``PATH`` when the run mode is onSave."""

    session = open_session(ctx.obj)
    try:
        session.start()
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    if not session.provider.auto_run:
        session.logger.debug("run mode is manual; save ignored")
        raise typer.Exit(code=0)
    raise typer.Exit(code=_run_file_check(session, path))


def check_commit(
    ctx: typer.Context,
    repo: Annotated[
        Path | None,
        typer.Option("--repo", help="Repository root; picked from the workspace when omitted."),
    ] = None,
    commit: Annotated[
        str | None,
        typer.Option("--commit", "-c", help="Commit to check; picked from the newest entries when omitted."),
    ] = None,
) -> None:
    """Check the files touched by one commit; replaces the problems list."""

    session = open_session(ctx.obj)
    try:
        session.start()
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    repository = GitRepository(repo.resolve()) if repo is not None else None
    result = asyncio.run(session.provider.check_commit(repository, commit))
    if session.host.problems_requested:
        session.show_problems()
    raise typer.Exit(code=session.finish(result))


def register(app: typer.Typer) -> None:
    """Register the check commands on ``app``."""

    app.command("check-file")(check_file)
    app.command("check-commit")(check_commit)
    app.command("on-save")(on_save)


__all__ = ["check_commit", "check_file", "on_save", "register"]

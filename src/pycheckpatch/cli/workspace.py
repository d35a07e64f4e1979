# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build a provider for one CLI invocation and persist its problems list."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..config_loader import SettingsStore
from ..constants import PROBLEMS_CACHE_DIR, PROBLEMS_CACHE_FILE
from ..logging import OutputChannel
from ..models import CheckResult
from ..provider import CheckpatchProvider
from ..reporting import dump_diagnostics
from ..vcs import GitVersionControl
from .host import ConsoleHost
from .shared import CLIError, CLILogger, build_cli_logger

EXIT_FINDINGS: Final[int] = 1
EXIT_FAILURE: Final[int] = 2


@dataclass(slots=True)
class WorkspaceOptions:
    """Options shared by every command."""

    folders: tuple[Path, ...] = field(default_factory=tuple)
    workspace_config: Path | None = None
    user_config: Path | None = None
    verbose: bool = False
    emoji: bool = True
    color: bool = True
    interactive: bool = True

    def resolved_folders(self) -> tuple[Path, ...]:
        """Return absolute workspace folders; the current directory when none were given."""

        folders = self.folders or (Path.cwd(),)
        return tuple(folder.resolve() for folder in folders)


@dataclass(slots=True)
class CLISession:
    """Provider plus the collaborators one command needs."""

    options: WorkspaceOptions
    logger: CLILogger
    host: ConsoleHost
    provider: CheckpatchProvider
    folders: tuple[Path, ...]

    @property
    def snapshot_path(self) -> Path:
        """Return the file the problems list is persisted to."""
        return self.folders[0] / PROBLEMS_CACHE_DIR / PROBLEMS_CACHE_FILE

    def load_problems(self) -> None:
        self.provider.store.load(self.snapshot_path)

    def save_problems(self) -> None:
        try:
            self.provider.store.save(self.snapshot_path)
        except OSError as exc:
            self.logger.warn(f"Could not persist problems to {self.snapshot_path}: {exc}")

    def start(self) -> None:
        """Load and probe the configuration, then restore the problems list.

        Raises:
            CLIError: When the configuration is unusable.
        """

        if not self.provider.reload():
            raise CLIError("Checkpatch is not configured", exit_code=EXIT_FAILURE)
        self.load_problems()

    def show_problems(self, keys: Sequence[str] | None = None) -> int:
        return dump_diagnostics(
            self.provider.store,
            self.logger.console,
            color=self.options.color,
            keys=keys,
        )

    def finish(self, result: CheckResult | None) -> int:
        """Persist the store and return the exit code for ``result``."""

        self.save_problems()
        if result is None:
            return 0
        if result.failure is not None:
            return EXIT_FAILURE
        return EXIT_FINDINGS if result.count else 0


def open_session(options: WorkspaceOptions) -> CLISession:
    """Return a session wired to the workspace described by ``options``."""

    logger = build_cli_logger(emoji=options.emoji, debug=options.verbose, no_color=not options.color)
    folders = options.resolved_folders()
    host = ConsoleHost(logger, interactive=options.interactive)
    channel = OutputChannel(console=logger.console if options.verbose else None)
    settings = SettingsStore(
        folders=folders,
        user_config=options.user_config,
        workspace_config=options.workspace_config,
    )
    provider = CheckpatchProvider(
        settings,
        host=host,
        vcs=GitVersionControl(folders),
        channel=channel,
    )
    return CLISession(options=options, logger=logger, host=host, provider=provider, folders=folders)


__all__ = [
    "CLISession",
    "EXIT_FAILURE",
    "EXIT_FINDINGS",
    "WorkspaceOptions",
    "open_session",
]

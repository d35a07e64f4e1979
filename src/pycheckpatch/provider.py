# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The checkpatch provider: configuration lifecycle, commands and events.

A :class:`CheckpatchProvider` is the single owned context object a host keeps
for the lifetime of a workspace. It loads settings, probes the configured
checker, runs file and commit checks and keeps the diagnostic store current.
Failures are reported through the host and the output channel; no exception
escapes the public methods.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from .config import ConfigError, FolderSettings, RunMode
from .config_loader import SettingsStore
from .constants import C_FILE_SUFFIXES, MAX_COMMIT_ENTRIES
from .exclusion import ExclusionFilter
from .interfaces import HostUI, PickItem, Repository, VersionControl
from .invoker import LinterInvoker
from .logging import OutputChannel
from .models import CheckResult, InvocationContext, InvocationFailure
from .parsers import CheckpatchParser
from .resolver import ConfigResolver
from .store import DiagnosticStore, file_key
from .validator import ConfigValidator

LOGGER = logging.getLogger(__name__)

FILE_CHECK_FAILED: Final[str] = "Checkpatch [file]: Check failed. Please, review the output pane for details"
COMMIT_CHECK_FAILED: Final[str] = "Checkpatch [commit]: Check failed. Please, review the output pane for details"
COMMIT_HAS_PROBLEMS: Final[str] = "Checkpatch [commit]: Commit has style problems, please review the problems pane"
COMMIT_IS_CLEAN: Final[str] = (
    "Checkpatch [commit]: Commit has no obvious style problems and is ready for submission"
)
NO_REPOSITORIES: Final[str] = "Checkpatch [commit]: No repositories in workspace"


def is_c_document(path: Path) -> bool:
    """Return ``True`` for C sources and headers."""
    return path.suffix in C_FILE_SUFFIXES


class CheckpatchProvider:
    """Drive checkpatch for one workspace."""

    def __init__(
        self,
        settings: SettingsStore,
        *,
        host: HostUI,
        vcs: VersionControl | None = None,
        store: DiagnosticStore | None = None,
        channel: OutputChannel | None = None,
        invoker: LinterInvoker | None = None,
    ) -> None:
        self.settings = settings
        self.host = host
        self.vcs = vcs
        self.store = store if store is not None else DiagnosticStore()
        self.channel = channel if channel is not None else OutputChannel()
        self.invoker = invoker if invoker is not None else LinterInvoker()
        self.resolver: ConfigResolver | None = None
        self.run_mode = RunMode.ON_SAVE
        self._configured = False
        self._auto_run = False
        self._disposed = False

    @property
    def configured(self) -> bool:
        """Return ``True`` once every configured scope probed successfully."""
        return self._configured

    @property
    def auto_run(self) -> bool:
        """Return ``True`` when saved documents are checked automatically."""
        return self._auto_run

    def _log(self, message: str) -> None:
        self.channel.append_line(message)

    # Lifecycle -------------------------------------------------------------

    def reload(self) -> bool:
        """Reload settings, rebuild the configuration and probe the checker.

        Returns:
            bool: ``True`` when the provider is configured afterwards.
        """

        self._configured = False
        self._auto_run = False
        if self._disposed:
            return False
        self.store.clear()

        folders = self.settings.folders
        try:
            settings = self.settings.load_common()
            folder_settings: dict[Path, FolderSettings] = {
                folder: self.settings.load_folder(folder) for folder in folders
            }
        except ConfigError as exc:
            self._log(f"Load config failed: {exc}")
            self._log("Not configured!")
            self.host.show_error(f"Checkpatch [config]: {exc}")
            return False

        self.run_mode = settings.run
        self.resolver = ConfigResolver.from_settings(
            settings,
            folder_settings,
            folders=folders,
            channel=self.channel,
        )
        validator = ConfigValidator(host=self.host, channel=self.channel, timeout=settings.probe_timeout)
        if not validator.validate(self.resolver):
            return False

        self._auto_run = settings.run is RunMode.ON_SAVE
        self._log("Configured")
        self._configured = True
        return True

    def maybe_configure(self) -> bool:
        """Reload once when not configured; return the resulting state."""

        if not self._configured:
            self.reload()
        return self._configured

    def dispose(self) -> None:
        """Cancel running checks and release the diagnostic store."""

        self.invoker.cancel_all()
        self.store.dispose()
        self._configured = False
        self._auto_run = False
        self._disposed = True

    # Commands --------------------------------------------------------------

    async def check_file(self, path: Path | str) -> CheckResult | None:
        """Check a single C document.

        Returns:
            CheckResult | None: Outcome of the check, or ``None`` when nothing
            ran (not a C document, not configured, or excluded).
        """

        target = Path(path).absolute()
        if not is_c_document(target):
            LOGGER.debug("skipping non-C document %s", target)
            return None
        if not self.maybe_configure() or self.resolver is None:
            self._log("Check file: bad config yet")
            return None

        context = self.resolver.file_context(target)
        exclusion = ExclusionFilter(context.config.exclude_globs)
        matched = exclusion.matching_glob(target, folder=context.workspace_folder)
        if matched is not None:
            self._log(f'Check file "{target}": excluded by "{matched}"')
            return None

        self.store.delete(file_key(target))
        outcome = await self.invoker.run(context)
        if isinstance(outcome, InvocationFailure):
            return self._report_failure(f'Check file "{target}"', context, outcome, FILE_CHECK_FAILED)

        count = self._publish(context, outcome)
        self._log(f'Check file "{target}": done, {count} errors found')
        return CheckResult(context=context, count=count)

    async def check_commit(
        self,
        repository: Repository | None = None,
        commit: str | None = None,
    ) -> CheckResult | None:
        """Check the files touched by one commit.

        Args:
            repository: Repository to check; picked interactively when several
                exist and none is given.
            commit: Commit identifier; picked among the newest entries when
                not given.

        Returns:
            CheckResult | None: Outcome, or ``None`` when nothing ran.
        """

        if not self.maybe_configure() or self.resolver is None:
            self._log("Check commit: bad config yet")
            return None

        if repository is None:
            repository = await self._pick_repository()
            if repository is None:
                return None
        root = repository.root_path

        if commit is None:
            commit = await self._pick_commit(repository)
            if commit is None:
                return None

        context = self.resolver.commit_context(root, commit)
        header = f'Check commit {commit} @ "{root}"'
        outcome = await self.invoker.run(context)
        if isinstance(outcome, InvocationFailure):
            return self._report_failure(header, context, outcome, COMMIT_CHECK_FAILED)

        # Only the commit's own findings remain visible.
        self.store.clear()
        count = self._publish(context, outcome)
        if count > 0:
            self.host.show_error(COMMIT_HAS_PROBLEMS)
            self.host.reveal_problems()
        else:
            self.host.show_info(COMMIT_IS_CLEAN)
        self._log(f"{header}: done, {count} errors found")
        return CheckResult(context=context, count=count)

    def toggle_auto_run(self) -> RunMode:
        """Flip the run mode in the workspace settings file and reload.

        Returns:
            RunMode: The run mode in effect afterwards.
        """

        try:
            current = self.settings.load_common().run
        except ConfigError:
            current = self.run_mode
        target = current.toggled()
        try:
            written = self.settings.set_run_mode(target)
        except (ConfigError, OSError) as exc:
            self._log(f"Toggle auto run failed: {exc}")
            self.host.show_error(f"Checkpatch [config]: {exc}")
            return self.run_mode
        self._log(f'Run mode set to "{target.value}" in "{written}"')
        self.run_mode = target
        self.reload()
        return self.run_mode

    def clear_diagnostics(self) -> None:
        """Remove every diagnostic from the store."""
        self.store.clear()

    # Events ----------------------------------------------------------------

    async def on_document_saved(self, path: Path | str) -> CheckResult | None:
        """Check ``path`` when automatic checking on save is enabled."""

        if not self._auto_run:
            return None
        return await self.check_file(path)

    def on_document_closed(self, path: Path | str) -> None:
        """Drop the diagnostics of a closed document."""
        self.store.delete(file_key(Path(path).absolute()))

    # Helpers ---------------------------------------------------------------

    def _publish(self, context: InvocationContext, text: str) -> int:
        parser = CheckpatchParser(
            grammar=context.config.grammar,
            severity=context.config.diagnostic_severity,
        )
        return parser.publish(text, self.store, base_path=context.base_path)

    def _report_failure(
        self,
        header: str,
        context: InvocationContext,
        failure: InvocationFailure,
        notice: str,
    ) -> CheckResult:
        if failure.cancelled:
            self._log(f"{header}: superseded by a newer check")
        else:
            self._log(f"{header}: {failure.describe()}")
            self.host.show_error(notice)
        return CheckResult(context=context, failure=failure)

    async def _pick_repository(self) -> Repository | None:
        repositories = list(self.vcs.repositories()) if self.vcs is not None else []
        if not repositories:
            self.host.show_error(NO_REPOSITORIES)
            return None
        if len(repositories) == 1:
            return repositories[0]
        items = [
            PickItem(label=repo.root_path.name, description=str(repo.root_path), value=repo)
            for repo in repositories
        ]
        picked = await self.host.pick(items, placeholder="Select git repo")
        return picked.value if picked is not None else None

    async def _pick_commit(self, repository: Repository) -> str | None:
        entries = repository.log(MAX_COMMIT_ENTRIES)
        items = [PickItem(label=entry.message, description=entry.hash, value=entry.hash) for entry in entries]
        picked = await self.host.pick(items, placeholder="Select commit")
        if picked is None or not picked.value:
            return None
        return picked.value


__all__ = [
    "COMMIT_CHECK_FAILED",
    "COMMIT_HAS_PROBLEMS",
    "COMMIT_IS_CLEAN",
    "CheckpatchProvider",
    "FILE_CHECK_FAILED",
    "NO_REPOSITORIES",
    "is_c_document",
]

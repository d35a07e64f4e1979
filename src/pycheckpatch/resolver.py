# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve effective checker configuration for files, folders and commits.

The resolver merges the common configuration with per-folder overrides one
field at a time. It performs no I/O beyond appending resolution traces to an
optional :class:`~pycheckpatch.logging.OutputChannel`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import CheckpatchSettings, FolderSettings
from .logging import OutputChannel
from .models import FolderOverride, InvocationContext, InvocationMode, LinterConfig

_FROM_COMMON: Final[str] = " (from common config)"
_ROOT_AS_CWD: Final[str] = " (root folder used as cwd)"


def prettify(value: str | Sequence[str] | Path | None) -> str:
    """Render a setting value the way resolution traces show it."""

    if value is None or value == "":
        return "undefined"
    if isinstance(value, (str, Path)):
        return f'"{value}"'
    return "[" + ", ".join(prettify(item) for item in value) + "]"


def absolutize(executable: str, base: Path | None) -> tuple[str, bool]:
    """Return ``executable`` joined to ``base`` when it is relative.

    Args:
        executable: Configured executable path.
        base: Folder relative paths are anchored to; ``None`` leaves the path
            untouched so it is looked up on ``PATH`` at launch.

    Returns:
        tuple[str, bool]: The resulting path and whether it was converted.
    """

    if not executable or base is None or Path(executable).is_absolute():
        return executable, False
    return str(base / executable), True


def build_common_config(settings: CheckpatchSettings, root: Path | None) -> tuple[LinterConfig, bool]:
    """Return the common :class:`LinterConfig` and whether its path was converted."""

    executable, converted = absolutize(settings.checkpatch_path, root)
    config = LinterConfig(
        executable_path=executable,
        args=tuple(settings.checkpatch_args),
        exclude_globs=tuple(settings.exclude),
        use_folder_as_cwd=settings.use_folder_as_cwd,
        diagnostic_severity=settings.diagnostic_level,
        grammar=settings.grammar,
    )
    return config, converted


def build_folder_override(folder: Path, settings: FolderSettings) -> tuple[FolderOverride, bool]:
    """Return the override for ``folder`` and whether its path was converted."""

    executable: str | None = None
    converted = False
    if settings.checkpatch_path:
        executable, converted = absolutize(settings.checkpatch_path, folder)
    override = FolderOverride(
        folder=folder,
        executable_path=executable,
        args=tuple(settings.checkpatch_args) if settings.checkpatch_args is not None else None,
        exclude_globs=tuple(settings.exclude) if settings.exclude is not None else None,
        use_folder_as_cwd=settings.use_folder_as_cwd,
        diagnostic_severity=settings.diagnostic_level,
        grammar=settings.grammar,
    )
    return override, converted


@dataclass(slots=True)
class _Traced:
    """Effective value paired with the suffix explaining where it came from."""

    value: object
    note: str = ""

    def render(self) -> str:
        if isinstance(self.value, bool):
            return f"{str(self.value).lower()}{self.note}"
        return f"{prettify(self.value)}{self.note}"  # type: ignore[arg-type]


class ConfigResolver:
    """Field-level merge of the common configuration with folder overrides."""

    def __init__(
        self,
        common: LinterConfig,
        overrides: Mapping[Path, FolderOverride] | None = None,
        *,
        folders: Sequence[Path] = (),
        channel: OutputChannel | None = None,
    ) -> None:
        self.common = common
        self.overrides: dict[Path, FolderOverride] = dict(overrides or {})
        self.folders = tuple(folders)
        self._channel = channel

    @classmethod
    def from_settings(
        cls,
        settings: CheckpatchSettings,
        folder_settings: Mapping[Path, FolderSettings],
        *,
        folders: Sequence[Path],
        channel: OutputChannel | None = None,
    ) -> ConfigResolver:
        """Build a resolver from loaded settings, logging every scope.

        Args:
            settings: Merged common settings.
            folder_settings: Values explicitly set per workspace folder.
            folders: Workspace folders in host order; the first is the root.
            channel: Output channel receiving the resolution trace.

        Returns:
            ConfigResolver: Resolver for the given workspace.
        """

        root = folders[0] if folders else None
        common, converted = build_common_config(settings, root)
        resolver = cls(common, folders=folders, channel=channel)
        note = " (converted to absolute using root folder path)" if converted else ""
        resolver.log(
            "Load common config:\n"
            f"  - checkpatchPath:  {prettify(common.executable_path)}{note}\n"
            f"  - checkpatchArgs:  {prettify(common.args)}\n"
            f"  - exclude:         {prettify(common.exclude_globs)}\n"
            f"  - useFolderAsCwd:  {str(common.use_folder_as_cwd).lower()}\n"
            f"  - diagnosticLevel: {common.diagnostic_severity.value}\n"
            f"  - grammar:         {common.grammar.value}",
        )
        for folder in folders:
            override, converted = build_folder_override(folder, folder_settings.get(folder, FolderSettings()))
            resolver.overrides[folder] = override
            note = " (converted to absolute)" if converted else ""
            resolver.log(
                f'Load folder config @ "{folder}":\n'
                f"  - checkpatchPath: {prettify(override.executable_path)}{note}\n"
                f"  - checkpatchArgs: {prettify(override.args)}\n"
                f"  - exclude:        {prettify(override.exclude_globs)}\n"
                f"  - useFolderAsCwd: {_optional_flag(override.use_folder_as_cwd)}",
            )
        return resolver

    @property
    def root(self) -> Path | None:
        """Return the first workspace folder, or ``None`` without folders."""
        return self.folders[0] if self.folders else None

    def log(self, message: str) -> None:
        if self._channel is not None:
            self._channel.append_line(message)

    def effective(self, folder: Path | None) -> LinterConfig:
        """Return the effective configuration for ``folder``.

        Every field set by the folder override wins independently; unset
        fields inherit the common value. ``None`` or an unknown folder yields
        the common configuration.
        """

        override = self.overrides.get(folder) if folder is not None else None
        if override is None:
            return self.common
        common = self.common
        return LinterConfig(
            executable_path=override.executable_path or common.executable_path,
            args=override.args if override.args is not None else common.args,
            exclude_globs=override.exclude_globs if override.exclude_globs is not None else common.exclude_globs,
            use_folder_as_cwd=(
                override.use_folder_as_cwd if override.use_folder_as_cwd is not None else common.use_folder_as_cwd
            ),
            diagnostic_severity=override.diagnostic_severity or common.diagnostic_severity,
            grammar=override.grammar or common.grammar,
        )

    def folder_for_file(self, path: Path) -> Path | None:
        """Return the workspace folder with the longest path containing ``path``."""

        best: Path | None = None
        for folder in self.folders:
            if not path.is_relative_to(folder):
                continue
            if best is None or len(folder.parts) > len(best.parts):
                best = folder
        return best

    def folder_for_repository(self, root: Path) -> Path | None:
        """Return the workspace folder whose path equals the repository ``root``."""

        for folder in self.folders:
            if folder == root:
                return folder
        return None

    def cwd_for(self, folder: Path | None) -> Path | None:
        """Return the working directory for checks owned by ``folder``.

        The owning folder is used when it sets its own executable or when the
        effective ``use_folder_as_cwd`` flag is on; otherwise the first
        workspace folder, or ``None`` when the workspace has no folders.
        """

        if folder is not None:
            override = self.overrides.get(folder)
            if (override is not None and override.has_path_override) or self.effective(folder).use_folder_as_cwd:
                return folder
        return self.root

    def file_context(self, path: Path) -> InvocationContext:
        """Return the invocation context for a single-file check of ``path``."""

        folder = self.folder_for_file(path)
        context = InvocationContext(
            mode=InvocationMode.FILE,
            target=str(path),
            cwd=self.cwd_for(folder),
            config=self.effective(folder),
            workspace_folder=folder,
        )
        self._trace(f'Check file "{path}"', context, include_exclude=True)
        return context

    def commit_context(self, repository_root: Path, commit: str) -> InvocationContext:
        """Return the invocation context for checking ``commit`` in a repository."""

        folder = self.folder_for_repository(repository_root)
        context = InvocationContext(
            mode=InvocationMode.COMMIT,
            target=commit,
            cwd=self.cwd_for(folder),
            config=self.effective(folder),
            base_path=str(repository_root),
            workspace_folder=folder,
        )
        self._trace(f'Check commit {commit} @ "{repository_root}"', context, include_exclude=False)
        return context

    def _trace(self, header: str, context: InvocationContext, *, include_exclude: bool) -> None:
        folder = context.workspace_folder
        override = self.overrides.get(folder) if folder is not None else None
        if folder is not None and override is None:
            self.log(f"{header}: folder config is not defined!")

        def traced(name: str) -> _Traced:
            own = getattr(override, name, None) if override is not None else None
            if own is None:
                return _Traced(getattr(self.common, name), _FROM_COMMON)
            return _Traced(own)

        cwd_note = "" if folder is not None and context.cwd == folder else _ROOT_AS_CWD
        lines = [
            f"{header}:",
            f"  - workspace folder: {prettify(folder)}",
            f"  - checkpatchPath:   {traced('executable_path').render()}",
            f"  - checkpatchArgs:   {traced('args').render()}",
        ]
        if include_exclude:
            lines.append(f"  - exclude:          {traced('exclude_globs').render()}")
        lines.extend(
            [
                f"  - useFolderAsCwd:   {traced('use_folder_as_cwd').render()}",
                f"  - cwd:              {prettify(context.cwd)}{cwd_note}",
            ],
        )
        self.log("\n".join(lines))


def _optional_flag(value: bool | None) -> str:
    return "undefined" if value is None else str(value).lower()


__all__ = [
    "ConfigResolver",
    "absolutize",
    "build_common_config",
    "build_folder_override",
    "prettify",
]

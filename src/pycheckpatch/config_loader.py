# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered settings store backed by TOML documents.

The common scope is assembled from built-in defaults, the user file
(``~/.checkpatch.toml``) and the workspace file, later sources winning per key.
Every workspace folder may carry its own ``.checkpatch.toml`` whose values are
reported separately so the resolver can apply field-level precedence.
"""

from __future__ import annotations

import copy
import tomllib
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, Final

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import ParseError

from .config import CheckpatchSettings, ConfigError, FolderSettings, RunMode
from .constants import FOLDER_CONFIG_NAME, SETTINGS_TABLE, USER_CONFIG_NAME, WORKSPACE_CONFIG_NAME

_RUN_KEY: Final[str] = "run"

# Setting names as spelled by the editor extension.
_CAMEL_CASE_KEYS: Final[dict[str, str]] = {
    "checkpatchPath": "checkpatch_path",
    "checkpatchArgs": "checkpatch_args",
    "useFolderAsCwd": "use_folder_as_cwd",
    "diagnosticLevel": "diagnostic_level",
    "probeTimeout": "probe_timeout",
}

_TOML_CACHE: dict[tuple[Path, int, int], Mapping[str, Any]] = {}


class TomlSettingsSource:
    """Load one settings fragment from a TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self.path = path
        self.name = name or str(path)

    def load(self) -> dict[str, Any]:
        """Return the settings table of the document, or ``{}`` when absent.

        Raises:
            ConfigError: If the document is not valid TOML or the settings
                table has the wrong shape.
        """

        if not self.path.is_file():
            return {}
        resolved = self.path.resolve()
        try:
            stat = resolved.stat()
        except OSError as exc:
            raise ConfigError(f"Cannot read {self.name}: {exc}") from exc
        cache_key = (resolved, stat.st_mtime_ns, stat.st_size)
        if (cached := _TOML_CACHE.get(cache_key)) is not None:
            data: Mapping[str, Any] = copy.deepcopy(cached)
        else:
            try:
                with resolved.open("rb") as handle:
                    data = tomllib.load(handle)
            except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Invalid TOML in {self.name}: {exc}") from exc
            except OSError as exc:
                raise ConfigError(f"Cannot read {self.name}: {exc}") from exc
            _TOML_CACHE[cache_key] = copy.deepcopy(data)
        table = data.get(SETTINGS_TABLE, data)
        if not isinstance(table, Mapping):
            raise ConfigError(f"[{SETTINGS_TABLE}] in {self.name} must be a table")
        return normalise_fragment(table)

    def describe(self) -> str:
        return f"TOML settings at {self.name}"


def normalise_fragment(fragment: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``fragment`` with editor-style camelCase keys mapped to snake_case."""

    return {_CAMEL_CASE_KEYS.get(str(key), str(key)): value for key, value in fragment.items()}


class SettingsStore:
    """Apply layered settings sources with predictable precedence."""

    def __init__(
        self,
        *,
        folders: Sequence[Path],
        user_config: Path | None = None,
        workspace_config: Path | None = None,
    ) -> None:
        self._folders = tuple(folders)
        self.user_config = user_config if user_config is not None else Path.home() / USER_CONFIG_NAME
        if workspace_config is not None:
            self.workspace_config: Path | None = workspace_config
        elif self._folders:
            self.workspace_config = self._folders[0] / WORKSPACE_CONFIG_NAME
        else:
            self.workspace_config = None

    @property
    def folders(self) -> tuple[Path, ...]:
        """Return the workspace folders this store serves."""
        return self._folders

    def common_sources(self) -> list[TomlSettingsSource]:
        """Return the common-scope sources in ascending precedence."""

        sources = [TomlSettingsSource(self.user_config, name=f"user ({self.user_config})")]
        if self.workspace_config is not None:
            sources.append(TomlSettingsSource(self.workspace_config, name=f"workspace ({self.workspace_config})"))
        return sources

    def load_common(self) -> CheckpatchSettings:
        """Return the merged common settings.

        Raises:
            ConfigError: If any source is unreadable or holds invalid values.
        """

        merged: dict[str, Any] = {}
        for source in self.common_sources():
            merged.update(source.load())
        return _validate(CheckpatchSettings, merged, "common settings")

    def load_folder(self, folder: Path) -> FolderSettings:
        """Return only the values explicitly set in ``folder``'s settings file.

        Raises:
            ConfigError: If the folder file is unreadable or holds invalid values.
        """

        source = TomlSettingsSource(folder / FOLDER_CONFIG_NAME)
        fragment = source.load()
        # Run mode is a workspace-wide switch.
        fragment.pop(_RUN_KEY, None)
        fragment.pop("probe_timeout", None)
        return _validate(FolderSettings, fragment, f"folder settings @ {folder}")

    def set_run_mode(self, mode: RunMode) -> Path:
        """Persist ``mode`` into the workspace settings file.

        Formatting and comments of an existing file are preserved.

        Returns:
            Path: The file that was written.

        Raises:
            ConfigError: When the workspace has no settings file location or
                the existing file is not valid TOML.
        """

        target = self.workspace_config
        if target is None:
            raise ConfigError("No workspace folder is open; cannot store the run mode")
        if target.is_file():
            try:
                document = tomlkit.parse(target.read_text(encoding="utf-8"))
            except (ParseError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Invalid TOML in {target}: {exc}") from exc
        else:
            document = tomlkit.document()
        table: MutableMapping[str, Any] = document
        existing = document.get(SETTINGS_TABLE)
        if isinstance(existing, MutableMapping):
            table = existing
        table[_RUN_KEY] = mode.value
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(tomlkit.dumps(document), encoding="utf-8")
        invalidate_cache(target)
        return target


def invalidate_cache(path: Path) -> None:
    """Forget cached documents for ``path``; rewrites may keep size and mtime."""

    resolved = path.resolve()
    for key in [key for key in _TOML_CACHE if key[0] == resolved]:
        del _TOML_CACHE[key]


def _validate(model: type[Any], payload: Mapping[str, Any], context: str) -> Any:
    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigError(f"Invalid {context}: {exc}") from exc


__all__ = [
    "SettingsStore",
    "TomlSettingsSource",
    "invalidate_cache",
    "normalise_fragment",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across pycheckpatch modules."""

from __future__ import annotations

from typing import Final

DIAGNOSTIC_SOURCE: Final[str] = "checkpatch"

# Arguments appended to every real check so output carries file, line and type.
SHOW_TYPES_FLAG: Final[str] = "--show-types"
SHOW_FILE_FLAG: Final[str] = "--showfile"
FILE_FLAG: Final[str] = "-f"
COMMIT_FLAG: Final[str] = "-g"

# Probe invocation: no kernel tree, patch read from stdin.
PROBE_FLAGS: Final[tuple[str, ...]] = ("--no-tree", "-")
PROBE_INPUT: Final[str] = "\n"
DEFAULT_PROBE_TIMEOUT: Final[float] = 30.0

MAX_COMMIT_ENTRIES: Final[int] = 8

C_FILE_SUFFIXES: Final[frozenset[str]] = frozenset({".c", ".h"})

# Diagnostics span the whole line; editors clamp the end column.
END_OF_LINE: Final[int] = 2**31 - 1

SETTINGS_TABLE: Final[str] = "checkpatch"
USER_CONFIG_NAME: Final[str] = ".checkpatch.toml"
FOLDER_CONFIG_NAME: Final[str] = ".checkpatch.toml"
WORKSPACE_CONFIG_NAME: Final[str] = "checkpatch-workspace.toml"
PROBLEMS_CACHE_DIR: Final[str] = ".checkpatch-cache"
PROBLEMS_CACHE_FILE: Final[str] = "diagnostics.json"

__all__ = [
    "COMMIT_FLAG",
    "C_FILE_SUFFIXES",
    "DEFAULT_PROBE_TIMEOUT",
    "DIAGNOSTIC_SOURCE",
    "END_OF_LINE",
    "FILE_FLAG",
    "FOLDER_CONFIG_NAME",
    "MAX_COMMIT_ENTRIES",
    "PROBE_FLAGS",
    "PROBE_INPUT",
    "PROBLEMS_CACHE_DIR",
    "PROBLEMS_CACHE_FILE",
    "SETTINGS_TABLE",
    "SHOW_FILE_FLAG",
    "SHOW_TYPES_FLAG",
    "USER_CONFIG_NAME",
    "WORKSPACE_CONFIG_NAME",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Probe configured checker invocations before trusting them."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_PROBE_TIMEOUT, PROBE_FLAGS, PROBE_INPUT
from .interfaces import HostUI
from .logging import OutputChannel
from .parsers import has_summary
from .process import CommandOptions, TIMEOUT_RETURNCODE, run_command, split_arguments
from .resolver import ConfigResolver

LOGGER = logging.getLogger(__name__)

PROBE_FAILURE_NOTICE = "Checkpatch [config]: Probably bad or unusable config. Please, review the output pane for details"


@dataclass(frozen=True, slots=True)
class ProbeOutcome:
    """Result of a single probe invocation."""

    description: str
    executable: str
    ok: bool
    stderr: str = ""
    reason: str = ""


class ConfigValidator:
    """Run the checker on an empty patch and look for its summary line.

    A scope is usable when the process starts and its stdout contains the
    ``total: ... lines checked`` summary. Failures are reported to the output
    channel and the host; nothing is raised.
    """

    def __init__(
        self,
        *,
        host: HostUI | None = None,
        channel: OutputChannel | None = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self._host = host
        self._channel = channel
        self.timeout = timeout

    def _log(self, message: str) -> None:
        if self._channel is not None:
            self._channel.append_line(message)

    def probe(
        self,
        description: str,
        executable: str,
        args: Sequence[str],
        cwd: Path | None,
    ) -> ProbeOutcome:
        """Probe one configured invocation.

        Args:
            description: Scope label used in log messages.
            executable: Checker executable.
            args: Configured base arguments; probe flags are appended to a copy.
            cwd: Working directory, or ``None`` to inherit the current one.

        Returns:
            ProbeOutcome: Whether the scope is usable, with captured stderr.
        """

        self._log(f"Test {description}")
        options = CommandOptions(cwd=cwd, timeout=self.timeout, input=PROBE_INPUT)
        try:
            command = [executable, *split_arguments(args), *PROBE_FLAGS]
            completed = run_command(command, options=options)
        except (OSError, ValueError) as exc:
            outcome = ProbeOutcome(description, executable, ok=False, reason=str(exc))
        else:
            stdout = completed.stdout or ""
            stderr = completed.stderr or ""
            if completed.returncode == TIMEOUT_RETURNCODE and not has_summary(stdout):
                outcome = ProbeOutcome(description, executable, ok=False, stderr=stderr, reason="timed out")
            elif has_summary(stdout):
                outcome = ProbeOutcome(description, executable, ok=True, stderr=stderr)
            else:
                outcome = ProbeOutcome(description, executable, ok=False, stderr=stderr, reason="no summary line")

        if not outcome.ok:
            self._report_failure(outcome)
        else:
            LOGGER.debug("probe %s succeeded", description)
        return outcome

    def _report_failure(self, outcome: ProbeOutcome) -> None:
        detail = outcome.stderr.strip() or outcome.reason
        suffix = f'. Stderr: "{detail}"' if detail else ""
        self._log(
            f"Test {outcome.description}: probably bad or unusable config. "
            f'Failed to call "{outcome.executable}" to test for it works{suffix}',
        )
        if self._host is not None:
            self._host.show_error(PROBE_FAILURE_NOTICE)

    def validate(self, resolver: ConfigResolver) -> bool:
        """Probe the common scope, then every folder scope.

        Folder scopes are skipped when the common scope fails; any failure
        leaves the whole system unconfigured.

        Returns:
            bool: ``True`` when every scope probed successfully.
        """

        common = resolver.common
        if not self.probe("common config", common.executable_path, common.args, resolver.root).ok:
            self._log("Not configured!")
            return False
        for folder in resolver.overrides:
            effective = resolver.effective(folder)
            outcome = self.probe(
                f'folder config @ "{folder}"',
                effective.executable_path,
                effective.args,
                resolver.cwd_for(folder),
            )
            if not outcome.ok:
                self._log("Not configured!")
                return False
        return True


__all__ = ["ConfigValidator", "PROBE_FAILURE_NOTICE", "ProbeOutcome"]

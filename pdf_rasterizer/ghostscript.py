"""Ghostscript executable discovery and process execution."""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from .exceptions import ExecutableNotFound
from .utils import run_subprocess

_LOGGER = logging.getLogger("pdf_rasterizer.ghostscript")

GHOSTSCRIPT_CANDIDATES: Tuple[str, ...] = ("gswin64c", "gswin32c", "gs")

# Exit code recorded when the process could not be started or was killed.
ABNORMAL_EXIT = -1

_STDERR_LIMIT = 4000


class ProbeOutcome(str, Enum):
    """Result of running ``<candidate> --version``."""

    AVAILABLE = "available"
    SPAWN_ERROR = "spawn-error"
    NON_ZERO_EXIT = "non-zero-exit"


@dataclass(frozen=True)
class ProbeResult:
    candidate: str
    outcome: ProbeOutcome
    exit_code: Optional[int] = None
    version: str = ""
    detail: str = ""

    @property
    def available(self) -> bool:
        return self.outcome is ProbeOutcome.AVAILABLE


def probe_executable(candidate: str, *, timeout: float = 10.0) -> ProbeResult:
    """Run ``candidate --version`` and classify the result."""

    try:
        completed = run_subprocess([candidate, "--version"], timeout=timeout)
    except (OSError, subprocess.SubprocessError) as exc:
        _LOGGER.debug("Probe of %s could not start: %s", candidate, exc)
        return ProbeResult(candidate, ProbeOutcome.SPAWN_ERROR, detail=str(exc))

    if completed.returncode != 0:
        return ProbeResult(
            candidate,
            ProbeOutcome.NON_ZERO_EXIT,
            exit_code=completed.returncode,
            detail=(completed.stderr or "").strip(),
        )
    return ProbeResult(
        candidate,
        ProbeOutcome.AVAILABLE,
        exit_code=0,
        version=(completed.stdout or "").strip(),
    )


def probe_candidates(
    configured: Optional[str] = None,
    candidates: Iterable[str] = GHOSTSCRIPT_CANDIDATES,
    *,
    stop_at_first: bool = True,
    timeout: float = 10.0,
) -> List[ProbeResult]:
    """Probe *configured* (if any) followed by *candidates* in rank order."""

    ranked: List[str] = []
    for candidate in ([configured] if configured else []) + list(candidates):
        if candidate and candidate not in ranked:
            ranked.append(candidate)

    probes: List[ProbeResult] = []
    for candidate in ranked:
        probe = probe_executable(candidate, timeout=timeout)
        probes.append(probe)
        if probe.available and stop_at_first:
            break
    return probes


def find_executable(
    configured: Optional[str] = None,
    candidates: Iterable[str] = GHOSTSCRIPT_CANDIDATES,
    *,
    timeout: float = 10.0,
) -> str:
    """
    Return the first Ghostscript executable that answers ``--version``.

    Raises:
        ExecutableNotFound: every candidate failed; ``probes`` holds the outcomes
    """
    probes = probe_candidates(configured, candidates, timeout=timeout)
    for probe in probes:
        if probe.available:
            _LOGGER.debug("Using Ghostscript %s (version %s)", probe.candidate, probe.version)
            return probe.candidate

    summary = ", ".join(f"{probe.candidate}: {probe.outcome.value}" for probe in probes)
    raise ExecutableNotFound(
        "Ghostscript is not found, check if gs is installed or configured properly"
        + (f" ({summary})" if summary else ""),
        probes=probes,
    )


@dataclass(frozen=True)
class ProcessOutcome:
    exit_code: int
    stderr: str = ""
    timed_out: bool = False
    cancelled: bool = False


class ProcessRunner(Protocol):
    """Executes one command line and reports its exit status."""

    def run(
        self,
        args: Sequence[str],
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProcessOutcome:
        """Run *args* to completion, capturing standard error."""


class SubprocessRunner:
    """:class:`ProcessRunner` backed by :class:`subprocess.Popen`."""

    def __init__(self, poll_interval: float = 0.2) -> None:
        self.poll_interval = poll_interval

    def run(
        self,
        args: Sequence[str],
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProcessOutcome:
        _LOGGER.debug("Executing command: %s", " ".join(args))
        try:
            process = subprocess.Popen(
                list(args),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            _LOGGER.error("Error opening process: %s", exc)
            return ProcessOutcome(ABNORMAL_EXIT, f"Error opening process: {exc}")

        with process:
            stderr, timed_out, cancelled = self._wait(process, timeout, cancel_event)

        text = stderr.decode("utf-8", errors="replace")[-_STDERR_LIMIT:]
        if timed_out:
            return ProcessOutcome(
                ABNORMAL_EXIT, text or f"Process timed out after {timeout} seconds", timed_out=True
            )
        if cancelled:
            return ProcessOutcome(ABNORMAL_EXIT, text or "Process cancelled", cancelled=True)
        return ProcessOutcome(process.returncode, text)

    def _wait(
        self,
        process: subprocess.Popen,
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> Tuple[bytes, bool, bool]:
        waited = 0.0
        while True:
            interval = self.poll_interval if cancel_event is not None else timeout
            if timeout is not None and interval is not None:
                interval = min(interval, max(timeout - waited, 0.0))
            try:
                _, stderr = process.communicate(timeout=interval)
                return stderr or b"", False, False
            except subprocess.TimeoutExpired:
                waited += interval or 0.0

            if cancel_event is not None and cancel_event.is_set():
                process.terminate()
                _, stderr = process.communicate()
                return stderr or b"", False, True
            if timeout is not None and waited >= timeout:
                process.kill()
                _, stderr = process.communicate()
                return stderr or b"", True, False


__all__ = [
    "ABNORMAL_EXIT",
    "GHOSTSCRIPT_CANDIDATES",
    "ProbeOutcome",
    "ProbeResult",
    "ProcessOutcome",
    "ProcessRunner",
    "SubprocessRunner",
    "find_executable",
    "probe_candidates",
    "probe_executable",
]

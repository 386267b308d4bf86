"""Batch-wise PDF to image conversion driven by Ghostscript."""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Union

from .config import DEFAULT_CONFIGURATION, ConfigurationResolver, ConfigValue
from .exceptions import NoInputFile, ProcessFailure
from .ghostscript import ProcessRunner, SubprocessRunner, find_executable
from .invocation import InvocationBuilder, command_line
from .page_count import GhostscriptPageCounter, PageCountOracle
from .planner import plan_batches
from .types import (
    BatchRange,
    BatchStatus,
    FailurePolicy,
    InvocationResult,
    OutputFormat,
    RunReport,
)
from .utils import format_duration, require_directory, resolve_document

_LOGGER = logging.getLogger("pdf_rasterizer")

ProgressCallback = Callable[[int, int, InvocationResult], None]


class PDFRasterizer:
    """
    Convert a PDF into one image per page, optionally in batches.

    Example:
        >>> report = (
        ...     PDFRasterizer()
        ...     .read("input.pdf")
        ...     .configure({"batch_size": 50, "resolution": 150})
        ...     .process("output/", "png")
        ... )
    """

    def __init__(
        self,
        *,
        executable: Optional[str] = None,
        verify_executable: bool = True,
        runner: Optional[ProcessRunner] = None,
        page_counter: Optional[PageCountOracle] = None,
        failure_policy: Union[FailurePolicy, str] = FailurePolicy.COLLECT_ALL,
        max_workers: int = 1,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        strict: bool = False,
        defaults: Mapping[str, ConfigValue] = DEFAULT_CONFIGURATION,
    ) -> None:
        self.executable_path = executable
        self.verify_executable = verify_executable
        self.runner: ProcessRunner = runner or SubprocessRunner()
        self.page_counter = page_counter
        self.failure_policy = FailurePolicy(failure_policy)
        self.max_workers = max(1, max_workers)
        self.timeout = timeout
        self.cancel_event = cancel_event or threading.Event()
        self.strict = strict
        self.defaults = defaults
        self.filename: Optional[Path] = None
        self.config: dict = {}
        self._executable: Optional[str] = None

    # ------------------------------------------------------------------
    # Fluent setup
    # ------------------------------------------------------------------
    def set_executable(self, path: str) -> "PDFRasterizer":
        self.executable_path = path
        self._executable = None
        return self

    def read(self, path: Union[str, os.PathLike]) -> "PDFRasterizer":
        """Select the document to convert; raises :class:`FileNotFound`."""

        self.filename = resolve_document(path)
        return self

    def configure(self, config: Optional[Mapping[str, ConfigValue]] = None, **options: ConfigValue) -> "PDFRasterizer":
        """Replace the user configuration layer."""

        merged = dict(config or {})
        merged.update(options)
        self.config = merged
        return self

    @property
    def resolver(self) -> ConfigurationResolver:
        return ConfigurationResolver(self.config, self.defaults)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    def get_executable(self) -> str:
        if self._executable is None:
            if self.executable_path and not self.verify_executable:
                self._executable = self.executable_path
            else:
                self._executable = find_executable(self.executable_path)
        return self._executable

    def get_page_count(self) -> int:
        if self.filename is None:
            raise NoInputFile()
        counter = self.page_counter or GhostscriptPageCounter(self.get_executable())
        return counter.page_count(self.filename)

    def plan(self, total_pages: Optional[int] = None) -> List[BatchRange]:
        resolver = self.resolver
        resolver.validate()
        if total_pages is None:
            total_pages = self.get_page_count()
        return plan_batches(
            total_pages,
            int(resolver.resolve("start_page")),
            int(resolver.resolve("batch_size")),
        )

    def invocations(
        self,
        directory: Union[str, os.PathLike],
        image_format: Union[OutputFormat, str] = OutputFormat.JPEG,
        batches: Optional[Sequence[BatchRange]] = None,
    ) -> List[List[str]]:
        """Return the full argument vector for every planned batch."""

        fmt = OutputFormat.from_extension(image_format)
        if self.filename is None:
            raise NoInputFile()
        builder = InvocationBuilder(self.resolver)
        executable = self.get_executable()
        planned = self.plan() if batches is None else batches
        return [
            [executable, *builder.build(fmt, batch, self.filename, directory)]
            for batch in planned
        ]

    def get_commands(
        self,
        directory: Union[str, os.PathLike],
        image_format: Union[OutputFormat, str] = OutputFormat.JPEG,
    ) -> List[str]:
        return [command_line(args[0], args[1:]) for args in self.invocations(directory, image_format)]

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def process(
        self,
        directory: Union[str, os.PathLike],
        image_format: Union[OutputFormat, str] = OutputFormat.JPEG,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> RunReport:
        """
        Convert every planned batch into *directory*.

        Input, configuration and executable problems raise before any
        conversion starts. Failed batches are recorded in the report; with
        ``FailurePolicy.ABORT_ON_FIRST`` the remaining ones are skipped.

        Raises:
            InvalidDirectory: *directory* does not exist
            UnsupportedFormat: *image_format* is neither jpg nor png
            NoInputFile: :meth:`read` was not called
            ProcessFailure: a batch failed and ``strict`` is enabled
        """
        output_dir = require_directory(directory)
        fmt = OutputFormat.from_extension(image_format)
        if self.filename is None:
            raise NoInputFile()
        self.resolver.validate()
        self.get_executable()

        total_pages = self.get_page_count()
        batches = self.plan(total_pages)
        invocations = self.invocations(output_dir, fmt, batches)

        start = time.perf_counter()
        if not batches:
            _LOGGER.info("Nothing to convert: start page equals page count (%d)", total_pages)
            results: List[InvocationResult] = []
        else:
            results = self._run_all(batches, invocations, progress_callback)
        total_seconds = time.perf_counter() - start

        report = RunReport(
            source_file=str(self.filename),
            output_dir=str(output_dir),
            output_format=fmt,
            total_pages=total_pages,
            failure_policy=self.failure_policy,
            results=tuple(results),
            total_seconds=total_seconds,
        )
        _LOGGER.info("Total processing time: %s (%s)", format_duration(total_seconds), report)

        if self.strict and report.failed:
            raise ProcessFailure(
                f"{report.failed} of {len(report.results)} batch(es) failed",
                results=report.failures,
                report=report,
            )
        return report

    def _run_all(
        self,
        batches: Sequence[BatchRange],
        invocations: Sequence[Sequence[str]],
        progress_callback: Optional[ProgressCallback],
    ) -> List[InvocationResult]:
        stop = threading.Event()
        lock = threading.Lock()
        completed = [0]

        def execute(batch: BatchRange, args: Sequence[str]) -> InvocationResult:
            if self.cancel_event.is_set():
                result = InvocationResult.skipped(batch, "Run cancelled")
            elif stop.is_set():
                result = InvocationResult.skipped(batch, "Skipped after an earlier batch failed")
            else:
                result = self._run_batch(batch, args)
                if not result.ok and self.failure_policy is FailurePolicy.ABORT_ON_FIRST:
                    stop.set()

            if progress_callback:
                with lock:
                    completed[0] += 1
                    progress_callback(completed[0], len(batches), result)
            return result

        if self.max_workers == 1 or len(batches) == 1:
            return [execute(batch, args) for batch, args in zip(batches, invocations)]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(execute, batch, args) for batch, args in zip(batches, invocations)]
            return [future.result() for future in futures]

    def _run_batch(self, batch: BatchRange, args: Sequence[str]) -> InvocationResult:
        command = command_line(args[0], args[1:])
        _LOGGER.debug("Running %s: %s", batch, command)

        start = time.perf_counter()
        outcome = self.runner.run(args, timeout=self.timeout, cancel_event=self.cancel_event)
        duration = time.perf_counter() - start

        ok = outcome.exit_code == 0 and not outcome.cancelled and not outcome.timed_out
        result = InvocationResult(
            batch_index=batch.batch_index,
            exit_code=outcome.exit_code,
            stderr_text=outcome.stderr,
            duration_seconds=duration,
            status=BatchStatus.SUCCESS if ok else BatchStatus.FAILURE,
            first_page=batch.first_page,
            last_page=batch.last_page,
            command=command,
        )

        if ok:
            _LOGGER.info("%s processing time: %s", batch, format_duration(duration))
        else:
            _LOGGER.warning(
                "Error during processing of %s: exit code %s, standard error: %s",
                batch,
                outcome.exit_code,
                outcome.stderr.strip(),
            )
        return result


__all__ = ["PDFRasterizer", "ProgressCallback"]

"""
Type definitions and dataclasses for PDF Rasterizer.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import UnsupportedFormat


class OutputFormat(str, Enum):
    """Raster formats supported by the Ghostscript devices we drive."""

    JPEG = "jpg"
    PNG_ALPHA = "png"

    @property
    def device(self) -> str:
        return _DEVICES[self]

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_extension(cls, value: "str | OutputFormat") -> "OutputFormat":
        """Return the format for an extension such as ``"jpg"`` or ``"png"``."""

        if isinstance(value, OutputFormat):
            return value
        key = str(value).strip().lower().lstrip(".")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError as exc:
            raise UnsupportedFormat(f"This type is not supported: {value}") from exc


_DEVICES = {
    OutputFormat.JPEG: "jpeg",
    OutputFormat.PNG_ALPHA: "pngalpha",
}

_ALIASES = {"jpeg": "jpg", "pngalpha": "png"}


class FailurePolicy(str, Enum):
    """What the run does after a batch exits with a non-zero code."""

    COLLECT_ALL = "collect-all"
    ABORT_ON_FIRST = "abort-on-first"


class BatchStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class BatchRange:
    """
    A contiguous span of pages converted by one Ghostscript invocation.

    Attributes:
        batch_index: 1-based batch number, or None when batching is off
        first_page: First page passed to ``-dFirstPage``
        last_page: Last page passed to ``-dLastPage``
    """
    batch_index: Optional[int]
    first_page: int
    last_page: int

    @property
    def is_batched(self) -> bool:
        return self.batch_index is not None

    @property
    def pages(self) -> range:
        return range(self.first_page, self.last_page + 1)

    @property
    def page_count(self) -> int:
        return self.last_page - self.first_page + 1

    def as_tuple(self) -> Tuple[Optional[int], int, int]:
        return (self.batch_index, self.first_page, self.last_page)

    def __str__(self) -> str:
        label = f"batch {self.batch_index}" if self.is_batched else "all pages"
        return f"{label} (pages {self.first_page}-{self.last_page})"


@dataclass(frozen=True)
class InvocationResult:
    """
    Outcome of running (or skipping) one batch.

    Attributes:
        batch_index: Batch number of the range, None when unbatched
        exit_code: Process exit code, None when the batch was skipped
        stderr_text: Captured standard error of the process
        duration_seconds: Wall-clock time spent on the invocation
        status: success, failure or skipped
        first_page: First page of the range
        last_page: Last page of the range
        command: Normalized command line that was executed
    """
    batch_index: Optional[int]
    exit_code: Optional[int]
    stderr_text: str
    duration_seconds: float
    status: BatchStatus
    first_page: int = 0
    last_page: int = 0
    command: str = ""

    @property
    def ok(self) -> bool:
        return self.status is BatchStatus.SUCCESS

    @classmethod
    def skipped(cls, batch: BatchRange, reason: str = "") -> "InvocationResult":
        return cls(
            batch_index=batch.batch_index,
            exit_code=None,
            stderr_text=reason,
            duration_seconds=0.0,
            status=BatchStatus.SKIPPED,
            first_page=batch.first_page,
            last_page=batch.last_page,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batch": self.batch_index,
            "first_page": self.first_page,
            "last_page": self.last_page,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "duration_seconds": round(self.duration_seconds, 6),
            "stderr": self.stderr_text,
            "command": self.command,
        }


@dataclass(frozen=True)
class RunReport:
    """
    Aggregated result of a conversion run.

    Attributes:
        source_file: Path of the converted document
        output_dir: Directory receiving the images
        output_format: Raster format that was produced
        total_pages: Page count reported by the oracle
        failure_policy: Policy applied to failed batches
        results: Per-batch results in plan order
        total_seconds: Wall-clock duration of the whole run
    """
    source_file: str
    output_dir: str
    output_format: OutputFormat
    total_pages: int
    failure_policy: FailurePolicy
    results: Tuple[InvocationResult, ...] = field(default_factory=tuple)
    total_seconds: float = 0.0

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.status is BatchStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.status is BatchStatus.FAILURE)

    @property
    def skipped(self) -> int:
        return sum(1 for result in self.results if result.status is BatchStatus.SKIPPED)

    @property
    def success(self) -> bool:
        return self.failed == 0 and self.skipped == 0

    @property
    def failures(self) -> List[InvocationResult]:
        return [result for result in self.results if result.status is BatchStatus.FAILURE]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_file": self.source_file,
            "output_dir": self.output_dir,
            "format": self.output_format.value,
            "total_pages": self.total_pages,
            "failure_policy": self.failure_policy.value,
            "total_seconds": round(self.total_seconds, 6),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "results": [result.to_dict() for result in self.results],
        }

    def __str__(self) -> str:
        return (
            "RunReport(batches={total}, succeeded={ok}, failed={failed}, "
            "skipped={skipped}, seconds={seconds:.2f})"
        ).format(
            total=len(self.results),
            ok=self.succeeded,
            failed=self.failed,
            skipped=self.skipped,
            seconds=self.total_seconds,
        )

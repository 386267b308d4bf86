from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
import sys
import threading

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_rasterizer.ghostscript import ProcessOutcome  # noqa: E402


class FakeRunner:
    """Records argument vectors and answers with scripted exit codes.

    ``exit_codes`` maps a ``-dFirstPage`` value to the exit code returned for
    the batch starting at that page; unlisted batches succeed.
    """

    def __init__(self, exit_codes: Optional[Dict[int, int]] = None, on_run=None) -> None:
        self.exit_codes = exit_codes or {}
        self.on_run = on_run
        self.calls: List[List[str]] = []
        self.timeouts: List[Optional[float]] = []
        self._lock = threading.Lock()

    @staticmethod
    def first_page(args: Sequence[str]) -> int:
        for arg in args:
            if arg.startswith("-dFirstPage="):
                return int(arg.split("=", 1)[1])
        raise AssertionError("no -dFirstPage flag")

    def run(self, args, *, timeout=None, cancel_event=None) -> ProcessOutcome:
        with self._lock:
            self.calls.append(list(args))
            self.timeouts.append(timeout)
        if self.on_run is not None:
            self.on_run(args, cancel_event)
        code = self.exit_codes.get(self.first_page(args), 0)
        stderr = "" if code == 0 else f"GPL Ghostscript: Unrecoverable error, exit code {code}"
        return ProcessOutcome(code, stderr)

    @property
    def first_pages(self) -> List[int]:
        return [self.first_page(args) for args in self.calls]


class FakePageCounter:
    def __init__(self, pages: int) -> None:
        self.pages = pages
        self.queried: List[str] = []

    def page_count(self, pdf_path) -> int:
        self.queried.append(str(pdf_path))
        return self.pages


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "pdf-rasterizer-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture()
def rasterizer_factory(sample_pdf: Path) -> Callable[..., object]:
    from pdf_rasterizer import PDFRasterizer

    def _create(pages: int = 10, runner: Optional[FakeRunner] = None, **kwargs):
        rasterizer = PDFRasterizer(
            executable="gs",
            verify_executable=False,
            runner=runner or FakeRunner(),
            page_counter=FakePageCounter(pages),
            **kwargs,
        )
        return rasterizer.read(sample_pdf)

    return _create

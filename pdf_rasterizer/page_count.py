"""Page-count oracles used to plan batches."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .exceptions import PageCountError
from .utils import run_subprocess

_LOGGER = logging.getLogger("pdf_rasterizer.page_count")

_INTEGER = re.compile(r"^\s*(\d+)\s*$")


class PageCountOracle(Protocol):
    """Anything that can tell how many pages a document has."""

    def page_count(self, pdf_path: Union[str, os.PathLike]) -> int:
        """Return the number of pages of *pdf_path*."""


def parse_page_count(output: Optional[str]) -> int:
    """Parse the untrusted text printed by a page-count query."""

    if output is None:
        raise PageCountError("Page count query produced no output")

    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        raise PageCountError("Page count query produced no output")

    match = _INTEGER.match(lines[-1])
    if not match:
        raise PageCountError(f"Unexpected page count output: {output.strip()!r}")
    return int(match.group(1))


def _postscript_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


class GhostscriptPageCounter:
    """Ask Ghostscript for ``pdfpagecount`` of a document."""

    def __init__(self, executable: str, *, timeout: Optional[float] = 60.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def command(self, pdf_path: Union[str, os.PathLike]) -> list:
        path = str(pdf_path)
        return [
            self.executable,
            "-q",
            "-dNODISPLAY",
            f"--permit-file-read={path}",
            "-c",
            f"({_postscript_string(path)}) (r) file runpdfbegin pdfpagecount = quit",
        ]

    def page_count(self, pdf_path: Union[str, os.PathLike]) -> int:
        try:
            completed = run_subprocess(self.command(pdf_path), timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            raise PageCountError(f"Unable to run Ghostscript page count: {exc}") from exc

        if completed.returncode != 0:
            raise PageCountError(
                f"Ghostscript page count failed with exit code {completed.returncode}: "
                f"{(completed.stderr or '').strip()}"
            )
        count = parse_page_count(completed.stdout)
        _LOGGER.debug("Ghostscript reports %d pages for %s", count, pdf_path)
        return count


class PypdfPageCounter:
    """Count pages with :mod:`pypdf` without spawning Ghostscript."""

    def __init__(self, password: Optional[str] = None) -> None:
        self.password = password

    def page_count(self, pdf_path: Union[str, os.PathLike]) -> int:
        path = Path(pdf_path)
        try:
            reader = PdfReader(str(path))
            if reader.is_encrypted:
                if not self.password or reader.decrypt(self.password) == 0:
                    raise PageCountError(f"PDF is encrypted: {pdf_path}")
            count = len(reader.pages)
        except PageCountError:
            raise
        except (PdfReadError, OSError) as exc:
            raise PageCountError(f"Corrupted or invalid PDF file: {pdf_path}. Error: {exc}") from exc
        except Exception as exc:
            raise PageCountError(f"Unexpected error reading PDF: {pdf_path}. Error: {exc}") from exc

        _LOGGER.debug("pypdf reports %d pages for %s", count, pdf_path)
        return count


__all__ = [
    "GhostscriptPageCounter",
    "PageCountOracle",
    "PypdfPageCounter",
    "parse_page_count",
]

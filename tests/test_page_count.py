from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from pdf_rasterizer import page_count
from pdf_rasterizer.exceptions import PageCountError
from pdf_rasterizer.page_count import GhostscriptPageCounter, PypdfPageCounter, parse_page_count


@pytest.mark.parametrize(
    "output,expected",
    [("5\n", 5), ("  12 ", 12), ("0", 0), ("GPL Ghostscript 10.0 warning\n7\n\n", 7)],
)
def test_parse_page_count(output: str, expected: int) -> None:
    assert parse_page_count(output) == expected


@pytest.mark.parametrize("output", [None, "", "\n", "Error: /undefined in runpdfbegin", "-3", "4 pages"])
def test_parse_page_count_rejects_garbage(output) -> None:
    with pytest.raises(PageCountError):
        parse_page_count(output)


def test_ghostscript_command_escapes_path() -> None:
    command = GhostscriptPageCounter("gs").command("/docs/report (final).pdf")
    assert command[:4] == ["gs", "-q", "-dNODISPLAY", "--permit-file-read=/docs/report (final).pdf"]
    assert command[-1] == r"(/docs/report \(final\).pdf) (r) file runpdfbegin pdfpagecount = quit"


def test_ghostscript_page_count(monkeypatch) -> None:
    calls = []

    def fake_run(command, timeout=None):
        calls.append((command, timeout))
        return subprocess.CompletedProcess(command, 0, "42\n", "")

    monkeypatch.setattr(page_count, "run_subprocess", fake_run)
    assert GhostscriptPageCounter("gs", timeout=5).page_count("/docs/in.pdf") == 42
    assert calls[0][1] == 5


def test_ghostscript_page_count_failure(monkeypatch) -> None:
    monkeypatch.setattr(
        page_count,
        "run_subprocess",
        lambda command, timeout=None: subprocess.CompletedProcess(command, 1, "", "Unrecoverable error"),
    )
    with pytest.raises(PageCountError, match="exit code 1"):
        GhostscriptPageCounter("gs").page_count("/docs/in.pdf")


def test_ghostscript_page_count_spawn_error(monkeypatch) -> None:
    def fail(command, timeout=None):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(page_count, "run_subprocess", fail)
    with pytest.raises(PageCountError):
        GhostscriptPageCounter("gs").page_count("/docs/in.pdf")


def test_pypdf_page_count(sample_pdf: Path) -> None:
    assert PypdfPageCounter().page_count(sample_pdf) == 5


def test_pypdf_page_count_invalid_file(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.pdf"
    bogus.write_text("not a pdf")
    with pytest.raises(PageCountError):
        PypdfPageCounter().page_count(bogus)

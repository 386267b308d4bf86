from __future__ import annotations

import os

import pytest

from pdf_rasterizer.config import ConfigurationResolver
from pdf_rasterizer.exceptions import NoInputFile, UnsupportedFormat
from pdf_rasterizer.invocation import InvocationBuilder, command_line, output_pattern
from pdf_rasterizer.types import BatchRange, OutputFormat

BASELINE = [
    "-dNOPAUSE",
    "-dBATCH",
    "-dNumRenderingThreads=4",
    "-dBufferSpace=1000000000",
    "-dBandBufferSpace=500000000",
    "-dNOTRANSPARENCY",
    "-dMaxBitmap=10000000",
    "-dNOGC",
]


def _build(fmt, batch=BatchRange(None, 0, 5), **config):
    builder = InvocationBuilder(ConfigurationResolver(config))
    return builder.build(fmt, batch, "/docs/in.pdf", "/out")


def test_jpeg_flags_in_order() -> None:
    flags = _build(OutputFormat.JPEG)
    assert flags == BASELINE + [
        "-r300",
        "-sDEVICE=jpeg",
        "-dJPEGQ=100",
        "-dCOLORSCREEN",
        "-dColorConversionStrategy=/LeaveColorUnchanged",
        "-dNOFONT",
        "-dPrinted",
        "-dFirstPage=0",
        "-dLastPage=5",
        "-sOutputFile=" + os.path.join("/out", "page_%d.jpg"),
        "/docs/in.pdf",
    ]


def test_jpeg_never_has_alpha_flags() -> None:
    flags = _build("jpg", compression_quality=80, alpha_bits=2)
    assert "-dJPEGQ=80" in flags
    assert not any("AlphaBits" in flag for flag in flags)


def test_png_alpha_bits_share_one_value() -> None:
    flags = _build(OutputFormat.PNG_ALPHA, alpha_bits=2)
    assert "-sDEVICE=pngalpha" in flags
    assert "-dGraphicsAlphaBits=2" in flags
    assert "-dTextAlphaBits=2" in flags
    assert not any(flag.startswith("-dJPEGQ") for flag in flags)
    assert "-dCOLORSCREEN" not in flags
    device = flags.index("-sDEVICE=pngalpha")
    assert flags.index("-dGraphicsAlphaBits=2") > device


def test_feature_toggles_are_independent() -> None:
    flags = _build(
        "png",
        disable_color_management=False,
        disable_font_embedding=True,
        disable_annotations=False,
    )
    assert "-dNOFONT" in flags
    assert "-dColorConversionStrategy=/LeaveColorUnchanged" not in flags
    assert "-dPrinted" not in flags


def test_batched_output_pattern_and_final_entries() -> None:
    flags = _build("png", batch=BatchRange(3, 7, 9), resolution=150)
    assert "-r150" in flags
    assert flags[-4:] == [
        "-dFirstPage=7",
        "-dLastPage=9",
        "-sOutputFile=" + os.path.join("/out", "page_3_%d.png"),
        "/docs/in.pdf",
    ]


def test_missing_input_raises() -> None:
    with pytest.raises(NoInputFile):
        InvocationBuilder().build("jpg", BatchRange(None, 0, 1), None, "/out")


@pytest.mark.parametrize("fmt", ["gif", "tiff", ""])
def test_unsupported_format_raises(fmt: str) -> None:
    with pytest.raises(UnsupportedFormat):
        InvocationBuilder().build(fmt, BatchRange(None, 0, 1), "/docs/in.pdf", "/out")


def test_output_format_aliases() -> None:
    assert OutputFormat.from_extension("JPEG") is OutputFormat.JPEG
    assert OutputFormat.from_extension(".png") is OutputFormat.PNG_ALPHA
    assert OutputFormat.PNG_ALPHA.device == "pngalpha"
    assert OutputFormat.JPEG.extension == "jpg"


def test_output_pattern() -> None:
    assert output_pattern("/out", OutputFormat.JPEG) == os.path.join("/out", "page_%d.jpg")
    assert output_pattern("/out", OutputFormat.PNG_ALPHA, 2) == os.path.join("/out", "page_2_%d.png")


def test_command_line_is_single_normalized_line() -> None:
    line = command_line("gs", ["-dNOPAUSE", "-dBATCH\n", "  -r300", "in\r\n.pdf"])
    assert line == "gs -dNOPAUSE -dBATCH -r300 in .pdf"
    assert "\n" not in line


def test_command_line_does_not_quote_paths_with_spaces() -> None:
    line = command_line("gs", ["-sOutputFile=my  pages/page_%d.jpg", "my doc.pdf"])
    assert line == "gs -sOutputFile=my pages/page_%d.jpg my doc.pdf"
    assert '"' not in line and "'" not in line

"""Assemble Ghostscript argument lists for one batch."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .config import ConfigurationResolver
from .exceptions import NoInputFile
from .parameters import Flag, ParameterSet
from .types import BatchRange, OutputFormat

_LOGGER = logging.getLogger("pdf_rasterizer.invocation")

BASELINE_FLAGS: tuple = (
    Flag.define("NOPAUSE"),
    Flag.define("BATCH"),
    Flag.define("NumRenderingThreads", 4),
    Flag.define("BufferSpace", 1000000000),
    Flag.define("BandBufferSpace", 500000000),
    Flag.define("NOTRANSPARENCY"),
    Flag.define("MaxBitmap", 10000000),
    Flag.define("NOGC"),
)

_WHITESPACE = re.compile(r"\s+")


def output_pattern(
    output_dir: Union[str, os.PathLike],
    output_format: OutputFormat,
    batch_index: Optional[int] = None,
) -> str:
    """Return the ``-sOutputFile`` pattern, e.g. ``out/page_2_%d.png``."""

    stem = "page_%d" if batch_index is None else f"page_{batch_index}_%d"
    return str(Path(output_dir) / f"{stem}.{output_format.extension}")


def command_line(executable: str, flags: Sequence[str]) -> str:
    """Join *executable* and *flags* into a single whitespace-normalized line."""

    return _WHITESPACE.sub(" ", " ".join([executable, *flags])).strip()


class InvocationBuilder:
    """Build the ordered flag list for a single Ghostscript invocation."""

    def __init__(self, resolver: Optional[ConfigurationResolver] = None) -> None:
        self.resolver = resolver or ConfigurationResolver()

    def device_parameters(self, output_format: OutputFormat) -> ParameterSet:
        """Baseline, resolution, device and format-specific flags."""

        resolve = self.resolver.resolve
        parameters = ParameterSet(*BASELINE_FLAGS)
        parameters.append(
            Flag("-r", value=resolve("resolution")),
            Flag.string("DEVICE", output_format.device),
        )

        if output_format is OutputFormat.JPEG:
            parameters.append(
                Flag.define("JPEGQ", resolve("compression_quality")),
                Flag.define("COLORSCREEN"),
            )

        if output_format is OutputFormat.PNG_ALPHA:
            alpha_bits = resolve("alpha_bits")
            parameters.append(
                Flag.define("GraphicsAlphaBits", alpha_bits),
                Flag.define("TextAlphaBits", alpha_bits),
            )

        if resolve("disable_color_management"):
            parameters.append(Flag.define("ColorConversionStrategy", "/LeaveColorUnchanged"))
        if resolve("disable_font_embedding"):
            parameters.append(Flag.define("NOFONT"))
        if resolve("disable_annotations"):
            parameters.append(Flag.define("Printed"))

        return parameters

    def build_parameters(
        self,
        output_format: Union[OutputFormat, str],
        batch: BatchRange,
        input_path: Optional[Union[str, os.PathLike]],
        output_dir: Union[str, os.PathLike],
    ) -> ParameterSet:
        if not input_path:
            raise NoInputFile()
        fmt = OutputFormat.from_extension(output_format)

        parameters = self.device_parameters(fmt)
        parameters.append(
            Flag.define("FirstPage", batch.first_page),
            Flag.define("LastPage", batch.last_page),
            Flag.string("OutputFile", output_pattern(output_dir, fmt, batch.batch_index)),
            Flag.literal(str(input_path)),
        )
        return parameters

    def build(
        self,
        output_format: Union[OutputFormat, str],
        batch: BatchRange,
        input_path: Optional[Union[str, os.PathLike]],
        output_dir: Union[str, os.PathLike],
    ) -> List[str]:
        """
        Return the Ghostscript flags converting *batch* of *input_path*.

        Raises:
            NoInputFile: no document path was given
            UnsupportedFormat: *output_format* has no Ghostscript device
        """
        flags = self.build_parameters(output_format, batch, input_path, output_dir).render()
        _LOGGER.debug("Built %d flags for %s", len(flags), batch)
        return flags


__all__ = [
    "BASELINE_FLAGS",
    "InvocationBuilder",
    "command_line",
    "output_pattern",
]

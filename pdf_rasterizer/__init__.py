"""
PDF Rasterizer - Convert PDF pages to images with Ghostscript.

This library plans page batches, builds the Ghostscript command line for
each batch and collects per-batch timings and exit codes. Large documents
can be split into independently processed batches.

Quick Start:
    >>> from pdf_rasterizer import PDFRasterizer
    >>> report = PDFRasterizer().read('input.pdf').process('output/', 'png')

Main Classes:
    - PDFRasterizer: Orchestrates a conversion run
    - ConfigurationResolver: Layers user settings over defaults
    - InvocationBuilder: Builds Ghostscript flags for one batch
    - ParameterSet: Ordered collection of flags

Data Classes:
    - BatchRange: Page span of one batch
    - InvocationResult: Outcome of one batch
    - RunReport: Outcome of a run

Exceptions:
    - PDFRasterizerException: Base exception
    - InputError: Missing file, directory, format or document
    - ConfigurationError: Missing or invalid setting
    - ExecutableNotFound: No usable Ghostscript
    - ProcessFailure: A batch exited with an error (strict mode)

For CLI usage, use the 'pdf-rasterizer' command after installation.
"""

# Core classes
from pdf_rasterizer.rasterizer import PDFRasterizer
from pdf_rasterizer.config import ConfigurationResolver, DEFAULT_CONFIGURATION
from pdf_rasterizer.invocation import InvocationBuilder, command_line, output_pattern
from pdf_rasterizer.parameters import Flag, ParameterSet
from pdf_rasterizer.planner import plan_batches

# Data types
from pdf_rasterizer.types import (
    BatchRange,
    BatchStatus,
    FailurePolicy,
    InvocationResult,
    OutputFormat,
    RunReport,
)

# Collaborators
from pdf_rasterizer.ghostscript import SubprocessRunner, find_executable, probe_candidates
from pdf_rasterizer.page_count import GhostscriptPageCounter, PypdfPageCounter

# Exceptions
from pdf_rasterizer.exceptions import (
    PDFRasterizerException,
    InputError,
    FileNotFound,
    InvalidDirectory,
    UnsupportedFormat,
    NoInputFile,
    InvalidPageRange,
    PageCountError,
    ConfigurationError,
    ConfigurationKeyNotFound,
    ExecutableNotFound,
    ProcessFailure,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Main classes
    "PDFRasterizer",
    "ConfigurationResolver",
    "DEFAULT_CONFIGURATION",
    "InvocationBuilder",
    "Flag",
    "ParameterSet",
    "plan_batches",
    "command_line",
    "output_pattern",
    # Data types
    "BatchRange",
    "BatchStatus",
    "FailurePolicy",
    "InvocationResult",
    "OutputFormat",
    "RunReport",
    # Collaborators
    "SubprocessRunner",
    "find_executable",
    "probe_candidates",
    "GhostscriptPageCounter",
    "PypdfPageCounter",
    # Exceptions
    "PDFRasterizerException",
    "InputError",
    "FileNotFound",
    "InvalidDirectory",
    "UnsupportedFormat",
    "NoInputFile",
    "InvalidPageRange",
    "PageCountError",
    "ConfigurationError",
    "ConfigurationKeyNotFound",
    "ExecutableNotFound",
    "ProcessFailure",
    # Version info
    "__version__",
]

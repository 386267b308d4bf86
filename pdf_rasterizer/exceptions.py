"""
Custom exceptions for PDF Rasterizer.

Input, configuration and executable errors are raised before any
Ghostscript process starts. Process failures are recorded per batch and only
raised when the caller asks for strict handling.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PDFRasterizerException(Exception):
    """Base exception for all PDF Rasterizer errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF rasterizer error occurred."


class InputError(PDFRasterizerException):
    """Raised when the input document, directory or format is unusable."""

    @property
    def default_message(self) -> str:
        return "Invalid input for rasterization."


class FileNotFound(InputError):
    """Raised when the input document does not exist or is unreadable."""

    @property
    def default_message(self) -> str:
        return "File not found, is this path correct?"


class InvalidDirectory(InputError):
    """Raised when the output directory does not exist."""

    @property
    def default_message(self) -> str:
        return "Output path is not an existing directory."


class UnsupportedFormat(InputError):
    """Raised when the requested image format has no Ghostscript device."""

    @property
    def default_message(self) -> str:
        return "This image format is not supported."


class NoInputFile(InputError):
    """Raised when a conversion is requested before a document was read."""

    @property
    def default_message(self) -> str:
        return "There is no file being read."


class InvalidPageRange(InputError):
    """Raised when page count, start page or batch size are inconsistent."""

    @property
    def default_message(self) -> str:
        return "Invalid page range specification."


class PageCountError(InputError):
    """Raised when the page count of a document cannot be determined."""

    @property
    def default_message(self) -> str:
        return "Unable to determine the page count of the document."


class ConfigurationError(PDFRasterizerException):
    """Raised when configuration values are missing or invalid."""

    @property
    def default_message(self) -> str:
        return "Invalid rasterizer configuration."


class ConfigurationKeyNotFound(ConfigurationError, KeyError):
    """Raised when neither the user nor the default layer defines a key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Configuration key not found: {key!r}")

    def __str__(self) -> str:
        return self.message


class ExecutableNotFound(PDFRasterizerException):
    """Raised when no usable Ghostscript executable could be located."""

    def __init__(self, message: str = "", probes: Sequence[object] = ()) -> None:
        super().__init__(message)
        self.probes = list(probes)

    @property
    def default_message(self) -> str:
        return "Ghostscript is not found, check if gs is installed or configured properly."


class ProcessFailure(PDFRasterizerException):
    """Raised in strict mode when one or more batches exited with an error."""

    def __init__(
        self,
        message: str = "",
        results: Sequence[object] = (),
        report: Optional[object] = None,
    ) -> None:
        super().__init__(message)
        self.results = list(results)
        self.report = report

    @property
    def default_message(self) -> str:
        return "Ghostscript returned a non-zero exit code."

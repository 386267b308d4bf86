"""Utility helpers shared by the rasterizer and its CLI."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from .exceptions import FileNotFound, InvalidDirectory

_LOGGER = logging.getLogger("pdf_rasterizer")


def get_logger(name: str = "pdf_rasterizer", level: int = logging.WARNING) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level)
    return logger


def resolve_path(path: Union[str, os.PathLike]) -> Path:
    """Resolve *path* into an absolute :class:`~pathlib.Path`."""

    resolved = Path(path).expanduser().resolve()
    _LOGGER.debug("Resolved path '%s' to '%s'", path, resolved)
    return resolved


def resolve_document(path: Union[str, os.PathLike]) -> Path:
    """Return the absolute path of a readable document or raise :class:`FileNotFound`."""

    resolved = resolve_path(path)
    if not resolved.is_file():
        raise FileNotFound(f"File not found, is this path correct? {path}")
    if not os.access(resolved, os.R_OK):
        raise FileNotFound(f"Cannot read file (permission denied): {path}")
    return resolved


def require_directory(path: Union[str, os.PathLike]) -> Path:
    """Return *path* resolved, raising :class:`InvalidDirectory` if it is not a directory."""

    resolved = resolve_path(path)
    if not resolved.is_dir():
        raise InvalidDirectory(f"Invalid directory: {path}")
    return resolved


def run_subprocess(
    command: Sequence[str],
    *,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """Run *command* capturing output as text.

    Parameters
    ----------
    command:
        Command and arguments to execute.
    timeout:
        Seconds before :class:`subprocess.TimeoutExpired` is raised.
    """

    _LOGGER.debug("Executing command: %s", " ".join(command))
    completed = subprocess.run(
        list(command),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
        text=True,
        timeout=timeout,
    )
    _LOGGER.debug(
        "Command finished with exit code %s\nstdout: %s\nstderr: %s",
        completed.returncode,
        completed.stdout,
        completed.stderr,
    )
    return completed


def format_duration(seconds: float) -> str:
    """
    Format a duration for humans.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., "850 ms", "12.40 s", "3m 05s")
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.2f} s"
    minutes, rest = divmod(int(round(seconds)), 60)
    return f"{minutes}m {rest:02d}s"

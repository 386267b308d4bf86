"""Partition a document's pages into Ghostscript batches."""

from __future__ import annotations

import math
from typing import List

from .exceptions import InvalidPageRange
from .types import BatchRange


def count_batches(total_pages: int, start_page: int, batch_size: int) -> int:
    """Number of ranges :func:`plan_batches` returns for these arguments."""

    remaining = total_pages - start_page
    if remaining <= 0:
        return 0
    if batch_size == 0:
        return 1
    return math.ceil(remaining / batch_size)


def plan_batches(total_pages: int, start_page: int = 0, batch_size: int = 0) -> List[BatchRange]:
    """
    Split ``start_page + 1 .. total_pages`` into ordered batches.

    A *batch_size* of 0 disables batching: a single unnumbered range from
    *start_page* to *total_pages* is returned. Nothing is planned when the
    start page already equals the page count.

    Raises:
        InvalidPageRange: negative arguments or a start page past the end
    """
    if total_pages < 0:
        raise InvalidPageRange(f"Page count must be >= 0, got {total_pages}")
    if start_page < 0:
        raise InvalidPageRange(f"Start page must be >= 0, got {start_page}")
    if batch_size < 0:
        raise InvalidPageRange(f"Batch size must be >= 0, got {batch_size}")
    if start_page > total_pages:
        raise InvalidPageRange(
            f"Start page ({start_page}) exceeds PDF page count ({total_pages} pages)."
        )

    if total_pages == start_page:
        return []

    if batch_size == 0:
        return [BatchRange(batch_index=None, first_page=start_page, last_page=total_pages)]

    ranges: List[BatchRange] = []
    first_page = start_page + 1
    batch_index = 1
    while first_page <= total_pages:
        last_page = min(first_page + batch_size - 1, total_pages)
        ranges.append(BatchRange(batch_index=batch_index, first_page=first_page, last_page=last_page))
        first_page += batch_size
        batch_index += 1

    return ranges


__all__ = ["plan_batches", "count_batches"]

from __future__ import annotations

import pytest

from pdf_rasterizer.exceptions import InputError, InvalidPageRange
from pdf_rasterizer.planner import count_batches, plan_batches


def test_plan_ten_pages_in_batches_of_three() -> None:
    plan = plan_batches(10, 0, 3)
    assert [batch.as_tuple() for batch in plan] == [(1, 1, 3), (2, 4, 6), (3, 7, 9), (4, 10, 10)]


@pytest.mark.parametrize("total_pages", [1, 7, 500])
def test_unbatched_plan_is_single_range(total_pages: int) -> None:
    plan = plan_batches(total_pages, 0, 0)
    assert len(plan) == 1
    assert plan[0].batch_index is None
    assert (plan[0].first_page, plan[0].last_page) == (0, total_pages)
    assert not plan[0].is_batched


def test_unbatched_plan_keeps_start_page() -> None:
    plan = plan_batches(12, 4, 0)
    assert [batch.as_tuple() for batch in plan] == [(None, 4, 12)]


@pytest.mark.parametrize("batch_size", [0, 1, 5])
def test_start_page_equal_to_total_is_empty(batch_size: int) -> None:
    assert plan_batches(8, 8, batch_size) == []


def test_batch_larger_than_remaining_pages() -> None:
    plan = plan_batches(10, 6, 100)
    assert [batch.as_tuple() for batch in plan] == [(1, 7, 10)]


@pytest.mark.parametrize(
    "total_pages,start_page,batch_size",
    [(10, 0, 3), (10, 2, 4), (1, 0, 1), (97, 13, 7), (50, 49, 10)],
)
def test_batches_cover_remaining_pages_exactly_once(total_pages, start_page, batch_size) -> None:
    plan = plan_batches(total_pages, start_page, batch_size)
    pages = [page for batch in plan for page in batch.pages]
    assert pages == list(range(start_page + 1, total_pages + 1))
    assert len(plan) == count_batches(total_pages, start_page, batch_size)
    assert [batch.batch_index for batch in plan] == list(range(1, len(plan) + 1))
    assert all(batch.first_page <= batch.last_page <= total_pages for batch in plan)


@pytest.mark.parametrize(
    "total_pages,start_page,batch_size",
    [(-1, 0, 0), (5, -1, 0), (5, 0, -2), (5, 6, 1)],
)
def test_invalid_arguments(total_pages, start_page, batch_size) -> None:
    with pytest.raises(InvalidPageRange):
        plan_batches(total_pages, start_page, batch_size)


def test_invalid_page_range_is_input_error() -> None:
    with pytest.raises(InputError):
        plan_batches(3, 4, 1)


def test_count_batches() -> None:
    assert count_batches(10, 0, 3) == 4
    assert count_batches(10, 0, 0) == 1
    assert count_batches(10, 10, 3) == 0

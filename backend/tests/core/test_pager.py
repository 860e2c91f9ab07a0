"""Tests for the pager — window, metadata and param normalization."""

import pytest

from app.core.domain_types import MAX_PAGE_NUMBER, MAX_PAGE_SIZE
from app.core.pager import (
    ListingQuery, compute_meta, compute_window, normalize_page_param, normalize_query,
)


@pytest.mark.parametrize("raw", [None, "", "abc", "0", "-3", "1.5"])
def test_bad_page_params_fall_back_to_default(raw):
    assert normalize_page_param(raw, 7) == 7


def test_numeric_string_page_param_is_parsed():
    assert normalize_page_param(" 4 ", 1) == 4


def test_normalize_query_defaults():
    assert normalize_query() == ListingQuery(page_number=1, page_size=10)


def test_normalize_query_uses_configured_page_size():
    assert normalize_query(page_size="x", default_page_size=25).page_size == 25


def test_normalize_query_drops_empty_sort_and_search():
    query = normalize_query(sort="", search="")
    assert query.sort is None
    assert query.search is None


def test_window_for_third_page():
    assert compute_window(3, 10) == (10, 20)


def test_window_clamps_below_one():
    assert compute_window(0, 0) == (1, 0)


def test_meta_last_partial_page():
    meta = compute_meta(25, 3, 10)
    assert meta.total_pages == 3
    assert meta.has_previous_page is True
    assert meta.has_next_page is False


def test_meta_first_page():
    meta = compute_meta(25, 1, 10)
    assert meta.has_previous_page is False
    assert meta.has_next_page is True


def test_meta_empty_result_still_has_one_page():
    meta = compute_meta(0, 1, 10)
    assert meta.total_pages == 1
    assert meta.has_next_page is False


def test_meta_exact_multiple():
    assert compute_meta(20, 2, 10).total_pages == 2


def test_meta_page_beyond_end():
    meta = compute_meta(5, 4, 10)
    assert meta.has_previous_page is True
    assert meta.has_next_page is False


# ─── Ceilings ────────────────────────────────────────────────────

HUGE = "9" * 25


def test_oversized_page_param_is_capped():
    assert normalize_page_param(HUGE, 1, maximum=100) == 100


def test_normalize_query_caps_page_number_and_size():
    query = normalize_query(page_number=HUGE, page_size="500")
    assert query.page_number == MAX_PAGE_NUMBER
    assert query.page_size == MAX_PAGE_SIZE


def test_configured_default_page_size_is_capped():
    assert normalize_query(default_page_size=1000).page_size == MAX_PAGE_SIZE


def test_window_offset_stays_within_int64():
    limit, offset = compute_window(10 ** 30, 10 ** 30)
    assert limit == MAX_PAGE_SIZE
    assert offset == (MAX_PAGE_NUMBER - 1) * MAX_PAGE_SIZE
    assert offset < 2 ** 63

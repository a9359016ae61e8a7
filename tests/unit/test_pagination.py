# -*- coding: utf-8 -*-
import pytest

from constants.post import POST_SORT_FIELDS
from utils.pagination import paginate_and_sort, total_pages


def test_defaults_when_nothing_given():
    opts = paginate_and_sort({})

    assert opts.page == 1
    assert opts.limit == 2
    assert opts.skip == 0
    assert opts.sort_by == "createdAt"
    assert opts.sort_order == "desc"


@pytest.mark.parametrize(
    "page, limit, expected_skip",
    [
        ("1", "10", 0),
        ("2", "5", 5),
        ("3", "7", 14),
        (4, 25, 75),
    ],
)
def test_skip_is_page_minus_one_times_limit(page, limit, expected_skip):
    opts = paginate_and_sort({"page": page, "limit": limit})

    assert opts.skip == expected_skip
    assert opts.skip == (opts.page - 1) * opts.limit


@pytest.mark.parametrize("raw", ["abc", "", None, "0", "-3", "1.5", True])
def test_invalid_numbers_fall_back_to_defaults(raw):
    opts = paginate_and_sort({"page": raw, "limit": raw})

    assert opts.page == 1
    assert opts.limit == 2


def test_default_limit_is_configurable():
    assert paginate_and_sort({}, default_limit=10).limit == 10
    assert paginate_and_sort({"limit": "x"}, default_limit=10).limit == 10


def test_sort_order_normalised():
    assert paginate_and_sort({"sortOrder": "ASC"}).sort_order == "asc"
    assert paginate_and_sort({"sortOrder": "sideways"}).sort_order == "desc"


def test_unknown_sort_field_falls_back_to_created_at():
    opts = paginate_and_sort({"sortBy": "password_hash"}, sortable=set(POST_SORT_FIELDS))
    assert opts.sort_by == "createdAt"

    opts = paginate_and_sort({"sortBy": "views"}, sortable=set(POST_SORT_FIELDS))
    assert opts.sort_by == "views"


@pytest.mark.parametrize(
    "total, limit, expected",
    [(0, 5, 0), (1, 5, 1), (5, 5, 1), (6, 5, 2), (11, 2, 6), (3, None, 2)],
)
def test_total_pages(total, limit, expected):
    assert total_pages(total, limit) == expected

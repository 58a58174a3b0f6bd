"""Tests for page/limit slicing."""

import pytest

from vidtube.errors import BadRequestError
from vidtube.services.pagination import page_offset, paginate


def test_second_page_of_ten():
    assert paginate(2, 10, list(range(25))) == list(range(10, 20))


def test_last_page_is_short():
    assert paginate(3, 10, list(range(25))) == [20, 21, 22, 23, 24]


def test_page_past_the_end_is_empty():
    assert paginate(4, 10, list(range(25))) == []


def test_first_page():
    assert paginate(1, 3, ["a", "b", "c", "d"]) == ["a", "b", "c"]


def test_page_offset():
    assert page_offset(1, 10) == 0
    assert page_offset(5, 20) == 80


@pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0)])
def test_invalid_page_or_limit(page, limit):
    with pytest.raises(BadRequestError):
        paginate(page, limit, list(range(5)))

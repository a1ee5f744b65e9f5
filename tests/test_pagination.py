import pytest

from app.services.pagination import MAX_PAGE, Pagination, parse_page, total_pages


@pytest.mark.parametrize("raw, expected", [
    (None, 1),
    ("", 1),
    ("abc", 1),
    ("0", 1),
    ("-3", 1),
    ("2", 2),
    (" 3 ", 3),
    (4, 4),
])
def test_parse_page_clamps_to_first_page(raw, expected):
    assert parse_page(raw) == expected


def test_first_page_of_empty_result():
    pagination = Pagination.for_page(1, 12)
    assert (pagination.offset, pagination.to) == (0, 11)
    assert pagination.limit == 12
    assert total_pages(0, 12) == 1


def test_third_page():
    pagination = Pagination.for_page(3, 12)
    assert (pagination.offset, pagination.to) == (24, 35)
    assert total_pages(30, 12) == 3


@pytest.mark.parametrize("count, expected", [(1, 1), (12, 1), (13, 2), (24, 2), (25, 3)])
def test_total_pages_rounds_up(count, expected):
    assert total_pages(count, 12) == expected


def test_huge_page_is_capped():
    assert parse_page("99999999999999999999") == MAX_PAGE
    pagination = Pagination.for_page(MAX_PAGE, 12)
    assert pagination.offset < 2 ** 63

"""
Page arithmetic for listing pages: 1-based page number -> zero-based row range.
"""
import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE_SIZE = 12
# Keeps offset = (page - 1) * page_size inside a 64-bit integer
MAX_PAGE = 10 ** 9


def parse_page(raw: Any) -> int:
    """Absent, non-numeric and < 1 page numbers all become page 1; huge ones are capped"""
    if raw is None or raw == "":
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    if page < 1:
        return 1
    return min(page, MAX_PAGE)


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Never fewer than one page, even for an empty result"""
    return max(1, math.ceil((count or 0) / page_size))


@dataclass(frozen=True)
class Pagination:
    page: int
    page_size: int
    offset: int
    to: int  # inclusive

    @classmethod
    def for_page(cls, page: int, page_size: int = DEFAULT_PAGE_SIZE) -> "Pagination":
        offset = (page - 1) * page_size
        return cls(page=page, page_size=page_size, offset=offset, to=offset + page_size - 1)

    @property
    def limit(self) -> int:
        return self.to - self.offset + 1

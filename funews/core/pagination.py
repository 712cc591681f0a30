"""
Pagination
==========

Page math shared by the public category/search screens and the admin lists.
"""

import math

DEFAULT_PAGE_SIZE = 10
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


def clamp_page_size(value, default=DEFAULT_PAGE_SIZE):
    """Coerce a requested page size into [MIN_PAGE_SIZE, MAX_PAGE_SIZE]"""
    try:
        size = int(value)
    except (TypeError, ValueError):
        return default
    return max(MIN_PAGE_SIZE, min(size, MAX_PAGE_SIZE))


def parse_page(value):
    """Page number from a query string, 1 when missing or invalid"""
    try:
        return max(int(value), 1)
    except (TypeError, ValueError):
        return 1


class Pagination:
    """Position within a paged result set.

    `go_to_page` ignores pages outside [1, total_pages], so the current
    page never points past the data.
    """

    def __init__(self, total_count=0, limit=DEFAULT_PAGE_SIZE, current_page=1):
        self.total_count = max(int(total_count), 0)
        self.limit = clamp_page_size(limit)
        self.current_page = max(int(current_page), 1)

    @property
    def total_pages(self):
        return math.ceil(self.total_count / self.limit)

    @property
    def has_next_page(self):
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self):
        return self.current_page > 1

    @property
    def skip(self):
        return (self.current_page - 1) * self.limit

    def go_to_page(self, page):
        if 1 <= page <= self.total_pages:
            self.current_page = page
            return True
        return False

    def next_page(self):
        if self.has_next_page:
            return self.go_to_page(self.current_page + 1)
        return False

    def prev_page(self):
        if self.has_prev_page:
            return self.go_to_page(self.current_page - 1)
        return False

    def window(self, sibling_count=1):
        return page_window(self.current_page, self.total_pages, sibling_count)

    def to_dict(self):
        return {
            'total_count': self.total_count,
            'limit': self.limit,
            'current_page': self.current_page,
            'total_pages': self.total_pages,
            'has_next_page': self.has_next_page,
            'has_prev_page': self.has_prev_page,
        }


def page_window(current_page, total_pages, sibling_count=1):
    """Page numbers to render, with '...' where pages are skipped.

    First and last page are always present.
    """
    total_page_numbers = sibling_count + 5

    if total_pages <= total_page_numbers:
        return list(range(1, total_pages + 1))

    left_sibling = max(current_page - sibling_count, 1)
    right_sibling = min(current_page + sibling_count, total_pages)

    show_left_dots = left_sibling > 2
    show_right_dots = right_sibling < total_pages - 2

    if not show_left_dots and show_right_dots:
        left_count = 3 + 2 * sibling_count
        return list(range(1, left_count + 1)) + ['...', total_pages]

    if show_left_dots and not show_right_dots:
        right_count = 3 + 2 * sibling_count
        return [1, '...'] + list(range(total_pages - right_count + 1, total_pages + 1))

    return [1, '...'] + list(range(left_sibling, right_sibling + 1)) + ['...', total_pages]

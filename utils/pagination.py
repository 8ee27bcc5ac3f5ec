"""Page arithmetic shared by the report API and the dashboard pages.

Pages are 1-based.  A result set always has at least one page, so an empty
report reads "Page 1 Of 1" instead of offering navigation to page 0.
"""

from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 20


def page_count(total: int, page_size: int) -> int:
    """Return ceil(total / page_size), never less than 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if total <= 0:
        return 1
    return (total + page_size - 1) // page_size


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into [1, pages]."""
    return max(1, min(page, max(1, pages)))


def page_offset(page: int, page_size: int) -> int:
    """SQL OFFSET for a 1-based page."""
    return (max(1, page) - 1) * page_size


@dataclass(frozen=True)
class PageWindow:
    """Position within a paginated result set.

    The navigation methods return the target page, or None when the move is
    disabled at the current boundary.
    """

    page: int
    pages: int
    total: int
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def for_total(cls, page: int, total: int,
                  page_size: int = DEFAULT_PAGE_SIZE) -> "PageWindow":
        pages = page_count(total, page_size)
        return cls(clamp_page(page, pages), pages, total, page_size)

    @property
    def at_first(self) -> bool:
        return self.page <= 1

    @property
    def at_last(self) -> bool:
        return self.page >= self.pages

    def first(self) -> int | None:
        return None if self.at_first else 1

    def prev(self) -> int | None:
        return None if self.at_first else self.page - 1

    def next(self) -> int | None:
        return None if self.at_last else self.page + 1

    def last(self) -> int | None:
        return None if self.at_last else self.pages

    def showing(self) -> str:
        """Return the "Showing X to Y of Z results" caption."""
        if self.total == 0:
            return "Showing 0 to 0 of 0 results"
        start = (self.page - 1) * self.page_size + 1
        end = min(self.page * self.page_size, self.total)
        return f"Showing {start} to {end} of {self.total} results"

    def label(self) -> str:
        return f"Page {self.page} Of {self.pages}"

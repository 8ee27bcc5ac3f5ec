"""
Report page controller.

``ReportPage`` holds the state of one dashboard report page: the filter
form, the current page of results and the load status.

States::

    IDLE ──search()──▶ LOADING ──▶ LOADED | EMPTY | ERRORED
                          ▲                    │
                          └── search() / page navigation (once searched)

Editing a filter only changes local state and resets the page to 1; nothing
is fetched until the next ``search()``.  Errors are shown, never retried.

Every load takes a generation token.  A response (or failure) arriving for
a token that is no longer current was superseded by a later load and is
discarded, so a slow earlier request cannot overwrite newer results.
"""

import enum
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from datetime import date
from pathlib import Path
from typing import Any

from dashboard.client import ReportClient, ReportExportError, ReportFetchError
from dashboard.download import save_bytes
from reports.export import export_filename
from utils.formatting import TableFormatter
from utils.pagination import DEFAULT_PAGE_SIZE, PageWindow, clamp_page
from utils.query import clean_filters
from utils.strings import titleize

logger = logging.getLogger(__name__)

NO_RESULTS = "No Results Found"
EXPORT_OK = "Report exported successfully"
EXPORT_FAILED = "Failed to export report"


class PageState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERRORED = "errored"


class ReportPage:
    """State machine behind one report page.

    Args:
        client: A ``ReportClient`` (or anything with the same methods).
        report_id: Report to fetch, e.g. ``"birthday-report"``.
        title: Page heading (default: titleized report id).
        columns: ``(key, label)`` pairs to render; derived from the first
            record when omitted.
        filters: Initial filter form values; "all" means unfiltered.
        page_size: Rows per page requested from the server.
        filename_keys: Filters whose values qualify the export filename.
        notify: Callback receiving user-facing notices (toasts).
    """

    def __init__(
        self,
        client: ReportClient,
        report_id: str,
        title: str | None = None,
        columns: Sequence[tuple[str, str]] | None = None,
        filters: Mapping[str, Any] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        filename_keys: Sequence[str] = (),
        notify: Callable[[str], None] | None = None,
    ):
        self.client = client
        self.report_id = report_id
        self.title = title or titleize(report_id)
        self.columns = list(columns) if columns else None
        self._initial_filters = dict(filters or {})
        self.filters: dict[str, Any] = dict(self._initial_filters)
        self.page_size = page_size
        self.filename_keys = tuple(filename_keys)
        self._notify = notify
        self.notices: list[str] = []

        self.state = PageState.IDLE
        self.page = 1
        self.records: list[dict] = []
        self.pagination: dict[str, int] = {"page": 1, "pages": 1, "total": 0}
        self.summary: dict | None = None
        self.error: str | None = None
        self.searched = False

        self._generation = 0
        self._lock = threading.Lock()

    # ── Filter form ───────────────────────────────────────────────────────────

    def set_filter(self, key: str, value: Any) -> None:
        """Edit one filter; resets to page 1 without fetching."""
        if self.filters.get(key) == value:
            return
        self.filters[key] = value
        self.page = 1

    def reset_filters(self) -> None:
        self.filters = dict(self._initial_filters)
        self.page = 1

    def request_filters(self) -> dict[str, Any]:
        """Filters as they would be sent (sentinels removed)."""
        return clean_filters(self.filters)

    # ── Loading ──────────────────────────────────────────────────────────────

    def begin_load(self) -> int:
        """Enter LOADING and return the token of this load."""
        with self._lock:
            self._generation += 1
            self.state = PageState.LOADING
            self.error = None
            return self._generation

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def complete_load(self, token: int, data: Mapping[str, Any]) -> bool:
        """Apply a fetched page; False when the load was superseded."""
        with self._lock:
            if token != self._generation:
                logger.debug("discarding superseded load %d of %s", token, self.report_id)
                return False
            pagination = data.get("pagination") or {}
            total = int(pagination.get("total", 0))
            pages = max(1, int(pagination.get("pages", 1)))
            self.records = list(data.get("records") or [])
            self.pagination = {
                "page": clamp_page(int(pagination.get("page", self.page)), pages),
                "pages": pages,
                "total": total,
            }
            self.page = self.pagination["page"]
            self.summary = data.get("summary")
            self.state = PageState.EMPTY if total == 0 else PageState.LOADED
            return True

    def fail_load(self, token: int, error: Exception) -> bool:
        """Record a failed load; False when the load was superseded."""
        with self._lock:
            if token != self._generation:
                logger.debug("discarding superseded failure %d of %s", token, self.report_id)
                return False
            self.records = []
            self.error = str(error)
            self.state = PageState.ERRORED
            return True

    def load(self) -> PageState:
        """Fetch the current page with the current filters."""
        token = self.begin_load()
        filters, page = dict(self.filters), self.page
        try:
            data = self.client.fetch_report(
                self.report_id, filters, page=page, page_size=self.page_size
            )
        except ReportFetchError as exc:
            logger.warning("loading %s failed: %s", self.report_id, exc)
            self.fail_load(token, exc)
        else:
            self.complete_load(token, data)
        return self.state

    def search(self) -> PageState:
        """The "Go" action: fetch page 1 with the current filters."""
        self.searched = True
        self.page = 1
        return self.load()

    # ── Pagination ────────────────────────────────────────────────────────────

    @property
    def window(self) -> PageWindow:
        return PageWindow(
            page=self.page,
            pages=self.pagination["pages"],
            total=self.pagination["total"],
            page_size=self.page_size,
        )

    def go_to(self, page: int | None) -> bool:
        """Load ``page`` (clamped); False when disabled or not yet searched."""
        if page is None or not self.searched:
            return False
        target = clamp_page(page, self.pagination["pages"])
        if target == self.page and self.state in (PageState.LOADED, PageState.EMPTY):
            return False
        self.page = target
        self.load()
        return True

    def first(self) -> bool:
        return self.go_to(self.window.first())

    def prev(self) -> bool:
        return self.go_to(self.window.prev())

    def next(self) -> bool:
        return self.go_to(self.window.next())

    def last(self) -> bool:
        return self.go_to(self.window.last())

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _columns(self) -> list[tuple[str, str]]:
        if self.columns:
            return self.columns
        if self.records:
            return [(k, titleize(k)) for k in self.records[0]]
        return []

    def render(self) -> str:
        """Plain-text rendering of the page for the terminal dashboard."""
        lines = [self.title]
        if self.state is PageState.IDLE:
            lines.append("Choose filters and press Go.")
        elif self.state is PageState.LOADING:
            lines.append("Loading...")
        elif self.state is PageState.ERRORED:
            lines.append(f"Failed to load report: {self.error}")
        elif self.state is PageState.EMPTY:
            lines.append(NO_RESULTS)
        else:
            columns = self._columns()
            table = TableFormatter([label for _, label in columns])
            for record in self.records:
                table.add_row([record.get(key) for key, _ in columns])
            lines.append(table.to_string())
        if self.state in (PageState.LOADED, PageState.EMPTY):
            window = self.window
            lines.append(f"{window.showing()}    {window.label()}")
        return "\n".join(lines)

    # ── Export ────────────────────────────────────────────────────────────────

    def _notice(self, message: str) -> None:
        self.notices.append(message)
        if self._notify is not None:
            self._notify(message)

    def export_filename(self, today: date | None = None) -> str:
        applied = self.request_filters()
        qualifiers = [str(applied[k]) for k in self.filename_keys if k in applied]
        return export_filename(self.report_id, today, qualifiers)

    def export(self, dest_dir: Path, today: date | None = None) -> Path | None:
        """Download the CSV export of the current filters into ``dest_dir``.

        The file takes the name the server gives in ``Content-Disposition``
        (which accounts for server-side filter defaults), else the locally
        built ``export_filename``.  Returns the written path, or None after
        notifying the failure.  A failed export leaves no file behind.
        """
        try:
            content, server_name = self.client.download_export(self.report_id, self.filters)
            dest = Path(dest_dir) / (server_name or self.export_filename(today))
            path = save_bytes(dest, content)
        except (ReportExportError, OSError) as exc:
            logger.error("export of %s failed: %s", self.report_id, exc)
            self._notice(EXPORT_FAILED)
            return None
        logger.info("exported %s to %s", self.report_id, path)
        self._notice(EXPORT_OK)
        return path

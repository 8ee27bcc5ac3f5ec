"""
Breadcrumb resolution for dashboard paths.

A ``BreadcrumbResolver`` is built from an ordered, immutable table of
``RouteCrumb`` entries.  Resolving a path scans the table in registration
order and the first structurally matching pattern wins; its builder receives
the captured ``:name`` parameters.  Paths no entry matches fall back to a
titleized trail of their segments, each linking to its cumulative path.

Resolution is pure and never raises.

Usage:
    resolver = BreadcrumbResolver(default_routes())
    resolver.resolve("/reports/finance/collection")
    # [Home -> /, Reports -> /reports, Finance -> /reports/finance, Collection]
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from urllib.parse import unquote

from reports.catalog import REPORT_SECTIONS
from utils.strings import titleize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Breadcrumb:
    """One step of a trail; ``to`` is None for a non-link crumb."""

    label: str
    to: str | None = None

    def to_dict(self) -> dict:
        return {"label": self.label, "to": self.to}


CrumbBuilder = Callable[[Mapping[str, str]], list[Breadcrumb]]


@dataclass(frozen=True)
class RouteCrumb:
    """A path pattern such as ``/staff/:id/targets`` and its trail builder."""

    pattern: str
    build: CrumbBuilder


HOME = Breadcrumb("Home", "/")


def _segments(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def match_path(pattern: str, path: str) -> dict[str, str] | None:
    """Match ``path`` against ``pattern`` as a whole.

    ``:name`` segments capture exactly one non-empty path segment
    (percent-decoded); literal segments compare case-insensitively.
    Repeated and trailing slashes are ignored.

    Returns:
        The captured parameters, or None when the path does not match.
    """
    want = _segments(pattern)
    got = _segments(path)
    if len(want) != len(got):
        return None
    params: dict[str, str] = {}
    for expected, actual in zip(want, got):
        if expected.startswith(":"):
            params[expected[1:]] = unquote(actual)
        elif expected.lower() != actual.lower():
            return None
    return params


def fallback_crumbs(path: str) -> list[Breadcrumb]:
    """Titleized trail for a path no route matches.

    ``/`` (or an empty path) yields just ``[Home]``.
    """
    segments = _segments(path)
    if not segments:
        return [Breadcrumb("Home")]
    crumbs = [HOME]
    cumulative = ""
    for i, segment in enumerate(segments):
        cumulative += f"/{segment}"
        last = i == len(segments) - 1
        crumbs.append(Breadcrumb(titleize(unquote(segment)), None if last else cumulative))
    return crumbs


class BreadcrumbResolver:
    """First-match-wins breadcrumb lookup over an injected route table."""

    def __init__(self, routes: Iterable[RouteCrumb]):
        self._routes: tuple[RouteCrumb, ...] = tuple(routes)

    @property
    def routes(self) -> tuple[RouteCrumb, ...]:
        return self._routes

    def find(self, path: str) -> tuple[RouteCrumb, dict[str, str]] | None:
        """Return the first matching entry and its captured parameters."""
        for route in self._routes:
            params = match_path(route.pattern, path)
            if params is not None:
                return route, params
        return None

    def resolve(self, path: str | None,
                items: list[Breadcrumb] | None = None) -> list[Breadcrumb]:
        """Resolve a path to its trail.

        Explicit ``items`` take precedence over the route table.  The last
        crumb of the returned trail never carries a link.
        """
        if items:
            return _unlink_last(list(items))
        if not isinstance(path, str):
            path = ""
        path = path.split("?", 1)[0].split("#", 1)[0]
        if not _segments(path):
            return [Breadcrumb("Home")]

        found = self.find(path)
        if found is not None:
            route, params = found
            try:
                crumbs = route.build(params)
            except Exception:
                logger.exception("breadcrumb builder for %s failed", route.pattern)
                crumbs = None
            if crumbs:
                return _unlink_last(list(crumbs))
        return fallback_crumbs(path)


def _unlink_last(crumbs: list[Breadcrumb]) -> list[Breadcrumb]:
    if crumbs and crumbs[-1].to is not None:
        crumbs[-1] = replace(crumbs[-1], to=None)
    return crumbs


# ── Default dashboard route table ────────────────────────────────────────────

def _static(*labels: tuple[str, str | None]) -> CrumbBuilder:
    trail = [HOME, *(Breadcrumb(label, to) for label, to in labels)]
    return lambda params: list(trail)


def _staff_child(label: str) -> CrumbBuilder:
    return lambda p: [
        HOME,
        Breadcrumb("Staff", "/staff"),
        Breadcrumb("Staff Details", f"/staff/{p['id']}"),
        Breadcrumb(label),
    ]


def _report_section(p: Mapping[str, str]) -> list[Breadcrumb]:
    return [HOME, Breadcrumb("Reports", "/reports"), Breadcrumb(titleize(p["section"]))]


def _report_sub_section(p: Mapping[str, str]) -> list[Breadcrumb]:
    base = f"/reports/{p['section']}"
    return [
        HOME,
        Breadcrumb("Reports", "/reports"),
        Breadcrumb(titleize(p["section"]), base),
        Breadcrumb(titleize(p["subSection"])),
    ]


def _report_detail(p: Mapping[str, str]) -> list[Breadcrumb]:
    base = f"/reports/{p['section']}"
    nested = f"{base}/{p['subSection']}"
    return [
        HOME,
        Breadcrumb("Reports", "/reports"),
        Breadcrumb(titleize(p["section"]), base),
        Breadcrumb(titleize(p["subSection"]), nested),
        Breadcrumb(titleize(p["detail"])),
    ]


def _setup_category(parent: str, parent_path: str) -> CrumbBuilder:
    return lambda p: [
        HOME,
        Breadcrumb("Setup", "/setup"),
        Breadcrumb(parent, parent_path),
        Breadcrumb(titleize(p["category"])),
    ]


def _report_page(section_label: str, label: str) -> CrumbBuilder:
    return _static(("Reports", "/reports"), (section_label, "/reports"), (label, None))


def default_routes() -> tuple[RouteCrumb, ...]:
    """The dashboard's route table, in registration order.

    The per-report ``/reports/<section>/<slug>`` entries come after the
    generic ``/reports/:section/:subSection`` pattern and are therefore
    shadowed by it under first-match-wins; they are kept so the table
    lists every report page.
    """
    routes = [
        RouteCrumb("/taskboard", _static(("Dashboard", "/"), ("Follow-ups", None))),
        RouteCrumb("/leaderboard", _static(("Dashboard", "/"), ("Leaderboards", None))),
        RouteCrumb("/clients", _static(("Clients", None))),
        RouteCrumb("/clients/:id", _static(("Clients", "/clients"), ("Member Details", None))),
        RouteCrumb("/staff", _static(("Staff", None))),
        RouteCrumb("/staff/:id", _static(("Staff", "/staff"), ("Staff Details", None))),
        RouteCrumb("/staff/:id/admin-rights", _staff_child("Admin Rights")),
        RouteCrumb("/staff/:id/targets", _staff_child("Targets")),
        RouteCrumb("/staff/:id/add-target", _staff_child("Add Target")),
        RouteCrumb("/staff/:id/rep-change", _staff_child("Rep Change")),
        RouteCrumb("/reports", _static(("Reports", None))),
        RouteCrumb("/reports/:section", _report_section),
        RouteCrumb("/reports/:section/:subSection", _report_sub_section),
        RouteCrumb("/reports/:section/:subSection/:detail", _report_detail),
        RouteCrumb("/setup", _static(("Setup", None))),
        RouteCrumb("/setup/:section",
                   lambda p: [HOME, Breadcrumb("Setup", "/setup"),
                              Breadcrumb(titleize(p["section"]))]),
        RouteCrumb("/setup/marketing/:category",
                   _setup_category("Marketing", "/setup/marketing")),
        RouteCrumb("/setup/client-management/:category",
                   _setup_category("Client Management", "/setup/client-management")),
        RouteCrumb("/marketing", _static(("Marketing", None))),
        RouteCrumb("/enquiries", _static(("Enquiries", None))),
        RouteCrumb("/enquiries/:enquiryId/edit",
                   _static(("Enquiries", "/enquiries"), ("Edit Enquiry", None))),
        RouteCrumb("/expenses", _static(("Expenses", None))),
        RouteCrumb("/invoices", _static(("Invoices", None))),
        RouteCrumb("/payments", _static(("Payments", None))),
        RouteCrumb("/attendance", _static(("Attendance", None))),
        RouteCrumb("/corporates", _static(("Corporates", None))),
        RouteCrumb("/support", _static(("Support", None))),
        RouteCrumb("/profile", _static(("Profile", None))),
        RouteCrumb("/account-plan", _static(("Account Plan", None))),
        RouteCrumb("/central-panel", _static(("Central Panel", None))),
        RouteCrumb("/branches", _static(("Branch Management", None))),
        RouteCrumb("/taskboard/:view",
                   lambda p: [HOME, Breadcrumb("Dashboard", "/"),
                              Breadcrumb(titleize(p["view"]))]),
    ]
    for section, config in REPORT_SECTIONS.items():
        for slug, label in config["reports"].items():
            routes.append(RouteCrumb(
                f"/reports/{section}/{slug}",
                _report_page(config["label"], label),
            ))
    return tuple(routes)

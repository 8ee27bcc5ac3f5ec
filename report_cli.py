"""
Terminal dashboard for the gym report API.

Talks to a running report server (REPORTS_API_BASE) the same way the web
dashboard does: filters equal to "all" or empty are not sent, a failed
request is reported once and never retried, and exports are written through
a scoped temporary file so a failure leaves nothing behind.

Usage:
    python report_cli.py list
    python report_cli.py fetch collection --filter fromDate=2025-06-01 --page 2
    python report_cli.py export birthday-report --filter birthdayMonth=6 --out exports/
    python report_cli.py crumbs /reports/finance/collection
"""

import argparse
import logging
import sys
import textwrap
from pathlib import Path

from dashboard.client import ReportClient, ReportClientError
from dashboard.page import PageState, ReportPage
from navigation.breadcrumbs import BreadcrumbResolver, default_routes
from reports.definitions import get_report
from utils.formatting import TableFormatter
from utils.pagination import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


def _parse_filters(pairs: list[str] | None) -> dict[str, str]:
    """Turn ``["k=v", ...]`` into a dict (later keys win)."""
    filters: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Filter must look like key=value: '{pair}'")
        filters[key.strip()] = value.strip()
    return filters


def _build_page(client: ReportClient, report_id: str,
                filters: dict[str, str]) -> ReportPage:
    """A ReportPage configured from the local report definition, if any."""
    definition = get_report(report_id)
    if definition is None:
        return ReportPage(client, report_id, filters=filters)
    initial = {f.key: f.default for f in definition.filters if f.default is not None}
    initial.update(filters)
    return ReportPage(
        client,
        report_id,
        title=definition.title,
        columns=[(c.key, c.label) for c in definition.columns],
        filters=initial,
        page_size=definition.page_size or DEFAULT_PAGE_SIZE,
        filename_keys=definition.filename_filters,
    )


def cmd_list(client: ReportClient, args: argparse.Namespace) -> int:
    reports = client.list_reports()
    table = TableFormatter(["Report", "Section", "Title", "Filters"])
    for r in reports:
        table.add_row([
            r["report_id"],
            r["section_label"],
            r["title"],
            ", ".join(f["key"] for f in r.get("filters", [])),
        ])
    print(table.to_string())
    return 0


def cmd_fetch(client: ReportClient, args: argparse.Namespace) -> int:
    page = _build_page(client, args.report, _parse_filters(args.filter))
    page.search()
    if args.page > 1 and page.state is PageState.LOADED:
        page.go_to(args.page)
    print(page.render())
    return 1 if page.state is PageState.ERRORED else 0


def cmd_export(client: ReportClient, args: argparse.Namespace) -> int:
    page = _build_page(client, args.report, _parse_filters(args.filter))
    path = page.export(args.out)
    for notice in page.notices:
        print(notice)
    if path is None:
        return 1
    print(f"Wrote {path}")
    return 0


def cmd_crumbs(client: ReportClient | None, args: argparse.Namespace) -> int:
    resolver = BreadcrumbResolver(default_routes())
    trail = resolver.resolve(args.path)
    print(" / ".join(
        f"{c.label} ({c.to})" if c.to else c.label for c in trail
    ))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse and export gym reports from the report API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
            Examples:
              python report_cli.py list
              python report_cli.py fetch collection --filter branchId=b1
              python report_cli.py fetch cashflow-statement --filter dateRange=last-7-days
              python report_cli.py export birthday-report --out exports/
              python report_cli.py crumbs /staff/42/targets
        """),
    )
    parser.add_argument("--api", default=None,
                        help="Report API base URL (default: REPORTS_API_BASE)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Request timeout in seconds (default: REPORTS_API_TIMEOUT)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log HTTP activity")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="List available reports")

    fetch = sub.add_parser("fetch", help="Show one page of a report")
    fetch.add_argument("report", help="Report id, e.g. collection")
    fetch.add_argument("--filter", "-f", action="append", metavar="KEY=VALUE",
                       help="Filter value (repeatable); 'all' means no filter")
    fetch.add_argument("--page", type=int, default=1, help="Page number (default: 1)")

    export = sub.add_parser("export", help="Download a report as CSV")
    export.add_argument("report", help="Report id, e.g. birthday-report")
    export.add_argument("--filter", "-f", action="append", metavar="KEY=VALUE",
                        help="Filter value (repeatable); 'all' means no filter")
    export.add_argument("--out", type=Path, default=Path("."),
                        help="Destination directory (default: current directory)")

    crumbs = sub.add_parser("crumbs", help="Show the breadcrumb trail of a dashboard path")
    crumbs.add_argument("path", help="Dashboard path, e.g. /reports/finance")
    return parser


_COMMANDS = {
    "list": cmd_list,
    "fetch": cmd_fetch,
    "export": cmd_export,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 2
    if args.command == "crumbs":
        return cmd_crumbs(None, args)

    try:
        with ReportClient(base_url=args.api, timeout=args.timeout) as client:
            return _COMMANDS[args.command](client, args)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except ReportClientError as exc:
        print(f"Error: {exc}" + (f" ({exc.detail})" if exc.detail else ""),
              file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Breadcrumb endpoints.

GET /api/v1/breadcrumbs?path=...   → JSON trail
GET /partials/breadcrumbs?path=... → HTML <nav> fragment (HTMX swap target)
"""

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from api.models import BreadcrumbOut
from navigation.breadcrumbs import BreadcrumbResolver, default_routes

router = APIRouter(tags=["navigation"])
partials_router = APIRouter(tags=["frontend"])

_resolver = BreadcrumbResolver(default_routes())

# Templates instance is set by create_app().
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised, call set_templates() first")
    return _templates


@router.get(
    "/breadcrumbs",
    response_model=list[BreadcrumbOut],
    summary="Resolve a dashboard path to its breadcrumb trail",
)
def breadcrumbs(
    path: str = Query("/", description="Dashboard path, e.g. /reports/finance"),
) -> list[dict]:
    return [c.to_dict() for c in _resolver.resolve(path)]


@partials_router.get("/partials/breadcrumbs", response_class=HTMLResponse,
                     include_in_schema=False)
def breadcrumbs_partial(
    request: Request,
    path: str = Query("/"),
) -> HTMLResponse:
    """HTMX partial: the breadcrumb <nav> for a path."""
    return _tmpl().TemplateResponse(
        request,
        "partials/breadcrumbs.html",
        {"crumbs": _resolver.resolve(path)},
    )

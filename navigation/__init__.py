"""Dashboard navigation: breadcrumb trails for URL paths."""

from navigation.breadcrumbs import (
    Breadcrumb,
    BreadcrumbResolver,
    RouteCrumb,
    default_routes,
    fallback_crumbs,
    match_path,
)

__all__ = [
    "Breadcrumb",
    "BreadcrumbResolver",
    "RouteCrumb",
    "default_routes",
    "fallback_crumbs",
    "match_path",
]

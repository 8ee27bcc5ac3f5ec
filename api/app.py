"""
FastAPI application factory for the gym report API.

Usage:
    python -m api.app                    # Dev server on port 8000
    APP_DB_PATH=/data/gym.sqlite python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

Logging: text by default, newline-delimited JSON when APP_LOG_FORMAT=json.
Requests slower than APP_SLOW_REQUEST_MS are logged again at WARNING.
"""

import json
import logging
import sqlite3
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from api.database import _make_conn, get_db_path
from api.routes import navigation, reports
from utils.config import AppConfig

_cfg = AppConfig.from_env()
_logger = logging.getLogger("gym_reports_api")

_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

# Attributes copied from a record's ``extra`` into the JSON line
_EXTRA_FIELDS = ("method", "path", "status", "duration_ms", "client_ip", "request_id")

_API_DESCRIPTION = """\
Serves the finance, sales, client-management, staff and expense reports of
the gym dashboard.

- `GET /api/v1/reports/{id}` returns
  `{success, data: {records, pagination{page,pages,total}, summary}}`.
- Filters are plain query parameters. `all` and empty values mean no filter;
  undeclared keys are ignored.
- `page` is clamped into `[1, pages]` and `pages` is at least 1.
- `GET /api/v1/reports/{id}/export` returns the full filtered set as CSV.
"""


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update({k: getattr(record, k) for k in _EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def _configure_logging(log_format: str) -> None:
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=logging.INFO, force=True)


_configure_logging(_cfg.log_format)


def _log_request(request: Request, status: int, duration_ms: float,
                 request_id: str) -> None:
    """One access-log line per request; fields also ride along as extras."""
    fields = {
        "method": request.method,
        "path": request.url.path,
        "status": status,
        "duration_ms": round(duration_ms, 1),
        "client_ip": request.client.host if request.client else "unknown",
        "request_id": request_id,
    }
    _logger.info(
        "method=%(method)s path=%(path)s status=%(status)d "
        "duration_ms=%(duration_ms).1f ip=%(client_ip)s rid=%(request_id)s",
        fields, extra=fields,
    )
    if duration_ms > _cfg.slow_request_ms:
        _logger.warning("slow_request method=%s path=%s duration_ms=%.1f",
                        request.method, request.url.path, duration_ms)


def _error_body(error: str, exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": str(exc), "status_code": status_code},
    )


def _health_status() -> tuple[int, dict]:
    db_path = get_db_path()
    if not db_path.exists():
        return 503, {"status": "no_database", "database": str(db_path)}
    try:
        conn = _make_conn(db_path)
        try:
            members = conn.execute("SELECT COUNT(*) FROM members").fetchone()[0]
        finally:
            conn.close()
    except sqlite3.Error as e:
        return 503, {"status": "degraded", "error": str(e)}
    return 200, {"status": "ok", "database": str(db_path), "members": members}


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_path = get_db_path()
    if not db_path.exists():
        _logger.warning(
            "Database not found at %s. Run 'python schema_design.py %s' first.",
            db_path, db_path,
        )
    _logger.debug("settings: %s", _cfg.to_dict())
    yield


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Override the database path (useful for testing).
    """
    if db_path is not None:
        import api.database as _db_mod
        _db_mod._DB_PATH = db_path

    app = FastAPI(
        title="Gym Report API",
        summary="Paginated, filterable business reports for a gym management dashboard.",
        description=_API_DESCRIPTION,
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "reports",
             "description": "Report catalogue, paginated report pages and CSV export."},
            {"name": "navigation", "description": "Breadcrumb trails for dashboard paths."},
            {"name": "meta", "description": "Health check."},
        ],
    )

    # Downloads read their filename and row count from exposed headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Total-Count", "X-Request-ID"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = uuid.uuid4().hex[:8]
        start = time.monotonic()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        _log_request(request, response.status_code,
                     (time.monotonic() - start) * 1000, request_id)
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        """JSON body instead of an HTML traceback."""
        _logger.exception("unhandled error on %s", request.url.path)
        return _error_body("Internal server error", exc, 500)

    @app.exception_handler(ValueError)
    async def bad_filter_value(request: Request, exc: ValueError):
        _logger.info("rejected %s: %s", request.url.path, exc)
        return _error_body("Bad request", exc, 400)

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """200 when the database is reachable, 503 otherwise."""
        status_code, body = _health_status()
        if status_code != 200:
            return JSONResponse(status_code=status_code, content=body)
        return body

    app.include_router(reports.router, prefix="/api/v1")
    app.include_router(navigation.router, prefix="/api/v1")

    if _TEMPLATES_DIR.exists():
        navigation.set_templates(Jinja2Templates(directory=str(_TEMPLATES_DIR)))
        app.include_router(navigation.partials_router)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from .errors import MarketplaceError, StorageError
from .middleware.access_log import AccessLogMiddleware
from .middleware.auth import AuthMiddleware
from .middleware.cors import build_allowed_origins
from .middleware.request_context import RequestContextMiddleware
from .observability.logging import configure_logging, get_logger
from .observability.otel import configure_otel, instrument_app
from .problem_details import problem_from_error, problem_response
from .routers.admin import router as admin_router
from .routers.applications import router as applications_router
from .routers.company import router as company_router
from .routers.health import VERSION
from .routers.health import router as health_router
from .routers.lp import router as lp_router
from .routers.opportunities import router as opportunities_router
from .settings import settings


def create_app() -> FastAPI:
    # Logging must be configured before the app starts handling requests.
    configure_logging(level=settings.log_level, fmt=settings.log_format)
    log = get_logger("startup")

    # Optional tracing (no-op unless OTEL_ENABLED=true)
    configure_otel(settings)

    app = FastAPI(
        title="Advisor Connect Backend",
        version=VERSION,
        default_response_class=ORJSONResponse,
        redirect_slashes=False,
    )

    allowed_origins = build_allowed_origins(
        frontend_base_url=settings.frontend_base_url,
        frontend_url=settings.frontend_url,
        frontend_urls=settings.frontend_urls,
    )

    log.info("app_starting", settings=settings.to_log_safe_dict())

    # Middlewares (order matters; last added is outermost)
    # Auth runs inside CORS so auth failures still get CORS headers.
    app.add_middleware(AuthMiddleware)
    app.add_middleware(AccessLogMiddleware, exclude_paths={"/"})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
        max_age=3000,
    )
    # Outermost: request context (request-id) wraps everything.
    app.add_middleware(RequestContextMiddleware)

    # Error handlers
    app.add_exception_handler(MarketplaceError, _marketplace_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    # Routes
    app.include_router(health_router)
    app.include_router(opportunities_router, prefix="/api/opportunities")
    app.include_router(applications_router, prefix="/api/applications")
    app.include_router(company_router, prefix="/api/company")
    app.include_router(lp_router, prefix="/api/lp")
    app.include_router(admin_router, prefix="/api/admin")

    # Instrument after routers/middleware are attached.
    instrument_app(app, settings)

    return app


def _actor_id(request: Request) -> int | None:
    actor = getattr(getattr(request, "state", None), "actor", None)
    return getattr(actor, "id", None) if actor else None


def _marketplace_error_handler(request: Request, exc: MarketplaceError) -> Response:
    if isinstance(exc, StorageError):
        get_logger("storage").error(
            "storage_error",
            operation=exc.operation,
            collection=exc.collection,
            path=request.url.path,
            exc_info=exc.cause or exc,
        )
    else:
        get_logger("domain").info(
            "request_rejected",
            error=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path,
        )
    return problem_from_error(request, exc)


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    status_code = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)

    title: str | None = None
    safe_detail = str(detail) if detail is not None else None

    if status_code == 404:
        title = "Not Found"
        safe_detail = safe_detail or "Route not found"
    elif status_code == 401:
        title = "Unauthorized"

    return problem_response(request=request, status_code=status_code, title=title, detail=safe_detail)


def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    errors: list[dict[str, object]] = []
    for e in exc.errors():
        loc = e.get("loc") or ()
        loc_path = ".".join([str(x) for x in loc if x != "body"])
        errors.append(
            {
                "location": list(loc) if isinstance(loc, (list, tuple)) else [],
                "path": loc_path,
                "message": e.get("msg", "Invalid value"),
                "type": e.get("type"),
            }
        )
    return problem_response(
        request=request,
        status_code=422,
        title="Validation Failed",
        detail="Request validation failed",
        errors=errors,
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    # Full traceback goes to the logs; the response stays generic.
    get_logger("unhandled").error(
        "unhandled_exception",
        http_method=str(request.method or "").upper() or None,
        path=request.url.path,
        actor_id=_actor_id(request),
        exc_info=exc,
    )
    return problem_response(request=request, status_code=500, title="Internal Server Error")


app = create_app()

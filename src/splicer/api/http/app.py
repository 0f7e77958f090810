"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.splicer.api.http.app_data import ApplicationDependencies
from src.splicer.api.http.middleware.limiter import close_rate_limiter
from src.splicer.api.http.routers import health, me
from src.splicer.api.http.routers.service import category, deal, product
from src.splicer.api.utils.app_startup import configure_logging
from src.splicer.core.errors import DealError, StoreError
from src.splicer.core.models.forms import field_errors
from src.splicer.core.services import DbSessionService
from src.splicer.runtime.context import get_config

INVALID_FIELDS_MESSAGE = "Missing or invalid fields."


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


# --- Error rendering ---
async def handle_deal_error(request: Request, exc: DealError) -> JSONResponse:
    logger.info("Rejected {}: {}", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "errors": exc.errors},
    )


async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": exc.message})


async def handle_validation_error(
    request: Request, exc: ValidationError | RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "message": INVALID_FIELDS_MESSAGE,
            "errors": field_errors(exc.errors()),
        },
    )


async def handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    deps: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if deps is None:
        deps = ApplicationDependencies.build(DbSessionService())
        app.state.app_dependencies = deps

    if config.database.create_tables:
        logger.info("Creating missing database tables")
        deps.database_service.create_all()

    if not deps.database_service.health_check():
        logger.error("Database is not reachable at startup")
        if config.app.environment == "production":
            raise RuntimeError("Database readiness check failed")


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    await close_rate_limiter()
    deps: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if deps is not None and getattr(app.state, "owns_dependencies", True):
        deps.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the API.

    Args:
        dependencies: Pre-wired services; built from configuration at startup
            when omitted.
    """
    config = get_config()
    configure_logging()

    production = config.app.environment == "production"
    app = FastAPI(
        title="Splicer",
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    if dependencies is not None:
        app.state.app_dependencies = dependencies
        app.state.owns_dependencies = False

    app.add_middleware(SecurityHeadersMiddleware)

    if production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)

    app.add_exception_handler(DealError, handle_deal_error)
    app.add_exception_handler(StoreError, handle_store_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_error)

    app.include_router(health.router)
    app.include_router(me.router, prefix="/api/v1")
    app.include_router(category.router, prefix="/api/v1/categories", tags=["categories"])
    app.include_router(product.router, prefix="/api/v1/products", tags=["products"])
    app.include_router(deal.router, prefix="/api/v1/deals", tags=["deals"])

    return app


__all__ = ["create_app", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    cfg = get_config().app
    uvicorn.run(create_app(), host=cfg.host, port=cfg.port, access_log=False)

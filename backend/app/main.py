from contextlib import asynccontextmanager
from uuid import uuid4
import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings, get_settings
from .core.db import Base, build_session_factory, create_db_engine
from .core.logging import configure_logging
from .api.routes_companies import router as companies_router

logger = logging.getLogger(__name__)


def _cors_origins(settings: Settings) -> list[str]:
    # CORS:
    # - In prod, FRONTEND_ORIGIN is required and we never fall back to "*".
    # - In non-prod, wide-open CORS is the default unless FRONTEND_ORIGIN is set.
    if settings.ENV.lower() == "prod":
        if not settings.FRONTEND_ORIGIN:
            raise RuntimeError(
                "FRONTEND_ORIGIN must be set in production – refusing to start with wide-open CORS."
            )
        return [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()]

    if settings.CORS_ALLOW_ALL_ORIGINS or not settings.FRONTEND_ORIGIN:
        return ["*"]
    return [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()]


def _error_response(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": True, "msg": msg})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    engine = create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.DB_AUTO_CREATE:
            Base.metadata.create_all(engine)
        logger.info("Company registry API started", extra={"step": "startup"})
        yield
        engine.dispose()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=False,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Rejected unparseable request",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "step": "parse_request",
            },
        )
        return _error_response(400, "Invalid request body")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled error",
            exc_info=exc,
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "method": request.method,
                "path": request.url.path,
            },
        )
        return _error_response(500, "Internal server error")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(companies_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)

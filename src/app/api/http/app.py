"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.app.api.http.app_data import ApplicationDependencies
from src.app.api.http.routers.health import router as health_router
from src.app.api.http.routers.service.order import router as order_router
from src.app.api.utils.app_startup import configure_logging
from src.app.core.exceptions import StorageError
from src.app.core.services import DbManageService, DbSessionService
from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.context import get_config

__all__ = ["app", "create_app"]


def _build_dependencies(config: ConfigData) -> ApplicationDependencies:
    return ApplicationDependencies(database_service=DbSessionService(config))


def create_app(
    config: ConfigData | None = None,
    dependencies: ApplicationDependencies | None = None,
) -> FastAPI:
    """Build the application.

    `dependencies` replaces the services normally created at startup; tests
    use it to run against an in-memory database.
    """
    main_config = config or get_config()
    environment = main_config.app.environment

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        deps = dependencies or _build_dependencies(main_config)
        app.state.app_dependencies = deps
        logger.info("Starting up application in {} environment", environment)
        DbManageService(deps.database_service.engine).create_all()
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if dependencies is None:
                deps.database_service.dispose()

    app = FastAPI(
        title="Order Service",
        lifespan=lifespan,
        docs_url=None if environment == "production" else "/docs",
        redoc_url=None if environment == "production" else "/redoc",
    )

    # --- CORS configuration ---
    cors = main_config.app.cors
    if environment == "production" and "*" in cors.origins and cors.allow_credentials:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

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

        # Everything that logs within this block inherits base_ctx
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)

                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 1),
                ).info("request.end")

                response.headers.setdefault("X-Request-ID", request_id)
                return response

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

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "-")
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Storage unavailable",
                "operation": exc.operation,
                "request_id": request_id,
            },
        )

    # --- Router registration ---
    app.include_router(health_router)
    app.include_router(order_router)

    return app


configure_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(
        app,
        host=config.app.host,
        port=config.app.port,
        access_log=False,  # We handle access logging in middleware
    )

"""FastAPI application factory.

Lifespan runs the container's startup checks before the first request and
releases its services on shutdown. Every authentication route is a thin
adapter: build an EngineRequest, hand it to the LifecycleInterceptor, emit
whatever comes back.
"""

import json
import time
import uuid
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth_starter import __version__
from auth_starter.container import ServiceContainer
from auth_starter.hooks.models import EngineRequest
from auth_starter.logging import get_logger
from auth_starter.responses import ErrorDetail, builder

logger = get_logger(__name__, component="api")

REQUEST_ID_HEADER = "x-request-id"


def create_app(container: ServiceContainer) -> FastAPI:
    """Build the HTTP application around a service container."""
    app_config = container.app_config.app

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # A check failure raises here and aborts server startup
        container.start()
        app.state.container = container
        logger.info(f"{app_config.name} API ready", extra={"event": "api.ready"})

        yield

        container.stop()
        logger.info(f"{app_config.name} API shutdown complete", extra={"event": "api.stopped"})

    app = FastAPI(title=app_config.name, version=__version__, lifespan=lifespan)

    if app_config.frontend_urls:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(app_config.frontend_urls),
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms",
            extra={
                "event": "http.request",
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 1),
            },
        )
        return response

    health_path = f"/{app_config.global_prefix}/health" if app_config.global_prefix else "/health"

    @app.get(health_path)
    async def health() -> JSONResponse:
        report = await run_in_threadpool(container.health)
        status = HTTPStatus.OK if report["status"] == "ok" else HTTPStatus.SERVICE_UNAVAILABLE
        return JSONResponse(status_code=int(status), content=report)

    @app.api_route(f"{app_config.auth_base_path}/{{auth_path:path}}", methods=["GET", "POST"])
    async def auth_route(auth_path: str, request: Request) -> JSONResponse:
        path = "/" + auth_path.strip("/")

        if container.interceptor is None:
            envelope = builder.error(
                "Authentication engine is not configured",
                HTTPStatus.SERVICE_UNAVAILABLE,
                path=path,
            )
            return JSONResponse(status_code=envelope.status_code, content=envelope.to_dict())

        engine_request = EngineRequest(
            method=request.method.upper(),
            path=path,
            body=await _read_json_body(request),
            headers={key.lower(): value for key, value in request.headers.items()},
            query=dict(request.query_params),
            request_id=request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex,
        )

        result = await run_in_threadpool(container.interceptor.dispatch, engine_request)
        return JSONResponse(status_code=result.status_code, content=result.body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            ErrorDetail(
                message=error.get("msg", "Invalid value"),
                code=error.get("type"),
                path=".".join(str(part) for part in error.get("loc", ())),
            )
            for error in exc.errors()
        ]
        envelope = builder.validation_error(errors=details, path=request.url.path)
        return JSONResponse(status_code=envelope.status_code, content=envelope.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
            extra={"event": "http.unhandled_error", "error_type": type(exc).__name__},
        )
        envelope = builder.internal_server_error(path=request.url.path)
        return JSONResponse(status_code=envelope.status_code, content=envelope.to_dict())

    return app


async def _read_json_body(request: Request):
    raw = await request.body()
    if not raw.strip():
        return None

    try:
        return json.loads(raw)
    except ValueError as e:
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body",),
                    "msg": "Request body is not valid JSON",
                    "input": None,
                    "ctx": {"error": str(e)},
                }
            ]
        ) from e

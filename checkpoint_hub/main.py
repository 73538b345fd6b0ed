from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.encoders import jsonable_encoder

from checkpoint_hub.api.router import api_router
from checkpoint_hub.config import settings
from checkpoint_hub.db.session import engine
from checkpoint_hub.utils.error_codes import ERROR_MESSAGES, ErrorCode
from checkpoint_hub.utils.exceptions import CheckpointHubException
from checkpoint_hub.utils.log_config import configure_logging
from checkpoint_hub.utils.request_context import request_id_var, new_request_id, validate_request_id


logger = logging.getLogger(__name__)


async def _create_tables() -> None:
    from checkpoint_hub.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)

    if settings.DB_AUTO_CREATE:
        logger.info("lifespan.db_auto_create")
        await _create_tables()

    try:
        yield
    finally:
        # Ensure pooled DB connections are released when the app shuts down.
        await engine.dispose()


app = FastAPI(title="Gameplay Checkpoints API", debug=settings.DEBUG, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming_rid = request.headers.get("X-Request-ID")
    rid = validate_request_id(incoming_rid) or new_request_id()
    token = request_id_var.set(rid)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)

    response.headers["X-Request-ID"] = rid
    return response


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    if not settings.METRICS_ENABLED:
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed_s = time.perf_counter() - start

    from checkpoint_hub.utils.metrics import HTTP_REQUESTS_TOTAL, HTTP_REQUEST_DURATION_SECONDS

    # Keep label cardinality low: route template for matched routes, a fixed label otherwise.
    route = request.scope.get("route")
    route_path = getattr(route, "path", None)
    if isinstance(route_path, str) and route_path:
        path_label = route_path
    else:
        path_label = "__unmatched__"
    method = request.method
    status = str(getattr(response, "status_code", 0))

    HTTP_REQUESTS_TOTAL.labels(method=method, path=path_label, status=status).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(method=method, path=path_label).observe(elapsed_s)
    return response


@app.exception_handler(CheckpointHubException)
async def checkpoint_hub_exception_handler(request: Request, exc: CheckpointHubException):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    # Unify FastAPI/Pydantic validation errors into the common error envelope.
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": ErrorCode.E002.value,
                "message": ERROR_MESSAGES[ErrorCode.E002],
                "details": {"errors": jsonable_encoder(exc.errors())},
            }
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": ErrorCode.E005.value,
                "message": ERROR_MESSAGES[ErrorCode.E005],
                "details": {},
            }
        },
    )


app.include_router(api_router, prefix="/api")


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def hello():
    return (
        "This is the server for the Bee Swarm Simulator (bss) game checkpoints. "
        "The API lives under /api/gamecheckpoints."
    )


if settings.METRICS_ENABLED:

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        from checkpoint_hub.utils.metrics import render_metrics

        payload, content_type = render_metrics()
        return Response(content=payload, media_type=content_type)

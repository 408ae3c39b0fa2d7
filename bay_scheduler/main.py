import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from .api.main import api_router
from .core.config import settings
from .core.observability import (
    REQUEST_COUNT,
    REQUEST_DURATION,
    get_logger,
    initialize_observability,
    set_correlation_id,
    set_user_id,
)
from .domain.shared.exceptions import DomainError, ErrorType

# Initialize structured logger
logger = get_logger(__name__)

ERROR_STATUS_CODES: dict[ErrorType, int] = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.CAPACITY_VIOLATION: 409,
    ErrorType.TRACK_CONFLICT: 409,
    ErrorType.INVALID_PLACEMENT: 409,
    ErrorType.DRAG_STATE: 409,
    ErrorType.COMMIT_FAILED: 502,
}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Middleware for request observability and metrics collection."""

    async def dispatch(self, request: Request, call_next):
        # Generate correlation ID for request tracing
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        user_id = request.headers.get("X-User-ID", "")
        if user_id:
            set_user_id(user_id)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(
            "Request started",
            method=method,
            path=path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            if settings.ENABLE_METRICS:
                REQUEST_COUNT.labels(method=method, endpoint=path, status="500").inc()
                REQUEST_DURATION.labels(method=method, endpoint=path).observe(duration)

            logger.error(
                "Request failed",
                method=method,
                path=path,
                duration_seconds=duration,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        status_code = response.status_code
        if settings.ENABLE_METRICS:
            REQUEST_COUNT.labels(
                method=method, endpoint=path, status=str(status_code)
            ).inc()
            REQUEST_DURATION.labels(method=method, endpoint=path).observe(duration)

        # Add correlation ID to response headers
        response.headers["X-Correlation-ID"] = correlation_id

        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_seconds=duration,
        )
        return response


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for FastAPI application."""
    initialize_observability()
    logger.info(
        "Application started",
        project_name=settings.PROJECT_NAME,
        environment=settings.ENVIRONMENT,
        api_version=settings.API_V1_STR,
        tracks_per_bay=settings.TRACKS_PER_BAY,
    )
    yield
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Bay Scheduler - Manufacturing Bay Schedule Layout API

    Computes the layout behind a manufacturing bay schedule board.

    ## Features

    * **Time Axis**: Day, week, month and quarter header slots for a date range
    * **Track Layout**: Bounded per-bay tracks with deterministic greedy assignment
    * **Duration Estimates**: End dates from work hours and bay staffing
    * **Placement Checks**: Capacity, track range and track overlap validation
    * **Utilization**: Weekly bay load from bay-floor project phases
    """,
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.error_type, 400)
    logger.warning(
        "Domain error",
        path=request.url.path,
        error_type=exc.error_type.value,
        status_code=status_code,
        message=exc.message,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Add observability middleware
app.add_middleware(ObservabilityMiddleware)

# Set all CORS enabled origins
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)

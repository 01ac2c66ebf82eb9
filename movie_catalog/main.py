import logging
import uuid
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    ArgumentError,
    DatabaseError,
    DBAPIError,
    IntegrityError,
    OperationalError,
)
from sqlalchemy.exc import (
    TimeoutError as SQLAlchemyTimeoutError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_catalog import __version__
from movie_catalog.db.connection import (
    dispose_engine,
    get_database_type,
    get_database_url,
)
from movie_catalog.settings import get_settings

from .api import favourites, movies
from .schemas.error import ErrorType, ValidationErrorDetail
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_type_for_status,
    render_error,
)
from .utils.request_context import get_request_id, set_request_id

settings = get_settings()

logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

LOCAL_DEV_PORTS = (*range(3000, 3011), 5173)


def validate_environment() -> None:
    """Log a warning for each optional setting that is still unset."""
    warnings = get_settings().optional_config_warnings()
    if not warnings:
        return
    logger.warning("Environment configuration warnings:")
    for warning in warnings:
        logger.warning("  - %s", warning)


def _sanitize_database_url(url: str) -> str:
    """Mask the password so the URL can be logged."""
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return url.split("://", 1)[0] + "://<unparseable>"


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_environment()

    database_type = get_database_type()
    logger.info("Movie Catalog API %s starting", __version__)
    logger.info(
        "Database: %s (%s)", database_type.upper(), _sanitize_database_url(get_database_url())
    )
    if database_type == "postgresql":
        logger.info("Ensure Alembic migrations are applied (alembic upgrade head)")

    from movie_catalog.warmup import warmup_all

    await warmup_all()

    yield

    logger.info("Shutting down Movie Catalog API")
    await dispose_engine()


app = FastAPI(
    title="Movie Catalog API",
    version=__version__,
    description="Movies, comments, and per-user yearly favourites lists.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _allowed_origins() -> list[str]:
    """Localhost dev servers followed by configured origins, without duplicates."""
    local = [
        f"http://{host}:{port}"
        for host in ("localhost", "127.0.0.1")
        for port in LOCAL_DEV_PORTS
    ]
    return list(dict.fromkeys(local + settings.cors_allow_origins))


app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_origin_regex=settings.cors_allow_origin_regex,
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag the request with a UUID that error bodies and logs can reference."""
    request_id = str(uuid.uuid4())
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _log_failure(level: int, label: str, request: Request, exc: object) -> None:
    logger.log(
        level,
        "%s for request %s to %s: %s",
        label,
        get_request_id(),
        request.url.path,
        exc,
    )


def _validation_details(
    exc: RequestValidationError | ValidationError,
) -> list[ValidationErrorDetail]:
    return [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render ``HTTPException`` raised by routers and dependencies."""
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    _log_failure(level, f"HTTP {exc.status_code}", request, exc.detail)

    error_response = build_error_response(
        error_type=error_type_for_status(exc.status_code),
        message=str(exc.detail),
        detail=None,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return render_error(error_response, headers=getattr(exc, "headers", None))


async def _render_validation_failure(
    request: Request, exc: RequestValidationError | ValidationError, message: str
) -> JSONResponse:
    errors = _validation_details(exc)
    _log_failure(logging.WARNING, message, request, f"{len(errors)} errors")

    error_response = build_validation_error_response(
        message=message,
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=request.url.path,
        errors=errors,
    )
    return render_error(error_response)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return await _render_validation_failure(request, exc, "Request validation failed")


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    """Response models that fail validation are reported rather than hidden."""
    return await _render_validation_failure(request, exc, "Data validation failed")


def _database_exception_handler(
    *,
    error_type: ErrorType,
    status_code: int,
    message: str,
    detail: str,
    retry_after: int | None = None,
) -> Callable[[Request, Exception], Awaitable[JSONResponse]]:
    """Build a handler that reports a SQLAlchemy failure without leaking SQL."""

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        _log_failure(logging.ERROR, message, request, exc)
        error_response = build_error_response(
            error_type=error_type,
            message=message,
            detail=detail,
            status_code=status_code,
            path=request.url.path,
            retry_after=retry_after,
        )
        return render_error(error_response)

    return handler


database_connection_exception_handler = _database_exception_handler(
    error_type=ErrorType.DATABASE_ERROR,
    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    message="Database connection failed",
    detail="Unable to connect to the database. Please try again later.",
    retry_after=5,
)
database_timeout_exception_handler = _database_exception_handler(
    error_type=ErrorType.TIMEOUT_ERROR,
    status_code=status.HTTP_504_GATEWAY_TIMEOUT,
    message="Database query timeout",
    detail="The database did not answer in time. Please try again.",
    retry_after=3,
)
database_integrity_exception_handler = _database_exception_handler(
    error_type=ErrorType.CONFLICT,
    status_code=status.HTTP_409_CONFLICT,
    message="Data integrity constraint violation",
    detail="The operation would violate a database constraint.",
)
database_generic_exception_handler = _database_exception_handler(
    error_type=ErrorType.DATABASE_ERROR,
    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    message="Database operation failed",
    detail="An error occurred while accessing the database. Please try again.",
    retry_after=3,
)

# Starlette picks the handler registered for the closest class in the MRO, so
# IntegrityError and OperationalError win over their DBAPIError/DatabaseError bases.
app.add_exception_handler(OperationalError, database_connection_exception_handler)
app.add_exception_handler(IntegrityError, database_integrity_exception_handler)
app.add_exception_handler(DBAPIError, database_connection_exception_handler)
app.add_exception_handler(SQLAlchemyTimeoutError, database_timeout_exception_handler)
app.add_exception_handler(DatabaseError, database_generic_exception_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )
    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=request.url.path,
    )
    return render_error(error_response)


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Liveness probe; does not touch the database."""
    return {"status": "ok"}


app.include_router(movies.router, prefix="/movies", tags=["movies"])
app.include_router(favourites.router, prefix="/favourites", tags=["favourites"])

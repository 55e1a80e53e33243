"""
Main FastAPI application for the InEvent Weather API.

This module contains the FastAPI application instance, the exception
handlers that render every failure as ``{"error": true, "message": ...}``
and the root endpoints.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weather_api import __version__
from weather_api.config import settings
from weather_api.core.exceptions import AppError
from weather_api.database import dispose_engine
from weather_api.routers.auth import router as auth_router
from weather_api.routers.users import router as users_router
from weather_api.routers.weather import router as weather_router
from weather_api.utils.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)

HTTP_ERROR_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Rota não encontrada",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Método não permitido",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events.

    Note: Database tables are managed through Alembic migrations.
    Run `alembic upgrade head` to create/update database tables.
    """
    logger.info("=" * 60)
    logger.info(f"{settings.PROJECT_NAME} - Application starting up")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Database: {settings.SQLALCHEMY_DATABASE_URI.split('://')[0]}")
    logger.info("=" * 60)
    if not settings.OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY is not set; weather endpoints will fail")

    yield

    await dispose_engine()
    logger.info(f"{settings.PROJECT_NAME} - Application shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Weather proxy and user account API backed by OpenWeatherMap",
    version=__version__,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "message": message},
        headers=headers,
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render application errors with their own status and message."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and unparsable parameters are plain 400s."""
    logger.debug(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "Dados inválidos")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (unknown path, wrong method) in the common error shape."""
    message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
    return _error_response(exc.status_code, message, getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures; never leak details to the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro interno do servidor")


# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


@app.get("/")
async def root():
    """
    Root endpoint returning API information.
    """
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint.
    """
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(weather_router, prefix=settings.API_PREFIX)

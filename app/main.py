from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
from typing import Optional
import time
import logging

from .api.deps import general_rate_limit
from .api.routes.auth import router as auth_router
from .api.routes.bookings import router as bookings_router
from .api.routes.slots import router as slots_router
from .core.config import Settings, settings as default_settings
from .core.database import Database, create_redis
from .core.errors import ApiError, STATUS_CODES, error_body
from .schemas.base import format_utc

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc, ApiError):
            code, message = exc.code, exc.message
        elif exc.status_code == 404:
            code, message = "NOT_FOUND", "Route not found"
        else:
            code = STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
            message = str(exc.detail)

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(code, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body("VALIDATION_ERROR", _validation_message(exc)),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body("INTERNAL_ERROR", "Internal server error"),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    # Create FastAPI application
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Appointment slot booking with patient and admin roles",
        openapi_url="/api/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.redis = create_redis(settings)

    # Middleware setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.TRUSTED_HOSTS_ENABLED:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=settings.ALLOWED_HOSTS
        )

    # Custom middleware for request logging and timing
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        # Log request
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

    register_exception_handlers(app)

    # Include routers
    api_dependencies = [Depends(general_rate_limit)]
    app.include_router(auth_router, prefix="/api", dependencies=api_dependencies)
    app.include_router(slots_router, prefix="/api", dependencies=api_dependencies)
    app.include_router(bookings_router, prefix="/api", dependencies=api_dependencies)

    # Startup and shutdown events
    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup."""
        logger.info("Starting Appointment Booking API...")

        database = app.state.database
        logger.info(f"Using {database.backend_name} database")

        try:
            database.create_all()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            raise

        logger.info("Application startup complete")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release pooled connections on shutdown."""
        logger.info("Shutting down Appointment Booking API...")
        app.state.database.dispose()
        app.state.redis.close()

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": format_utc(datetime.now(timezone.utc)),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
        log_level="info"
    )

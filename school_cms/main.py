"""
FastAPI application entry point.
Main application instance with middleware and route configuration.
"""
from fastapi import FastAPI, Request, status, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import logging

from school_cms.config import settings
from school_cms.database import AsyncSessionLocal, get_db, init_db, close_db
from school_cms.routes import gallery
from school_cms.services.keep_alive import KeepAliveTask

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its response status."""
    method = request.method
    path = request.url.path
    logger.debug(f"Incoming {method} request to {path}")

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Error processing {method} {path}: {str(e)}\n"
            f"  Error type: {type(e).__name__}",
            exc_info=True
        )
        raise

    logger.info(f"Response status: {response.status_code} for {method} {path}")
    return response


# Include routers
app.include_router(gallery.router, prefix="/api", tags=["gallery"])


# Exception Handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions (401, 403, 404, etc.)."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"HTTPException on {request.method} {request.url.path}:\n"
        f"  Status: {exc.status_code}\n"
        f"  Detail: {exc.detail}"
    )

    # Handle both string and dict detail formats
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail, "detail": str(exc.detail)}

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Reject malformed input with one field/message pair per problem."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {details}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "details": details
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )


# Root Endpoints
@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health_check():
    """Health check endpoint. Also the keep-alive ping target."""
    return {"status": "healthy"}


@app.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """
    Database health check endpoint.
    Tests database connection and returns status.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        return {
            "database": "connected",
            "status": "healthy",
            "result": result.scalar()
        }
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}", exc_info=True)
        return {
            "database": "error",
            "status": "unhealthy",
            "error": "Database connection failed"
        }


@app.on_event("startup")
async def startup_event():
    """
    Initialize database connection and the keep-alive task on startup.
    Non-blocking: app will start even if database connection fails.
    """
    if settings.DATABASE_URL:
        try:
            await init_db()
            logger.info("Database connection established successfully")
        except Exception as e:
            logger.error(
                f"Failed to initialize database on startup: {str(e)}\n"
                f"The application will continue to run, but database-dependent endpoints will fail.\n"
                f"Please check your DATABASE_URL configuration and network connectivity."
            )
    else:
        logger.info("DATABASE_URL not configured - database features will be unavailable")

    app.state.keep_alive = None
    if settings.KEEP_ALIVE_ENABLED:
        keep_alive = KeepAliveTask(
            AsyncSessionLocal,
            interval_seconds=settings.KEEP_ALIVE_INTERVAL_SECONDS,
            health_url=settings.health_check_url,
            timeout_seconds=settings.KEEP_ALIVE_TIMEOUT_SECONDS,
            start_delay_seconds=settings.KEEP_ALIVE_START_DELAY_SECONDS,
        )
        keep_alive.start()
        app.state.keep_alive = keep_alive


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the keep-alive task and close database connections."""
    keep_alive = getattr(app.state, "keep_alive", None)
    if keep_alive is not None:
        await keep_alive.stop()

    if settings.DATABASE_URL:
        try:
            await close_db()
        except Exception as e:
            logger.warning(f"Error during database shutdown: {str(e)}")

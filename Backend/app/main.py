import logging
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import AppError
from app.schemas.common import error_response, format_validation_errors

# Setup Logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Car listings, service history and Razorpay-backed service payments",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --------------------------------------------------------------------------
# CORS Middleware
# --------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# --------------------------------------------------------------------------
# Local image uploads (not available when running serverless)
# --------------------------------------------------------------------------
if not settings.SERVERLESS:
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# --------------------------------------------------------------------------
# Database Initialization (Startup Event)
# --------------------------------------------------------------------------
from app.core.database import init_db

@app.on_event("startup")
async def on_startup():
    logger.info("Connecting to Database...")
    try:
        await init_db()
    except Exception:
        logger.exception("Database Connection FAILED")
        raise
    logger.info("Database Connection Successful!")

# --------------------------------------------------------------------------
# Exception Handlers (every failure is a {success: false, message} envelope)
# --------------------------------------------------------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.message))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=error_response(format_validation_errors(exc.errors()))
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    # Stack stays in the server log; clients get a generic message
    logger.exception(f"Unhandled error at {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_response("Server error"))

# --------------------------------------------------------------------------
# Basic Routes
# --------------------------------------------------------------------------
@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }

@app.get("/api/health")
async def health_check():
    return {
        "success": True,
        "message": f"{settings.APP_NAME} is running",
        "timestamp": datetime.utcnow().isoformat()
    }

# --------------------------------------------------------------------------
# API Routers
# --------------------------------------------------------------------------
from app.api import api_router

app.include_router(api_router, prefix="/api")

"""REST API module for the DApp catalog.

This module provides HTTP endpoints for:
- Client token issuance, refresh and validation
- Searching the DApp catalog (access token required)
- DApp details (access token required)
- Account favorites

Every response body carries a `success` flag; failures add an `error` tag
and a human-readable `message`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings_conf
from database import init_db, close as db_close
from database.exceptions import DatabaseError

# Configure logging
logging.basicConfig(
    level=settings_conf['log_level'],
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_NAME = "Geode DApp API"
API_VERSION = "1.0.0"

# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Initializing API...")
    await init_db(create_schema=True)

    yield

    logger.info("Shutting down API...")
    await db_close()

# Create FastAPI app
app = FastAPI(
    title=API_NAME,
    description="Search, details and favorites for the DApp catalog",
    version=API_VERSION,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings_conf['cors_origin_regex'],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors with the standard envelope."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {'success': False, 'error': str(exc.detail), 'message': str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are reported as 400, not 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            'success': False,
            'error': 'Invalid request',
            'message': '; '.join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
        }
    )

@app.exception_handler(DatabaseError)
async def database_exception_handler(request: Request, exc: DatabaseError):
    """Store failures surface as a generic 500; detail stays in the logs."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            'success': False,
            'error': 'Database query failed',
            'message': 'Internal server error'
        }
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            'success': False,
            'error': 'Internal server error',
            'message': 'An unexpected error occurred'
        }
    )

@app.get("/")
async def root():
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "status": "running"
    }

# Import and include all routers
from .auth import router as auth_router
from .dapps import router as dapps_router
from .favorites import router as favorites_router

app.include_router(auth_router)
app.include_router(dapps_router)
app.include_router(favorites_router)

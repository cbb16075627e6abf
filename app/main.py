"""
Job Portal - Main Application

FastAPI backend with:
- MongoDB for all documents (users, companies, jobs, applications, posts, comments)
- JWT bearer authentication
- Uniform {"message": ...} error bodies

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import api_router
from app.db.mongodb import init_mongo_indexes, check_mongo_connection, close_mongo_client
from app.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    On startup: create MongoDB indexes (uniqueness rules live there)
    On shutdown: close the MongoDB client
    """
    logger.info("🚀 Starting Job Portal API...")
    logger.info(f"📊 MongoDB database: {settings.mongodb_db}")
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning(f"⚠️ MongoDB index initialization failed: {e}")

    yield

    logger.info("👋 Shutting down Job Portal API...")
    close_mongo_client()


# Create FastAPI app
app = FastAPI(
    title="Job Portal API",
    description="""
    A job board with a community feed.

    ## Features
    - **Authentication**: JWT-based auth for candidates and employers
    - **Jobs**: Search, filter, post and manage job listings
    - **Applications**: Apply once per job, employers track applicants
    - **Companies**: Employer-owned company profiles
    - **Community**: Posts, likes and comments
    """,
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR HANDLERS - every error body is {"message": "..."}
# ============================================================

def format_validation_error(error: dict) -> str:
    """Turn the first pydantic error into a one-line message."""
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    message = error.get("msg", "Invalid request")
    return f"{field}: {message}" if field else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = format_validation_error(errors[0]) if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Server Error"})


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root():
    return {"message": "welcome to job portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if check_mongo_connection() else "disconnected"
    }

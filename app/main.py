"""
Student Achievement Tracker - Main Application

FastAPI backend with:
- MongoDB for students and achievements
- JWT authentication (students + admin reviewer)
- Gemini / Azure OpenAI for resume writing, with a rule-based fallback

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.mongodb import get_mongo_db, init_mongo_indexes, close_mongo_client, test_mongo_connection

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup, close the client on shutdown."""
    try:
        init_mongo_indexes(get_mongo_db())
    except Exception as e:
        logger.warning(f"MongoDB index initialization failed: {e}")
    yield
    close_mongo_client()


# Create FastAPI app
app = FastAPI(
    title="Student Achievement Tracker",
    description="""
    Track, validate and showcase student achievements.

    ## Features
    - **Authentication**: JWT-based auth for students and the admin reviewer
    - **Achievements**: Submit, review (validate/reject), edit, delete
    - **Profiles**: Contact details, education, skills, certifications
    - **Resume**: Validated achievements -> structured resume (AI or rule-based)
    - **AI helpers**: Description writing, skill extraction, gap analysis, chat
    - **Analytics**: Counts by status, category and level
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
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
# ERROR RESPONSES
# Every error body is {"message": ...}
# ============================================================

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
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {field} {first.get('msg', '')}".strip() if field else "Invalid request body"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check(db: Database = Depends(get_mongo_db)):
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection(db) else "disconnected",
    }

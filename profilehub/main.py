"""
ProfileHub - Main Application

FastAPI backend with:
- MongoDB for profile documents
- JWT authentication (bearer tokens, 30 day expiry)
- Cloudinary for profile images
- SerpAPI for job/internship/event listings

Run: uvicorn profilehub.main:app --reload
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from profilehub import __version__
from profilehub.api import api_router
from profilehub.core.config import get_settings
from profilehub.core.logger import setup_logging
from profilehub.db.mongodb import init_mongo_indexes, test_mongo_connection

logger = logging.getLogger(__name__)


# ============================================================
# ERROR HANDLERS
# Every error leaves the API as {"error": ..., "details"?: ...}
# ============================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{loc}: {errors[0].get('msg')}" if loc else errors[0].get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error", "details": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="ProfileHub",
        description="""
        Developer profile hosting with search and opportunity listings.

        ## Features
        - **Profiles**: Register with bio, skills, social links, projects and an avatar
        - **Authentication**: JWT bearer tokens; only owners can edit
        - **Discovery**: Most viewed list and search by name, skills or location
        - **Opportunities**: Jobs, internships, bootcamps, hackathons, mentorship, remote work
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # CORS middleware (allow all for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event():
        """Initialize MongoDB indexes on startup."""
        try:
            init_mongo_indexes()
        except Exception as e:
            logger.warning("MongoDB index initialization failed: %s", e)

    @app.get("/", tags=["Health"])
    async def root():
        return {"status": "healthy", "message": "Backend is running"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check."""
        return {
            "status": "healthy",
            "mongodb": "connected" if test_mongo_connection() else "disconnected"
        }

    return app


app = create_app()

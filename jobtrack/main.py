"""
JobTrack - FastAPI application entry point.

A job application tracker: users register, log in, and manage the jobs
they applied to.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
import logging
import os

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from . import __version__
from .config import settings
from .errors import register_exception_handlers
from .rate_limit import limiter
from .routers import jobs
from .auth import router as auth_router

# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("jobtrack")

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def setup_database():
    """Create tables if fresh DB, run migrations if existing."""
    from alembic import command
    from alembic.config import Config
    from sqlalchemy import inspect as sa_inspect
    from .database import engine, init_db

    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    alembic_cfg.attributes["configure_logger"] = False

    inspector = sa_inspect(engine)
    existing = inspector.get_table_names()

    if "users" not in existing:
        logger.info("No users table found, creating schema")
        init_db()
        command.stamp(alembic_cfg, "head")
        logger.info("Tables created and alembic stamped to head.")
    else:
        logger.info("Existing schema found, upgrading to head")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    logger.info("Starting JobTrack API...")
    if settings.database_url.startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)
    setup_database()
    logger.info("JobTrack ready!")
    yield
    logger.info("Shutting down JobTrack...")


app = FastAPI(
    title="JobTrack",
    description="Job application tracker - register, log in, and track the jobs you applied to",
    version=__version__,
    lifespan=lifespan
)

# --- Rate Limiting ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Error boundary ---
register_exception_handlers(app)


# --- Security Headers Middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-site"
        return response


# --- Middleware ---
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
app.include_router(jobs.router, prefix=f"{settings.api_prefix}/jobs", tags=["jobs"])


# --- API Endpoints ---

@app.get("/", tags=["system"])
async def index():
    """API landing: name, version and where the docs live."""
    return {"name": "JobTrack API", "version": __version__, "docs": "/docs"}


@app.get("/api/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat()
    }

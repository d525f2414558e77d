"""FastAPI application entry point."""
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gamereview.config import settings
from gamereview.database import init_db
from gamereview.exceptions import register_exception_handlers
from gamereview.logging_config import setup_logging, get_logger
from gamereview.services.seed_admin import seed_admin_user
from gamereview.middleware.logging_middleware import LoggingMiddleware
from gamereview.routes import (
    health,
    auth,
    users,
    games,
    reviews,
    companies,
    tags,
    genres,
    admin,
)


logger = get_logger("gamereview.main")


def _run_startup() -> None:
    """Run DB init and admin seed in background (allows app to accept connections immediately)."""
    try:
        init_db()
        logger.info("Database initialized")
        try:
            seed_admin_user()
        except Exception as e:
            logger.warning("Admin seed failed (non-fatal): %s", e)
    except Exception as e:
        logger.exception("Startup failed: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s", settings.app_name)
    thread = threading.Thread(target=_run_startup, daemon=True)
    thread.start()
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router, prefix=settings.api_v1_prefix)
app.include_router(auth.router, prefix=settings.api_v1_prefix)
app.include_router(users.router, prefix=settings.api_v1_prefix)
app.include_router(games.router, prefix=settings.api_v1_prefix)
app.include_router(reviews.router, prefix=settings.api_v1_prefix)
app.include_router(companies.router, prefix=settings.api_v1_prefix)
app.include_router(tags.router, prefix=settings.api_v1_prefix)
app.include_router(genres.router, prefix=settings.api_v1_prefix)
app.include_router(admin.router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": settings.app_name, "docs": "/docs"}

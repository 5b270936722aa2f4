"""
FastAPI Application - Testimonial Video Generation API.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proofreel import __version__
from proofreel.config import get_config
from proofreel.persistence import close_connection

from .routes import health_router, videos_router
from .exceptions import APIError, api_error_handler, unhandled_error_handler
from .dependencies import close_coordinator, get_coordinator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info("Starting ProofReel API...")
    logger.info("=" * 60)

    config = get_config()
    config.log_status()

    # Media left behind by batches interrupted before their record was written
    try:
        report = get_coordinator().reconcile_orphans()
        logger.info(f"Orphan sweep: {report.total_removed} file(s) removed")
    except Exception as e:
        logger.warning(f"Orphan sweep skipped: {e}")

    yield

    logger.info("Shutting down ProofReel API...")
    await close_coordinator()
    close_connection()


def create_app(debug: bool = False) -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="ProofReel API",
        description="Turns approved customer reviews into short testimonial videos",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health_router)
    app.include_router(videos_router)

    return app


app = create_app(debug=get_config().debug)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "proofreel.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )

"""
Shared dependencies for API routes.
"""
import logging
from functools import lru_cache

from fastapi import Depends

from proofreel.config import AppConfig, get_config
from proofreel.generation import GenerationCoordinator
from proofreel.narrative import NarrativeTemplateEngine
from proofreel.persistence import SQLiteReviewRepository, get_connection

logger = logging.getLogger(__name__)


def get_app_config() -> AppConfig:
    return get_config()


@lru_cache()
def get_narrative_engine() -> NarrativeTemplateEngine:
    """Get cached NarrativeTemplateEngine instance."""
    return NarrativeTemplateEngine()


@lru_cache()
def get_coordinator() -> GenerationCoordinator:
    """Get cached GenerationCoordinator wired from the process config."""
    return GenerationCoordinator.from_config(get_config())


def get_review_repository(config: AppConfig = Depends(get_app_config)) -> SQLiteReviewRepository:
    return SQLiteReviewRepository(get_connection(config.database_path))


async def close_coordinator() -> None:
    """Release the cached coordinator's HTTP clients, if one was created."""
    if get_coordinator.cache_info().currsize:
        await get_coordinator().aclose()
        get_coordinator.cache_clear()


def check_database_connection() -> bool:
    """Check if SQLite is accessible."""
    try:
        get_connection(get_config().database_path).execute("SELECT 1")
        return True
    except Exception as e:
        logger.warning(f"Database connection check failed: {e}")
        return False

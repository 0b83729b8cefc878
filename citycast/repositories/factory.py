"""
Repository factory for dependency injection and configuration.

DuckDB is the only record store backend; unknown ``REPOSITORY_TYPE`` values
fall back to it with a warning.
"""

import structlog

from citycast.config import settings
from citycast.repositories.base import FeedbackRepository, StopRepository
from citycast.repositories.duckdb_repository import (
    DuckDBFeedbackRepository,
    DuckDBStopRepository,
)

logger = structlog.get_logger(__name__)


class RepositoryFactory:
    """Factory for creating repository instances."""

    @staticmethod
    def create_repositories(
        repository_type: str | None = None, db_path: str | None = None
    ) -> tuple[StopRepository, FeedbackRepository]:
        """
        Create repository instances based on configuration.

        Returns:
            Tuple of (StopRepository, FeedbackRepository)
        """
        repository_type = (repository_type or settings.repository_type).lower()

        if repository_type != "duckdb":
            logger.warning(
                "Unknown repository type, falling back to DuckDB",
                repository_type=repository_type,
            )

        return RepositoryFactory._create_duckdb_repositories(db_path)

    @staticmethod
    def _create_duckdb_repositories(
        db_path: str | None = None,
    ) -> tuple[StopRepository, FeedbackRepository]:
        """Create DuckDB repository instances."""
        db_path = db_path or settings.duckdb_db_path

        logger.info("Creating DuckDB repositories", db_path=db_path)

        return DuckDBStopRepository(db_path), DuckDBFeedbackRepository(db_path)


# Global repository instances (initialized once at startup)
_stop_repository: StopRepository | None = None
_feedback_repository: FeedbackRepository | None = None


def get_stop_repository() -> StopRepository:
    """Get the global stop repository instance."""
    if _stop_repository is None:
        initialize_repositories()
    assert _stop_repository is not None
    return _stop_repository


def get_feedback_repository() -> FeedbackRepository:
    """Get the global feedback repository instance."""
    if _feedback_repository is None:
        initialize_repositories()
    assert _feedback_repository is not None
    return _feedback_repository


def initialize_repositories(
    repository_type: str | None = None, db_path: str | None = None
) -> None:
    """Initialize repositories at application startup."""
    global _stop_repository, _feedback_repository

    logger.info("Initializing repositories")
    _stop_repository, _feedback_repository = RepositoryFactory.create_repositories(
        repository_type, db_path
    )

    logger.info(
        "Repositories initialized",
        stop_repo=type(_stop_repository).__name__,
        feedback_repo=type(_feedback_repository).__name__,
    )


def reset_repositories() -> None:
    """Drop the global instances so the next access re-creates them."""
    global _stop_repository, _feedback_repository
    _stop_repository = None
    _feedback_repository = None

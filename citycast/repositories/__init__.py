"""
Repository pattern implementation for the record store.

Abstract interfaces live in ``base``; ``duckdb_repository`` provides the
concrete storage and ``factory`` wires up the global instances.
"""

from .base import FeedbackEntity, FeedbackRepository, StopEntity, StopRepository
from .factory import (
    get_feedback_repository,
    get_stop_repository,
    initialize_repositories,
    reset_repositories,
)

__all__ = [
    "FeedbackEntity",
    "FeedbackRepository",
    "StopEntity",
    "StopRepository",
    "get_feedback_repository",
    "get_stop_repository",
    "initialize_repositories",
    "reset_repositories",
]

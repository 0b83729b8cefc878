"""
DuckDB implementation of the record store.

Each table mirrors a key-value layout: stops are keyed by
(stop_id, stop_city) with a secondary index on the city, feedback rows carry
their partition/sort keys and a secondary (gsi1pk, gsi1sk) index for the
newest-first testimonial query.
"""

import asyncio
from datetime import datetime
import json
from pathlib import Path
from typing import Any, cast

import duckdb
import structlog

from citycast.errors import StorageError
from citycast.repositories.base import (
    APPROVED_FEEDBACK_PARTITION,
    FeedbackEntity,
    FeedbackRepository,
    StopEntity,
    StopRepository,
)

logger = structlog.get_logger(__name__)


class DuckDBRepository:
    """Base class for DuckDB repositories with shared connection logic."""

    SCHEMA: tuple[str, ...] = ()

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # Single lock for all database operations of this repository
        self._db_lock = asyncio.Lock()
        self._initialized = False

    async def _run(self, operation, *args):
        """Run a blocking DuckDB call in the default executor under the lock."""
        async with self._db_lock:

            def _call():
                with duckdb.connect(str(self.db_path)) as conn:
                    return operation(conn, *args)

            loop = asyncio.get_running_loop()
            try:
                return await loop.run_in_executor(None, _call)
            except duckdb.Error as e:
                logger.error("DuckDB operation failed", db_path=str(self.db_path), error=str(e))
                raise StorageError("Record store operation failed") from e

    async def _init_db(self) -> None:
        """Create tables and indexes on first use."""
        if self._initialized:
            return
        for statement in self.SCHEMA:
            await self._execute(statement)
        self._initialized = True

    async def _execute(self, query: str, params: tuple = ()) -> None:
        await self._run(lambda conn: conn.execute(query, params))

    async def _fetch_one(self, query: str, params: tuple = ()) -> tuple | None:
        return await self._run(lambda conn: conn.execute(query, params).fetchone())

    async def _fetch_all(self, query: str, params: tuple = ()) -> list[tuple]:
        return await self._run(lambda conn: conn.execute(query, params).fetchall())

    async def _table_health(self, table: str) -> dict[str, Any]:
        try:
            await self._init_db()
            row = await self._fetch_one(f"SELECT COUNT(*) FROM {table}")
            version_row = await self._fetch_one("SELECT version()")
            return {
                "database": "healthy",
                "type": "duckdb",
                "version": cast(str, version_row[0]) if version_row else "unknown",
                "path": str(self.db_path),
                "records": cast(int, row[0]) if row else 0,
            }
        except StorageError as e:
            logger.error("Repository health check failed", table=table, error=str(e))
            return {"database": "unhealthy", "error": str(e)}


class DuckDBStopRepository(DuckDBRepository, StopRepository):
    """DuckDB implementation of StopRepository."""

    SCHEMA = (
        """
        CREATE TABLE IF NOT EXISTS city_stops (
            stop_id VARCHAR NOT NULL,
            stop_city VARCHAR NOT NULL,
            tour_type VARCHAR NOT NULL,
            stop_name VARCHAR NOT NULL,
            stop_description VARCHAR DEFAULT '',
            stop_lat DOUBLE,
            stop_lng DOUBLE,
            created_at TIMESTAMP NOT NULL,
            last_updated TIMESTAMP NOT NULL,
            enrichment JSON,
            enriched_at TIMESTAMP,
            PRIMARY KEY (stop_id, stop_city)
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_city_stops_city ON city_stops(stop_city)",
    )

    COLUMNS = (
        "stop_id, stop_city, tour_type, stop_name, stop_description, stop_lat, "
        "stop_lng, created_at, last_updated, enrichment, enriched_at"
    )

    def __init__(self, db_path: str = "data/citycast.duckdb"):
        super().__init__(db_path)
        logger.info("DuckDB stop repository initialized", db_path=str(self.db_path))

    async def find_by_name(self, stop_city: str, stop_name: str) -> str | None:
        await self._init_db()

        row = await self._fetch_one(
            "SELECT stop_id FROM city_stops WHERE stop_city = ? AND stop_name = ? LIMIT 1",
            (stop_city, stop_name),
        )
        return cast(str, row[0]) if row else None

    async def create_stop(self, stop: StopEntity) -> StopEntity:
        await self._init_db()

        await self._execute(
            f"INSERT INTO city_stops ({self.COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                stop.stop_id,
                stop.stop_city,
                stop.tour_type,
                stop.stop_name,
                stop.stop_description,
                stop.stop_lat,
                stop.stop_lng,
                stop.created_at,
                stop.last_updated,
                json.dumps(stop.enrichment) if stop.enrichment is not None else None,
                stop.enriched_at,
            ),
        )

        logger.info("Stop created", stop_id=stop.stop_id, stop_city=stop.stop_city)
        return stop

    async def get_stop(self, stop_id: str, stop_city: str) -> StopEntity | None:
        await self._init_db()

        row = await self._fetch_one(
            f"SELECT {self.COLUMNS} FROM city_stops WHERE stop_id = ? AND stop_city = ?",
            (stop_id, stop_city),
        )
        return self._row_to_entity(row) if row else None

    async def list_stops(
        self, stop_city: str, tour_type: str | None = None
    ) -> list[StopEntity]:
        await self._init_db()

        query = f"SELECT {self.COLUMNS} FROM city_stops WHERE stop_city = ?"
        params: list[Any] = [stop_city]

        if tour_type:
            query += " AND tour_type = ?"
            params.append(tour_type)

        query += " ORDER BY created_at, stop_name"

        rows = await self._fetch_all(query, tuple(params))
        return [self._row_to_entity(row) for row in rows]

    async def update_enrichment(
        self, stop_id: str, stop_city: str, enrichment: dict[str, Any]
    ) -> bool:
        await self._init_db()

        # Conditional update: only existing stops are enriched
        existing = await self.get_stop(stop_id, stop_city)
        if not existing:
            logger.warning("Stop not found, enrichment not written", stop_id=stop_id)
            return False

        now = datetime.now()
        await self._execute(
            """
            UPDATE city_stops SET
                enrichment = ?, enriched_at = ?, last_updated = ?
            WHERE stop_id = ? AND stop_city = ?
            """,
            (json.dumps(enrichment), now, now, stop_id, stop_city),
        )

        logger.info("Enrichment written to stop", stop_id=stop_id)
        return True

    async def health_check(self) -> dict[str, Any]:
        return await self._table_health("city_stops")

    def _row_to_entity(self, row: tuple) -> StopEntity:
        """Convert DuckDB row to StopEntity."""
        return StopEntity(
            stop_id=row[0],
            stop_city=row[1],
            tour_type=row[2],
            stop_name=row[3],
            stop_description=row[4] or "",
            stop_lat=row[5],
            stop_lng=row[6],
            created_at=row[7],
            last_updated=row[8],
            enrichment=json.loads(row[9]) if row[9] else None,
            enriched_at=row[10],
        )


class DuckDBFeedbackRepository(DuckDBRepository, FeedbackRepository):
    """DuckDB implementation of FeedbackRepository."""

    SCHEMA = (
        """
        CREATE TABLE IF NOT EXISTS feedback (
            pk VARCHAR PRIMARY KEY,
            sk VARCHAR NOT NULL,
            gsi1pk VARCHAR NOT NULL,
            gsi1sk VARCHAR NOT NULL,
            feedback_id VARCHAR NOT NULL,
            user_name VARCHAR NOT NULL,
            user_email VARCHAR,
            rating DOUBLE NOT NULL,
            review VARCHAR DEFAULT '',
            tour_id VARCHAR,
            tour_city VARCHAR,
            tour_duration DOUBLE,
            tour_stop_count INTEGER,
            submitted_at VARCHAR NOT NULL,
            status VARCHAR NOT NULL
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_feedback_gsi1 ON feedback(gsi1pk, gsi1sk)",
    )

    COLUMNS = (
        "feedback_id, user_name, rating, submitted_at, user_email, review, "
        "tour_id, tour_city, tour_duration, tour_stop_count, status"
    )

    def __init__(self, db_path: str = "data/citycast.duckdb"):
        super().__init__(db_path)

    async def create_feedback(self, feedback: FeedbackEntity) -> FeedbackEntity:
        await self._init_db()

        await self._execute(
            f"""
            INSERT INTO feedback (pk, sk, gsi1pk, gsi1sk, {self.COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                feedback.pk,
                feedback.sk,
                feedback.gsi1pk,
                feedback.gsi1sk,
                feedback.feedback_id,
                feedback.user_name,
                feedback.rating,
                feedback.submitted_at,
                feedback.user_email,
                feedback.review,
                feedback.tour_id,
                feedback.tour_city,
                feedback.tour_duration,
                feedback.tour_stop_count,
                feedback.status,
            ),
        )

        logger.info(
            "Feedback stored", feedback_id=feedback.feedback_id, rating=feedback.rating
        )
        return feedback

    async def list_approved(self, limit: int = 10) -> list[FeedbackEntity]:
        await self._init_db()

        rows = await self._fetch_all(
            f"""
            SELECT {self.COLUMNS} FROM feedback
            WHERE gsi1pk = ?
            ORDER BY gsi1sk DESC
            LIMIT ?
            """,
            (APPROVED_FEEDBACK_PARTITION, limit),
        )
        return [self._row_to_entity(row) for row in rows]

    async def health_check(self) -> dict[str, Any]:
        return await self._table_health("feedback")

    def _row_to_entity(self, row: tuple) -> FeedbackEntity:
        """Convert DuckDB row to FeedbackEntity."""
        return FeedbackEntity(
            feedback_id=row[0],
            user_name=row[1],
            rating=row[2],
            submitted_at=row[3],
            user_email=row[4],
            review=row[5] or "",
            tour_id=row[6],
            tour_city=row[7],
            tour_duration=row[8],
            tour_stop_count=row[9],
            status=row[10],
        )

"""
Analysis result store.

Keeps one ``CrossAnalysisResult`` per group and analysis window in a local
SQLite database, keyed the same way the app's report documents are
(``{groupId}_{windowStart}_analysis``). A new run for the same window
replaces the stored result instead of patching it.
"""

import asyncio
import json
import logging
import sqlite3
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from .exceptions import StorageError
from .models import CrossAnalysisResult, StoredAnalysisSummary

logger = logging.getLogger(__name__)

FORMAT_VERSION = "2.0"

SCHEMA = """
CREATE TABLE IF NOT EXISTS group_analysis (
    analysis_id TEXT PRIMARY KEY,
    group_id TEXT NOT NULL,
    window_start TEXT NOT NULL,
    payload TEXT NOT NULL,
    created_at TEXT NOT NULL,
    version TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_group_analysis_group
    ON group_analysis (group_id, window_start);
"""


def make_analysis_id(group_id: str, window_start: date) -> str:
    """Build the storage key of a group's analysis window."""
    return f"{group_id}_{window_start.isoformat()}_analysis"


class AnalysisStore:
    """SQLite-backed store for cross-analysis results."""

    def __init__(self, db_path: Union[str, Path], timeout: int = 30):
        """Initialize store settings; the connection opens lazily."""
        self.db_path = Path(db_path).expanduser()
        self.timeout = timeout
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the database and create the schema if needed."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(
                str(self.db_path),
                timeout=self.timeout,
                check_same_thread=False,
            )
            self._connection.executescript(SCHEMA)
            self._connection.commit()
            logger.info(f"Analysis store initialized: {self.db_path}")

        except (sqlite3.Error, OSError) as e:
            raise StorageError(
                f"Failed to initialize analysis store: {e}", {"path": str(self.db_path)}
            )

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.info("Analysis store closed")

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[sqlite3.Connection, None]:
        """Get database connection with async context manager."""
        async with self._lock:
            if not self._connection:
                await self.initialize()
            yield self._connection

    async def execute_query(
        self, query: str, params: Optional[Tuple[Any, ...]] = None
    ) -> List[Dict[str, Any]]:
        """Execute a query and return rows as dictionaries."""
        async with self.get_connection() as conn:
            try:
                cursor = conn.execute(query, params or ())
                rows = cursor.fetchall()
                columns = [desc[0] for desc in cursor.description] if cursor.description else []
                return [dict(zip(columns, row)) for row in rows]

            except sqlite3.Error as e:
                logger.error(f"Query execution failed: {e}")
                raise StorageError(f"Query failed: {e}")

    async def save_result(
        self, group_id: str, window_start: date, result: CrossAnalysisResult
    ) -> str:
        """
        Store the result of one analysis run.

        Args:
            group_id: Group identifier
            window_start: First day of the analysis window
            result: The analysis result

        Returns:
            The analysis id the result is stored under
        """
        analysis_id = make_analysis_id(group_id, window_start)
        payload = json.dumps(result.to_payload(), sort_keys=True, ensure_ascii=False)
        created_at = datetime.now(timezone.utc).isoformat()

        async with self.get_connection() as conn:
            try:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO group_analysis
                        (analysis_id, group_id, window_start, payload, created_at, version)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        analysis_id,
                        group_id,
                        window_start.isoformat(),
                        payload,
                        created_at,
                        FORMAT_VERSION,
                    ),
                )
                conn.commit()
            except sqlite3.Error as e:
                logger.error(f"Failed to save analysis {analysis_id}: {e}")
                raise StorageError(
                    f"Failed to save analysis: {e}", {"analysis_id": analysis_id}
                )

        logger.info(f"Stored analysis {analysis_id}")
        return analysis_id

    async def get_result(
        self, group_id: str, window_start: date
    ) -> Optional[CrossAnalysisResult]:
        """Load a stored result, or None if the window was never analyzed."""
        analysis_id = make_analysis_id(group_id, window_start)
        rows = await self.execute_query(
            "SELECT payload FROM group_analysis WHERE analysis_id = ?", (analysis_id,)
        )
        if not rows:
            return None

        try:
            return CrossAnalysisResult.model_validate(json.loads(rows[0]["payload"]))
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(
                f"Stored analysis {analysis_id} is corrupt: {e}", {"analysis_id": analysis_id}
            )

    async def list_analyses(self, group_id: str) -> List[StoredAnalysisSummary]:
        """List a group's stored analyses, most recent window first."""
        rows = await self.execute_query(
            """
            SELECT analysis_id, group_id, window_start, created_at, version
            FROM group_analysis
            WHERE group_id = ?
            ORDER BY window_start DESC
            """,
            (group_id,),
        )
        return [StoredAnalysisSummary(**row) for row in rows]

    async def check_schema(self) -> Dict[str, Any]:
        """Validate the store schema and return available tables."""
        tables = await self.execute_query(
            """
            SELECT name, type
            FROM sqlite_master
            WHERE type IN ('table', 'index')
            AND name NOT LIKE 'sqlite_%'
            ORDER BY type, name
            """
        )
        table_names = {t["name"] for t in tables if t["type"] == "table"}
        missing = {"group_analysis"} - table_names

        return {
            "tables": sorted(table_names),
            "indices": [t["name"] for t in tables if t["type"] == "index"],
            "missing_required": sorted(missing),
            "schema_valid": len(missing) == 0,
        }

    async def get_stats(self) -> Dict[str, Any]:
        """Get store statistics."""
        stats: Dict[str, Any] = {}

        version_result = await self.execute_query("SELECT sqlite_version() AS version")
        stats["sqlite_version"] = version_result[0]["version"] if version_result else "unknown"

        counts = await self.execute_query(
            """
            SELECT COUNT(*) AS analysis_count, COUNT(DISTINCT group_id) AS group_count
            FROM group_analysis
            """
        )
        stats["analysis_count"] = counts[0]["analysis_count"] if counts else 0
        stats["group_count"] = counts[0]["group_count"] if counts else 0

        stats["size_bytes"] = self.db_path.stat().st_size if self.db_path.exists() else 0
        stats["size_mb"] = round(stats["size_bytes"] / (1024 * 1024), 2)

        return stats


# Open stores, one per resolved path
_stores: Dict[str, AnalysisStore] = {}


async def get_store(store_path: Optional[str] = None) -> AnalysisStore:
    """Get or create the store for a path (the configured path by default)."""
    from .config import get_config

    config = get_config()
    path = Path(store_path or config.storage.path).expanduser()
    key = str(path.resolve())

    store = _stores.get(key)
    if store is None:
        store = AnalysisStore(path, timeout=config.storage.timeout_seconds)
        await store.initialize()
        _stores[key] = store

    return store


async def close_store() -> None:
    """Close every open store."""
    for store in list(_stores.values()):
        await store.close()
    _stores.clear()

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from smartcheck.errors import StorageError
from smartcheck.findings.models import Finding

logger = logging.getLogger(__name__)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class HistoryRecord:
    id: int
    source_code: str
    results: list[Finding]
    user_id: str
    created_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceCode": self.source_code,
            "results": [f.to_dict() for f in self.results],
            "createdAt": self.created_at,
        }


class HistoryStore:
    """Per-user analysis history in a local sqlite database."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        try:
            if str(db_path) != ":memory:":
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open history database {db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row

    def __enter__(self) -> "HistoryStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    def init_schema(self) -> None:
        try:
            self.conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS analysis_results (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    source_code TEXT NOT NULL,
                    results TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_analysis_results_user
                    ON analysis_results(user_id, created_at);
                """
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialize schema: {e}") from e

    def save_analysis(self, source_code: str, findings: Sequence[Finding], user_id: str) -> int:
        payload = json.dumps([f.to_dict() for f in findings])
        try:
            cursor = self.conn.execute(
                """
                INSERT INTO analysis_results (source_code, results, user_id, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (source_code, payload, str(user_id), utc_now()),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot save analysis for user {user_id}: {e}") from e
        logger.debug("Stored analysis %s for user %s", cursor.lastrowid, user_id)
        return int(cursor.lastrowid)

    def list_history(self, user_id: str) -> list[HistoryRecord]:
        """Stored analyses of one user, newest first."""
        try:
            rows = self.conn.execute(
                """
                SELECT id, source_code, results, user_id, created_at
                FROM analysis_results
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (str(user_id),),
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read history for user {user_id}: {e}") from e
        return [
            HistoryRecord(
                id=int(row["id"]),
                source_code=row["source_code"],
                results=[Finding.from_dict(d) for d in json.loads(row["results"])],
                user_id=row["user_id"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

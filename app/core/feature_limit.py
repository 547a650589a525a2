from __future__ import annotations

import os
import sqlite3
import threading
import time

from app.core.config import settings

DAY_SECONDS = 24 * 60 * 60

_conn: sqlite3.Connection | None = None
_conn_lock = threading.Lock()


class FeatureLimitExceeded(Exception):
    def __init__(self, feature: str, limit: int):
        super().__init__(f"Daily limit of {limit} reached for '{feature}'.")
        self.feature = feature
        self.limit = limit


def _get_connection() -> sqlite3.Connection:
    global _conn
    with _conn_lock:
        if _conn is not None:
            return _conn

        db_path = settings.feature_limit_db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        _conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        _conn.execute("PRAGMA journal_mode=WAL;")
        _conn.execute("PRAGMA synchronous=NORMAL;")
        _conn.execute("PRAGMA busy_timeout=5000;")
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS feature_usage_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                client_key TEXT NOT NULL,
                feature TEXT NOT NULL,
                created_at REAL NOT NULL
            );
            """
        )
        _conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_feature_usage_lookup
            ON feature_usage_events (client_key, feature, created_at);
            """
        )
        return _conn


def feature_daily_limit(feature: str) -> int:
    if feature == "score_optimized":
        return settings.feature_limit_optimized_per_day
    return settings.feature_limit_score_per_day


def enforce_feature_limit(client_key: str, feature: str, window_seconds: int = DAY_SECONDS) -> None:
    """Record one use of ``feature`` or raise when the rolling window is full. A limit of 0 disables it."""
    limit = feature_daily_limit(feature)
    if limit <= 0:
        return

    now = time.time()
    cutoff = now - window_seconds
    conn = _get_connection()

    with _conn_lock:
        cursor = conn.cursor()
        cursor.execute("BEGIN IMMEDIATE")
        try:
            cursor.execute("DELETE FROM feature_usage_events WHERE created_at < ?", (cutoff,))
            cursor.execute(
                """
                SELECT COUNT(1)
                FROM feature_usage_events
                WHERE client_key = ? AND feature = ? AND created_at >= ?
                """,
                (client_key, feature, cutoff),
            )
            count = int(cursor.fetchone()[0] or 0)
            if count >= limit:
                conn.rollback()
                raise FeatureLimitExceeded(feature, limit)

            cursor.execute(
                """
                INSERT INTO feature_usage_events (client_key, feature, created_at)
                VALUES (?, ?, ?)
                """,
                (client_key, feature, now),
            )
            conn.commit()
        except FeatureLimitExceeded:
            raise
        except Exception:
            conn.rollback()
            raise


def clear_feature_limit_events() -> None:
    conn = _get_connection()
    with _conn_lock:
        conn.execute("DELETE FROM feature_usage_events")
        conn.commit()

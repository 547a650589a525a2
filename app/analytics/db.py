from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.core.config import settings


def _utc_now() -> str:
    # Same layout as sqlite datetime() so retention comparisons work as strings.
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS llm_calls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                stage TEXT NOT NULL,
                variant TEXT NOT NULL,
                model TEXT NOT NULL,
                status TEXT NOT NULL,
                error_code TEXT,
                latency_ms INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS scoring_results (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                variant TEXT NOT NULL,
                outcome TEXT NOT NULL,
                score INTEGER NOT NULL,
                matched_count INTEGER NOT NULL,
                missing_count INTEGER NOT NULL,
                latency_ms INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_llm_calls_created_at
            ON llm_calls (created_at)
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_scoring_results_created_at
            ON scoring_results (created_at)
            """
        )
        conn.commit()
    purge_old_records()


def log_llm_call(
    *,
    run_id: str,
    stage: str,
    variant: str,
    model: str,
    status: str,
    error_code: str | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO llm_calls (
                created_at, run_id, stage, variant, model, status, error_code, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                run_id,
                stage,
                variant,
                model,
                status,
                error_code,
                latency_ms,
            ),
        )
        conn.commit()


def log_scoring_result(
    *,
    variant: str,
    outcome: str,
    score: int,
    matched_count: int,
    missing_count: int,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO scoring_results (
                created_at, variant, outcome, score, matched_count, missing_count, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                variant,
                outcome,
                score,
                matched_count,
                missing_count,
                latency_ms,
            ),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"llm_calls": 0, "scoring_results": 0}

    db_path = _get_db_path()
    retention = max(1, int(settings.analytics_retention_days))

    deleted = {"llm_calls": 0, "scoring_results": 0}
    with sqlite3.connect(db_path) as conn:
        for table in ("llm_calls", "scoring_results"):
            cur = conn.execute(
                f"DELETE FROM {table} WHERE created_at < datetime('now', ?)",
                (f"-{retention} days",),
            )
            deleted[table] = int(cur.rowcount or 0)
        conn.commit()

    return deleted


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute("SELECT COUNT(*) FROM scoring_results")
        total = cur.fetchone()[0]
        cur = conn.execute(
            """
            SELECT COUNT(*)
            FROM scoring_results
            WHERE created_at >= datetime('now', '-7 days')
            """
        )
        total_7d = cur.fetchone()[0]
        cur = conn.execute(
            """
            SELECT variant, COUNT(*) AS runs, AVG(score) AS avg_score
            FROM scoring_results
            GROUP BY variant
            """
        )
        by_variant = [_row_to_dict(cur, row) for row in cur.fetchall()]
        cur = conn.execute(
            """
            SELECT status, COUNT(*) AS calls
            FROM llm_calls
            GROUP BY status
            """
        )
        llm_status = {row[0]: row[1] for row in cur.fetchall()}
    return {
        "enabled": True,
        "total": total,
        "total_7d": total_7d,
        "by_variant": by_variant,
        "llm_calls_by_status": llm_status,
    }


def get_latest(limit: int = 20) -> list[dict[str, Any]]:
    if not settings.analytics_enabled:
        return []
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            """
            SELECT created_at, variant, outcome, score, matched_count, missing_count, latency_ms
            FROM scoring_results
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = cur.fetchall()
        return [_row_to_dict(cur, row) for row in rows]

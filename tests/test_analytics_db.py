import sqlite3
import sys
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analytics import db as analytics_db  # noqa: E402


class AnalyticsDbTests(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.settings = SimpleNamespace(
            analytics_enabled=True,
            analytics_db_path=str(Path(self.tmp_dir.name) / "analytics.db"),
            analytics_retention_days=90,
        )
        self.patcher = patch.object(analytics_db, "settings", self.settings)
        self.patcher.start()
        analytics_db.init_db()

    def tearDown(self):
        self.patcher.stop()
        self.tmp_dir.cleanup()

    def test_creates_call_and_result_tables(self):
        with sqlite3.connect(self.settings.analytics_db_path) as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}

        self.assertTrue({"llm_calls", "scoring_results"} <= tables)

    def test_summary_counts_results_and_calls(self):
        analytics_db.log_llm_call(
            run_id="run-1", stage="extract", variant="shared", model="fake", status="success", latency_ms=12
        )
        analytics_db.log_llm_call(
            run_id="run-2",
            stage="evaluate",
            variant="first_pass",
            model="fake",
            status="error",
            error_code="llm_exception",
        )
        analytics_db.log_scoring_result(
            variant="first_pass", outcome="scored", score=72, matched_count=4, missing_count=2, latency_ms=900
        )

        summary = analytics_db.get_summary()

        self.assertTrue(summary["enabled"])
        self.assertEqual(summary["total"], 1)
        self.assertEqual(summary["total_7d"], 1)
        self.assertEqual(summary["llm_calls_by_status"], {"success": 1, "error": 1})
        self.assertEqual(summary["by_variant"][0]["variant"], "first_pass")

    def test_latest_is_newest_first(self):
        for score in (10, 20, 30):
            analytics_db.log_scoring_result(
                variant="optimized", outcome="scored", score=score, matched_count=0, missing_count=0
            )

        latest = analytics_db.get_latest(limit=2)

        self.assertEqual([row["score"] for row in latest], [30, 20])

    def test_purge_keeps_recent_rows(self):
        analytics_db.log_scoring_result(
            variant="first_pass", outcome="scored", score=50, matched_count=1, missing_count=1
        )

        deleted = analytics_db.purge_old_records()

        self.assertEqual(deleted, {"llm_calls": 0, "scoring_results": 0})
        self.assertEqual(analytics_db.get_summary()["total"], 1)

    def test_disabled_analytics_is_a_no_op(self):
        self.settings.analytics_enabled = False

        analytics_db.log_scoring_result(
            variant="first_pass", outcome="scored", score=50, matched_count=1, missing_count=1
        )

        self.assertEqual(analytics_db.get_summary(), {"enabled": False})
        self.assertEqual(analytics_db.get_latest(), [])


if __name__ == "__main__":
    unittest.main()

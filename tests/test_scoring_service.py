import asyncio
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.models import MatchResult  # noqa: E402
from app.services import scoring_service  # noqa: E402
from app.services.scoring_service import ScoringInputError, extract_resume_text, run_scoring  # noqa: E402

RESUME = "Airfield design engineer with AutoCAD, Civil 3D and ICAO standards experience on live projects."


class ExtractResumeTextTests(unittest.TestCase):
    def test_returns_text_for_valid_upload(self):
        self.assertEqual(extract_resume_text("resume.txt", RESUME.encode("utf-8"), "text/plain"), RESUME)

    def test_short_resume_is_rejected(self):
        with self.assertRaises(ScoringInputError) as ctx:
            extract_resume_text("resume.txt", b"Too short to score.", "text/plain")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_unsupported_type(self):
        with self.assertRaises(ScoringInputError) as ctx:
            extract_resume_text("resume.png", b"\x89PNG....", "image/png")
        self.assertEqual(ctx.exception.status_code, 415)

    def test_failed_extraction(self):
        with self.assertRaises(ScoringInputError) as ctx:
            extract_resume_text("resume.pdf", b"not a pdf at all", "application/pdf")
        self.assertEqual(ctx.exception.status_code, 422)

    def test_oversized_upload(self):
        fake_settings = SimpleNamespace(max_upload_mb=1, scoring_request_timeout_s=45.0)
        with patch.object(scoring_service, "settings", fake_settings):
            with self.assertRaises(ScoringInputError) as ctx:
                extract_resume_text("resume.txt", b"a" * (1024 * 1024 + 1), "text/plain")
        self.assertEqual(ctx.exception.status_code, 413)


class RunScoringTests(unittest.IsolatedAsyncioTestCase):
    async def test_dispatches_by_variant(self):
        first = AsyncMock(return_value=MatchResult(score=70))
        optimized = AsyncMock(return_value=MatchResult(score=90))
        with patch.object(scoring_service, "score_resume", first), patch.object(
            scoring_service, "score_optimized_resume", optimized
        ):
            self.assertEqual((await run_scoring(RESUME, "job text", "first_pass")).score, 70)
            self.assertEqual((await run_scoring(RESUME, "job text", "optimized")).score, 90)

        first.assert_awaited_once_with(RESUME, "job text")
        optimized.assert_awaited_once_with(RESUME, "job text")

    async def test_timeout_maps_to_408(self):
        async def slow_scorer(resume_text, job_description):
            await asyncio.sleep(1)
            return MatchResult(score=50)

        fake_settings = SimpleNamespace(max_upload_mb=10, scoring_request_timeout_s=0.01)
        with patch.object(scoring_service, "settings", fake_settings), patch.object(
            scoring_service, "score_resume", slow_scorer
        ):
            with self.assertRaises(ScoringInputError) as ctx:
                await run_scoring(RESUME, "job text")

        self.assertEqual(ctx.exception.status_code, 408)


if __name__ == "__main__":
    unittest.main()

import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.fakes import FakeCompletionClient  # noqa: E402

from app.scoring.extractor import (  # noqa: E402
    apply_soft_skill_backstop,
    extract_profile_and_requirements,
    needs_soft_skill_backstop,
)

JOB_TEXT = "Airfield design engineer. Must know AutoCAD and ICAO standards. 5+ years experience."


class SoftSkillBackstopTests(unittest.TestCase):
    def test_trigger_conditions(self):
        self.assertTrue(needs_soft_skill_backstop(["Python"]))
        self.assertTrue(needs_soft_skill_backstop(["Python", "SQL", "Docker", "AWS", "Terraform", "Linux"]))
        self.assertFalse(
            needs_soft_skill_backstop(["Python", "SQL", "Docker", "AWS", "Terraform", "Team Leadership"])
        )

    def test_appends_terms_found_in_resume(self):
        resume = "Strong communication skills and teamwork. Problem solving under pressure."
        self.assertEqual(
            apply_soft_skill_backstop(["Python"], resume),
            ["Python", "Communication Skills", "Teamwork", "Problem Solving"],
        )

    def test_skips_terms_contained_in_extracted_skills(self):
        resume = "Excellent communication skills and leadership."
        skills = apply_soft_skill_backstop(["Written Communication Skills", "Team Leadership"], resume)
        self.assertEqual(skills, ["Written Communication Skills", "Team Leadership"])

    def test_shorter_extracted_skill_does_not_hide_term(self):
        resume = "Excellent communication skills and leadership."
        skills = apply_soft_skill_backstop(["Communication", "Leadership"], resume)
        self.assertEqual(skills, ["Communication", "Leadership", "Communication Skills"])


class ExtractorTests(unittest.IsolatedAsyncioTestCase):
    async def test_returns_empty_records_on_upstream_failure(self):
        client = FakeCompletionClient(TimeoutError("upstream timed out"))

        profile, requirements = await extract_profile_and_requirements(client, "Resume text", JOB_TEXT)

        self.assertTrue(profile.is_empty)
        self.assertEqual(requirements.vocabulary(), [])

    async def test_returns_empty_records_on_invalid_json(self):
        client = FakeCompletionClient("this is not json")

        profile, requirements = await extract_profile_and_requirements(client, "Resume text", JOB_TEXT)

        self.assertTrue(profile.is_empty)
        self.assertEqual(requirements.required_skills, [])

    async def test_preprocesses_inputs_before_the_call(self):
        client = FakeCompletionClient({"resume_summary": "Engineer with airfield background."})
        resume = "Jane Doe jane@example.com\n" + ("Designed airfield pavements. " * 300)

        await extract_profile_and_requirements(client, resume, JOB_TEXT)

        call = client.calls[0]
        user_message = call["messages"][1].content
        self.assertIn("[EMAIL]", user_message)
        self.assertNotIn("jane@example.com", user_message)
        self.assertLess(len(user_message), 4000 + len(JOB_TEXT) + 200)
        self.assertEqual(call["temperature"], 0.1)
        self.assertEqual(call["max_tokens"], 2500)

    async def test_caps_lists_and_applies_backstop(self):
        client = FakeCompletionClient(
            {
                "resume_summary": "Airfield engineer with eight years of design work.",
                "resume_skills": ["AutoCAD", "Civil 3D"],
                "resume_experience": "Live airfield projects.",
                "job_required_skills": [f"Requirement {index}" for index in range(20)],
                "job_preferred_skills": ["Revit"],
                "job_keywords": ["airfield", "airfield", "pavement"],
                "experience_level": "5+ years",
            }
        )
        resume = "AutoCAD and Civil 3D. Known for teamwork and time management on site."

        profile, requirements = await extract_profile_and_requirements(client, resume, JOB_TEXT)

        self.assertEqual(profile.skills, ["AutoCAD", "Civil 3D", "Teamwork", "Time Management"])
        self.assertEqual(len(requirements.required_skills), 15)
        self.assertEqual(requirements.keywords, ["airfield", "pavement"])
        self.assertEqual(requirements.experience_level, "5+ years")


if __name__ == "__main__":
    unittest.main()

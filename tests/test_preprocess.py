import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.preprocess import preprocess_text  # noqa: E402


class PreprocessTextTests(unittest.TestCase):
    def test_redacts_contact_details(self):
        text = "Contact jane.doe@example.com or +1 (555) 123-4567. Portfolio: https://github.com/jane"
        cleaned = preprocess_text(text, 4000)

        self.assertIn("[EMAIL]", cleaned)
        self.assertIn("[PHONE]", cleaned)
        self.assertIn("[URL]", cleaned)
        self.assertNotIn("jane.doe", cleaned)
        self.assertNotIn("555", cleaned)
        self.assertNotIn("github", cleaned)

    def test_drops_noise_characters_and_collapses_spaces(self):
        self.assertEqual(preprocess_text("Skills: C# • Python ★ SQL", 4000), "Skills: C Python SQL")

    def test_limits_blank_lines(self):
        self.assertEqual(preprocess_text("Summary\n\n\n\n\nExperience", 4000), "Summary\n\nExperience")

    def test_truncates_to_max_length(self):
        self.assertEqual(len(preprocess_text("x" * 5000, 4000)), 4000)
        self.assertEqual(len(preprocess_text("y" * 3000, 2500)), 2500)

    def test_empty_input(self):
        self.assertEqual(preprocess_text("", 4000), "")
        self.assertEqual(preprocess_text("   \n\t ", 4000), "")

    def test_idempotent(self):
        samples = [
            "Jane Doe | jane@x.io | +1 555 123 4567 | www.jane.dev\n\n\n\nPython, SQL & AWS",
            "Tel: 555*123*4567   ext",
            "  Led   a team of 12 (onsite) -- delivered [3] projects;  ",
        ]
        for sample in samples:
            once = preprocess_text(sample, 4000)
            self.assertEqual(preprocess_text(once, 4000), once, sample)


if __name__ == "__main__":
    unittest.main()

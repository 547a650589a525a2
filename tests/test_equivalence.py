import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.equivalence import (  # noqa: E402
    are_equivalent_skills,
    has_token_overlap,
    is_direct_match,
    is_known_synonym,
    is_normalized_match,
    significant_words,
)


class SkillEquivalenceTests(unittest.TestCase):
    def test_direct_match_is_case_insensitive_substring(self):
        self.assertTrue(is_direct_match("Python", "python 3"))
        self.assertTrue(is_direct_match("  SQL ", "sql"))
        self.assertFalse(is_direct_match("", "sql"))

    def test_normalized_match_ignores_spacing_and_punctuation(self):
        self.assertTrue(is_normalized_match("Node.js", "NodeJS"))
        self.assertTrue(is_normalized_match("Civil 3D", "Civil3D"))
        self.assertFalse(is_normalized_match("Java", "JavaFX"))

    def test_significant_words_skip_short_and_stopwords(self):
        self.assertEqual(significant_words("Management of Complex Projects"), ["management", "complex", "projects"])
        self.assertEqual(significant_words("UI and UX"), [])

    def test_token_overlap_needs_two_shared_words(self):
        self.assertTrue(has_token_overlap("Project Management Skills", "Management of Complex Projects"))
        self.assertFalse(has_token_overlap("Data Analysis", "Python"))
        self.assertFalse(has_token_overlap("Stakeholder Management", "Risk Management"))

    def test_known_synonyms_work_in_both_directions(self):
        self.assertTrue(is_known_synonym("Client Facing", "Client Relationship Management"))
        self.assertTrue(is_known_synonym("Client Relationship Management", "Client Facing"))
        self.assertTrue(is_known_synonym("Planning and Organisational Skills", "Planning & Organizational"))

    def test_layered_equivalence(self):
        self.assertTrue(are_equivalent_skills("Communication", "Excellent Communication Skills"))
        self.assertTrue(are_equivalent_skills("Client Facing", "Client Relationship Management"))
        self.assertFalse(are_equivalent_skills("AutoCAD", "Revit"))


if __name__ == "__main__":
    unittest.main()

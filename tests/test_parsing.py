import sys
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document  # noqa: E402

from app.parsing.parse import UnsupportedDocumentError, detect_source_type, parse_upload  # noqa: E402


class UploadParsingTests(unittest.TestCase):
    def test_parse_txt_returns_stable_parsed_doc(self):
        content = "Line one\n- Bullet item\nLine three"

        parsed = parse_upload("resume.txt", content.encode("utf-8"), "text/plain")

        self.assertEqual(parsed.source_type, "txt")
        self.assertEqual(parsed.text, content)
        self.assertEqual(parsed.doc_id, parse_upload("copy.txt", content.encode("utf-8")).doc_id)
        self.assertEqual(parsed.parsing_warnings, [])

    def test_parse_docx_paragraphs(self):
        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("")
        document.add_paragraph("Airfield design engineer")
        buffer = BytesIO()
        document.save(buffer)

        parsed = parse_upload("resume.docx", buffer.getvalue(), "application/octet-stream")

        self.assertEqual(parsed.source_type, "docx")
        self.assertEqual(parsed.text, "Jane Doe\nAirfield design engineer")
        self.assertEqual(len(parsed.blocks), 2)

    def test_broken_pdf_reports_failed_extraction(self):
        parsed = parse_upload("resume.pdf", b"definitely not a pdf", "application/pdf")

        self.assertEqual(parsed.source_type, "pdf")
        self.assertEqual(parsed.text, "")
        self.assertTrue(parsed.extraction_failed)

    def test_detects_type_from_content_type_then_extension(self):
        self.assertEqual(detect_source_type("upload", "application/pdf"), "pdf")
        self.assertEqual(detect_source_type("resume.PDF", "application/octet-stream"), "pdf")
        self.assertEqual(detect_source_type("resume.txt", "text/plain; charset=utf-8"), "txt")

    def test_unsupported_type_raises(self):
        with self.assertRaises(UnsupportedDocumentError):
            parse_upload("photo.png", b"\x89PNG", "image/png")


if __name__ == "__main__":
    unittest.main()

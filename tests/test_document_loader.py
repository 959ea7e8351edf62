"""
Tests for turning uploaded files into Documents.
"""

import pytest

from matcher import document_loader
from matcher.document_loader import load_document, load_documents
from shared.exceptions import DocumentLoadError


class FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class FakePdf:
    def __init__(self, texts):
        self.pages = [FakePage(t) for t in texts]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class TestLoadDocument:
    """Test loading individual files."""

    def test_text_file(self, tmp_path):
        path = tmp_path / "job.txt"
        path.write_text("Senior Go developer wanted")

        doc = load_document(path)

        assert doc.display_name == "job.txt"
        assert doc.text == "Senior Go developer wanted"
        assert doc.id

    def test_pdf_pages_joined(self, tmp_path, monkeypatch):
        path = tmp_path / "resume.pdf"
        path.write_bytes(b"%PDF-1.4")
        monkeypatch.setattr(
            document_loader.pdfplumber, "open", lambda p: FakePdf(["Page one", None, "Page three"])
        )

        doc = load_document(path)

        assert doc.text == "Page one  Page three"

    def test_unparseable_pdf(self, tmp_path, monkeypatch):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"garbage")

        def explode(p):
            raise ValueError("not a PDF")

        monkeypatch.setattr(document_loader.pdfplumber, "open", explode)

        with pytest.raises(DocumentLoadError, match="broken.pdf"):
            load_document(path)

    def test_scanned_pdf_without_text(self, tmp_path, monkeypatch):
        path = tmp_path / "scan.pdf"
        path.write_bytes(b"%PDF-1.4")
        monkeypatch.setattr(document_loader.pdfplumber, "open", lambda p: FakePdf([None, ""]))

        with pytest.raises(DocumentLoadError, match="text-based"):
            load_document(path)

    def test_yaml_cv_flattened(self, tmp_path):
        path = tmp_path / "cv.yaml"
        path.write_text(
            "name: Ada Lovelace\n"
            "skills:\n"
            "  - Python\n"
            "  - Kubernetes\n"
            "experience:\n"
            "  - company: Analytical Engines\n"
            "    title: Engineer\n"
        )

        text = load_document(path).text

        assert "**Name:** Ada Lovelace" in text
        assert "## Skills" not in text
        assert "# Skills" in text
        assert "- Python" in text
        assert "**Company:** Analytical Engines" in text

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "cv.yml"
        path.write_text("skills: [unclosed")
        with pytest.raises(DocumentLoadError):
            load_document(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="not found"):
            load_document(tmp_path / "nope.txt")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("   \n")
        with pytest.raises(DocumentLoadError):
            load_document(path)


def test_load_documents_keeps_order(tmp_path):
    paths = []
    for name in ["b.txt", "a.txt", "c.txt"]:
        path = tmp_path / name
        path.write_text(f"content of {name}")
        paths.append(path)

    docs = load_documents(paths)

    assert [d.display_name for d in docs] == ["b.txt", "a.txt", "c.txt"]
    assert len({d.id for d in docs}) == 3

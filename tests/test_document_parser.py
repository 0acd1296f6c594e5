import pytest
from langchain_core.documents import Document

from smartcompare.core.errors import DocumentDecodeError
from smartcompare.services import document_parser
from smartcompare.services.document_parser import DocumentParser


def test_text_file_is_loaded(tmp_path):
    spec_file = tmp_path / "kone_spec.txt"
    spec_file.write_text("KONE MonoSpace\nCapacity 630 KG", encoding="utf-8")
    text = DocumentParser.load_text(spec_file)
    assert "Capacity 630 KG" in text


def test_missing_file_raises_decode_error(tmp_path):
    with pytest.raises(DocumentDecodeError) as exc_info:
        DocumentParser.load_text(tmp_path / "missing.txt")
    assert exc_info.value.source_name == "missing.txt"


def test_undecodable_text_raises_decode_error(tmp_path):
    binary = tmp_path / "brochure.txt"
    binary.write_bytes(b"\xff\xfe\x00\x80\x81 not utf-8")
    with pytest.raises(DocumentDecodeError):
        DocumentParser.load_text(binary)


def test_empty_pdf_raises_decode_error(tmp_path):
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"")
    with pytest.raises(DocumentDecodeError):
        DocumentParser.load_text(broken)


def test_pdf_pages_are_joined_with_newlines(tmp_path, monkeypatch):
    class FakePDFLoader:
        def __init__(self, path):
            self.path = path

        def load(self):
            return [Document(page_content="Page one"), Document(page_content="Page two")]

    monkeypatch.setattr(document_parser, "PyPDFLoader", FakePDFLoader)
    pdf = tmp_path / "otis.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    assert DocumentParser.load_text(pdf) == "Page one\nPage two"


def test_save_upload_writes_into_upload_dir(tmp_path):
    target = DocumentParser.save_upload(tmp_path / "uploads", "../offer.txt", b"Stops: 6")
    assert target == tmp_path / "uploads" / "offer.txt"
    assert target.read_bytes() == b"Stops: 6"

import io
from unittest.mock import patch

import pytest
from fastapi import UploadFile
from langchain_core.documents import Document
from starlette.datastructures import Headers

from app.services.upload_service import UnsupportedFileTypeError, store_upload, stored_name
from app.utils.file_processing import (
    DocumentKind,
    UnsupportedDocumentError,
    detect_document_kind,
    extract_text,
)

def make_upload(filename, content, content_type):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )

class TestDocumentKind:
    @pytest.mark.parametrize(
        "filename, kind",
        [
            ("notes.pdf", DocumentKind.PDF),
            ("NOTES.PDF", DocumentKind.PDF),
            ("notes.txt", DocumentKind.PLAIN_TEXT),
            ("Notes.Txt", DocumentKind.PLAIN_TEXT),
            ("notes.docx", DocumentKind.UNSUPPORTED),
            ("notes.doc", DocumentKind.UNSUPPORTED),
            ("notes", DocumentKind.UNSUPPORTED),
        ],
    )
    def test_detect(self, filename, kind):
        assert detect_document_kind(filename) is kind

class TestExtractText:
    def test_text_round_trip(self, tmp_path):
        content = "Photosynthesis converts light energy into chemical energy.\nLine two."
        path = tmp_path / "bio.txt"
        path.write_text(content, encoding="utf-8")
        assert extract_text(str(path), "bio.txt") == content

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "essay.docx"
        path.write_bytes(b"PK\x03\x04")
        with pytest.raises(UnsupportedDocumentError, match="essay.docx"):
            extract_text(str(path), "essay.docx")

    def test_pdf_pages_joined_with_space(self, tmp_path):
        pages = [
            Document(page_content="  Chapter one text.\n"),
            Document(page_content="Chapter two text."),
        ]
        with patch("app.utils.file_processing.PyPDFLoader") as loader_cls:
            loader_cls.return_value.lazy_load.return_value = iter(pages)
            text = extract_text(str(tmp_path / "book.pdf"), "Book.PDF")

        loader_cls.assert_called_once_with(str(tmp_path / "book.pdf"))
        assert text == "Chapter one text. Chapter two text."

class TestStoreUpload:
    def test_stores_with_timestamp_prefix(self, tmp_path):
        upload_dir = tmp_path / "uploads"
        stored = store_upload(make_upload("notes.txt", b"hello", "text/plain"), str(upload_dir))

        assert stored.original_name == "notes.txt"
        assert stored.declared_mime_type == "text/plain"
        files = list(upload_dir.iterdir())
        assert len(files) == 1
        prefix, name = files[0].name.split("-", 1)
        assert prefix.isdigit()
        assert name == "notes.txt"
        assert files[0].read_bytes() == b"hello"

    @pytest.mark.parametrize(
        "content_type",
        [
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "text/plain; charset=utf-8",
        ],
    )
    def test_allowed_types(self, tmp_path, content_type):
        store_upload(make_upload("doc", b"x", content_type), str(tmp_path))

    @pytest.mark.parametrize("content_type", ["image/png", "application/zip", "text/html", ""])
    def test_rejected_types(self, tmp_path, content_type):
        upload_dir = tmp_path / "uploads"
        with pytest.raises(UnsupportedFileTypeError):
            store_upload(make_upload("file.bin", b"x", content_type), str(upload_dir))
        assert not upload_dir.exists()

    def test_stored_name_drops_directories(self):
        assert stored_name("../../etc/passwd", 1700000000000) == "1700000000000-passwd"
        assert stored_name("C:\\docs\\notes.txt", 42) == "42-notes.txt"

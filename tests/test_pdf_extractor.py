"""Tests for the CV text source."""
import io
from unittest import mock

import pytest

from cvalign.errors import ExtractionFailure
from cvalign.extractors.pdf_extractor import PDFExtractor
from cvalign.utils.config import Config


class NamedBytesIO(io.BytesIO):
    def __init__(self, data, name):
        super().__init__(data)
        self.name = name


@pytest.fixture
def extractor():
    return PDFExtractor(Config(config_path=None))


class TestCleanText:

    def test_keeps_section_breaks(self):
        text = "Jane Roe\r\n\r\nSKILLS\n  Python,\t\tDocker\n   \nEDUCATION"

        assert PDFExtractor.clean_text(text) == "Jane Roe\n\nSKILLS\n Python, Docker\n\nEDUCATION"

    def test_collapses_long_gaps(self):
        assert PDFExtractor.clean_text("a\n\n\n\n\nb") == "a\n\nb"

    def test_drops_non_printable(self):
        assert PDFExtractor.clean_text("Jane\x00 Roe\x07") == "Jane Roe"


class TestReadText:

    def test_plain_text_upload(self, extractor):
        upload = NamedBytesIO("Jane Roe\n\nSKILLS\nPython".encode('utf-8'), "jane.TXT")

        assert extractor.read_text(upload) == "Jane Roe\n\nSKILLS\nPython"

    def test_empty_text_upload(self, extractor):
        with pytest.raises(ExtractionFailure):
            extractor.read_text(NamedBytesIO(b"  \n ", "blank.txt"))

    def test_pdf_falls_back_to_pdfplumber(self, extractor):
        with mock.patch.object(extractor, 'extract_with_pypdf2', return_value=("", False)), \
                mock.patch.object(extractor, 'extract_with_pdfplumber',
                                  return_value=("Jane Roe\n\nSKILLS\nPython", True)) as plumber:
            text = extractor.read_text(NamedBytesIO(b"%PDF-1.4", "jane.pdf"))

        assert text == "Jane Roe\n\nSKILLS\nPython"
        plumber.assert_called_once()

    def test_unreadable_pdf(self, extractor):
        with mock.patch.object(extractor, 'extract_with_pypdf2', return_value=("", False)), \
                mock.patch.object(extractor, 'extract_with_pdfplumber', return_value=("", False)):
            with pytest.raises(ExtractionFailure):
                extractor.read_text(NamedBytesIO(b"%PDF-1.4", "scan.pdf"))

    def test_garbage_bytes_fail_every_method(self, extractor):
        text, method = extractor.extract_with_fallback(io.BytesIO(b"not a pdf"), "junk.pdf")

        assert (text, method) == ("", "none")


class TestFallbackChain:

    def test_ocr_only_when_enabled(self):
        extractor = PDFExtractor(Config(config_path=None), enable_ocr=True)

        with mock.patch.object(extractor, 'extract_with_pypdf2', return_value=("", False)), \
                mock.patch.object(extractor, 'extract_with_pdfplumber', return_value=("", False)), \
                mock.patch.object(extractor, 'extract_with_ocr', return_value=("scanned text", True)):
            assert extractor.extract_with_fallback(io.BytesIO(b""), "scan.pdf") == ("scanned text", "OCR")

    def test_ocr_skipped_when_disabled(self, extractor):
        with mock.patch.object(extractor, 'extract_with_pypdf2', return_value=("", False)), \
                mock.patch.object(extractor, 'extract_with_pdfplumber', return_value=("", False)), \
                mock.patch.object(extractor, 'extract_with_ocr') as ocr:
            extractor.extract_with_fallback(io.BytesIO(b""), "scan.pdf")

        ocr.assert_not_called()


class TestCollectPages:

    def test_failing_page_is_skipped(self, extractor):
        def broken():
            raise ValueError("bad xref")

        pages = [lambda: "Jane Roe " * 10, broken, lambda: "SKILLS Python"]

        text, success = extractor._collect("PyPDF2", "jane.pdf", pages)

        assert success
        assert text.endswith("\nSKILLS Python")

    def test_short_text_is_not_a_success(self, extractor):
        text, success = extractor._collect("PyPDF2", "jane.pdf", [lambda: "Jane"])

        assert (text, success) == ("Jane", False)

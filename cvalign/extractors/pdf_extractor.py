"""
CV text source with a PDF fallback chain.

PDFs are read with PyPDF2, then pdfplumber, then Tesseract OCR when it is
enabled and installed. The first backend that yields enough text wins.
Plain-text uploads are decoded directly.
"""
import logging
import re
import time
from io import BytesIO
from typing import Any, Callable, Iterable, List, Tuple

import pdfplumber
import PyPDF2

from ..errors import ExtractionFailure

logger = logging.getLogger(__name__)

try:
    from pdf2image import convert_from_bytes
    import pytesseract
    OCR_AVAILABLE = True
except ImportError:
    OCR_AVAILABLE = False
    logger.info("OCR extras not installed; scanned PDFs will not be read")

MIN_TEXT_LENGTH = 50
OCR_DPI = 300


def _pypdf2_pages(file_bytes: BytesIO) -> Iterable[Callable[[], str]]:
    reader = PyPDF2.PdfReader(file_bytes)
    for page in reader.pages:
        yield page.extract_text


def _ocr_pages(file_bytes: BytesIO) -> Iterable[Callable[[], str]]:
    images = convert_from_bytes(file_bytes.read(), dpi=OCR_DPI, fmt='jpeg', thread_count=2)
    for image in images:
        yield lambda image=image: pytesseract.image_to_string(image, lang='eng')


class PDFExtractor:
    """Read CV uploads into text, keeping line structure for section parsing."""

    def __init__(self, config, enable_ocr: bool = False):
        """
        Args:
            config: Configuration object
            enable_ocr: Whether to fall back to OCR for scanned PDFs
        """
        self.config = config
        self.enable_ocr = enable_ocr
        self.min_text_length = MIN_TEXT_LENGTH

    def _collect(self, method: str, filename: str, pages: Iterable[Callable[[], str]]) -> Tuple[str, bool]:
        """
        Join the text of every readable page.

        A page that fails is logged and skipped; the result counts as a
        success only when it reaches ``min_text_length`` characters.
        """
        parts: List[str] = []
        for page_num, read_page in enumerate(pages):
            try:
                page_text = read_page()
            except Exception as e:
                logger.warning(f"{method} page {page_num} error in {filename}: {str(e)}")
                continue
            if page_text:
                parts.append(page_text)

        text = "\n".join(parts)
        success = len(text) >= self.min_text_length
        if success:
            logger.info(f"{method} extracted {len(text)} chars from {filename}")
        return text, success

    def extract_with_pypdf2(self, file_bytes: BytesIO, filename: str) -> Tuple[str, bool]:
        try:
            file_bytes.seek(0)
            return self._collect("PyPDF2", filename, _pypdf2_pages(file_bytes))
        except Exception as e:
            logger.error(f"PyPDF2 failed for {filename}: {str(e)}")
            return "", False

    def extract_with_pdfplumber(self, file_bytes: BytesIO, filename: str) -> Tuple[str, bool]:
        try:
            file_bytes.seek(0)
            with pdfplumber.open(file_bytes) as pdf:
                return self._collect("pdfplumber", filename, (page.extract_text for page in pdf.pages))
        except Exception as e:
            logger.error(f"pdfplumber failed for {filename}: {str(e)}")
            return "", False

    def extract_with_ocr(self, file_bytes: BytesIO, filename: str) -> Tuple[str, bool]:
        if not OCR_AVAILABLE:
            logger.warning(f"OCR requested but not available for {filename}")
            return "", False

        try:
            file_bytes.seek(0)
            return self._collect("OCR", filename, _ocr_pages(file_bytes))
        except Exception as e:
            logger.error(f"OCR failed for {filename}: {str(e)}")
            return "", False

    @staticmethod
    def clean_text(text: str) -> str:
        """
        Normalise extracted text without flattening it.

        Line breaks and single blank lines survive because the field
        extractor finds the SKILLS and EDUCATION sections by them.
        """
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        text = ''.join(char for char in text if char.isprintable() or char in '\n\t')
        text = re.sub(r'[ \t]+', ' ', text)
        text = re.sub(r'\n[ \t]+\n', '\n\n', text)
        text = re.sub(r'\n{3,}', '\n\n', text)
        text = re.sub(r'<script.*?</script>', '', text, flags=re.IGNORECASE | re.DOTALL)
        return text.strip()

    def extract_with_fallback(self, file_bytes: BytesIO, filename: str) -> Tuple[str, str]:
        """
        Run the backends in order until one succeeds.

        Returns:
            Tuple of (cleaned_text, method_used); method is "none" on failure
        """
        start_time = time.time()

        chain = [
            ("PyPDF2", self.extract_with_pypdf2),
            ("pdfplumber", self.extract_with_pdfplumber),
        ]
        if self.enable_ocr:
            chain.append(("OCR", self.extract_with_ocr))

        for method, extract in chain:
            text, success = extract(file_bytes, filename)
            if success:
                logger.info(f"{filename}: {method} success in {time.time() - start_time:.2f}s")
                return self.clean_text(text), method

        logger.error(f"{filename}: All extraction methods failed in {time.time() - start_time:.2f}s")
        return "", "none"

    def read_text(self, file: Any) -> str:
        """
        Read an uploaded CV into text.

        Args:
            file: File-like object with ``name`` and ``read()``

        Returns:
            Cleaned CV text

        Raises:
            ExtractionFailure: If no usable text could be read
        """
        filename = getattr(file, 'name', 'upload')
        if hasattr(file, 'seek'):
            file.seek(0)
        data = file.read()

        if filename.lower().endswith('.txt'):
            if isinstance(data, bytes):
                data = data.decode('utf-8', errors='replace')
            text = self.clean_text(data)
        else:
            text, method = self.extract_with_fallback(BytesIO(data), filename)
            if method == "none":
                raise ExtractionFailure(f"No text could be extracted from {filename}")

        if not text.strip():
            raise ExtractionFailure(f"{filename} contains no text")

        return text

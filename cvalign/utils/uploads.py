"""
Checks and clean-up applied to CV uploads before they reach the extractors.
"""
import os
import re
from typing import Any, Tuple

ALLOWED_EXTENSIONS = ('.pdf', '.txt')
MAX_FILENAME_LENGTH = 100
FALLBACK_FILENAME = "unnamed_cv.pdf"

_UNSAFE_FILENAME_CHARS = re.compile(r'[^\w\s\-\.]')

# Markup that must never be echoed back into the dashboard
_SCRIPT_PATTERNS = (
    re.compile(r'<script.*?</script>', re.IGNORECASE | re.DOTALL),
    re.compile(r'javascript:', re.IGNORECASE),
    re.compile(r'on\w+\s*=', re.IGNORECASE),
)


def sanitize_filename(filename: str) -> str:
    """
    Reduce an uploaded filename to a safe display name and candidate reference.

    Directory parts (POSIX or Windows) are dropped, so ``../../cv.pdf``
    becomes ``cv.pdf``. Long names are shortened with the extension kept.
    """
    base = os.path.basename(filename.replace('\\', '/'))
    base = _UNSAFE_FILENAME_CHARS.sub('', base).strip('. ')

    if len(base) > MAX_FILENAME_LENGTH:
        stem, ext = os.path.splitext(base)
        base = stem[:MAX_FILENAME_LENGTH - 10] + ext

    return base or FALLBACK_FILENAME


def sanitize_text(text: str) -> str:
    for pattern in _SCRIPT_PATTERNS:
        text = pattern.sub('', text)
    return text


def upload_size(file: Any) -> int:
    """Size in bytes of a seekable upload; the read position is rewound."""
    file.seek(0, os.SEEK_END)
    size = file.tell()
    file.seek(0)
    return size


def validate_file(file: Any, config: Any) -> Tuple[bool, str]:
    """
    Validate one CV upload against the configured limits.

    Args:
        file: Seekable upload with a ``name`` attribute
        config: Configuration providing ``max_file_size_mb``

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not file.name.lower().endswith(ALLOWED_EXTENSIONS):
        return False, "Only PDF and TXT files are allowed"

    size = upload_size(file)
    limit_mb = config.max_file_size_mb

    if size == 0:
        return False, "File is empty"

    if size > limit_mb * 1024 * 1024:
        return False, f"File too large ({size / 1024 / 1024:.1f}MB). Max: {limit_mb}MB"

    return True, ""

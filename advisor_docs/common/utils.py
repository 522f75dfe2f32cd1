"""Common utilities for the advisor document engine.

Text handling contract
----------------------
* Extracted text has BOM markers stripped before it is stored so chunking
  and scoring never see spurious characters.
* Whitespace normalization is explicit: ``normalize_text`` for display and
  prompts, nothing implicit at storage time.
* Word counts are always whitespace-token counts of the stored text.
"""

import re
import unicodedata

_FILENAME_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9.-]")
_UNDERSCORE_RUN_RE = re.compile(r"_+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")
_INLINE_SPACE_RE = re.compile(r"[ \t\f\v]+")

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def clean_text(text: str, *, normalize: bool = True, ascii_only: bool = False) -> str:
    """Remove BOM markers and optionally normalize/ASCII-fold text.

    Args:
        text: Input text that may contain BOM or special characters.
        normalize: Whether to apply NFKC normalization.
        ascii_only: Whether to discard non-ASCII characters.

    Returns:
        Cleaned text with BOMs removed and optional normalization applied.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    if normalize:
        cleaned = unicodedata.normalize("NFKC", cleaned)
    if ascii_only:
        cleaned = cleaned.encode("ascii", errors="ignore").decode("ascii")
    return cleaned


def normalize_text(text: str) -> str:
    """Clean text and collapse whitespace while keeping paragraph breaks.

    Runs of spaces/tabs become one space, CRLF becomes LF, and any run of
    blank lines becomes exactly one blank line.
    """
    cleaned = clean_text(text).replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _INLINE_SPACE_RE.sub(" ", cleaned)
    cleaned = "\n".join(line.strip() for line in cleaned.split("\n"))
    cleaned = _BLANK_LINES_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def count_words(text: str) -> int:
    """Count non-empty whitespace-delimited tokens."""
    return len(text.split())


def strip_extension(filename: str) -> str:
    """Filename without its final extension (``report.v2.pdf`` -> ``report.v2``)."""
    stem, dot, _ = filename.rpartition(".")
    return stem if dot and stem else filename


def sanitize_filename(filename: str) -> str:
    """Make a filename safe for storage paths.

    Characters other than letters, digits, dots and dashes become
    underscores, underscore runs collapse, and edge underscores are trimmed.
    """
    sanitized = _FILENAME_UNSAFE_RE.sub("_", filename)
    sanitized = _UNDERSCORE_RUN_RE.sub("_", sanitized)
    return sanitized.strip("_")


def format_file_size(size_bytes: int) -> str:
    """Human readable file size (``1536`` -> ``"1.5 KB"``)."""
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"

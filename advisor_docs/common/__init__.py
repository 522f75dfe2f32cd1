"""Shared helpers: text utilities and exception formatting."""

from .utils import (
    clean_text,
    count_words,
    format_file_size,
    normalize_text,
    sanitize_filename,
    strip_extension,
)

__all__ = [
    "clean_text",
    "count_words",
    "format_file_size",
    "normalize_text",
    "sanitize_filename",
    "strip_extension",
]

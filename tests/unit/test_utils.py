import pytest

from advisor_docs.common.utils import (
    clean_text,
    count_words,
    format_file_size,
    normalize_text,
    sanitize_filename,
    strip_extension,
)

pytestmark = pytest.mark.unit


class TestCleanText:
    def test_bom_and_replacement_characters_are_removed(self):
        assert clean_text("\ufeffHello\ufffd world") == "Hello world"

    def test_nfkc_normalization_is_optional(self):
        assert clean_text("\ufb01le") == "file"
        assert clean_text("\ufb01le", normalize=False) == "\ufb01le"

    def test_ascii_only(self):
        assert clean_text("café menu", ascii_only=True) == "caf menu"

    def test_empty_input(self):
        assert clean_text("") == ""


class TestNormalizeText:
    def test_collapses_spaces_and_blank_lines(self):
        assert normalize_text("a  \t b\r\n\r\n\r\nc  ") == "a b\n\nc"

    def test_keeps_single_line_breaks(self):
        assert normalize_text("one\ntwo") == "one\ntwo"


class TestFilenames:
    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("report.pdf", "report.pdf"),
            ("Q3 report (final).pdf", "Q3_report_final_.pdf"),
            ("__weird__name__.txt", "weird_name_.txt"),
            ("notes-2024.md", "notes-2024.md"),
        ],
    )
    def test_sanitize_filename(self, filename, expected):
        assert sanitize_filename(filename) == expected

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("report.v2.pdf", "report.v2"),
            ("README", "README"),
            (".env", ".env"),
        ],
    )
    def test_strip_extension(self, filename, expected):
        assert strip_extension(filename) == expected


class TestFormatting:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 Bytes"),
            (500, "500 Bytes"),
            (1536, "1.5 KB"),
            (50 * 1024 * 1024, "50 MB"),
            (3 * 1024**3, "3 GB"),
        ],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    def test_count_words(self):
        assert count_words("  one two\n\nthree\t") == 3
        assert count_words("") == 0

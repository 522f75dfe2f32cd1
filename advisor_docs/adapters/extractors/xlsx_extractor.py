"""Spreadsheet extraction with openpyxl."""

import io
import logging
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ...core.domain import DocumentType
from ...core.domain.exceptions import SpreadsheetExtractionError
from ...core.ports import ExtractionResult, TextExtractorPort

logger = logging.getLogger(__name__)


def _format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class XlsxExtractor(TextExtractorPort):
    """Serializes every sheet as a tab-delimited table under its name.

    Each sheet becomes a ``Sheet: <name>`` header followed by one line per
    non-blank row; sheets are separated by a blank line and empty sheets are
    left out. Trailing empty cells are trimmed from each row.
    """

    doc_type = DocumentType.XLSX

    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        try:
            workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
            raise SpreadsheetExtractionError(
                str(e) or "Workbook could not be opened",
                cause=e,
                context={"filename": filename},
            )

        try:
            sections = []
            for sheet in workbook.worksheets:
                rows = []
                for row in sheet.iter_rows(values_only=True):
                    cells = [_format_cell(value) for value in row]
                    while cells and not cells[-1]:
                        cells.pop()
                    if cells:
                        rows.append("\t".join(cells))
                if rows:
                    sections.append(f"Sheet: {sheet.title}\n" + "\n".join(rows))
                else:
                    logger.debug(f"Skipping empty sheet {sheet.title!r} in {filename}")

            sheet_count = len(workbook.sheetnames)
            author = workbook.properties.creator if workbook.properties else None
        except (KeyError, ValueError, TypeError) as e:
            raise SpreadsheetExtractionError(
                str(e) or "Workbook could not be read",
                cause=e,
                context={"filename": filename},
            )
        finally:
            workbook.close()

        return ExtractionResult(
            text="\n\n".join(sections),
            sheets=sheet_count,
            author=author or None,
        )

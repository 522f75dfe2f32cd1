"""Slide deck extraction: PPTX archives parsed with BeautifulSoup, legacy PPT refused."""

import io
import logging
import re
import zipfile

from bs4 import BeautifulSoup

from ...core.domain import DocumentType
from ...core.domain.exceptions import SlideDeckExtractionError
from ...core.ports import ExtractionResult, TextExtractorPort

logger = logging.getLogger(__name__)

SLIDE_PART_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
NOTES_PART_RE = re.compile(r"^ppt/notesSlides/notesSlide(\d+)\.xml$")


def _numbered_parts(names: list[str], pattern: re.Pattern) -> list[tuple[int, str]]:
    """Archive parts matching ``pattern`` in numeric (not lexical) order."""
    parts = []
    for name in names:
        match = pattern.match(name)
        if match:
            parts.append((int(match.group(1)), name))
    return sorted(parts)


def _part_text(xml: bytes) -> str:
    """Text of a slide or notes part, one line per paragraph."""
    soup = BeautifulSoup(xml, "xml")
    lines = []
    for paragraph in soup.find_all("p"):
        line = "".join(run.get_text() for run in paragraph.find_all("t")).strip()
        if line:
            lines.append(line)
    return "\n".join(lines)


class PptxExtractor(TextExtractorPort):
    """Reads slide and speaker-note text out of the OOXML archive."""

    doc_type = DocumentType.PPTX

    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        """Extract slide text followed by speaker notes.

        Slides are labelled ``--- Slide N ---`` and notes
        ``--- Speaker Notes N ---`` using the part number from the archive.
        Parts without text are skipped but still counted as slides.

        Raises:
            SlideDeckExtractionError: If the archive cannot be read.
        """
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                names = archive.namelist()
                slides = _numbered_parts(names, SLIDE_PART_RE)
                notes = _numbered_parts(names, NOTES_PART_RE)

                sections = []
                for number, name in slides:
                    text = _part_text(archive.read(name))
                    if text:
                        sections.append(f"--- Slide {number} ---\n{text}")
                for number, name in notes:
                    text = _part_text(archive.read(name))
                    if text:
                        sections.append(f"--- Speaker Notes {number} ---\n{text}")
        except (zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
            raise SlideDeckExtractionError(
                str(e) or "Slide deck could not be opened",
                cause=e,
                context={"filename": filename},
            )

        logger.debug(f"Read {len(slides)} slides and {len(notes)} notes parts from {filename}")
        return ExtractionResult(text="\n\n".join(sections), slides=len(slides))


class LegacyPptExtractor(TextExtractorPort):
    """Binary ``.ppt`` decks are accepted but never parsed."""

    doc_type = DocumentType.PPT

    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        message = "Legacy PowerPoint files (.ppt) are not supported for text extraction"
        return ExtractionResult(
            text=(
                f"[Legacy PPT file: {filename}] - {message}. "
                "Please convert to .pptx format for full text extraction."
            ),
            slides=1,
            warnings=[message],
        )

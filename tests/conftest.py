"""
Pytest configuration and shared fixtures.

Office and PDF fixtures are generated in memory so the suite needs no binary
files on disk.
"""

import io
import zipfile
from datetime import UTC, datetime, timedelta

import pytest
from openpyxl import Workbook

from advisor_docs.adapters.extractors import get_default_extractors
from advisor_docs.adapters.outbound.memory_repository import InMemoryDocumentRepository
from advisor_docs.adapters.outbound.token_estimator import WordRatioTokenEstimator
from advisor_docs.config.settings import Settings
from advisor_docs.core.domain import DocumentMetadata, DocumentType, ProcessedDocument, UploadedFile
from advisor_docs.core.services import ContextAssemblyService, DocumentNormalizer


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP API through TestClient)")
    config.addinivalue_line("markers", "slow: Slow tests (large generated inputs)")


# =============================================================================
# File builders
# =============================================================================


def build_pdf(page_texts: list[str], author: str | None = None) -> bytes:
    """Minimal PDF with one Helvetica text line per page."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        None,  # page tree, filled in once page ids are known
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    page_ids = []
    for text in page_texts:
        page_id = len(objects) + 1
        page_ids.append(page_id)
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
    objects[1] = f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>".encode()

    info_ref = ""
    if author:
        objects.append(f"<< /Author ({author}) >>".encode("latin-1"))
        info_ref = f" /Info {len(objects)} 0 R"

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R{info_ref} >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


def build_docx(paragraphs: list[str]) -> bytes:
    """Minimal WordprocessingML package."""
    body = "".join(f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p>" for text in paragraphs)
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )
    content_types = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" '
        'ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
        "</Types>"
    )
    rels = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        '<Relationship Id="rId1" '
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
        'Target="word/document.xml"/>'
        "</Relationships>"
    )
    document_rels = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        "</Relationships>"
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", content_types)
        archive.writestr("_rels/.rels", rels)
        archive.writestr("word/document.xml", document)
        archive.writestr("word/_rels/document.xml.rels", document_rels)
    return buffer.getvalue()


def build_xlsx(sheets: dict[str, list[list]]) -> bytes:
    """Workbook with the given sheets, in order."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets.items():
        sheet = workbook.create_sheet(title)
        for row in rows:
            sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


_SLIDE_NAMESPACES = (
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"'
)


def _slide_xml(root: str, paragraphs: list[str]) -> str:
    body = "".join(f"<a:p><a:r><a:t>{text}</a:t></a:r></a:p>" for text in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f"<p:{root} {_SLIDE_NAMESPACES}><p:cSld><p:spTree><p:sp><p:txBody>"
        f"{body}</p:txBody></p:sp></p:spTree></p:cSld></p:{root}>"
    )


def build_pptx(slides: dict[int, list[str]], notes: dict[int, list[str]] | None = None) -> bytes:
    """Archive with ``ppt/slides/slideN.xml`` and optional notes parts."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("ppt/presentation.xml", f"<p:presentation {_SLIDE_NAMESPACES}/>")
        for number, paragraphs in slides.items():
            archive.writestr(f"ppt/slides/slide{number}.xml", _slide_xml("sld", paragraphs))
        for number, paragraphs in (notes or {}).items():
            archive.writestr(
                f"ppt/notesSlides/notesSlide{number}.xml", _slide_xml("notes", paragraphs)
            )
    return buffer.getvalue()


# =============================================================================
# Core fixtures
# =============================================================================


class FakeClock:
    """Controllable replacement for ``datetime.now(UTC)``."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_processed(text: str, chunks: list[str] | None = None, **metadata) -> ProcessedDocument:
    """ProcessedDocument for repository and context tests."""
    fields = {
        "title": "document",
        "word_count": len(text.split()),
        "size": len(text.encode()),
        "doc_type": DocumentType.TEXT,
    }
    fields.update(metadata)
    return ProcessedDocument(
        text=text,
        metadata=DocumentMetadata(**fields),
        chunks=[text] if chunks is None else chunks,
    )


def make_upload(filename: str, text: str, content_type: str | None = "text/plain") -> UploadedFile:
    return UploadedFile(filename=filename, content=text.encode(), content_type=content_type)


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository(clock):
    return InMemoryDocumentRepository(clock=clock)


@pytest.fixture
def normalizer(settings):
    return DocumentNormalizer(get_default_extractors(), settings)


@pytest.fixture
def context_service(repository, settings):
    return ContextAssemblyService(repository, WordRatioTokenEstimator(), settings)


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def make_docx():
    return build_docx


@pytest.fixture
def make_xlsx():
    return build_xlsx


@pytest.fixture
def make_pptx():
    return build_pptx


@pytest.fixture
def processed_factory():
    return make_processed


@pytest.fixture
def upload_factory():
    return make_upload

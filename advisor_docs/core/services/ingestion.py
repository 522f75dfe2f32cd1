"""Ingestion: validate, normalize and store uploads."""

import logging
from dataclasses import dataclass

from ..domain import ConfidentialityLevel, Document, DocumentCategory, UploadedFile
from ..domain.exceptions import ValidationError
from ..ports import DocumentRepositoryPort
from .normalizer import DocumentNormalizer

logger = logging.getLogger(__name__)


@dataclass
class IngestionOutcome:
    """Result for one file of a batch: a stored document or a rejection."""

    filename: str
    document: Document | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.document is not None


class DocumentIngestionService:
    """The write path from an upload to a stored Document."""

    def __init__(self, normalizer: DocumentNormalizer, repository: DocumentRepositoryPort):
        self.normalizer = normalizer
        self.repository = repository

    async def ingest(
        self,
        file: UploadedFile,
        advisor_id: str,
        user_id: str,
        *,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
        tags: list[str] | None = None,
    ) -> Document:
        """Process one upload and store it.

        Raises:
            ValidationError: If the file is rejected; nothing is stored.
        """
        processed = await self.normalizer.process(file)
        return self.repository.store(
            file,
            processed,
            advisor_id,
            user_id,
            category=category,
            confidentiality=confidentiality,
            tags=tags,
        )

    async def ingest_batch(
        self,
        files: list[UploadedFile],
        advisor_id: str,
        user_id: str,
        *,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
        tags: list[str] | None = None,
    ) -> list[IngestionOutcome]:
        """Ingest files one after another, in call order.

        Each extraction completes before the next begins, which bounds peak
        memory to one open parse as long as nothing times out: a timed-out
        extraction thread cannot be cancelled and keeps running alongside
        later files. A rejected file does not stop the batch.
        """
        outcomes = []
        for file in files:
            try:
                document = await self.ingest(
                    file,
                    advisor_id,
                    user_id,
                    category=category,
                    confidentiality=confidentiality,
                    tags=tags,
                )
            except ValidationError as e:
                logger.warning(f"Rejected {file.filename}: {e.message}")
                outcomes.append(IngestionOutcome(filename=file.filename, error=e))
            else:
                outcomes.append(IngestionOutcome(filename=file.filename, document=document))
        return outcomes

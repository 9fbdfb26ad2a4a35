"""Upload pipeline: extract, chunk, store, and generate study notes.

Each file is handled independently. A file that fails extraction is reported
alongside the successes; the batch only fails when no file yields text.
Note generation runs inline, once, over the combined text of the batch.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from ..domain import (
    AuthenticatedUser,
    Embedding,
    ExtractedDocument,
    FileProblem,
    ProcessedDocument,
    UploadedFile,
    UploadResult,
)
from ..domain.exceptions import (
    BackendError,
    ExtractionError,
    LLMGenerationError,
    NoTextExtractedError,
    UploadValidationError,
)
from ..domain.utils import chunk_text
from ..ports import BackendPort
from .embedding_service import EmbeddingProvider
from .note_generator import NoteGenerator
from .text_extractor import TextExtractor

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n\n--- Document Separator ---\n\n"
SIZE_TRUNCATION_MARKER = "\n\n[Content truncated due to size limits...]"
EMPTY_TEXT_MESSAGE = "File appears to be empty or contains no extractable text"


class UploadService:
    """Runs one upload batch for an authenticated user."""

    def __init__(
        self,
        backend: BackendPort,
        extractor: TextExtractor,
        note_generator: NoteGenerator,
        embeddings: EmbeddingProvider | None = None,
        *,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        max_files: int = 10,
        max_file_size: int = 50 * 1024 * 1024,
        max_combined_text_length: int = 50_000,
        storage_bucket: str = "documents",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the upload service.

        Args:
            backend: Backend service bound to the requesting user.
            extractor: Text extractor.
            note_generator: Study-note generator.
            embeddings: When given, stored chunks are embedded on upload.
            chunk_size: Chunk window length.
            chunk_overlap: Overlap between chunk windows.
            max_files: Maximum files per batch.
            max_file_size: Maximum size of one file in bytes.
            max_combined_text_length: Cap on text sent to note generation.
            storage_bucket: Bucket for the original files.
            clock: Time source for storage paths.
        """
        self.backend = backend
        self.extractor = extractor
        self.note_generator = note_generator
        self.embeddings = embeddings
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.max_files = max_files
        self.max_file_size = max_file_size
        self.max_combined_text_length = max_combined_text_length
        self.storage_bucket = storage_bucket
        self.clock = clock

    def validate(self, collection_name: str, files: list[UploadedFile]) -> None:
        """Reject malformed batches before any work is done.

        Raises:
            UploadValidationError: Missing name, no files, too many, or too large.
        """
        if not collection_name or not collection_name.strip():
            raise UploadValidationError("Collection name is required")
        if not files:
            raise UploadValidationError("No files provided")
        if len(files) > self.max_files:
            raise UploadValidationError(
                f"Maximum {self.max_files} files allowed", context={"files": len(files)}
            )
        for file in files:
            if file.size > self.max_file_size:
                limit_mb = self.max_file_size // (1024 * 1024)
                raise UploadValidationError(
                    f"File {file.file_name} exceeds {limit_mb}MB limit",
                    context={"file_name": file.file_name, "size": file.size},
                )

    def extract_all(
        self, files: list[UploadedFile]
    ) -> tuple[list[tuple[UploadedFile, ExtractedDocument]], list[FileProblem]]:
        """Extract every file, collecting failures instead of stopping."""
        extracted: list[tuple[UploadedFile, ExtractedDocument]] = []
        problems: list[FileProblem] = []

        for file in files:
            try:
                text = self.extractor.extract(file.content, file.content_type, file.file_name)
            except ExtractionError as e:
                logger.warning("Error extracting text from %s: %s", file.file_name, e.message)
                problems.append(FileProblem(file.file_name, e.message))
                continue
            except Exception as e:
                logger.exception("Unexpected extraction failure for %s", file.file_name)
                problems.append(FileProblem(file.file_name, str(e)))
                continue

            if not text or not text.strip():
                logger.warning("No text extracted from %s, skipping", file.file_name)
                problems.append(FileProblem(file.file_name, EMPTY_TEXT_MESSAGE))
                continue

            logger.info("Extracted %d characters from %s", len(text), file.file_name)
            extracted.append((file, ExtractedDocument(text=text, source_file_name=file.file_name)))

        return extracted, problems

    def process(
        self,
        user: AuthenticatedUser,
        collection_name: str,
        files: list[UploadedFile],
    ) -> UploadResult:
        """Run the whole batch and generate notes.

        Raises:
            UploadValidationError: Batch rejected up front.
            BackendError: The collection could not be created.
            NoTextExtractedError: No file produced text.
            LLMGenerationError: Note generation produced nothing.
        """
        self.validate(collection_name, files)
        name = collection_name.strip()

        collection = self.backend.insert("collections", {"user_id": user.id, "name": name})[0]
        result = UploadResult(collection_id=str(collection["id"]), collection_name=collection.get("name", name))

        extracted, problems = self.extract_all(files)
        result.errors = problems

        if not extracted:
            logger.error("No text extracted from any of %d files", len(files))
            raise NoTextExtractedError(
                "Could not extract text from uploaded files. "
                "Please check if files are valid PDF, DOCX, or TXT files.",
                context={
                    "details": f"Tried to process {len(files)} file(s) but no text was extracted.",
                    "errors": [str(p) for p in problems] or ["Unknown error during text extraction"],
                },
            )

        for file, document in extracted:
            processed = self._store_document(user, result.collection_id, file, document)
            if processed is not None:
                result.documents.append(processed)

        combined = DOCUMENT_SEPARATOR.join(document.text for _, document in extracted)
        if len(combined) > self.max_combined_text_length:
            combined = combined[: self.max_combined_text_length] + SIZE_TRUNCATION_MARKER

        logger.info("Generating AI notes from %d characters of text", len(combined))
        notes = self.note_generator.generate(combined)
        if not notes or not notes.strip():
            raise LLMGenerationError("Failed to generate notes. Please try again or check your OpenRouter API key.")
        result.notes_generated = True

        try:
            saved = self.backend.insert(
                "notes",
                {"collection_id": result.collection_id, "user_id": user.id, "content": notes},
            )
        except BackendError as e:
            logger.warning("Notes were generated but could not be saved: %s", e.message)
            result.error_message = f"Notes were generated but could not be saved: {e.message}"
            return result

        result.notes_id = str(saved[0]["id"]) if saved else None
        result.notes_saved = result.notes_id is not None
        logger.info(
            "Upload complete: collection=%s files=%d notes=%s",
            result.collection_name,
            result.total_files,
            "saved" if result.notes_saved else "not saved",
        )
        return result

    def _store_document(
        self,
        user: AuthenticatedUser,
        collection_id: str,
        file: UploadedFile,
        document: ExtractedDocument,
    ) -> ProcessedDocument | None:
        """Persist the original file, its text row and its chunks.

        Returns None when the blob upload fails; the text still feeds note
        generation.
        """
        storage_path = f"{user.id}/{int(self.clock() * 1000)}-{file.file_name}"
        try:
            self.backend.upload_file(self.storage_bucket, storage_path, file.content, file.content_type)
        except BackendError as e:
            logger.error("Storage upload failed for %s: %s", file.file_name, e.message)
            return None

        file_url = self.backend.public_url(self.storage_bucket, storage_path)

        try:
            rows = self.backend.insert(
                "document_collections",
                {
                    "collection_id": collection_id,
                    "user_id": user.id,
                    "file_name": file.file_name,
                    "file_type": file.content_type,
                    "file_size": file.size,
                    "content": document.text,
                    "storage_path": storage_path,
                    "embedding": None,
                },
            )
            document_id = str(rows[0]["id"])
        except (BackendError, IndexError, KeyError) as e:
            logger.warning(
                "File %s was not saved to database, but text was extracted: %s", file.file_name, e
            )
            return ProcessedDocument(
                id=f"temp-{uuid.uuid4().hex}", name=file.file_name, status="error", url=file_url
            )

        self._store_chunks(user, document_id, document)
        return ProcessedDocument(id=document_id, name=file.file_name, status="completed", url=file_url)

    def _store_chunks(self, user: AuthenticatedUser, document_id: str, document: ExtractedDocument) -> None:
        chunks = chunk_text(document.text, self.chunk_size, self.chunk_overlap)
        rows: list[dict[str, Any]] = []
        for index, chunk in enumerate(chunks):
            embedding: Embedding | None = self.embeddings.embed(chunk.content) if self.embeddings else None
            rows.append(
                {
                    "user_id": user.id,
                    "document_id": document_id,
                    "document_name": document.source_file_name,
                    "chunk_index": index,
                    "content": chunk.content,
                    "start_offset": chunk.start,
                    "end_offset": chunk.end,
                    "embedding": embedding.values if embedding else None,
                    "embedding_origin": embedding.origin.value if embedding else None,
                }
            )

        if not rows:
            return
        try:
            self.backend.insert("document_chunks", rows)
            logger.info("Stored %d chunks for %s", len(rows), document.source_file_name)
        except BackendError as e:
            logger.warning("Could not store chunks for %s: %s", document.source_file_name, e.message)

    def request_note_generation(self, collection_id: str) -> dict[str, Any]:
        """Queue a regeneration request; a failed insert still reports ok."""
        try:
            rows = self.backend.insert("generation_requests", {"collection_id": collection_id})
        except BackendError as e:
            logger.warning("generation_requests insert failed, returning ok to allow polling: %s", e.message)
            return {"ok": True}
        return {"ok": True, "data": rows}

"""Document upload endpoint."""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from .....core.domain import AuthenticatedUser, UploadedFile
from .....core.services.upload_service import UploadService
from ..deps import get_current_user, get_upload_service
from ..models import ErrorResponse, ProcessedDocumentModel, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid upload or no extractable text"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        500: {"model": ErrorResponse, "description": "Note generation failed"},
    },
)
def upload_documents(
    collection_name: str = Form(""),
    files: list[UploadFile] | None = File(None),
    user: AuthenticatedUser = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    """Upload a batch of documents into a new collection and generate notes.

    Files that fail extraction are listed in ``errors``; the request only
    fails when none of them produced text.
    """
    uploaded = [
        UploadedFile(
            content=file.file.read(),
            content_type=file.content_type or "",
            file_name=file.filename or "document",
        )
        for file in files or []
    ]
    logger.info("Upload of %d files into '%s' for user %s", len(uploaded), collection_name, user.id)

    result = service.process(user, collection_name, uploaded)

    return UploadResponse(
        success=True,
        collection_id=result.collection_id,
        collection_name=result.collection_name,
        documents=[
            ProcessedDocumentModel(id=doc.id, name=doc.name, status=doc.status, url=doc.url)
            for doc in result.documents
        ],
        notes_id=result.notes_id,
        notes_saved=result.notes_saved,
        notes_generated=result.notes_generated,
        files_saved=result.files_saved,
        total_files=result.total_files,
        errors=[str(problem) for problem in result.errors],
        error=result.error_message,
    )

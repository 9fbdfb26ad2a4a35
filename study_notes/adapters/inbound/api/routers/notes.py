"""Note regeneration endpoint."""

from fastapi import APIRouter, Depends

from .....core.domain import AuthenticatedUser
from .....core.services.upload_service import UploadService
from ..deps import get_current_user, get_upload_service
from ..models import ErrorResponse, GenerateNotesRequest, GenerateNotesResponse

router = APIRouter(prefix="/api/v1/notes", tags=["notes"])


@router.post(
    "/generate",
    response_model=GenerateNotesResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
def request_generation(
    body: GenerateNotesRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
) -> GenerateNotesResponse:
    """Queue note regeneration for a collection."""
    return GenerateNotesResponse(**service.request_note_generation(body.collection_id))

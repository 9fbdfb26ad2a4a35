"""Saved conversation and export endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from .....core.domain import AuthenticatedUser, ChatMessage
from .....core.domain.exceptions import ValidationError
from .....core.ports import PdfRendererPort
from .....core.services.conversation_service import ConversationService
from ..deps import get_conversation_service, get_current_user, get_pdf_renderer
from ..models import (
    ConversationHistoryResponse,
    ErrorResponse,
    ExportRequest,
    ExportResponse,
    LoadChatResponse,
    PdfExportRequest,
    SaveChatRequest,
    SaveChatResponse,
)

router = APIRouter(prefix="/api/v1/chat", tags=["conversations"])

ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    404: {"model": ErrorResponse, "description": "Conversation not found"},
}


@router.post("/save", response_model=SaveChatResponse, responses=ERRORS)
def save_conversation(
    body: SaveChatRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> SaveChatResponse:
    """Create a conversation, or append unseen messages to an existing one."""
    saved = service.save(
        user.id,
        [ChatMessage(role=m.role, content=m.content, sources=m.sources) for m in body.messages],
        title=body.title,
        conversation_id=body.conversation_id,
    )
    return SaveChatResponse(**saved)


@router.get("/history", response_model=ConversationHistoryResponse, responses=ERRORS)
def conversation_history(
    limit: int = Query(3, ge=1, le=100),
    user: AuthenticatedUser = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationHistoryResponse:
    return ConversationHistoryResponse(conversations=service.list_recent(user.id, limit))


@router.get("/load", response_model=LoadChatResponse, responses=ERRORS)
def load_conversation(
    id: str = Query("", description="Conversation id"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> LoadChatResponse:
    return LoadChatResponse(**service.load(user.id, id))


@router.post("/export", response_model=ExportResponse, responses=ERRORS)
def export_conversation(
    body: ExportRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ExportResponse:
    """Record an exported transcript (pdf or doc)."""
    return ExportResponse(
        **service.create_export(
            user.id,
            body.title,
            body.content,
            body.type,
            conversation_id=body.conversation_id,
        )
    )


def attachment_filename(filename: str | None) -> str:
    """Download name safe to quote in a Content-Disposition header."""
    cleaned = "".join(ch for ch in (filename or "") if ch not in '"\\\r\n').strip()
    return cleaned or "document.pdf"


@router.post(
    "/pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Rendered PDF attachment"},
        400: {"model": ErrorResponse, "description": "Missing HTML"},
        500: {"model": ErrorResponse, "description": "Rendering failed"},
    },
)
def export_pdf(
    body: PdfExportRequest,
    renderer: PdfRendererPort = Depends(get_pdf_renderer),
) -> Response:
    """Render an HTML export as an A4 PDF download."""
    if not body.html.strip():
        raise ValidationError("HTML content is required")

    pdf = renderer.render(body.html)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{attachment_filename(body.filename)}"'},
    )

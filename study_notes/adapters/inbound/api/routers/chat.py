"""Chat endpoint streaming answers as server-sent events."""

import json
import logging
from collections.abc import AsyncIterator, Generator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import iterate_in_threadpool, run_in_threadpool

from .....core.domain import AuthenticatedUser, ChatStreamEvent
from .....core.services.chat_service import ChatService
from ..deps import get_chat_service, get_current_user
from ..models import ErrorResponse, QuestionRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["chat"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


def format_sse(event: ChatStreamEvent) -> str:
    """One ``data: <json>`` frame."""
    return f"data: {json.dumps(event.to_payload(), ensure_ascii=False)}\n\n"


async def event_stream(
    request: Request, events: Generator[ChatStreamEvent, None, None]
) -> AsyncIterator[str]:
    """Relay events until they run out or the client goes away.

    The generator is always closed, which releases the upstream LLM stream.
    """
    try:
        async for event in iterate_in_threadpool(events):
            if await request.is_disconnected():
                logger.info("Client disconnected; closing chat stream")
                break
            yield format_sse(event)
    finally:
        events.close()


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/event-stream": {}}, "description": "Answer event stream"},
        400: {"model": ErrorResponse, "description": "Empty question"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def chat(
    request: Request,
    body: QuestionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Answer a question from the caller's documents.

    Streams ``{"content"}`` frames, then one ``{"sources"}`` or ``{"error"}``.
    """
    events = await run_in_threadpool(service.answer, user.id, body.question)
    return StreamingResponse(
        event_stream(request, events),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )

"""FastAPI dependency injection for AI Study Notes."""

import logging
from collections.abc import Iterator

from fastapi import Depends, Header

from ....composition import container
from ....core.domain import AuthenticatedUser
from ....core.domain.exceptions import AuthenticationError
from ....core.ports import BackendPort, PdfRendererPort
from ....core.services.chat_service import ChatService
from ....core.services.conversation_service import ConversationService
from ....core.services.upload_service import UploadService
from ...outbound.llm.openrouter_adapter import OpenRouterAdapter

logger = logging.getLogger(__name__)


def get_access_token(authorization: str | None = Header(default=None)) -> str | None:
    """Bearer token from the ``Authorization`` header, if any."""
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer ") :].strip() or None
    return None


def get_backend(access_token: str | None = Depends(get_access_token)) -> Iterator[BackendPort]:
    """Backend client bound to the caller, closed after the response."""
    backend = container.create_backend(access_token)
    try:
        yield backend
    finally:
        backend.close()


def get_current_user(backend: BackendPort = Depends(get_backend)) -> AuthenticatedUser:
    """Resolve the caller or fail with 401."""
    try:
        return backend.get_user()
    except AuthenticationError:
        raise
    except Exception as e:
        logger.warning("User lookup failed: %s", e)
        raise AuthenticationError("Unauthorized", cause=e) from e


def get_upload_service(backend: BackendPort = Depends(get_backend)) -> UploadService:
    return container.build_upload_service(backend)


def get_chat_service(backend: BackendPort = Depends(get_backend)) -> ChatService:
    return container.build_chat_service(backend)


def get_conversation_service(backend: BackendPort = Depends(get_backend)) -> ConversationService:
    return container.build_conversation_service(backend)


def get_pdf_renderer() -> PdfRendererPort:
    return container.get_pdf_renderer()


def get_llm() -> OpenRouterAdapter:
    return container.get_llm()

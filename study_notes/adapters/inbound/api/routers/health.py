"""Health check and configuration diagnostics endpoints."""

from fastapi import APIRouter, Depends

from ..... import __version__
from .....config.settings import settings
from ....common.debug import OPENROUTER_KEY_PREFIX, credential_status
from ....outbound.llm.openrouter_adapter import OpenRouterAdapter
from ..deps import get_llm
from ..models import ConfigCheckResponse, CredentialStatus, ErrorResponse, HealthResponse, KeyCheckResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Reports whether embeddings use the remote API or the synthetic fallback,
    and whether chat has a credential at all.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        embeddings="configured" if settings.effective_openai_api_key else "fallback",
        chat="configured" if settings.openrouter_api_key else "missing",
    )


@router.get("/api/v1/config/check", response_model=ConfigCheckResponse)
async def config_check() -> ConfigCheckResponse:
    """Masked credential diagnostics; never returns a full secret."""
    return ConfigCheckResponse(
        openrouter=CredentialStatus(**credential_status(settings.openrouter_api_key, OPENROUTER_KEY_PREFIX)),
        openai=CredentialStatus(**credential_status(settings.effective_openai_api_key)),
        supabase_url=bool(settings.supabase_url),
        supabase_anon_key=bool(settings.supabase_anon_key),
    )


@router.get(
    "/api/v1/config/test-openrouter",
    response_model=KeyCheckResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Key missing or OpenRouter unreachable"},
    },
)
def check_openrouter_key(llm: OpenRouterAdapter = Depends(get_llm)) -> KeyCheckResponse:
    """Send one tiny completion with the configured key and report what came back."""
    return KeyCheckResponse(**llm.check_key())

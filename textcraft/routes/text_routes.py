"""
Text Processing API Routes

FastAPI routes for grammar checking, rephrasing and provider settings.

Provider failures are reported in the response body (`error` set, HTTP 200);
only malformed input is rejected, with HTTP 422.
"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from textcraft.config.logging_config import get_logger
from textcraft.llm.types import (
    Operation,
    ProviderType,
    RephraseStyle,
    RequestValidationError,
    TextRequest,
    TextResponse,
)
from textcraft.services.llm_service import LLMService

logger = get_logger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class ProcessTextRequest(BaseModel):
    """Request body for a generic text operation"""

    text: str = Field(..., min_length=1, description="Content to process")
    operation: Operation = Field(..., description="grammar-check or rephrase")
    style: Optional[RephraseStyle] = Field(None, description="Rephrase style")
    language: Optional[str] = Field("en", max_length=16, description="Language code")


class CheckGrammarRequest(BaseModel):
    """Request body for a grammar check"""

    text: str = Field(..., min_length=1)
    language: str = Field("en", max_length=16)


class RephraseTextRequest(BaseModel):
    """Request body for rephrasing"""

    text: str = Field(..., min_length=1)
    style: RephraseStyle = RephraseStyle.FORMAL


class UpdateSettingsRequest(BaseModel):
    """Request body for switching provider / saving API keys"""

    provider: ProviderType
    api_keys: Dict[str, str] = Field(default_factory=dict, description="Provider name -> API key")


class SettingsResponse(BaseModel):
    """Active provider settings (API keys are never exposed)"""

    provider: ProviderType
    fallback: Optional[ProviderType]
    has_api_key: Dict[str, bool]


# ============================================================================
# Router Setup
# ============================================================================

router = APIRouter(prefix="/api/ai", tags=["ai"])


def get_llm_service(request: Request) -> LLMService:
    """Orchestrator attached to the app by create_app()."""
    return request.app.state.llm_service


async def _run(service: LLMService, request: TextRequest) -> TextResponse:
    try:
        return await service.process(request)
    except RequestValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ============================================================================
# Routes
# ============================================================================

@router.post(
    "/process",
    response_model=TextResponse,
    summary="Process Text",
    description="Run a grammar check or rephrase through the active provider"
)
async def process_text(body: ProcessTextRequest, service: LLMService = Depends(get_llm_service)):
    request = TextRequest(
        text=body.text,
        operation=body.operation,
        style=body.style,
        language=body.language,
    )
    return await _run(service, request)


@router.post("/check-grammar", response_model=TextResponse, summary="Check Grammar")
async def check_grammar(body: CheckGrammarRequest, service: LLMService = Depends(get_llm_service)):
    request = TextRequest(text=body.text, operation=Operation.GRAMMAR_CHECK, language=body.language)
    return await _run(service, request)


@router.post("/rephrase-text", response_model=TextResponse, summary="Rephrase Text")
async def rephrase_text(body: RephraseTextRequest, service: LLMService = Depends(get_llm_service)):
    request = TextRequest(text=body.text, operation=Operation.REPHRASE, style=body.style)
    return await _run(service, request)


@router.get(
    "/providers/status",
    response_model=Dict[str, bool],
    summary="Provider Status",
    description="Health check every configured provider"
)
async def provider_status(service: LLMService = Depends(get_llm_service)):
    return await service.get_provider_status()


def _settings_response(service: LLMService) -> SettingsResponse:
    settings = service.settings
    return SettingsResponse(
        provider=settings.mode,
        fallback=settings.fallback,
        has_api_key={
            provider_type.value: bool(config.api_key)
            for provider_type, config in settings.providers.items()
        },
    )


@router.get("/settings", response_model=SettingsResponse, summary="Get Provider Settings")
async def get_settings(service: LLMService = Depends(get_llm_service)):
    return _settings_response(service)


@router.put(
    "/settings",
    response_model=SettingsResponse,
    summary="Update Provider Settings",
    description="Switch the active provider and store API keys"
)
async def update_settings(body: UpdateSettingsRequest, service: LLMService = Depends(get_llm_service)):
    try:
        service.update_provider(body.provider, body.api_keys)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info(f"⚙️ Provider settings updated: provider={body.provider.value}")
    return _settings_response(service)

"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from services.config_manager import mask_key
from services.container import ServiceContainer
from services.errors import CopilotError
from services.prompt_builder import GenerationParams

from .deps import get_services

router = APIRouter()

_PROBE_PARAMS = GenerationParams(temperature=0.0, max_output_tokens=16)


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    gemini: dict | None = None
    review: dict | None = None
    chat: dict | None = None


class ApiKeyRequest(BaseModel):
    """Request to store the Gemini API key"""

    apiKey: str


class ConfigResponse(BaseModel):
    """Configuration response"""

    gemini: dict
    review: dict
    chat: dict


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str


@router.get("", response_model=ConfigResponse)
async def get_config(services: ServiceContainer = Depends(get_services)) -> ConfigResponse:
    """Get current configuration"""
    config = services.config_manager.get_config()

    # Mask API keys for security
    gemini = dict(config.get("gemini", {}))
    gemini["apiKey"] = mask_key(gemini.get("apiKey", ""))

    return ConfigResponse(
        gemini=gemini,
        review=config.get("review", {}),
        chat=config.get("chat", {}),
    )


@router.put("")
async def update_config(
    request: ConfigUpdateRequest, services: ServiceContainer = Depends(get_services)
) -> dict[str, Any]:
    """Update configuration (partial merge)"""
    update = request.model_dump(exclude_none=True)
    if update:
        services.config_manager.save_config(update)
        services.reload_config()

    return {"status": "success", "message": "Configuration updated"}


@router.put("/api-key")
async def set_api_key(request: ApiKeyRequest, services: ServiceContainer = Depends(get_services)) -> dict[str, Any]:
    """Store the Gemini API key"""
    api_key = request.apiKey.strip()
    if not api_key:
        raise HTTPException(status_code=400, detail="API Key cannot be empty")

    services.config_manager.set_secret("apiKey", api_key)
    services.reload_config()
    return {"status": "success", "message": "API Key saved successfully!"}


@router.post("/validate", response_model=ValidateResponse)
async def validate_config(services: ServiceContainer = Depends(get_services)) -> ValidateResponse:
    """Validate current configuration with one probe request"""
    services.reload_config()
    try:
        response = await services.llm_service.send("Say 'OK' if you can hear me.", _PROBE_PARAMS)
    except CopilotError as e:
        return ValidateResponse(valid=False, message=f"Connection failed: {e}")

    if response.strip():
        return ValidateResponse(valid=True, message="Successfully connected to Gemini")
    return ValidateResponse(valid=False, message="Received empty response from LLM")

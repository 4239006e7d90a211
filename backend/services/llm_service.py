"""
LLM Service - Model gateway for the Gemini generateContent endpoint
Sends one prompt (or a windowed conversation) and returns the reply text
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import aiohttp

from models.chat import ChatRole, ConversationTurn

from .cancellation import CancellationToken
from .errors import (
    EndpointError,
    MalformedResponseError,
    MissingApiKeyError,
    NetworkError,
    RequestCancelled,
)
from .prompt_builder import GenerationParams

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash-exp"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# Gemini calls the assistant role "model"
ROLE_VOCABULARY = {ChatRole.USER: "user", ChatRole.ASSISTANT: "model"}


def to_contents(turns: list[ConversationTurn]) -> list[dict[str, Any]]:
    """Convert conversation turns into Gemini content parts, oldest first"""
    return [
        {"role": ROLE_VOCABULARY[turn.role], "parts": [{"text": turn.content}]}
        for turn in turns
    ]


class LLMService:
    """Service for interacting with the Gemini completion endpoint"""

    def __init__(self, config: dict[str, Any], secret_provider: Callable[[str], str | None] | None = None):
        self.config = config
        self._secret_provider = secret_provider

    # ========== Config Helpers ==========

    def require_api_key(self) -> str:
        """Return the API key or raise MissingApiKeyError"""
        api_key = None
        if self._secret_provider is not None:
            api_key = self._secret_provider("apiKey")
        if not api_key:
            api_key = self.config.get("gemini", {}).get("apiKey")
        if not api_key:
            raise MissingApiKeyError()
        return api_key

    def _get_gemini_config(self) -> tuple[str, str, int]:
        """Get Gemini config: (model, url, timeout_seconds)"""
        cfg = self.config.get("gemini", {})
        model = cfg.get("model", DEFAULT_MODEL)
        base_url = cfg.get("baseUrl", DEFAULT_BASE_URL).rstrip("/")
        url = f"{base_url}/{model}:generateContent"
        return model, url, int(cfg.get("timeoutSeconds", 60))

    # ========== Payload / Response ==========

    def _build_gemini_payload(self, contents: list[dict[str, Any]], params: GenerationParams) -> dict[str, Any]:
        """Build Gemini API request payload"""
        return {
            "contents": contents,
            "generationConfig": {
                "temperature": params.temperature,
                "maxOutputTokens": params.max_output_tokens,
            },
        }

    def _extract_gemini_text(self, data: Any) -> str:
        """Extract candidates[0].content.parts[0].text or raise MalformedResponseError"""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise MalformedResponseError("No valid response from Gemini API")
        if not isinstance(text, str):
            raise MalformedResponseError("Gemini API returned non-text content")
        return text

    @staticmethod
    def _error_message(body: Any, fallback: str) -> str:
        """Pull error.message out of an endpoint error body"""
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return fallback

    # ========== Transport ==========

    async def _post(self, url: str, payload: dict[str, Any], api_key: str, timeout_seconds: int) -> Any:
        """POST the payload and return the decoded JSON body"""
        timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, params={"key": api_key}, json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        try:
                            body = await response.json(content_type=None)
                        except ValueError:
                            body = None
                        message = self._error_message(body, error_text or response.reason or "")
                        logger.warning("[LLMService] Gemini API error (%s): %s", response.status, message)
                        raise EndpointError(response.status, message)
                    try:
                        return await response.json(content_type=None)
                    except ValueError:
                        raise MalformedResponseError("Gemini API returned a non-JSON body")
        except asyncio.TimeoutError:
            logger.warning("[LLMService] Request timeout after %ss", timeout_seconds)
            raise NetworkError(f"Request timeout after {timeout_seconds}s")
        except aiohttp.ClientError as e:
            logger.warning("[LLMService] Network error: %s", e)
            raise NetworkError(f"Network error: {e}")

    # ========== Public API ==========

    async def generate(
        self,
        contents: list[dict[str, Any]],
        params: GenerationParams,
        token: CancellationToken | None = None,
    ) -> str:
        """Send grouped content parts and return the reply text.

        No retry is attempted: a failure surfaces immediately as a
        GatewayError. When `token` is cancelled before the reply arrives the
        call raises RequestCancelled, and a reply that lands after the
        cancellation is discarded the same way.
        """
        api_key = self.require_api_key()
        model, url, timeout_seconds = self._get_gemini_config()
        payload = self._build_gemini_payload(contents, params)

        if token is not None and token.cancelled:
            raise RequestCancelled()

        logger.info("[LLMService] Calling Gemini API with model: %s", model)
        request = asyncio.ensure_future(self._post(url, payload, api_key, timeout_seconds))

        if token is None:
            data = await request
        else:
            waiter = asyncio.ensure_future(token.wait())
            try:
                await asyncio.wait({request, waiter}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                waiter.cancel()
                # Also reached when the caller itself is cancelled
                if not request.done():
                    request.cancel()
            if token.cancelled:
                if request.done() and not request.cancelled():
                    # Late result (or failure) of a cancelled request is dropped
                    request.exception()
                logger.info("[LLMService] Request cancelled by caller")
                raise RequestCancelled()
            data = request.result()

        text = self._extract_gemini_text(data)
        logger.info("[LLMService] Received response from %s (length: %d chars)", model, len(text))
        return text

    async def send(self, prompt: str, params: GenerationParams, token: CancellationToken | None = None) -> str:
        """Send a single user prompt"""
        return await self.generate([{"role": "user", "parts": [{"text": prompt}]}], params, token)

"""Tests for the Gemini gateway: payloads, validation and cancellation."""

import asyncio

import pytest

from helpers import FakeLLMService
from models.chat import ChatRole, ConversationTurn
from services.cancellation import CancellationToken
from services.errors import (
    EndpointError,
    MalformedResponseError,
    MissingApiKeyError,
    NetworkError,
    RequestCancelled,
)
from services.llm_service import LLMService, to_contents
from services.prompt_builder import GenerationParams

PARAMS = GenerationParams(temperature=0.0, max_output_tokens=2000)


class TestPayload:
    @pytest.mark.asyncio
    async def test_send_builds_single_user_content(self):
        llm = FakeLLMService(["ok"])
        assert await llm.send("review this", PARAMS) == "ok"
        payload = llm.payloads[0]
        assert payload["contents"] == [{"role": "user", "parts": [{"text": "review this"}]}]
        assert payload["generationConfig"] == {"temperature": 0.0, "maxOutputTokens": 2000}

    def test_role_vocabulary(self):
        turns = [
            ConversationTurn(role=ChatRole.USER, content="q"),
            ConversationTurn(role=ChatRole.ASSISTANT, content="a"),
            ConversationTurn(role=ChatRole.ASSISTANT, content="a2"),
        ]
        assert [c["role"] for c in to_contents(turns)] == ["user", "model", "model"]

    def test_endpoint_url_uses_model(self):
        llm = LLMService({"gemini": {"apiKey": "k", "model": "gemini-x", "baseUrl": "https://host/v1/models/"}})
        model, url, timeout = llm._get_gemini_config()
        assert url == "https://host/v1/models/gemini-x:generateContent"
        assert timeout == 60


class TestApiKey:
    def test_missing_key(self):
        with pytest.raises(MissingApiKeyError):
            LLMService({"gemini": {"apiKey": ""}}).require_api_key()

    def test_secret_provider_wins(self):
        llm = LLMService({"gemini": {"apiKey": "from-config"}}, secret_provider=lambda key: "from-store")
        assert llm.require_api_key() == "from-store"

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_request(self):
        llm = FakeLLMService(api_key="")
        with pytest.raises(MissingApiKeyError):
            await llm.send("hi", PARAMS)
        assert llm.payloads == []


class TestResponseValidation:
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"candidates": []},
            {"candidates": [{"content": {}}]},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": "..."}]}}]},
            {"candidates": [{"content": {"parts": [{"text": 12}]}}]},
            [],
        ],
    )
    @pytest.mark.asyncio
    async def test_missing_text_is_malformed(self, body):
        llm = FakeLLMService([body])
        with pytest.raises(MalformedResponseError):
            await llm.send("hi", PARAMS)

    @pytest.mark.parametrize("error", [NetworkError("boom"), EndpointError(400, "API key not valid")])
    @pytest.mark.asyncio
    async def test_failures_surface_without_retry(self, error):
        llm = FakeLLMService([error, "never used"])
        with pytest.raises(type(error)):
            await llm.send("hi", PARAMS)
        assert len(llm.payloads) == 1

    def test_error_message_from_body(self):
        body = {"error": {"code": 400, "message": "API key not valid"}}
        assert LLMService._error_message(body, "raw") == "API key not valid"
        assert LLMService._error_message(None, "raw") == "raw"


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_in_flight_request(self):
        llm = FakeLLMService(["late answer"])
        llm.gate = asyncio.Event()
        token = CancellationToken()

        task = asyncio.ensure_future(llm.send("hi", PARAMS, token))
        await asyncio.sleep(0)
        token.cancel()

        with pytest.raises(RequestCancelled):
            await task

    @pytest.mark.asyncio
    async def test_already_cancelled_token_sends_nothing(self):
        llm = FakeLLMService(["x"])
        token = CancellationToken()
        token.cancel()
        with pytest.raises(RequestCancelled):
            await llm.send("hi", PARAMS, token)
        assert llm.payloads == []

    @pytest.mark.asyncio
    async def test_uncancelled_token_returns_reply(self):
        llm = FakeLLMService(["answer"])
        assert await llm.send("hi", PARAMS, CancellationToken()) == "answer"

    @pytest.mark.asyncio
    async def test_caller_cancellation_stops_transport(self):
        llm = FakeLLMService(["never delivered"])
        llm.gate = asyncio.Event()

        task = asyncio.ensure_future(llm.send("hi", PARAMS, CancellationToken()))
        while not llm.payloads:
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0)
        pending = [
            t for t in asyncio.all_tasks()
            if not t.done() and "_post" in getattr(t.get_coro(), "__qualname__", "")
        ]
        assert pending == []

    @pytest.mark.asyncio
    async def test_late_success_is_discarded(self):
        llm = FakeLLMService(["late answer"])
        llm.gate = asyncio.Event()
        token = CancellationToken()

        task = asyncio.ensure_future(llm.send("hi", PARAMS, token))
        await asyncio.sleep(0)
        # Reply and cancellation become ready in the same loop iteration
        llm.gate.set()
        token.cancel()

        with pytest.raises(RequestCancelled):
            await task

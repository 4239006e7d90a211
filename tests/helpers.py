"""Test doubles shared across the backend tests."""

import asyncio

from services.llm_service import LLMService


def gemini_reply(text):
    """Minimal generateContent response body carrying `text`."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class FakeLLMService(LLMService):
    """Gateway whose transport returns scripted replies instead of calling Gemini."""

    def __init__(self, replies=None, api_key="AIza-test-key", config=None):
        config = config or {"gemini": {"apiKey": api_key, "model": "gemini-test"}}
        super().__init__(config)
        self._replies = list(replies or [])
        self.payloads = []
        self.gate = None  # set to an asyncio.Event to hold requests open

    def queue(self, *replies):
        self._replies.extend(replies)

    @property
    def prompts(self):
        return [p["contents"][-1]["parts"][0]["text"] for p in self.payloads]

    async def _post(self, url, payload, api_key, timeout_seconds):
        self.payloads.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        reply = self._replies.pop(0) if self._replies else "[]"
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            # Raw response body
            return reply
        return gemini_reply(reply)


def drain(queue: asyncio.Queue):
    """All events currently waiting in a subscriber queue."""
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
    return events

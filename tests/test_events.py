"""Tests for the presentation event stream served on /api/events."""

import asyncio
import json

import pytest

from helpers import FakeLLMService
from models.document import TextDocument
from routers.events import event_stream
from services.config_manager import ConfigManager
from services.container import build_container

DOC_ID = "file:///proj/calc.py"


class FakeConnection:
    """Client side of the SSE connection"""

    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


@pytest.fixture
def services(config_dir):
    return build_container(ConfigManager(config_dir), llm_service=FakeLLMService())


async def _next(stream):
    return await stream.__anext__()


async def _subscribe(services, connection):
    """Open the stream and wait until it listens on the bus"""
    stream = (await event_stream(connection, services)).body_iterator
    pending = asyncio.ensure_future(_next(stream))
    while services.events.subscriber_count == 0:
        await asyncio.sleep(0)
    return stream, pending


@pytest.mark.asyncio
async def test_events_arrive_in_publication_order(services):
    connection = FakeConnection()
    stream, pending = await _subscribe(services, connection)

    services.workspace.open(TextDocument(document_id=DOC_ID, language_id="python", content="ratio = 1 / 0"))
    services.llm_service.queue(
        '[{"line": 1, "message": "Division by zero at runtime", "severity": "error"}]',
        "Guard the divisor before dividing.",
    )
    await services.review_service.review_document(DOC_ID)
    await services.chat_session.send("Why is this flagged?")

    messages = [await pending] + [await _next(stream) for _ in range(2)]

    assert [m["event"] for m in messages] == ["message"] * 3
    payloads = [json.loads(m["data"]) for m in messages]
    assert [p["type"] for p in payloads] == ["diagnosticsUpdated", "chatTurnAppended", "chatTurnAppended"]
    assert payloads[0]["document_id"] == DOC_ID
    assert [d["message"] for d in payloads[0]["diagnostics"]] == ["Division by zero at runtime"]
    assert payloads[1]["turn"] == {"role": "user", "content": "Why is this flagged?"}
    assert payloads[2]["turn"]["content"] == "Guard the divisor before dividing."

    connection.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await _next(stream)
    assert services.events.subscriber_count == 0


@pytest.mark.asyncio
async def test_closing_the_stream_unsubscribes(services):
    stream, pending = await _subscribe(services, FakeConnection())

    services.chat_session.clear()
    assert json.loads((await pending)["data"])["type"] == "chatCleared"

    await stream.aclose()
    assert services.events.subscriber_count == 0


@pytest.mark.asyncio
async def test_each_subscriber_gets_every_event(services):
    first, first_pending = await _subscribe(services, FakeConnection())
    second = (await event_stream(FakeConnection(), services)).body_iterator
    second_pending = asyncio.ensure_future(_next(second))
    while services.events.subscriber_count < 2:
        await asyncio.sleep(0)

    services.chat_session.clear()

    for pending in (first_pending, second_pending):
        assert json.loads((await pending)["data"])["type"] == "chatCleared"
    await first.aclose()
    await second.aclose()
    assert services.events.subscriber_count == 0

"""Cooperative cancellation for in-flight model requests"""

from __future__ import annotations

import asyncio


class CancellationToken:
    """Cancellation handle for exactly one in-flight request.

    Only the owner of the token cancels it. Cancelling does not stop the
    network call by itself; the gateway watches the token and discards
    whatever the call produces afterwards.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self):
        self._event.set()

    async def wait(self):
        await self._event.wait()

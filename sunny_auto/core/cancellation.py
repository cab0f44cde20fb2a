"""
Cancellation tokens for calls to the hosted backend.

A controller passes a token into a boundary call and checks it again
before committing the result to its state. Once cancelled, results that
arrive later are discarded instead of overwriting newer state.

Inside the API every request gets a `RequestToken`, which turns itself
cancelled as soon as the client has gone away.
"""
from typing import Awaitable, Optional, TypeVar

from fastapi import Request

from sunny_auto.core.errors import Cancelled

T = TypeVar("T")


class CancellationToken:
    def __init__(self, reason: Optional[str] = None):
        self._cancelled = False
        self.reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: Optional[str] = None):
        self._cancelled = True
        if reason:
            self.reason = reason

    async def refresh(self):
        """Picks up cancellation from an outside source. Plain tokens only change through `cancel`."""

    def raise_if_cancelled(self):
        if self._cancelled:
            raise Cancelled(self.reason or "operation cancelled")

    async def check(self):
        await self.refresh()
        self.raise_if_cancelled()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await a boundary call and refuse to hand back its result if cancelled meanwhile."""
        try:
            await self.check()
        except Cancelled:
            # never started, don't leave the coroutine un-awaited
            close = getattr(awaitable, "close", None)
            if close:
                close()
            raise
        result = await awaitable
        await self.check()
        return result


class RequestToken(CancellationToken):
    """Cancelled once the HTTP client disconnects."""

    def __init__(self, request: Request):
        super().__init__()
        self.request = request

    async def refresh(self):
        if not self._cancelled and await self.request.is_disconnected():
            self.cancel(f"client disconnected from {self.request.url.path}")


async def request_token(request: Request) -> CancellationToken:
    return RequestToken(request)

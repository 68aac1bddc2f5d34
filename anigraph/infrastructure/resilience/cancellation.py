"""Cancellation signal passed by callers into every catalog operation.

The token is observed at each suspension point: the rate-limit wait, the
wait after a throttled response, and the network exchange itself. When it
fires, the suspended operation unwinds with OperationCancelledError.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from anigraph.domain.errors import OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot, caller-owned cancellation signal for asyncio code."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: Optional[str] = None) -> None:
        """Fires the token. Idempotent; the first reason wins."""
        if not self._event.is_set():
            self._reason = reason
            logger.debug(f"Cancellation requested{': ' + reason if reason else ''}")
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(self._reason)

    async def sleep(self, seconds: float) -> None:
        """Sleeps for `seconds`, returning early with an error if the token fires."""
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        raise OperationCancelledError(self._reason)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Awaits `awaitable`, abandoning (and cancelling) it if the token fires first."""
        self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            raise

        if task in done:
            waiter.cancel()
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        raise OperationCancelledError(self._reason)

"""Lazy, single-pass iteration over paged catalog listings.

A Pager requests page 1, yields its items in server order, and moves on to
the next page only while the server reports one. Nothing is prefetched and
pages are requested strictly in increasing order.
"""

import logging
from contextlib import aclosing
from typing import AsyncIterator, Callable, Generic, List, Optional, TypeVar

from anigraph.domain.models.common import PageEnvelope, PageIndex
from anigraph.infrastructure.graphql.operations import Operation, Variables
from anigraph.infrastructure.resilience.cancellation import CancellationToken
from anigraph.infrastructure.resilience.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

FIRST_PAGE = PageIndex(1)


class Pager(Generic[T]):
    """Forward-only async sequence of the items of a paged operation.

    Iterating a Pager a second time raises RuntimeError; build a new one
    through the client instead. Iteration stops when the server reports no
    next page or returns no page at all, never on an empty item list alone.
    """

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        operation: Operation[PageEnvelope[T]],
        variables_for_page: Callable[[PageIndex], Variables],
        cancel: Optional[CancellationToken] = None,
    ):
        self._dispatcher = dispatcher
        self._operation = operation
        self._variables_for_page = variables_for_page
        self._cancel = cancel or CancellationToken()
        self._started = False
        self.pages_fetched = 0
        self.items_yielded = 0

    @property
    def operation_name(self) -> str:
        return self._operation.name

    def __aiter__(self) -> AsyncIterator[T]:
        if self._started:
            raise RuntimeError(f"Results of '{self._operation.name}' can only be iterated once")
        self._started = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        token = self._cancel
        page = FIRST_PAGE
        has_next_page = True

        while has_next_page:
            token.raise_if_cancelled()
            envelope = await self._dispatcher.dispatch(
                self._operation, self._variables_for_page(page), token
            )
            if envelope is None:
                logger.debug(f"'{self._operation.name}' returned no page {page}; stopping.")
                break
            self.pages_fetched += 1
            logger.debug(
                f"'{self._operation.name}' page {page}: {len(envelope.items)} items, "
                f"has_next_page={envelope.has_next_page}"
            )

            for item in envelope.items:
                token.raise_if_cancelled()
                self.items_yielded += 1
                yield item

            has_next_page = envelope.has_next_page
            page = PageIndex(page + 1)

        logger.debug(
            f"'{self._operation.name}' finished: {self.pages_fetched} pages, {self.items_yielded} items."
        )

    async def to_list(self, limit: Optional[int] = None) -> List[T]:
        """Drains the pager into a list, stopping early after `limit` items if given."""
        items: List[T] = []
        if limit is not None and limit <= 0:
            return items
        async with aclosing(self.__aiter__()) as iterator:
            async for item in iterator:
                items.append(item)
                if limit is not None and len(items) >= limit:
                    break
        return items

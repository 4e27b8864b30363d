"""
Sequential walk over every page of the patient collection.

Page N's existence is only known once page N-1 has answered, so pages are
fetched strictly one after another in an explicit loop.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any

import structlog

from vitals.config import PaginationConfig
from vitals.domain.models import PageRequest, PageResponse
from vitals.services.fetcher import RetryingFetcher

logger = structlog.get_logger(__name__)

PageConsumer = Callable[[list[Any]], None]


class Paginator:
    """Drives a RetryingFetcher across all pages."""

    def __init__(self, fetcher: RetryingFetcher, config: PaginationConfig | None = None) -> None:
        self.fetcher = fetcher
        self.config = config or PaginationConfig()
        self.logger = logger.bind(component="paginator")

    async def iter_pages(self, page_size: int | None = None) -> AsyncIterator[PageResponse]:
        """
        Yield pages in order until one reports no further pages.

        A FetchExhaustedError from the fetcher ends the walk; pages already
        yielded stay with the caller.
        """
        limit = page_size or self.config.page_size
        page = self.config.first_page

        while True:
            response = await self.fetcher.fetch(PageRequest(page=page, limit=limit))
            yield response

            if not response.has_next:
                self.logger.info("pagination_complete", last_page=page)
                return
            page += 1

    async def fetch_all(self, page_consumer: PageConsumer, page_size: int | None = None) -> int:
        """
        Hand every page's records to ``page_consumer`` before requesting the next.

        Returns:
            Number of pages walked.
        """
        pages = 0
        async for response in self.iter_pages(page_size):
            page_consumer(response.data)
            pages += 1
            self.logger.info("page_consumed", page_number=pages, records=len(response.data))
        return pages

"""Crawl orchestration for the ranked listing.

The crawler drives the two extraction stages strictly in sequence: fetch
the first page and discover the paginator, then fetch and extract every
discovered page in discovery order. Results are committed only after the
whole crawl succeeded, so a failure part-way leaves nothing behind.
"""

from collections.abc import Callable
from enum import Enum

from config.settings import TARGET_URL
from top250.extractor import extract_items
from top250.fetcher import DocumentProvider
from top250.logger import get_logger, page_context
from top250.models import ItemRecord, PageDescriptor
from top250.pagination import discover_pages

log = get_logger(__name__)

RecordConsumer = Callable[[int, ItemRecord], None]


class CrawlState(Enum):
    """Lifecycle of a crawler instance."""

    NOT_STARTED = "not_started"
    POPULATED = "populated"


class Top250Crawler:
    """Collects every ranked entry of the listing.

    ``run()`` is idempotent: once the records are populated, later calls
    return them again without touching the network.

    Attributes:
        provider: Source of parsed documents.
        target_url: Base URL; page URLs are ``target_url + relative_path``.
        consumer: Called with ``(rank, record)`` for each record after a run.
        state: Whether records have been collected yet.

    Example:
        async with PageFetcher.create() as fetcher:
            crawler = Top250Crawler(fetcher, consumer=print_record)
            records = await crawler.run()
    """

    def __init__(
        self,
        provider: DocumentProvider,
        target_url: str = TARGET_URL,
        consumer: RecordConsumer | None = None,
    ) -> None:
        self.provider = provider
        self.target_url = target_url
        self.consumer = consumer
        self.state = CrawlState.NOT_STARTED
        self._pages: list[PageDescriptor] = []
        self._items: list[ItemRecord] = []

    @property
    def pages(self) -> list[PageDescriptor]:
        """Pages discovered by the last successful run."""
        return list(self._pages)

    @property
    def items(self) -> list[ItemRecord]:
        """Records collected by the last successful run, in rank order."""
        return list(self._items)

    async def run(self) -> list[ItemRecord]:
        """Collect all records, then report them to the consumer.

        Returns:
            Every record in page order, then document order within a page.

        Raises:
            Top250Error: Any fetch or parse failure. Nothing is committed
                and the consumer is not called.
        """
        if self.state is CrawlState.NOT_STARTED:
            pages, items = await self._crawl()
            self._pages = pages
            self._items = items
            self.state = CrawlState.POPULATED
        else:
            log.debug("Records already populated, skipping crawl", total_items=len(self._items))

        if self.consumer is not None:
            for rank, record in enumerate(self._items, start=1):
                self.consumer(rank, record)

        return self.items

    async def _crawl(self) -> tuple[list[PageDescriptor], list[ItemRecord]]:
        log.info("Starting crawl", target_url=self.target_url)

        first_page = await self.provider.fetch("GET", self.target_url)
        pages = discover_pages(first_page)

        items: list[ItemRecord] = []
        for page in pages:
            url = self.target_url + page.relative_path
            page_log = page_context(log, page.number, url)

            page_log.debug("Fetching listing page")
            doc = await self.provider.fetch("GET", url)
            page_items = extract_items(doc)
            items.extend(page_items)

            page_log.info(
                "Page extraction complete",
                items_extracted=len(page_items),
                total_items=len(items),
            )

        log.info("Crawl complete", pages_scraped=len(pages), total_items=len(items))
        return pages, items

"""Pagination discovery for the ranked listing.

Only the first listing page carries the paginator. Page 1 itself is not
linked there, so it is seeded implicitly with an empty relative path.
"""

import re

from top250.document import Document
from top250.exceptions import UnexpectedFormatError
from top250.logger import get_logger
from top250.models import PageDescriptor

log = get_logger(__name__)

PAGINATOR_LINK_SELECTOR = "#content > div > div.article > div.paginator > a"

_PAGE_NUMBER = re.compile(r"\s*([0-9]+)\s*")


def parse_page_number(text: str) -> int:
    """Parse the visible text of a paginator link as a positive integer.

    Raises:
        UnexpectedFormatError: If the text is not a positive decimal integer.
    """
    match = _PAGE_NUMBER.fullmatch(text)
    if match is None or int(match.group(1)) < 1:
        raise UnexpectedFormatError(
            selector=PAGINATOR_LINK_SELECTOR,
            reason="page link text is not a positive integer",
            text=text,
        )
    return int(match.group(1))


def discover_pages(doc: Document) -> list[PageDescriptor]:
    """Build the ordered list of listing pages from the first page.

    Links are taken in markup order and are not deduplicated: a link the
    source repeats is returned, and therefore fetched, twice.

    Args:
        doc: Parsed first listing page.

    Returns:
        Page 1 followed by one descriptor per paginator link.

    Raises:
        UnexpectedFormatError: If a link has a malformed number or no href.
    """
    pages = [PageDescriptor(number=1, relative_path="")]
    seen = {1}

    for link in doc.find(PAGINATOR_LINK_SELECTOR):
        number = parse_page_number(link.text())
        href = link.attr("href")
        if href is None:
            raise UnexpectedFormatError(
                selector=PAGINATOR_LINK_SELECTOR,
                reason=f"link for page {number} has no href",
            )

        if number in seen:
            log.warning("Paginator repeats a page link", page_number=number, href=href)
        seen.add(number)

        pages.append(PageDescriptor(number=number, relative_path=href))
        log.debug("Discovered listing page", page_number=number, href=href)

    log.info("Pagination discovered", url=doc.url, pages=len(pages))
    return pages

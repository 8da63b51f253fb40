"""Per-entry field extraction for listing pages.

Each entry of the ranked list is an ``<li>`` with three regions:

- ``.hd``: a link holding up to three title spans
  (title, ``&nbsp;/&nbsp;``-prefixed original title, other titles)
- ``.bd``: a paragraph with the credits line and a
  ``year / region / genres`` line, followed by the rating block
- ``.quote``: an optional one-line quote

Optional nodes degrade to empty strings. The body paragraph is the one
structural assumption that is enforced: it must split into a credits
line and a facts line with at least three slash-separated parts.
"""

import re

from top250.document import Document, Node
from top250.exceptions import UnexpectedFormatError
from top250.logger import get_logger
from top250.models import ItemRecord

log = get_logger(__name__)

ENTRY_SELECTOR = "#content > div > div.article > ol > li"
TITLE_SPAN_SELECTOR = ".hd a span"
BODY_SELECTOR = ".bd p"
RATING_SCORE_SELECTOR = ".bd .star .rating_num"
RATING_SPAN_SELECTOR = ".bd .star span"
QUOTE_SELECTOR = ".quote .inq"

# Index of the "N人评价" span inside the rating block.
RATING_COUNT_SPAN = 3

# Spaces (including the non-breaking ones the site emits) and slashes.
_TITLE_SEPARATOR_CHARS = " \u00a0/"
_DIGITS = re.compile(r"[0-9]")


def strip_title_separator(text: str) -> str:
    """Remove the leading ``" / "`` run that prefixes secondary titles.

    >>> strip_title_separator("\\u00a0/\\u00a0Amores Perros")
    'Amores Perros'
    """
    return text.lstrip(_TITLE_SEPARATOR_CHARS)


def digits_only(text: str) -> str:
    """Keep only ASCII decimal digits: ``"1,234人评价"`` -> ``"1234"``."""
    return "".join(_DIGITS.findall(text.strip()))


def split_body(text: str) -> tuple[str, str, str, str]:
    """Split the body paragraph into description, year, region and genres.

    The paragraph reads ``"<credits>\\n<year> / <region> / <genres>"``.
    Some entries list several release years (``"1961 / 1964 / 中国大陆 / 动画"``);
    the last two parts are always region and genres, so every leading part
    is kept together as the year. This departs from a plain positional
    read of parts 0, 1 and 2, which would file the second and third
    release years as region and genres.

    Args:
        text: Raw text content of the body paragraph.

    Returns:
        ``(description, year, region, genre_tags)``, each stripped.

    Raises:
        UnexpectedFormatError: If there is no facts line or it has fewer
            than three parts.
    """
    lines = text.strip().split("\n")
    if len(lines) < 2:
        raise UnexpectedFormatError(
            selector=BODY_SELECTOR,
            reason="body text has no facts line",
            text=text,
        )

    description = lines[0].strip()
    parts = [part.strip() for part in lines[1].split("/")]
    if len(parts) < 3:
        raise UnexpectedFormatError(
            selector=BODY_SELECTOR,
            reason=f"facts line has {len(parts)} part(s), expected year / region / genres",
            text=lines[1],
        )

    year = " / ".join(parts[:-2])
    return description, year, parts[-2], parts[-1]


def extract_item(entry: Node) -> ItemRecord:
    """Build an ItemRecord from one entry node."""
    titles = entry.find(TITLE_SPAN_SELECTOR)
    description, year, region, genre_tags = split_body(entry.find(BODY_SELECTOR).eq(0).text())

    return ItemRecord(
        title=titles.eq(0).text(),
        subtitle=strip_title_separator(titles.eq(1).text()),
        other_titles=strip_title_separator(titles.eq(2).text()),
        description=description,
        year=year,
        region=region,
        genre_tags=genre_tags,
        rating_score=entry.find(RATING_SCORE_SELECTOR).text(),
        rating_count=digits_only(entry.find(RATING_SPAN_SELECTOR).eq(RATING_COUNT_SPAN).text()),
        quote=entry.find(QUOTE_SELECTOR).text(),
    )


def extract_items(doc: Document) -> list[ItemRecord]:
    """Extract every entry of a listing page in document order.

    Args:
        doc: Parsed listing page.

    Returns:
        One ItemRecord per entry node; empty if the page has none.

    Raises:
        UnexpectedFormatError: If an entry's body text is malformed. The
            error context names the entry's position on the page.
    """
    items: list[ItemRecord] = []

    for index, entry in enumerate(doc.find(ENTRY_SELECTOR)):
        try:
            items.append(extract_item(entry))
        except UnexpectedFormatError as exc:
            exc.context.update(url=doc.url, entry_index=index)
            log.error(
                "Entry does not match listing layout",
                url=doc.url,
                entry_index=index,
                reason=exc.message,
            )
            raise

    if not items:
        log.warning("No entries found on listing page", url=doc.url, selector=ENTRY_SELECTOR)

    log.debug("Entries extracted", url=doc.url, count=len(items))
    return items

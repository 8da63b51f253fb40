"""Queryable markup document built on BeautifulSoup.

The extraction code only needs four capabilities from a parsed page:
find nodes matching a CSS selector, pick the nth match, look up an
attribute, and read text content. This module exposes exactly those,
so the parsing rules never touch the markup library directly.

Selections behave like jQuery-style result sets: picking an index that
does not exist yields an empty selection whose text is ``""`` and whose
attributes are ``None``, rather than raising.
"""

from collections.abc import Iterator, Sequence

from bs4 import BeautifulSoup, Tag

from top250.exceptions import MarkupParseError

# Stdlib parser keeps the document tree independent of compiled extras.
_PARSER = "html.parser"


class Node:
    """A single element of a parsed document."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def find(self, selector: str) -> "Selection":
        """Return every descendant matching ``selector`` in document order."""
        return Selection(self._tag.select(selector))

    def attr(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        # Multi-valued attributes (class, rel) come back as lists.
        if isinstance(value, list):
            return " ".join(value)
        return value

    def text(self) -> str:
        return self._tag.get_text()

    def __repr__(self) -> str:
        return f"Node(<{self._tag.name}>)"


class Selection:
    """An ordered, possibly empty, set of matched nodes."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Sequence[Tag] = ()) -> None:
        self._tags = list(tags)

    def eq(self, index: int) -> "Selection":
        """Return the match at ``index`` as a selection (empty if out of range)."""
        if 0 <= index < len(self._tags):
            return Selection([self._tags[index]])
        return Selection()

    def find(self, selector: str) -> "Selection":
        """Return descendants of every match that satisfy ``selector``."""
        found: list[Tag] = []
        seen: set[int] = set()
        for tag in self._tags:
            for match in tag.select(selector):
                if id(match) not in seen:
                    seen.add(id(match))
                    found.append(match)
        return Selection(found)

    def attr(self, name: str) -> str | None:
        """Return attribute ``name`` of the first match, or None."""
        if not self._tags:
            return None
        return Node(self._tags[0]).attr(name)

    def text(self) -> str:
        """Return the combined text content of all matches."""
        return "".join(tag.get_text() for tag in self._tags)

    def __iter__(self) -> Iterator[Node]:
        return (Node(tag) for tag in self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __bool__(self) -> bool:
        return bool(self._tags)

    def __repr__(self) -> str:
        return f"Selection(matches={len(self._tags)})"


class Document(Node):
    """Root of a parsed page, with the URL it was fetched from."""

    __slots__ = ("url",)

    def __init__(self, soup: BeautifulSoup, url: str = "") -> None:
        super().__init__(soup)
        self.url = url

    @classmethod
    def parse(cls, markup: str | bytes, url: str = "") -> "Document":
        """Build a document from raw markup.

        Args:
            markup: Page source as text or encoded bytes.
            url: Source URL, kept for error context.

        Returns:
            Parsed Document.

        Raises:
            MarkupParseError: If the input is not markup or the parser fails.
        """
        if not isinstance(markup, (str, bytes)):
            raise MarkupParseError(
                url=url, reason=f"expected str or bytes, got {type(markup).__name__}"
            )
        try:
            soup = BeautifulSoup(markup, _PARSER)
        except Exception as exc:
            raise MarkupParseError(url=url, reason=str(exc)) from exc
        return cls(soup, url=url)

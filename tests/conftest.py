"""Pytest configuration and shared fixtures for the Top250 crawler test suite.

Guarantees:
- No external network requests (documents are served from memory)
- Isolated state (config singleton cleared around every test)

The listing page factory renders markup shaped like the real source:
entries under ``#content > div > div.article > ol > li`` and a paginator
whose direct ``<a>`` children are the numbered page links.
"""

import sys
from pathlib import Path
from typing import Any, Callable

import pytest
from loguru import logger

from config.settings import GlobalConfig
from top250.document import Document
from top250.exceptions import TransportError

TEST_TARGET_URL = "https://test.example.com/top250"

DEFAULT_ENTRY: dict[str, Any] = {
    "title": "肖申克的救赎",
    "subtitle": "&nbsp;/&nbsp;The Shawshank Redemption",
    "other": "&nbsp;/&nbsp;月黑高飞(港)  /  刺激1995(台)",
    "credits": "导演: 弗兰克·德拉邦特 Frank Darabont&nbsp;&nbsp;&nbsp;主演: 蒂姆·罗宾斯 Tim Robbins /...",
    "facts": "1994&nbsp;/&nbsp;美国&nbsp;/&nbsp;犯罪 剧情",
    "score": "9.7",
    "count": "2,876,543人评价",
    "quote": "希望让人自由。",
}


@pytest.fixture
def mock_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GlobalConfig:
    """Provide isolated GlobalConfig with safe test defaults.

    Clears the lru_cache singleton before and after the test and points
    the log directory at tmp_path.
    """
    from config.settings import get_config

    get_config.cache_clear()

    log_dir = tmp_path / "logs"
    log_dir.mkdir()

    test_env = {
        "TOP250_APP_NAME": "Top250-Test",
        "TOP250_ENVIRONMENT": "test",
        "TOP250_DEBUG": "false",
        "TOP250_LOG_LEVEL": "DEBUG",
        "TOP250_LOG_DIR": str(log_dir),
        "TOP250_LOG_ROTATION": "1 day",
        "TOP250_LOG_RETENTION": "1 day",
        "TOP250_REQUEST_TIMEOUT_MS": "5000",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    config = get_config()

    yield config

    get_config.cache_clear()


def _render_entry(rank: int, fields: dict[str, Any]) -> str:
    """Render one ``<li>`` entry; a None field omits its node."""
    spans = []
    if fields["title"] is not None:
        spans.append(f'<span class="title">{fields["title"]}</span>')
    if fields["subtitle"] is not None:
        spans.append(f'<span class="title">{fields["subtitle"]}</span>')
    if fields["other"] is not None:
        spans.append(f'<span class="other">{fields["other"]}</span>')

    body = fields.get("body")
    if body is None:
        body = f"""
                                {fields["credits"]}<br>
                                {fields["facts"]}
                            """

    count_html = f'<span>{fields["count"]}</span>' if fields["count"] is not None else ""
    quote_html = (
        f'<p class="quote"><span class="inq">{fields["quote"]}</span></p>'
        if fields["quote"] is not None
        else ""
    )

    return f"""
    <li>
        <div class="item">
            <div class="pic"><em class="">{rank}</em></div>
            <div class="info">
                <div class="hd">
                    <a href="https://movie.example.com/subject/{rank}/">{"".join(spans)}</a>
                    <span class="playable">[可播放]</span>
                </div>
                <div class="bd">
                    <p class="">{body}</p>
                    <div class="star">
                        <span class="rating5-t"></span>
                        <span class="rating_num" property="v:average">{fields["score"]}</span>
                        <span property="v:best" content="10.0"></span>
                        {count_html}
                    </div>
                    {quote_html}
                </div>
            </div>
        </div>
    </li>
    """


@pytest.fixture
def listing_page_factory() -> Callable[..., str]:
    """Factory fixture for generating listing page markup.

    Example:
        html = listing_page_factory(
            count=3,
            overrides={1: {"quote": None}},
            page_links=[("2", "?start=25&filter=")],
        )
    """

    def _generate_html(
        count: int = 25,
        overrides: dict[int, dict[str, Any]] | None = None,
        page_links: list[tuple[str, str | None]] | None = None,
        first_rank: int = 1,
    ) -> str:
        overrides = overrides or {}

        entries = []
        for i in range(count):
            fields = {**DEFAULT_ENTRY, "title": f"Movie {first_rank + i}"}
            fields.update(overrides.get(i, {}))
            entries.append(_render_entry(first_rank + i, fields))

        paginator = ""
        if page_links is not None:
            links = []
            for text, href in page_links:
                href_attr = f' href="{href.replace("&", "&amp;")}"' if href is not None else ""
                links.append(f"<a{href_attr}>{text}</a>")
            next_href = page_links[0][1] if page_links and page_links[0][1] else ""
            paginator = f"""
            <div class="paginator">
                <span class="prev">&lt;前页</span>
                <span class="thispage">1</span>
                {"".join(links)}
                <span class="next">
                    <link rel="next" href="{next_href.replace("&", "&amp;")}"/>
                    <a href="{next_href.replace("&", "&amp;")}">后页&gt;</a>
                </span>
                <span class="count">(共{count}条)</span>
            </div>
            """

        return f"""
        <!DOCTYPE html>
        <html lang="zh-CN">
        <head><meta charset="utf-8"><title>豆瓣电影 Top 250</title></head>
        <body>
            <div id="wrapper">
                <div id="content">
                    <h1>豆瓣电影 Top 250</h1>
                    <div class="grid-16-8 clearfix">
                        <div class="article">
                            <div class="opt mod"></div>
                            <ol class="grid_view">
                                {"".join(entries)}
                            </ol>
                            {paginator}
                        </div>
                        <div class="aside"></div>
                    </div>
                </div>
            </div>
        </body>
        </html>
        """

    return _generate_html


class InMemoryProvider:
    """DocumentProvider serving canned markup and recording every request.

    Attributes:
        pages: Mapping of absolute URL to markup.
        fail_on: URLs that raise TransportError instead of answering.
        requests: ``(method, url)`` pairs in the order they were issued.
    """

    def __init__(self, pages: dict[str, str], fail_on: set[str] | None = None) -> None:
        self.pages = pages
        self.fail_on = fail_on or set()
        self.requests: list[tuple[str, str]] = []

    async def fetch(self, method: str, url: str, body: str | bytes | None = None) -> Document:
        self.requests.append((method, url))
        if url in self.fail_on or url not in self.pages:
            raise TransportError(url=url, reason="connection refused")
        return Document.parse(self.pages[url], url=url)

    @property
    def fetched_urls(self) -> list[str]:
        return [url for _, url in self.requests]


def build_listing(factory: Callable[..., str], target_url: str) -> dict[str, str]:
    """Ten listing pages of 25 entries each, keyed by absolute URL."""
    links = [(str(n), f"?start={(n - 1) * 25}&filter=") for n in range(2, 11)]

    pages = {target_url: factory(count=25, page_links=links)}
    for number, href in links:
        first_rank = (int(number) - 1) * 25 + 1
        pages[target_url + href] = factory(count=25, first_rank=first_rank)
    return pages


@pytest.fixture
def full_listing(listing_page_factory: Callable[..., str]) -> dict[str, str]:
    """The full ranking served under TEST_TARGET_URL."""
    return build_listing(listing_page_factory, TEST_TARGET_URL)


@pytest.fixture
def reset_loguru() -> None:
    """Restore loguru's default sink after tests that reconfigure logging."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring full stack",
    )

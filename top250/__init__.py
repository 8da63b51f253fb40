"""Top250 crawler core package.

This package contains the components of the crawl pipeline:
- document: queryable markup tree over BeautifulSoup
- fetcher: Playwright-backed page fetching
- pagination: discovery of listing pages from the paginator
- extractor: per-entry field extraction rules
- crawler: sequential crawl orchestration
- models: Pydantic page and record models
- logger: Structured logging configuration
- exceptions: Custom exception hierarchy
"""

__version__ = "1.0.0"

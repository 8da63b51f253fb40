"""Test suite for the Top250 crawler.

Tests mirror the top250/ package layout. All I/O is mocked: documents are
served from memory and Playwright is replaced with pytest-mock doubles.
"""

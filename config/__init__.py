"""Configuration module for the Top250 crawler.

Exposes the pydantic-settings configuration singleton and the fixed
crawl constants (target URL, User-Agent).
"""

from config.settings import TARGET_URL, USER_AGENT, GlobalConfig, get_config

__all__ = ["TARGET_URL", "USER_AGENT", "GlobalConfig", "get_config"]

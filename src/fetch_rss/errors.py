"""Exception types raised by fetch-rss."""

from typing import Optional


class FetchRSSError(Exception):
    """Base class for fetch-rss errors."""


class FeedFetchError(FetchRSSError):
    """The feed itself could not be retrieved; the run cannot continue."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Error fetching feed {url}: {reason}")

"""
RSS feed retrieval and parsing.

Fetches the feed document once per run and decodes it into a Channel of
FeedItems. Only title, guid, pubDate and link are extracted from each item;
pubDate is kept as raw text for the date filter.
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Optional

import feedparser
import requests

from fetch_rss.errors import FeedFetchError
from fetch_rss.models.entities import Channel, FeedItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedParseResult:
    """
    Outcome of decoding a feed document.

    Attributes:
        channel: Decoded channel; empty when parsing failed
        error: Parse failure description, None on success
    """

    channel: Channel
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fetch_feed(url: str, timeout: float) -> bytes:
    """
    Download the raw feed document.

    Normal redirects are followed. Anything other than a final 200 is a
    FeedFetchError, as is every transport-level failure.

    Args:
        url: Feed URL
        timeout: Request timeout in seconds

    Returns:
        Raw response body

    Raises:
        FeedFetchError: If the feed could not be retrieved
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.Timeout:
        raise FeedFetchError(url, f"timed out after {timeout}s")
    except requests.exceptions.RequestException as exc:
        raise FeedFetchError(url, str(exc))

    if response.status_code != 200:
        raise FeedFetchError(
            url,
            f"HTTP {response.status_code}",
            status_code=response.status_code,
        )

    return response.content


def parse_feed_bytes(content: bytes) -> FeedParseResult:
    """
    Decode a feed document into a Channel.

    Uses feedparser, which tolerates partially malformed documents. A
    document that feedparser flags as malformed and that yields no
    entries is reported as a parse failure; one that still yields entries
    is accepted with a warning.

    Args:
        content: Raw feed bytes

    Returns:
        FeedParseResult with the channel, or with ``error`` set

    Example:
        >>> result = parse_feed_bytes(body)
        >>> if result.ok:
        ...     print(len(result.channel.items))
    """
    feed = feedparser.parse(io.BytesIO(content))

    if feed.bozo and not feed.entries:
        error = f"Failed to parse feed: {feed.bozo_exception}"
        logger.error(error)
        return FeedParseResult(channel=Channel(), error=error)

    if feed.bozo:
        logger.warning(
            "Feed parsing encountered errors, continuing with %d item(s): %s",
            len(feed.entries),
            feed.bozo_exception,
        )

    channel_meta = getattr(feed, "feed", None) or {}
    channel = Channel(
        title=channel_meta.get("title", ""),
        items=[_extract_item(entry) for entry in feed.entries],
    )
    return FeedParseResult(channel=channel)


def _extract_item(entry: Any) -> FeedItem:
    """
    Build a FeedItem from a feedparser entry.

    Missing elements become empty strings; the date filter later rejects
    items without a usable pubDate.
    """
    return FeedItem(
        title=entry.get("title", "") or "",
        guid=entry.get("id", "") or entry.get("guid", "") or "",
        publish_date=entry.get("published", "") or "",
        link=_extract_link(entry),
    )


def _extract_link(entry: Any) -> str:
    """
    Return the text of the item's own <link> element.

    feedparser copies a permalink <guid> into ``link`` when the item has no
    <link>; only a real <link> element adds to ``links``, so an entry
    without ``links`` has no link.
    """
    if not entry.get("links"):
        return ""
    return entry.get("link", "") or ""

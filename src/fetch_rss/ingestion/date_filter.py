"""
Publish-date filtering.

An item is fetched only when its pubDate, parsed under the fixed layout
"Thu, 11 Jan 2024 21:00:00 +0000", renders to the target YYYY-MM-DD date.
The zone is a literal "+0000"; no timezone conversion is performed.
"""

import logging
from datetime import datetime
from typing import Optional

from fetch_rss.config import DATE_FORMAT
from fetch_rss.models.entities import FeedItem, FetchOutcome, SkipReason

logger = logging.getLogger(__name__)

PUBLISH_DATE_LAYOUT = "%a, %d %b %Y %H:%M:%S +0000"


def parse_publish_date(raw: str) -> datetime:
    """
    Parse a pubDate string under the fixed layout.

    Raises:
        ValueError: If the string does not match the layout
    """
    return datetime.strptime(raw.strip(), PUBLISH_DATE_LAYOUT)


def check_item_date(item: FeedItem, target_date: str) -> Optional[FetchOutcome]:
    """
    Decide whether an item should be fetched.

    Args:
        item: Feed item to check
        target_date: Date to match, as YYYY-MM-DD

    Returns:
        None if the item matches the target date, otherwise the terminal
        outcome for the item (an error for unparseable dates, a
        date-mismatch skip otherwise)
    """
    try:
        published = parse_publish_date(item.publish_date)
    except ValueError as exc:
        logger.warning("Error parsing publish date for %s: %s", item.title, exc)
        return FetchOutcome.failed(f"unparseable publish date {item.publish_date!r}")

    published_date = published.strftime(DATE_FORMAT)
    if published_date != target_date:
        logger.debug("Skipping, date mismatch: %s %s", item.title, published_date)
        return FetchOutcome.skipped(SkipReason.DATE_MISMATCH)

    return None

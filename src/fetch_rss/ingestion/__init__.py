"""
Ingestion module for feed parsing, date filtering and item downloading.

Provides the per-item pipeline used by the runner: parse the feed, filter
items by publish date, fetch each link under a redirect policy, and write
the result to the output directory.
"""

from fetch_rss.ingestion.date_filter import check_item_date
from fetch_rss.ingestion.downloader import fetch_item
from fetch_rss.ingestion.redirects import (
    FollowAllPolicy,
    RedirectAction,
    RedirectPolicy,
    RedirectPolicySession,
    SchemeCapturePolicy,
)
from fetch_rss.ingestion.rss_parser import fetch_feed, parse_feed_bytes
from fetch_rss.ingestion.writer import write_outcome

__all__ = [
    "check_item_date",
    "fetch_item",
    "fetch_feed",
    "parse_feed_bytes",
    "write_outcome",
    "FollowAllPolicy",
    "RedirectAction",
    "RedirectPolicy",
    "RedirectPolicySession",
    "SchemeCapturePolicy",
]

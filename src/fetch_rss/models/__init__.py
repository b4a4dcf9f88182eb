"""
Data models for feed items, channels and per-item fetch outcomes.
"""

from fetch_rss.models.entities import (
    Channel,
    FeedItem,
    FetchOutcome,
    OutcomeKind,
    SkipReason,
)

__all__ = ["Channel", "FeedItem", "FetchOutcome", "OutcomeKind", "SkipReason"]

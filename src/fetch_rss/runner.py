"""
Run driver: fetch the feed once, then process its items in order.

For every item the pipeline is date filter -> fetch (or skip) -> write.
Items are independent: a failure on one is recorded and the loop moves on.
Only a missing feed URL or a failed feed fetch stops the run, and then
before any item is touched.

Example:
    >>> from fetch_rss.config import get_config
    >>> from fetch_rss.runner import run_fetch
    >>> result = run_fetch(get_config({"url": "https://example.com/rss", "dry_run": False}))
    >>> print(result.to_json())
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fetch_rss.config import FetchConfig
from fetch_rss.errors import FeedFetchError
from fetch_rss.ingestion.date_filter import check_item_date
from fetch_rss.ingestion.downloader import fetch_item
from fetch_rss.ingestion.redirects import RedirectPolicySession, build_redirect_policy
from fetch_rss.ingestion.rss_parser import fetch_feed, parse_feed_bytes
from fetch_rss.ingestion.writer import write_outcome
from fetch_rss.models.entities import FeedItem, FetchOutcome, OutcomeKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Result models
# ---------------------------------------------------------------------------

@dataclass
class ItemResult:
    """
    What happened to a single feed item.

    Attributes:
        title: Item title
        guid: Item GUID
        link: Item link
        outcome: Terminal outcome kind
        skip_reason: Reason for skipped items
        detail: Error text, captured URL or byte count
        path: File written for the item, if any
    """

    title: str
    guid: str
    link: str
    outcome: OutcomeKind
    skip_reason: Optional[str] = None
    detail: str = ""
    path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "guid": self.guid,
            "link": self.link,
            "outcome": self.outcome.value,
            "skip_reason": self.skip_reason,
            "detail": self.detail,
            "path": str(self.path) if self.path else None,
        }


@dataclass
class RunResult:
    """
    Result of a fetch run.

    Attributes:
        target_date: Date items were matched against
        dry_run: Whether side effects were suppressed
        started_at: ISO-8601 timestamp of when the run started
        feed_title: Channel title, if the feed was parsed
        total_items: Number of items in the feed
        items: Per-item results in document order
        errors: Run-level errors (missing URL, feed fetch or parse failure)
    """

    target_date: str = ""
    dry_run: bool = True
    started_at: str = ""
    feed_title: str = ""
    total_items: int = 0
    items: List[ItemResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for item in self.items if item.outcome is kind)

    @property
    def written_paths(self) -> List[Path]:
        return [item.path for item in self.items if item.path is not None]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "target_date": self.target_date,
            "dry_run": self.dry_run,
            "started_at": self.started_at,
            "feed_title": self.feed_title,
            "total_items": self.total_items,
            "downloaded": self.count(OutcomeKind.DOWNLOADED),
            "redirects_captured": self.count(OutcomeKind.REDIRECT_CAPTURED),
            "skipped": self.count(OutcomeKind.SKIPPED),
            "failed": self.count(OutcomeKind.ERROR),
            "items": [item.to_dict() for item in self.items],
            "errors": self.errors,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
#  Per-item pipeline
# ---------------------------------------------------------------------------

def process_item(
    item: FeedItem,
    config: FetchConfig,
    session: RedirectPolicySession,
) -> ItemResult:
    """
    Run one item through date filter, fetch and write.

    Never raises for per-item failures; they are returned as error results.
    """
    outcome = check_item_date(item, config.target_date)
    if outcome is None:
        outcome = fetch_item(item, config, session)

    path = None
    if outcome.kind in (OutcomeKind.DOWNLOADED, OutcomeKind.REDIRECT_CAPTURED):
        try:
            path = write_outcome(item.title, outcome, config)
        except (OSError, ValueError) as exc:
            logger.error("Error writing %s: %s", item.title, exc)
            outcome = FetchOutcome.failed(f"write failed: {exc}")
        else:
            if path is not None:
                logger.info("Done %s", item.title)

    return ItemResult(
        title=item.title,
        guid=item.guid,
        link=item.link,
        outcome=outcome.kind,
        skip_reason=outcome.skip_reason.value if outcome.skip_reason else None,
        detail=outcome.detail,
        path=path,
    )


# ---------------------------------------------------------------------------
#  Main run entry point
# ---------------------------------------------------------------------------

def run_fetch(
    config: FetchConfig,
    session: Optional[RedirectPolicySession] = None,
) -> RunResult:
    """
    Run a full fetch and return the result.

    Args:
        config: Immutable run configuration
        session: Session to fetch items with; a session using the
            configured redirect policy is created (and closed) when omitted

    Returns:
        RunResult with per-item results and any run-level errors
    """
    result = RunResult(
        target_date=config.target_date,
        dry_run=config.dry_run,
        started_at=datetime.now().astimezone().isoformat(timespec="seconds"),
    )

    if not config.url:
        result.errors.append("URL is required.")
        logger.error("URL is required.")
        return result

    logger.info(
        "fetch-rss DryRun: %s Date: %s OutputDir: %s FileExtension: %s URL: %s",
        config.dry_run,
        config.target_date,
        config.out_dir,
        config.file_ext,
        config.url,
    )

    try:
        content = fetch_feed(config.url, config.timeout)
    except FeedFetchError as exc:
        result.errors.append(str(exc))
        logger.error("%s", exc)
        return result

    parsed = parse_feed_bytes(content)
    if not parsed.ok:
        result.errors.append(parsed.error)

    channel = parsed.channel
    result.feed_title = channel.title
    result.total_items = len(channel.items)
    logger.info("Found %d items, starting download...", len(channel.items))

    owns_session = session is None
    if owns_session:
        session = RedirectPolicySession(build_redirect_policy(config))

    try:
        for item in channel.items:
            result.items.append(process_item(item, config, session))
    finally:
        if owns_session:
            session.close()

    logger.info(
        "Done all! downloaded=%d redirects=%d skipped=%d failed=%d",
        result.count(OutcomeKind.DOWNLOADED),
        result.count(OutcomeKind.REDIRECT_CAPTURED),
        result.count(OutcomeKind.SKIPPED),
        result.count(OutcomeKind.ERROR),
    )
    return result

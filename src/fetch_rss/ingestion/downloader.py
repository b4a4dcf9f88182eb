"""
Per-item downloader.

Fetches an item's link through a RedirectPolicySession and turns whatever
happens into a FetchOutcome. Nothing raised by the HTTP layer escapes:
timeouts, transport errors and non-200 responses all become error outcomes
so the run can continue with the next item.
"""

import logging

import requests

from fetch_rss.config import FetchConfig
from fetch_rss.ingestion.redirects import RedirectPolicySession
from fetch_rss.models.entities import FeedItem, FetchOutcome, SkipReason

logger = logging.getLogger(__name__)


def fetch_item(
    item: FeedItem,
    config: FetchConfig,
    session: RedirectPolicySession,
) -> FetchOutcome:
    """
    Download one item's link.

    Under dry run no request is made; the intended download is logged and
    a dry-run skip is returned.

    Args:
        item: Feed item whose link is fetched
        config: Run configuration (dry_run, timeout)
        session: Session carrying the redirect policy

    Returns:
        Downloaded outcome with the full body for a final 200,
        RedirectCaptured outcome when the policy stopped on a redirect,
        error outcome otherwise
    """
    if config.dry_run:
        logger.info("Skipping download, dry run enabled: %s (%s)", item.title, item.link)
        return FetchOutcome.skipped(SkipReason.DRY_RUN)

    logger.info("Fetching %s", item.title)

    try:
        response = session.get(item.link, timeout=config.timeout)
    except requests.exceptions.Timeout:
        logger.error("Timed out fetching %s after %ss", item.title, config.timeout)
        return FetchOutcome.failed(f"timed out after {config.timeout}s")
    except requests.exceptions.RequestException as exc:
        logger.error("Error fetching %s: %s", item.title, exc)
        return FetchOutcome.failed(str(exc))

    try:
        target = session.captured_target(response)
        if target is not None:
            logger.info("Got %d redirect to %s", response.status_code, target)
            return FetchOutcome.redirect_captured(target)

        if response.status_code != 200:
            logger.error("Error fetching %s: HTTP %d", item.title, response.status_code)
            return FetchOutcome.failed(f"HTTP {response.status_code}")

        return FetchOutcome.downloaded(response.content)
    finally:
        response.close()

"""
Tests for the per-item downloader.

Covers dry run, successful downloads, captured redirects and the error
paths (non-200, timeouts, transport errors, unsupported redirect schemes).
"""

from unittest.mock import MagicMock

import pytest
import requests

from fetch_rss.ingestion.downloader import fetch_item
from fetch_rss.ingestion.redirects import (
    FollowAllPolicy,
    RedirectPolicySession,
    SchemeCapturePolicy,
)
from fetch_rss.models.entities import FeedItem, OutcomeKind, SkipReason

MAGNET = "magnet:?xt=urn:btih:feedface"


def _item(link: str) -> FeedItem:
    return FeedItem(
        title="Show S01E01",
        guid="g1",
        publish_date="Thu, 11 Jan 2024 21:00:00 +0000",
        link=link,
    )


class TestFetchItemOffline:

    def test_dry_run_makes_no_request(self, make_config):
        session = MagicMock(spec=RedirectPolicySession)

        outcome = fetch_item(_item("https://example.com/1"), make_config(dry_run=True), session)

        assert outcome.kind is OutcomeKind.SKIPPED
        assert outcome.skip_reason is SkipReason.DRY_RUN
        session.get.assert_not_called()

    def test_timeout_is_error(self, make_config):
        session = MagicMock(spec=RedirectPolicySession)
        session.get.side_effect = requests.exceptions.Timeout("read timed out")

        outcome = fetch_item(_item("https://example.com/1"), make_config(timeout=2.5), session)

        assert outcome.kind is OutcomeKind.ERROR
        assert "timed out after 2.5s" in outcome.error

    def test_passes_timeout_to_request(self, make_config):
        session = MagicMock(spec=RedirectPolicySession)
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        fetch_item(_item("https://example.com/1"), make_config(timeout=4), session)

        session.get.assert_called_once_with("https://example.com/1", timeout=4)

    def test_connection_error_is_error(self, make_config):
        session = MagicMock(spec=RedirectPolicySession)
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        outcome = fetch_item(_item("https://example.com/1"), make_config(), session)

        assert outcome.kind is OutcomeKind.ERROR
        assert "refused" in outcome.error


@pytest.mark.integration
class TestFetchItemHTTP:

    def test_200_downloads_body(self, http_server, make_config):
        http_server.add("/item", b"\x00\x01binary")
        session = RedirectPolicySession(SchemeCapturePolicy("magnet"))

        outcome = fetch_item(_item(http_server.url("/item")), make_config(), session)

        assert outcome.kind is OutcomeKind.DOWNLOADED
        assert outcome.content == b"\x00\x01binary"

    def test_follows_normal_redirect_to_content(self, http_server, make_config):
        http_server.add_redirect("/item", "/real")
        http_server.add("/real", b"ABC")
        session = RedirectPolicySession(SchemeCapturePolicy("magnet"))

        outcome = fetch_item(_item(http_server.url("/item")), make_config(), session)

        assert outcome.kind is OutcomeKind.DOWNLOADED
        assert outcome.content == b"ABC"

    def test_sentinel_redirect_is_captured(self, http_server, make_config):
        http_server.add_redirect("/item", MAGNET)
        session = RedirectPolicySession(SchemeCapturePolicy("magnet"))

        outcome = fetch_item(_item(http_server.url("/item")), make_config(), session)

        assert outcome.kind is OutcomeKind.REDIRECT_CAPTURED
        assert outcome.target_url == MAGNET

    def test_non_200_is_error(self, http_server, make_config):
        http_server.add("/item", b"gone", status=410)
        session = RedirectPolicySession(SchemeCapturePolicy("magnet"))

        outcome = fetch_item(_item(http_server.url("/item")), make_config(), session)

        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.error == "HTTP 410"

    def test_uncaptured_sentinel_scheme_is_error(self, http_server, make_config):
        http_server.add_redirect("/item", MAGNET)
        session = RedirectPolicySession(FollowAllPolicy())

        outcome = fetch_item(_item(http_server.url("/item")), make_config(), session)

        assert outcome.kind is OutcomeKind.ERROR

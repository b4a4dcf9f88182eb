"""
Redirect classification for item downloads.

Some feed links answer with a redirect whose target is not content to
download but a pointer to record, e.g. a ``magnet:`` URI. A RedirectPolicy
decides, per redirect target, whether the HTTP client should follow it or
stop and hand the target back to the caller.

RedirectPolicySession plugs a policy into the redirect loop of
``requests.Session``: every redirect response in a request's chain is
classified, normal redirects are followed transparently, and the first
captured one ends the chain with the redirect response itself as the final
response.

Example:
    >>> session = RedirectPolicySession(SchemeCapturePolicy("magnet"))
    >>> response = session.get("https://indexer.example/download/42", timeout=30)
    >>> session.captured_target(response)
    'magnet:?xt=urn:btih:...'
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests

from fetch_rss.config import FetchConfig

logger = logging.getLogger(__name__)


class RedirectAction(str, Enum):
    """What to do with a redirect target."""
    FOLLOW = "follow"
    CAPTURE = "capture"


class RedirectPolicy(ABC):
    """
    Abstract redirect classifier.

    Implementations map an absolute redirect target URL to a
    RedirectAction.
    """

    @abstractmethod
    def classify(self, target_url: str) -> RedirectAction:
        """
        Classify a redirect target.

        Args:
            target_url: Absolute URL from the Location header

        Returns:
            RedirectAction.CAPTURE to stop and record the target,
            RedirectAction.FOLLOW to keep following
        """
        ...


class SchemeCapturePolicy(RedirectPolicy):
    """Capture redirects whose target URL uses a given scheme."""

    def __init__(self, scheme: str) -> None:
        self.scheme = scheme.lower()

    def classify(self, target_url: str) -> RedirectAction:
        if urlparse(target_url).scheme.lower() == self.scheme:
            return RedirectAction.CAPTURE
        return RedirectAction.FOLLOW

    def __repr__(self) -> str:
        return f"SchemeCapturePolicy({self.scheme!r})"


class FollowAllPolicy(RedirectPolicy):
    """Follow every redirect, the stock requests behaviour."""

    def classify(self, target_url: str) -> RedirectAction:
        return RedirectAction.FOLLOW


def build_redirect_policy(config: FetchConfig) -> RedirectPolicy:
    """Return the capture policy for ``config.redirect_ext``."""
    return SchemeCapturePolicy(config.redirect_ext)


class RedirectPolicySession(requests.Session):
    """
    requests.Session that consults a RedirectPolicy on every redirect.

    ``get_redirect_target`` is called by requests once per response in the
    redirect chain; returning None ends the chain, leaving the redirect
    response as the final response of the request.
    """

    def __init__(self, policy: RedirectPolicy) -> None:
        super().__init__()
        self.policy = policy

    def get_redirect_target(self, resp: requests.Response) -> Optional[str]:
        location = super().get_redirect_target(resp)
        if location is None:
            return None
        target = urljoin(resp.url, location)
        if self.policy.classify(target) is RedirectAction.CAPTURE:
            logger.debug("Caught redirect from %s to %s", resp.url, target)
            return None
        return location

    def captured_target(self, resp: requests.Response) -> Optional[str]:
        """
        Return the absolute captured redirect target of a final response.

        Args:
            resp: Final response returned by a request on this session

        Returns:
            The redirect target URL if the chain stopped on a captured
            redirect, otherwise None
        """
        location = super().get_redirect_target(resp)
        if location is None:
            return None
        target = urljoin(resp.url, location)
        if self.policy.classify(target) is RedirectAction.CAPTURE:
            return target
        return None

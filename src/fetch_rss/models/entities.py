"""
Pydantic data models for feed items and fetch outcomes.

Feed items and channels are built once per run from the fetched feed and
never change afterwards. A FetchOutcome is the terminal state of one item.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OutcomeKind(str, Enum):
    """Terminal state of a single feed item."""
    DOWNLOADED = "downloaded"
    REDIRECT_CAPTURED = "redirect_captured"
    ERROR = "error"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    """Why an item was skipped without a fetch."""
    DATE_MISMATCH = "date_mismatch"
    DRY_RUN = "dry_run"


class FeedItem(BaseModel):
    """
    Feed item data model.

    publish_date keeps the raw pubDate text; it is parsed by the date
    filter, not here.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    guid: str = ""
    publish_date: str = ""
    link: str = ""


class Channel(BaseModel):
    """Feed channel with its items in document order."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    items: List[FeedItem] = Field(default_factory=list)


class FetchOutcome(BaseModel):
    """
    Result of processing one item.

    Exactly one payload field is set, selected by ``kind``:
    ``content`` for downloads, ``target_url`` for captured redirects,
    ``error`` for failures and ``skip_reason`` for skips. Use the
    classmethod constructors rather than building instances directly.
    """
    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    content: Optional[bytes] = None
    target_url: Optional[str] = None
    error: Optional[str] = None
    skip_reason: Optional[SkipReason] = None

    @classmethod
    def downloaded(cls, content: bytes) -> "FetchOutcome":
        return cls(kind=OutcomeKind.DOWNLOADED, content=content)

    @classmethod
    def redirect_captured(cls, target_url: str) -> "FetchOutcome":
        return cls(kind=OutcomeKind.REDIRECT_CAPTURED, target_url=target_url)

    @classmethod
    def failed(cls, error: str) -> "FetchOutcome":
        return cls(kind=OutcomeKind.ERROR, error=error)

    @classmethod
    def skipped(cls, reason: SkipReason) -> "FetchOutcome":
        return cls(kind=OutcomeKind.SKIPPED, skip_reason=reason)

    @property
    def detail(self) -> str:
        """Short human-readable description of the payload."""
        if self.kind is OutcomeKind.DOWNLOADED:
            return f"{len(self.content or b'')} bytes"
        if self.kind is OutcomeKind.REDIRECT_CAPTURED:
            return self.target_url or ""
        if self.kind is OutcomeKind.ERROR:
            return self.error or ""
        return self.skip_reason.value if self.skip_reason else ""

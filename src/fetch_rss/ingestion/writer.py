"""
Output file writer.

Downloaded content goes to ``<out_dir>/<title>.<file_ext>``; a captured
redirect target goes to ``<out_dir>/<title>.<redirect_ext>`` as plain
text. Existing files are overwritten in place. The output directory must
already exist.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

from fetch_rss.config import FetchConfig
from fetch_rss.models.entities import FetchOutcome, OutcomeKind

logger = logging.getLogger(__name__)

FILE_MODE = 0o666

_UNSAFE_TITLE_CHARS = re.compile(r"[/\\\x00]")


def sanitize_title(title: str) -> str:
    """
    Make a title safe to use as a filename stem.

    Path separators and NUL become underscores and leading dots are
    dropped, so the result cannot leave the output directory.
    """
    cleaned = _UNSAFE_TITLE_CHARS.sub("_", title).lstrip(".")
    return cleaned or "_"


def output_path(title: str, kind: OutcomeKind, config: FetchConfig) -> Path:
    """
    Return the output path for an item.

    Titles are used verbatim unless ``config.sanitize_titles`` is set.

    Raises:
        ValueError: If ``kind`` has no output file
    """
    if kind is OutcomeKind.DOWNLOADED:
        ext = config.file_ext
    elif kind is OutcomeKind.REDIRECT_CAPTURED:
        ext = config.redirect_ext
    else:
        raise ValueError(f"No output file for outcome {kind.value}")

    stem = sanitize_title(title) if config.sanitize_titles else title
    return Path(config.out_dir) / f"{stem}.{ext}"


def _write_file(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(data)


def write_outcome(title: str, outcome: FetchOutcome, config: FetchConfig) -> Optional[Path]:
    """
    Persist an item outcome.

    Args:
        title: Item title, used as the filename stem
        outcome: Terminal outcome of the item
        config: Run configuration (out_dir, extensions, dry_run)

    Returns:
        Path of the written file, or None when nothing was written

    Raises:
        OSError: If the file could not be written
    """
    if outcome.kind not in (OutcomeKind.DOWNLOADED, OutcomeKind.REDIRECT_CAPTURED):
        logger.debug("Nothing to write for %s (%s)", title, outcome.kind.value)
        return None

    path = output_path(title, outcome.kind, config)

    if config.dry_run:
        logger.info("Dry run, not writing %s", path)
        return None

    if outcome.kind is OutcomeKind.DOWNLOADED:
        data = outcome.content or b""
    else:
        data = (outcome.target_url or "").encode("utf-8")

    logger.info("Writing %s", path)
    _write_file(path, data)
    return path

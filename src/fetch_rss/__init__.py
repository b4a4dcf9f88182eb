"""
fetch-rss

Downloads the items of an RSS feed published on a given date, recording
redirects to out-of-band targets (e.g. magnet links) as pointer files.
"""

__version__ = "0.1.0"

from fetch_rss.config import FetchConfig

__all__ = ["FetchConfig", "__version__"]

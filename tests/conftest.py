"""
Shared test fixtures.

Provides pytest fixtures for common test resources including:
- Temporary output directory
- Run configuration factory
- RSS document builder
- Local HTTP server serving feeds, content and redirects
"""

import http.server
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from fetch_rss.config import FetchConfig


def build_feed(items: List[Dict[str, str]], title: str = "Test Feed") -> bytes:
    """
    Build an RSS 2.0 document.

    Each item dict may hold title, guid, pub_date and link; missing keys
    leave the element out.
    """
    parts = [
        "<?xml version='1.0' encoding='UTF-8'?>",
        "<rss version='2.0'>",
        "<channel>",
        f"<title>{title}</title>",
    ]
    for item in items:
        parts.append("<item>")
        if "title" in item:
            parts.append(f"<title>{item['title']}</title>")
        if "guid" in item:
            parts.append(f"<guid isPermaLink='false'>{item['guid']}</guid>")
        if "pub_date" in item:
            parts.append(f"<pubDate>{item['pub_date']}</pubDate>")
        if "link" in item:
            parts.append(f"<link>{item['link']}</link>")
        parts.append("</item>")
    parts.extend(["</channel>", "</rss>"])
    return "\n".join(parts).encode("utf-8")


class RouteRequestHandler(http.server.BaseHTTPRequestHandler):
    """Serves the routes registered on the server, 404 for anything else."""

    def do_GET(self):
        self.server.requested_paths.append(self.path)
        route = self.server.routes.get(self.path)
        if route is None:
            self._send(404, {"Content-Type": "text/plain"}, b"Not Found")
            return
        status, headers, body = route
        self._send(status, headers, body)

    def _send(self, status: int, headers: Dict[str, str], body: bytes):
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        """Suppress server log messages during tests."""
        pass


class LocalHTTPServer:
    """Test HTTP server bound to an ephemeral localhost port."""

    def __init__(self):
        self.server = http.server.HTTPServer(("127.0.0.1", 0), RouteRequestHandler)
        self.server.routes = {}
        self.server.requested_paths = []
        self.base_url = f"http://127.0.0.1:{self.server.server_address[1]}"
        self.thread: Optional[threading.Thread] = None

    def start(self):
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()

    def stop(self):
        self.server.shutdown()
        self.server.server_close()
        if self.thread:
            self.thread.join(timeout=1.0)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @property
    def requested_paths(self) -> List[str]:
        return self.server.requested_paths

    def add(self, path: str, body: bytes = b"", status: int = 200,
            content_type: str = "application/octet-stream"):
        self.server.routes[path] = (status, {"Content-Type": content_type}, body)

    def add_feed(self, path: str, feed: bytes):
        self.add(path, feed, content_type="application/rss+xml")

    def add_redirect(self, path: str, location: str, status: int = 302):
        self.server.routes[path] = (status, {"Location": location}, b"")


@pytest.fixture
def temp_dir():
    """
    Create temporary directory for test files.

    Yields:
        Path: Temporary directory path
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep FETCH_RSS_* variables and stray config files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("FETCH_RSS_"):
            monkeypatch.delenv(key)
    for key in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_config(temp_dir):
    """
    Factory for run configurations writing into temp_dir.

    Defaults to a real (non dry) run so tests opt in to dry run explicitly.
    """

    def _make(**overrides) -> FetchConfig:
        values = {
            "url": "http://127.0.0.1:1/feed",
            "out_dir": temp_dir,
            "file_ext": "file",
            "redirect_ext": "magnet",
            "target_date": "2024-01-11",
            "dry_run": False,
            "timeout": 5,
        }
        values.update(overrides)
        return FetchConfig(**values)

    return _make


@pytest.fixture
def http_server():
    """Local HTTP server, stopped after the test."""
    server = LocalHTTPServer()
    server.start()
    yield server
    server.stop()

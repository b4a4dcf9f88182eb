"""Logging configuration for fetch-rss."""

import json
import logging
import sys


class JsonFormatter(logging.Formatter):
    """JSON line formatter for machine-readable logs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        base = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base)


def setup_logging(verbose: bool = False, log_format: str = "text") -> None:
    """Configure the root logger to write to stderr, leaving stdout for results."""
    handler = logging.StreamHandler(sys.stderr)

    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Keep urllib3 connection chatter out of --verbose output.
    logging.getLogger("urllib3").setLevel(logging.WARNING)

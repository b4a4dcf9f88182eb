"""
Configuration management for fetch-rss.

Provides a single immutable run configuration using Pydantic for validation
and environment variable support. A fetch-rss.yaml file may supply the same
keys; command-line flags override both.
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DATE_FORMAT = "%Y-%m-%d"
CONFIG_FILENAME = "fetch-rss.yaml"

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def today() -> str:
    """Return the local date as YYYY-MM-DD."""
    return datetime.now().strftime(DATE_FORMAT)


def load_config_yaml(search_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load fetch-rss.yaml configuration file.

    Searches for fetch-rss.yaml starting from search_dir (or the current
    working directory) and walking up to 3 parent directories.

    Args:
        search_dir: Directory to start searching from

    Returns:
        Dictionary with fetch-rss.yaml contents, or empty dict if not found
    """
    start = (search_dir or Path.cwd()).resolve()
    for parent in [start] + list(start.parents)[:3]:
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return load_config_file(candidate)
    return {}


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML config file; an empty file yields an empty dict."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


class FetchConfig(BaseSettings):
    """
    Run configuration with environment variable support.

    Configuration can be provided via:
    1. Command-line flags
    2. fetch-rss.yaml
    3. Environment variables (prefixed with FETCH_RSS_)
    4. .env file
    5. Default values

    Instances are frozen: the runner and fetcher receive one value and
    never mutate it.

    Example:
        export FETCH_RSS_URL="https://example.com/feed.rss?apikey=..."
        export FETCH_RSS_OUT_DIR="/srv/downloads"
    """

    model_config = SettingsConfigDict(
        env_prefix="FETCH_RSS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    url: str = Field(
        default="",
        description="Feed URL, including any API key and search query"
    )
    out_dir: Path = Field(
        default=Path("."),
        description="Directory the output files are written to"
    )
    file_ext: str = Field(
        default="file",
        description="Extension for downloaded content files"
    )
    redirect_ext: str = Field(
        default="redirect",
        description="Sentinel redirect scheme, also the pointer file extension"
    )
    target_date: str = Field(
        default_factory=today,
        description="Only items published on this date (YYYY-MM-DD) are fetched"
    )
    dry_run: bool = Field(
        default=True,
        description="Report intended downloads without fetching or writing"
    )
    verbose: bool = Field(
        default=False,
        description="Enable debug logging, including date mismatches"
    )
    timeout: float = Field(
        default=30.0,
        description="Per-request timeout in seconds"
    )
    sanitize_titles: bool = Field(
        default=False,
        description="Replace path separators in titles before using them as filenames"
    )
    log_format: str = Field(
        default="text",
        description="Log output format (text/json)"
    )

    @field_validator("target_date")
    @classmethod
    def _check_target_date(cls, value: str) -> str:
        if not _DATE_PATTERN.fullmatch(value):
            raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
        datetime.strptime(value, DATE_FORMAT)
        return value

    @field_validator("file_ext", "redirect_ext")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("extension must not be empty")
        return value

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'")
        return value


def get_config(
    overrides: Optional[Dict[str, Any]] = None,
    yaml_path: Optional[Path] = None,
) -> FetchConfig:
    """
    Build the run configuration.

    Merges settings from environment variables, .env file, fetch-rss.yaml
    (if present) and explicit overrides. Overrides whose value is None are
    ignored so unset command-line flags fall through to the other sources.

    Args:
        overrides: Values taking precedence over every other source
        yaml_path: Explicit YAML file; searched for when omitted

    Returns:
        FetchConfig: Immutable run configuration
    """
    values: Dict[str, Any] = (
        load_config_file(yaml_path) if yaml_path else load_config_yaml()
    )
    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})
    return FetchConfig(**values)

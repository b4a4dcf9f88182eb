"""
Command-line interface for fetch-rss.

Usage:
    fetch-rss --url URL                      # Dry run for today's items
    fetch-rss --url URL --no-dry-run         # Download today's items
    fetch-rss --url URL --date 2024-01-11 --out downloads --ext torrent --redir-ext magnet
    fetch-rss --url URL --output-json        # JSON summary for automation
"""

import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from fetch_rss.config import get_config
from fetch_rss.log_setup import setup_logging
from fetch_rss.models.entities import OutcomeKind, SkipReason
from fetch_rss.runner import RunResult, run_fetch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fetch-rss",
        description="Download the items of an RSS feed published on a given date",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="The URL to call to fetch RSS data including API key and search query",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Path to output directory (default: current directory)",
    )
    parser.add_argument(
        "--ext",
        default=None,
        help="File extension to use for downloaded files (default: file)",
    )
    parser.add_argument(
        "--redir-ext",
        default=None,
        help="Redirect scheme to capture, also the extension of pointer files (default: redirect)",
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Date to find results from, e.g. 2006-01-02 (default: today)",
    )
    parser.add_argument(
        "--dry-run",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report what would be downloaded without fetching or writing (default: on)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Verbose logging, including skipped dates",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--sanitize-titles",
        action="store_true",
        default=None,
        help="Replace path separators in item titles before using them as filenames",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: fetch-rss.yaml in this or a parent directory)",
    )
    parser.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Print the run summary as JSON",
    )
    return parser


def print_summary(result: RunResult) -> None:
    for err in result.errors:
        print(f"ERROR: {err}")

    for item in result.items:
        if item.path is not None:
            print(f"  + {item.path}")
        elif item.outcome is OutcomeKind.ERROR:
            print(f"  ! {item.title}: {item.detail}")
        elif item.skip_reason == SkipReason.DRY_RUN.value:
            print(f"  ~ {item.title} (dry run) {item.link}")

    print(
        f"Done all! {result.total_items} item(s): "
        f"{result.count(OutcomeKind.DOWNLOADED)} downloaded, "
        f"{result.count(OutcomeKind.REDIRECT_CAPTURED)} redirect(s) captured, "
        f"{result.count(OutcomeKind.SKIPPED)} skipped, "
        f"{result.count(OutcomeKind.ERROR)} failed"
    )


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        "url": args.url,
        "out_dir": args.out,
        "file_ext": args.ext,
        "redirect_ext": args.redir_ext,
        "target_date": args.date,
        "dry_run": args.dry_run,
        "verbose": args.verbose,
        "timeout": args.timeout,
        "sanitize_titles": args.sanitize_titles,
    }
    try:
        config = get_config(overrides, yaml_path=args.config)
    except (ValidationError, ValueError, OSError) as exc:
        parser.error(str(exc))

    setup_logging(verbose=config.verbose, log_format=config.log_format)

    # Missing URL and feed failures are reported, not signalled via exit status.
    if not config.url:
        print("Error, URL is required.")
        return

    result = run_fetch(config)

    if args.output_json:
        print(result.to_json())
        return

    print_summary(result)


if __name__ == "__main__":
    main()

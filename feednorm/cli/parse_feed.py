#!/usr/bin/env python3
"""
Feed normalizer command line
Parses a feed from a URL or a file and prints the normalized JSON
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from tenacity import retry, wait_exponential_jitter, stop_after_attempt, retry_if_exception_type

from feednorm.api import parse_file, parse_url
from feednorm.config import load_config, ParserOptions
from feednorm.logging import setup_logging
from feednorm.models import Feed
from feednorm.rss.fetch import TransportError


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="feednorm-parse", description="Normalize an RSS/Atom feed to JSON")
    parser.add_argument("source", help="feed URL (http/https) or local file path")
    parser.add_argument("--max-redirects", type=int, default=None, help="redirects to follow (0 disables)")
    parser.add_argument("--retries", type=int, default=None, help="attempts on connection errors")
    parser.add_argument("--indent", type=int, default=2)
    return parser


def load_feed(source: str, options: ParserOptions, attempts: int = 1) -> Feed:
    if not _is_url(source):
        return parse_file(source, options)

    # Only transport failures are worth another attempt; redirects and bad documents are final
    fetch = retry(
        wait=wait_exponential_jitter(initial=1, max=10),
        stop=stop_after_attempt(max(1, attempts)),
        retry=retry_if_exception_type(TransportError),
        reraise=True,
    )(parse_url)
    return fetch(source, options)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    cfg = load_config()
    setup_logging(cfg.log_dir, cfg.log_level)
    logger = logging.getLogger(__name__)

    options = cfg.parser
    if args.max_redirects is not None:
        options = options.model_copy(update={"max_redirects": max(0, args.max_redirects)})
    attempts = args.retries if args.retries is not None else cfg.fetch_retries

    try:
        feed = load_feed(args.source, options, attempts)
    except Exception as exc:
        logger.error("Failed to parse %s: %s", args.source, exc)
        return 1

    logger.info("Parsed %d items from %s", len(feed.items), args.source)
    print(json.dumps(feed.to_dict(), indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

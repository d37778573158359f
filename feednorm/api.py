"""Entry points: parse a feed from a string, a URL or a local file.

Each returns the normalized `Feed` and raises on failure. When a `callback`
is given it is called exactly once, as `callback(error, None)` or
`callback(None, feed)`, and the function returns None.
"""

import logging
from typing import Callable, Mapping, Optional, Union

from feednorm.config import ParserOptions, coerce_options
from feednorm.dates import DateParseError
from feednorm.models import Feed
from feednorm.rss.fetch import fetch_url, read_file
from feednorm.xml.parser import FeedParser, MissingRequiredFieldError, UnrecognizedFeedFormat
from feednorm.xml.podcast import PodcastAlignmentError
from feednorm.xml.tree import XmlSyntaxError


logger = logging.getLogger(__name__)


# Failures caused by the document itself, as opposed to fetching it
PARSE_ERRORS = (
    XmlSyntaxError,
    UnrecognizedFeedFormat,
    MissingRequiredFieldError,
    DateParseError,
    PodcastAlignmentError,
)

Options = Union[ParserOptions, Mapping, None]
Callback = Callable[[Optional[BaseException], Optional[Feed]], None]


def _complete(callback: Optional[Callback], run: Callable[[], Feed]) -> Optional[Feed]:
    if callback is None:
        return run()
    try:
        feed = run()
    except Exception as exc:
        callback(exc, None)
        return None
    callback(None, feed)
    return None


def parse_string(xml: Union[str, bytes], options: Options = None,
                 callback: Optional[Callback] = None) -> Optional[Feed]:
    def run() -> Feed:
        return FeedParser(coerce_options(options)).parse_string(xml)

    return _complete(callback, run)


def parse_url(url: str, options: Options = None,
              callback: Optional[Callback] = None) -> Optional[Feed]:
    def run() -> Feed:
        opts = coerce_options(options)
        content = fetch_url(url, opts)
        logger.debug("Fetched %d bytes from %s", len(content), url)
        return FeedParser(opts).parse_string(content)

    return _complete(callback, run)


def parse_file(path: str, options: Options = None,
               callback: Optional[Callback] = None) -> Optional[Feed]:
    def run() -> Feed:
        opts = coerce_options(options)
        return FeedParser(opts).parse_string(read_file(path))

    return _complete(callback, run)

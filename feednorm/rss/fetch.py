import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit

import requests

from feednorm.config import ParserOptions


logger = logging.getLogger(__name__)


class FetchError(Exception):
    pass


class TransportError(FetchError):
    pass


class FetchStatusError(FetchError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnsupportedSchemeError(ValueError):
    pass


class RedirectError(FetchError):
    pass


class TooManyRedirectsError(RedirectError):
    pass


class RedirectsDisabledError(RedirectError):
    pass


def fetch_url(url: str, options: Optional[ParserOptions] = None) -> bytes:
    """Fetch raw feed bytes over HTTP(S), following at most `max_redirects` redirects.

    The body is returned undecoded so the XML declaration decides the encoding.
    """
    return _fetch(url, options or ParserOptions(), redirect_count=0)


def _fetch(url: str, options: ParserOptions, redirect_count: int) -> bytes:
    scheme = urlsplit(url).scheme.lower()
    if scheme not in ("http", "https"):
        raise UnsupportedSchemeError(f"Unsupported URL scheme for {url!r}")

    headers = {"User-Agent": options.user_agent}
    try:
        resp = requests.get(url, headers=headers, timeout=options.timeout, allow_redirects=False)
    except requests.RequestException as exc:
        logger.warning("Error fetching feed %s: %s", url, exc)
        raise TransportError(f"Request failed: {exc}") from exc

    if 300 <= resp.status_code < 400:
        location = resp.headers.get("location")
        if not location:
            raise FetchStatusError(resp.status_code, f"Status code {resp.status_code} without Location header")
        if options.max_redirects == 0:
            raise RedirectsDisabledError(f"Status code {resp.status_code}")
        if redirect_count >= options.max_redirects:
            raise TooManyRedirectsError("Too many redirects")
        target = urljoin(url, location)
        logger.info("Feed %s redirected (%s) to %s", url, resp.status_code, target)
        return _fetch(target, options, redirect_count + 1)

    if resp.status_code >= 400:
        logger.warning("Feed %s returned status %s", url, resp.status_code)
        raise FetchStatusError(resp.status_code, f"Status code {resp.status_code}")

    return resp.content


def read_file(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()

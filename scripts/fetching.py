"""HTTP fetch capability and bounded fan-out helper used by the extractors."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Protocol, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_HEADERS = {
    "User-Agent": BROWSER_UA,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,zh-CN;q=0.8,zh;q=0.7",
}
# requests counts redirects per session; the per-call bound is checked on the history
SESSION_MAX_REDIRECTS = 30

T = TypeVar("T")
R = TypeVar("R")


class FetchError(Exception):
    """Timeout, connection failure, redirect bound exceeded or non-2xx status."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


class FetchCapability(Protocol):
    def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        max_redirects: int | None = None,
    ) -> str: ...


def create_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=2,
        connect=2,
        read=2,
        backoff_factor=0.8,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["GET", "POST"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update(DEFAULT_HEADERS)
    session.max_redirects = SESSION_MAX_REDIRECTS
    return session


class Fetcher:
    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 60.0,
        max_redirects: int = 5,
    ):
        self.session = session or create_session()
        self.timeout = timeout
        self.max_redirects = max_redirects

    def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        max_redirects: int | None = None,
    ) -> str:
        bound = self.max_redirects if max_redirects is None else max_redirects
        try:
            r = self.session.get(
                url,
                headers=headers,
                timeout=timeout or self.timeout,
                allow_redirects=True,
            )
        except requests.exceptions.Timeout as exc:
            raise FetchError(url, "Request timeout") from exc
        except requests.exceptions.TooManyRedirects as exc:
            raise FetchError(url, "Too many redirects") from exc
        except requests.exceptions.RequestException as exc:
            raise FetchError(url, f"Request failed: {exc}") from exc

        if len(r.history) > bound:
            raise FetchError(url, f"Too many redirects ({len(r.history)})")
        if not 200 <= r.status_code < 300:
            raise FetchError(url, f"HTTP {r.status_code}: {r.reason}", status_code=r.status_code)

        if not r.encoding or r.encoding.upper() == "ISO-8859-1":
            r.encoding = r.apparent_encoding or "utf-8"
        return r.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def run_in_batches(
    fn: Callable[[T], R],
    items: Iterable[T],
    batch_size: int = 5,
    delay: float = 0.2,
) -> list[R | None]:
    """Run fn over items N at a time; a failed call yields None in its slot."""

    def guarded(item: T) -> R | None:
        try:
            return fn(item)
        except Exception as exc:
            logger.debug("Backfill call failed: %s", exc)
            return None

    pending = list(items)
    results: list[R | None] = []
    if not pending:
        return results
    size = max(1, batch_size)
    with ThreadPoolExecutor(max_workers=size) as executor:
        for start in range(0, len(pending), size):
            batch = pending[start : start + size]
            results.extend(executor.map(guarded, batch))
            if delay > 0 and start + size < len(pending):
                time.sleep(delay)
    return results

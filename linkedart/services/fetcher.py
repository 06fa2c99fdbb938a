import logging
import threading
from typing import Any, Dict, Optional, Tuple

import requests

from linkedart.config import get_settings

logger = logging.getLogger(__name__)


# --------------------------------------------------
# ERRORS
# --------------------------------------------------

class FetchError(Exception):
    """Transport failure, timeout or unusable body."""


class AnalysisCancelled(Exception):
    """Raised once the run's cancel event has been set."""

    def __init__(self, message: str = "Request cancelled"):
        super().__init__(message)


# --------------------------------------------------
# RESPONSE
# --------------------------------------------------

class FetchResponse:

    def __init__(self, response: requests.Response):
        self._response = response
        self._json = None
        self._parsed = False

    @property
    def ok(self) -> bool:
        return self._response.ok

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def reason(self) -> str:
        return self._response.reason or ""

    @property
    def url(self) -> str:
        return self._response.url

    def json(self) -> Any:
        """
        Decoded body. Raises FetchError when the body is not JSON
        (vocabulary servers sometimes answer with an HTML fallback page).
        """
        if not self._parsed:
            try:
                self._json = self._response.json()
            except ValueError as e:
                snippet = self._response.text[:40].strip()
                if snippet.lower().startswith(("<!doctype", "<html")):
                    raise FetchError(
                        f"{self.url} returned HTML instead of JSON (possible fallback page)"
                    ) from e
                raise FetchError(f"{self.url} did not return valid JSON: {e}") from e
            self._parsed = True

        return self._json


# --------------------------------------------------
# FETCHER
# --------------------------------------------------

class HttpFetcher:
    """
    requests based implementation of `fetch(url, headers) -> FetchResponse`.

    One instance serves one analysis run; `cancel()` aborts it from
    another thread.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
        cancel_event: Optional[threading.Event] = None
    ):
        settings = get_settings()

        self.timeout = timeout or settings.request_timeout
        self.user_agent = user_agent or settings.user_agent
        self.session = session or requests.Session()
        self.cancel_event = cancel_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self):
        logger.info("🛑 Cancelling in-flight fetches")
        self.cancel_event.set()
        self.session.close()

    def __call__(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None
    ) -> FetchResponse:

        if self.cancelled:
            raise AnalysisCancelled()

        request_headers = {"User-Agent": self.user_agent}
        request_headers.update(headers or {})

        try:
            r = self.session.get(
                url,
                headers=request_headers,
                timeout=self.timeout,
                allow_redirects=True
            )
        except requests.RequestException as e:
            if self.cancelled:
                raise AnalysisCancelled() from e
            logger.warning(f"Fetch failed for {url}: {e}")
            raise FetchError(str(e)) from e

        if self.cancelled:
            raise AnalysisCancelled()

        logger.debug(f"GET {url} -> {r.status_code}")
        return FetchResponse(r)


class MemoizedFetcher:
    """
    Per-run cache of successful responses keyed by (url, Accept).
    Failed or non-ok responses are never cached.
    """

    def __init__(self, inner):
        self.inner = inner
        self.calls = 0
        self._cache: Dict[Tuple[str, str], Any] = {}
        self._lock = threading.Lock()

    def __call__(self, url: str, headers: Optional[Dict[str, str]] = None):
        key = (url, (headers or {}).get("Accept", ""))

        with self._lock:
            cached = self._cache.get(key)

        if cached is not None:
            return cached

        self.calls += 1
        response = self.inner(url, headers)

        if response.ok:
            with self._lock:
                self._cache[key] = response

        return response


# --------------------------------------------------
# ROOT DOCUMENT
# --------------------------------------------------

def fetch_json(fetcher, url: str) -> Any:
    """
    Fetch and decode the document under analysis. Any failure is fatal
    for the run and surfaces as FetchError.
    """
    logger.info(f"Fetching: {url}")

    try:
        response = fetcher(url)
    except FetchError as e:
        raise FetchError(f"Error fetching data from {url}: {e}") from e

    if not response.ok:
        raise FetchError(
            f"Error fetching data from {url}: HTTP {response.status}: {response.reason}".rstrip(": ")
        )

    try:
        return response.json()
    except FetchError as e:
        raise FetchError(f"Failed to parse JSON from {url}.") from e

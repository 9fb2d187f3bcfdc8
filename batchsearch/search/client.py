"""
search/client.py — RapidAPI google-search3 client.

One call per keyword. Every call is bounded by SearchConfig.timeout and can
be abandoned early through the batch's stop event; the HTTP round-trip runs
on a helper thread so the caller can wait on both at once.
"""
from __future__ import annotations
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout
from urllib.parse import urlencode

import requests

from .config import SearchConfig
from .outcomes import (
    DecodeFailure,
    NetworkFailure,
    Outcome,
    RateLimited,
    StatusFailure,
    Success,
)

_POLL_INTERVAL = 0.1   # how often a waiting call re-checks the stop event


class DeadlineExceeded(requests.Timeout):
    """The keyword's call was still pending when its deadline ran out."""


class QueryCancelled(requests.RequestException):
    """The batch was stopped while the keyword's call was in flight."""


def build_params(keyword: str, lr: str = "", cr: str = "", num: str = "") -> dict[str, str]:
    """Locale/pagination values pass through untouched, empty strings included."""
    return {"q": keyword, "lr": lr, "cr": cr, "num": num}


def _field(obj: dict, name: str):
    """Look a key up the way the API's decoders do: exact first, then ignoring case."""
    if name in obj:
        return obj[name]
    for k, v in obj.items():
        if k.lower() == name:
            return v
    return None


def extract_links(payload) -> tuple[str, ...]:
    """
    Pull the links out of a `{"results": [{"link": "..."}, ...]}` body in
    response order. Items without a link (ads, knowledge panels) are skipped.
    Raises ValueError when the body has the wrong shape.
    """
    if payload is None:
        return ()
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    results = _field(payload, "results")
    if results is None:
        return ()
    if not isinstance(results, list):
        raise ValueError("'results' is not a list")

    links = []
    for i, r in enumerate(results):
        if not isinstance(r, dict):
            raise ValueError(f"results[{i}] is not an object")
        link = _field(r, "link")
        if link is None:
            continue
        if not isinstance(link, str):
            raise ValueError(f"results[{i}].link is not a string")
        links.append(link)
    return tuple(links)


def dump_response(resp: requests.Response, stream=None):
    """Write the raw response (status line, headers, body) for an operator to read."""
    stream = stream or sys.stderr
    try:
        stream.write(f"HTTP/1.1 {resp.status_code} {resp.reason or ''}\r\n")
        for k, v in resp.headers.items():
            stream.write(f"{k}: {v}\r\n")
        stream.write("\r\n")
        stream.write(resp.text)
        stream.write("\n")
        stream.flush()
    except (OSError, ValueError):
        # Diagnostics only; the keyword is already classified.
        pass


class SearchClient:
    """
    One instance is shared by every request thread. Without an injected
    session each call goes through the module-level `requests.get`, so no
    cookie jar or connection pool is shared between threads.
    """

    def __init__(self, config: SearchConfig, session: requests.Session | None = None, diag_stream=None):
        self.cfg         = config
        self.session     = session
        self.diag_stream = diag_stream

    def url_for(self, params: dict[str, str]) -> str:
        # The API reads its parameters from the path, not the query string.
        return self.cfg.endpoint + urlencode(sorted(params.items()))

    def query(
        self,
        keyword: str,
        params: dict[str, str],
        stop_event: threading.Event = None,
    ) -> Outcome:
        url = self.url_for(build_params(keyword, **params))

        try:
            resp = self._get_with_deadline(url, stop_event)
        except requests.RequestException as e:
            return NetworkFailure(keyword, cause=e)

        if resp.status_code == 429:
            return RateLimited(keyword)

        if resp.status_code != 200:
            dump_response(resp, self.diag_stream)
            return StatusFailure(keyword, status=resp.status_code, body=resp.text)

        try:
            links = extract_links(resp.json())
        except ValueError as e:
            return DecodeFailure(keyword, cause=e)

        return Success(keyword, links=links)

    # ── deadline handling ─────────────────────────────────────────────────────

    def _get_with_deadline(self, url: str, stop_event: threading.Event = None) -> requests.Response:
        timeout  = self.cfg.timeout
        deadline = time.monotonic() + timeout

        pool   = ThreadPoolExecutor(max_workers=1, thread_name_prefix="search-call")
        http   = self.session or requests
        future = pool.submit(http.get, url, headers=self.cfg.headers, timeout=timeout)
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise DeadlineExceeded(f"no response within {timeout:g}s")
                wait_for = remaining if stop_event is None else min(remaining, _POLL_INTERVAL)
                try:
                    return future.result(timeout=wait_for)
                except FuturesTimeout as e:
                    if future.done() and future.exception() is not None:
                        # a socket timeout raised by the call itself, not by our wait
                        raise DeadlineExceeded(str(e)) from e
                    if stop_event is not None and stop_event.is_set():
                        raise QueryCancelled("batch stopped while the call was in flight")
        finally:
            # An abandoned call keeps running until requests' own timeout fires;
            # nothing reads its result.
            future.cancel()
            pool.shutdown(wait=False)

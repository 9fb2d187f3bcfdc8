"""Shared fixtures: a scripted stand-in for requests.Session and a Flask test app."""

from __future__ import annotations

import json
import time
from urllib.parse import parse_qs

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from batchsearch.app import create_app
from batchsearch.config import Config
from batchsearch.search import SearchClient, SearchConfig

ENDPOINT = SearchConfig().endpoint


def make_response(status: int = 200, payload=None, text: str | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = {200: "OK", 429: "Too Many Requests", 500: "Internal Server Error"}.get(status, "")
    if text is None:
        text = json.dumps(payload if payload is not None else {"results": []})
    resp._content = text.encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
    return resp


def links_payload(*links: str) -> dict:
    return {"results": [{"link": link, "title": link} for link in links]}


class FakeSession:
    """
    Replies per keyword from `routes`: a Response, an exception to raise,
    or a callable taking the parsed params. Unknown keywords get an empty
    result list.
    """

    def __init__(self, routes: dict | None = None, delay: float = 0.0):
        self.routes = routes or {}
        self.delay = delay
        self.calls: list[dict] = []

    def get(self, url, headers=None, timeout=None):
        assert url.startswith(ENDPOINT)
        params = {k: v[0] for k, v in parse_qs(url[len(ENDPOINT):], keep_blank_values=True).items()}
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.delay:
            time.sleep(self.delay)

        reply = self.routes.get(params.get("q"), make_response(200, links_payload()))
        if callable(reply) and not isinstance(reply, requests.Response):
            reply = reply(params)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    @property
    def keywords(self) -> list[str]:
        return [c["params"]["q"] for c in self.calls]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def config(tmp_path):
    return Config(environ={"RAPIDAPI_KEY": "test-key", "OUTPUT_DIR": str(tmp_path)})


@pytest.fixture
def client(session):
    return SearchClient(SearchConfig(api_key="test-key"), session=session)


@pytest.fixture
def app(config, client):
    app = create_app(config, client=client)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def http(app):
    return app.test_client()

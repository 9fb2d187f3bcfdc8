"""Tests for BatchOrchestrator: ordering, failure tolerance, abort and stop."""

from __future__ import annotations

import io
import threading

import requests

from batchsearch.batch import BatchLogger, BatchOrchestrator, BatchRequest, ResultSink
from batchsearch.batch.state import ABORTED, DONE, STOPPED
from batchsearch.search import DecodeFailure, NetworkFailure, RateLimited, StatusFailure, Success


class ScriptedClient:
    def __init__(self, outcomes: dict, on_query=None):
        self.outcomes = outcomes
        self.on_query = on_query
        self.queried: list[str] = []
        self.params: list[dict] = []

    def query(self, keyword, params, stop_event=None):
        self.queried.append(keyword)
        self.params.append(params)
        if self.on_query:
            self.on_query(keyword)
        return self.outcomes.get(keyword, Success(keyword, links=()))


def _logger() -> BatchLogger:
    return BatchLogger(stream=io.StringIO(), err_stream=io.StringIO())


def _run(tmp_path, raw: str, client, stop_event=None, **params):
    logger = _logger()
    with ResultSink.open(tmp_path) as sink:
        state = BatchOrchestrator(client).run(
            BatchRequest(raw_keywords=raw, **params), sink, logger, stop_event=stop_event
        )
    lines = (tmp_path / sink.name).read_text(encoding="utf-8").splitlines()
    return state, lines, logger


def test_blank_only_batch_creates_empty_file_and_no_calls(tmp_path):
    client = ScriptedClient({})

    state, lines, _ = _run(tmp_path, "\r\n   \r\n\t\r\n", client)

    assert client.queried == []
    assert lines == []
    assert state.status == DONE


def test_links_follow_keyword_order(tmp_path):
    client = ScriptedClient({
        "cats":  Success("cats", links=("https://cats/1", "https://cats/2")),
        "dogs":  Success("dogs", links=("https://dogs",)),
        "birds": Success("birds", links=("https://birds",)),
    })

    state, lines, _ = _run(tmp_path, "cats\r\n\r\n  dogs  \r\nbirds", client, lr="lang_en", cr="", num="5")

    assert client.queried == ["cats", "dogs", "birds"]
    assert client.params[0] == {"lr": "lang_en", "cr": "", "num": "5"}
    assert lines == ["https://cats/1", "https://cats/2", "https://dogs", "https://birds"]
    assert state.links_written == 4


def test_failing_keywords_are_logged_and_skipped(tmp_path):
    client = ScriptedClient({
        "a": NetworkFailure("a", cause=requests.ConnectionError("refused")),
        "b": StatusFailure("b", status=500, body="oops"),
        "c": DecodeFailure("c", cause=ValueError("bad json")),
        "d": Success("d", links=("https://d",)),
    })

    state, lines, logger = _run(tmp_path, "a\r\nb\r\nc\r\nd", client)

    assert client.queried == ["a", "b", "c", "d"]
    assert lines == ["https://d"]
    assert state.status == DONE
    assert len(state.errors) == 3
    errors = logger.messages("error")
    assert any("kw='a'" in e for e in errors)
    assert any("(500)" in e and "kw='b'" in e for e in errors)
    assert any("kw='c'" in e for e in errors)


def test_rate_limit_aborts_the_rest_of_the_batch(tmp_path):
    client = ScriptedClient({
        "a": Success("a", links=("https://a",)),
        "b": RateLimited("b"),
        "c": Success("c", links=("https://c",)),
    })

    state, lines, logger = _run(tmp_path, "a\r\nb\r\nc", client)

    assert client.queried == ["a", "b"]
    assert lines == ["https://a"]
    assert state.status == ABORTED
    assert logger.messages("error") == []


def test_stop_event_prevents_later_keywords(tmp_path):
    stop = threading.Event()
    client = ScriptedClient(
        {"a": Success("a", links=("https://a",)), "b": Success("b", links=("https://b",))},
        on_query=lambda kw: stop.set(),
    )

    state, lines, _ = _run(tmp_path, "a\r\nb", client, stop_event=stop)

    assert client.queried == ["a"]
    assert lines == ["https://a"]
    assert state.status == STOPPED


def test_state_summary(tmp_path):
    client = ScriptedClient({"a": Success("a", links=("https://a",))})

    state, _, _ = _run(tmp_path, "a", client)

    summary = state.to_dict()
    assert summary["status"] == DONE
    assert summary["attempted"] == 1
    assert summary["links_written"] == 1
    assert summary["batch_id"].endswith(".txt")

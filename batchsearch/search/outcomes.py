"""
search/outcomes.py — Classified result of one keyword's API call.

Exactly one of these comes back from SearchClient.query(). The orchestrator
branches on `ok` / `is_rate_limited` rather than catching exceptions.
"""
from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Outcome:
    keyword: str

    ok: bool              = field(default=False, init=False)
    is_rate_limited: bool = field(default=False, init=False)

    def describe(self) -> str:
        return f"kw={self.keyword!r}"


@dataclass(frozen=True)
class Success(Outcome):
    links: tuple[str, ...] = ()

    ok: bool = field(default=True, init=False)

    def describe(self) -> str:
        return f"{len(self.links)} links: kw={self.keyword!r}"


@dataclass(frozen=True)
class RateLimited(Outcome):
    is_rate_limited: bool = field(default=True, init=False)

    def describe(self) -> str:
        return f"rate limit exceeded: kw={self.keyword!r}"


@dataclass(frozen=True)
class NetworkFailure(Outcome):
    cause: BaseException | None = None

    def describe(self) -> str:
        return f"http request failed: kw={self.keyword!r}: {self.cause}"


@dataclass(frozen=True)
class StatusFailure(Outcome):
    status: int = 0
    body:   str = ""

    def describe(self) -> str:
        return (
            f"http status code is not okay ({self.status}): "
            f"kw={self.keyword!r}: response dumped to stderr"
        )


@dataclass(frozen=True)
class DecodeFailure(Outcome):
    cause: BaseException | None = None

    def describe(self) -> str:
        return f"failed to decode json response from api: kw={self.keyword!r}: {self.cause}"

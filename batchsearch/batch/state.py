"""
batch/state.py — Shared state objects used throughout a batch run.
"""
import json
import re
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone


# ─── Stop-signal registry ─────────────────────────────────────────────────────

_stop_events: dict[str, threading.Event] = {}
_stop_lock = threading.Lock()


def register_stop(batch_id: str) -> threading.Event:
    ev = threading.Event()
    with _stop_lock:
        _stop_events[batch_id] = ev
    return ev


def request_stop(batch_id: str) -> bool:
    with _stop_lock:
        ev = _stop_events.get(batch_id)
    if ev:
        ev.set()
        return True
    return False


def cleanup_stop(batch_id: str):
    with _stop_lock:
        _stop_events.pop(batch_id, None)


def active_batches() -> list[str]:
    with _stop_lock:
        return sorted(_stop_events)


# ─── BatchLogger ──────────────────────────────────────────────────────────────

class BatchLogger:
    """Terminal output plus an in-memory record of everything logged for one batch."""

    def __init__(self, stream=None, err_stream=None):
        self.stream     = stream
        self.err_stream = err_stream
        self.lines: list[dict] = []

    def _emit(self, entry: dict):
        self.lines.append(entry)
        print(entry.get("message", json.dumps(entry)), file=self.stream or sys.stdout)

    def log(self, msg: str, level: str = "info"):
        self._emit({
            "type": "log", "level": level, "message": msg,
            "ts": datetime.now(timezone.utc).isoformat(),
        })

    def error(self, msg: str):
        self._emit({
            "type": "error", "level": "error", "message": msg,
            "ts": datetime.now(timezone.utc).isoformat(),
        })
        print(f"[ERROR] {msg}", file=self.err_stream or sys.stderr)

    def messages(self, level: str | None = None) -> list[str]:
        return [
            e["message"] for e in self.lines
            if level is None or e.get("level") == level
        ]


# ─── BatchRequest ─────────────────────────────────────────────────────────────

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class BatchRequest:
    raw_keywords: str = ""
    lr:  str = ""
    cr:  str = ""
    num: str = ""

    @classmethod
    def from_form(cls, form) -> "BatchRequest":
        return cls(
            raw_keywords=form.get("keywords", ""),
            lr=form.get("lr", ""),
            cr=form.get("cr", ""),
            num=form.get("num", ""),
        )

    def keywords(self):
        """Trimmed keywords in input order; blank lines never come out."""
        for line in _LINE_BREAK.split(self.raw_keywords):
            kw = line.strip()
            if kw:
                yield kw

    @property
    def params(self) -> dict[str, str]:
        return {"lr": self.lr, "cr": self.cr, "num": self.num}


# ─── BatchState ───────────────────────────────────────────────────────────────

DONE    = "done"
ABORTED = "aborted"
STOPPED = "stopped"


@dataclass
class BatchState:
    batch_id:      str  = ""
    status:        str  = "pending"
    attempted:     list = field(default_factory=list)
    links_written: int  = 0
    errors:        list = field(default_factory=list)
    stop_event:    object = field(default=None, repr=False)

    def is_stopped(self) -> bool:
        return self.stop_event is not None and self.stop_event.is_set()

    def to_dict(self) -> dict:
        return {
            "batch_id":      self.batch_id,
            "status":        self.status,
            "attempted":     len(self.attempted),
            "links_written": self.links_written,
            "errors":        self.errors,
        }

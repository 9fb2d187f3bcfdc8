"""
batch/sink.py — ResultSink
Append-only text file, one link per line, owned by a single batch.
"""
from __future__ import annotations
import os
import time
from pathlib import Path

_MAX_NAME_ATTEMPTS = 1000


class SinkCreateError(Exception):
    """Raised when the batch's output file cannot be created."""


class ResultSink:
    """
    Named `<unix-nanoseconds>.txt`. Files are created exclusively, so two
    batches started in the same clock tick still get separate files.

        with ResultSink.open(cfg.OUTPUT_DIR) as sink:
            sink.append("https://example.com")
    """

    def __init__(self, path: Path, fh):
        self.path  = path
        self._fh   = fh
        self.lines = 0

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def closed(self) -> bool:
        return self._fh.closed

    @classmethod
    def open(cls, directory: str | os.PathLike = ".", clock=time.time_ns) -> "ResultSink":
        directory = Path(directory)
        stamp     = clock()
        last_err: OSError | None = None

        for _ in range(_MAX_NAME_ATTEMPTS):
            path = directory / f"{stamp}.txt"
            try:
                fh = open(path, "x", encoding="utf-8")
            except FileExistsError as e:
                last_err = e
                stamp += 1
                continue
            except OSError as e:
                raise SinkCreateError(f"cannot create {path}: {e}") from e
            return cls(path, fh)

        raise SinkCreateError(
            f"no free output name in {directory} after {_MAX_NAME_ATTEMPTS} attempts"
        ) from last_err

    def append(self, link: str):
        self._fh.write(link + "\n")
        self.lines += 1

    def close(self):
        if not self._fh.closed:
            self._fh.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

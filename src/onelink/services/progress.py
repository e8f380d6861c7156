"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/progress.py
Progress sinks for the collect, checksum and merge stages.
"""
import sys
import threading
from typing import Optional, TextIO


class NullProgress:
    """Progress sink that discards everything."""

    def start(self, stage: str, total: Optional[int] = None) -> None:
        pass

    def advance(self, n: int = 1) -> None:
        pass

    def finish(self) -> None:
        pass


class ConsoleProgress:
    """
    Writes a single self-overwriting progress line to stderr.

    `advance` is called concurrently by checksum workers, so all state
    changes happen under a lock. Output is throttled to every `interval`
    units to keep console overhead low on large trees.
    """

    def __init__(self, stream: Optional[TextIO] = None, interval: int = 1):
        self.stream = stream or sys.stderr
        self.interval = max(1, interval)
        self._lock = threading.Lock()
        self._stage = ""
        self._total: Optional[int] = None
        self._current = 0
        self._pending = 0

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def start(self, stage: str, total: Optional[int] = None) -> None:
        with self._lock:
            self._stage = stage
            self._total = total
            self._current = 0
            self._pending = 0
            self._write()

    def advance(self, n: int = 1) -> None:
        with self._lock:
            self._current += n
            self._pending += n
            if self._pending >= self.interval:
                self._pending = 0
                self._write()

    def finish(self) -> None:
        with self._lock:
            self._write()
            self.stream.write("\n")
            self.stream.flush()

    def _write(self) -> None:
        if self._total and self._total > 0:
            percent = (self._current / self._total) * 100
            self.stream.write(
                f"\r  [{self._stage}] {self._current}/{self._total} ({percent:.1f}%)"
            )
        else:
            self.stream.write(f"\r  [{self._stage}] {self._current} files processed...")
        self.stream.flush()

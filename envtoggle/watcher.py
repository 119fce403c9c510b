"""Polling file watcher that reports debounced modifications."""

from __future__ import annotations

import os
import queue
import threading
import time
from dataclasses import dataclass
from typing import Union

_CLOSED = object()


@dataclass(frozen=True)
class FileChanged:
    """The watched file was written to."""

    path: str


class WatcherError(Exception):
    """A problem reported by the watcher, delivered as an event."""


Event = Union[FileChanged, WatcherError]


def _signature(path: str) -> tuple[int, int]:
    st = os.stat(path)
    return st.st_mtime_ns, st.st_size


class FileWatcher:
    """Watch one file in a background thread and queue change events."""

    def __init__(self, poll_interval: float = 0.1, debounce: float = 0.5) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if debounce < 0:
            raise ValueError("debounce must not be negative")
        self.poll_interval = poll_interval
        self.debounce = debounce
        self.path: str | None = None
        self._events: queue.Queue[object] = queue.Queue()
        self._stop_event = threading.Event()
        self._ready = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, path: str | os.PathLike[str]) -> None:
        """Begin watching path; returns once the initial state is recorded."""
        if self._thread is not None:
            raise RuntimeError("watcher already started")
        self.path = os.fspath(path)
        self._thread = threading.Thread(
            target=self._run, args=(self.path,), name="file-watcher", daemon=True
        )
        self._thread.start()
        self._ready.wait()

    def stop(self) -> None:
        """Stop watching; pending and later next_event calls return None."""
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            self._events.put(_CLOSED)
            self._thread = threading.current_thread()
            return
        if thread is not threading.current_thread():
            thread.join()

    def next_event(self, timeout: float | None = None) -> Event | None:
        """Wait for the next event; None on timeout or once the watcher is closed."""
        try:
            item = self._events.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._events.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def __enter__(self) -> FileWatcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def _run(self, path: str) -> None:
        try:
            try:
                last: tuple[int, int] | None = _signature(path)
            except OSError as exc:
                self._events.put(
                    WatcherError(f"failed to add file {path} to watcher: {exc}")
                )
                return
            finally:
                self._ready.set()

            deadline: float | None = None
            last_error: str | None = None
            while not self._stop_event.wait(self.poll_interval):
                try:
                    current: tuple[int, int] | None = _signature(path)
                    last_error = None
                except FileNotFoundError:
                    current = None
                except OSError as exc:
                    message = str(exc)
                    if message != last_error:
                        self._events.put(WatcherError(message))
                        last_error = message
                    continue

                if current is not None and current != last:
                    deadline = time.monotonic() + self.debounce
                last = current

                if deadline is not None and time.monotonic() >= deadline:
                    deadline = None
                    self._events.put(FileChanged(path))
        finally:
            self._events.put(_CLOSED)
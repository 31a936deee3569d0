"""
Relay download progress from worker threads to an observer.

The producer (the results fetcher and the packager, running on a worker
thread) pushes events onto a bounded queue and never waits on progress
events. A daemon thread drains the queue and hands each event to the
observer. Delivery is best-effort: a full queue drops progress events, and
observer exceptions are logged and discarded. The completion signal has a
slot of its own, so it is not lost behind a backlog of progress events.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
import queue
import threading
from typing import Dict, Optional

LOG = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1024
COMPLETE_TIMEOUT = 1.0


@dataclass(frozen=True)
class ProgressEvent:
    filename: str
    downloaded: int
    total: int

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


class ProgressObserver(object):
    """Receives relayed events. Subclasses override what they need."""

    def on_progress(self, event: ProgressEvent) -> None:
        pass

    def on_complete(self) -> None:
        pass


_COMPLETE = object()
_STOP = object()


class ProgressBridge(object):
    def __init__(
        self,
        observer: Optional[ProgressObserver] = None,
        maxsize: int = DEFAULT_QUEUE_SIZE,
    ):
        self._observer = observer or ProgressObserver()
        # One slot beyond maxsize is kept for the completion signal
        self._maxsize = maxsize
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize + 1)
        self._thread: Optional[threading.Thread] = None
        self._startLock = threading.Lock()

    def start(self) -> ProgressBridge:
        with self._startLock:
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._drain,
                    name="nsgjob-progress",
                    daemon=True)
                self._thread.start()
        return self

    def progress(self, filename: str, downloaded: int, total: int) -> None:
        """Producer side; matches the fetcher's on_progress signature."""
        event = ProgressEvent(filename, downloaded, total)
        if self._queue.qsize() >= self._maxsize:
            LOG.debug("progress queue full, dropping %r", event)
            return
        self._offer(event)

    def complete(self) -> None:
        """Signal the end of a run. Waits briefly rather than drop it."""
        try:
            self._queue.put(_COMPLETE, timeout=COMPLETE_TIMEOUT)
        except queue.Full:
            LOG.warning("progress queue full, completion not relayed")

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the relay thread after it has delivered what is queued."""
        thread = self._thread
        if thread is None:
            return
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            LOG.debug("progress queue full, relay thread not stopped")
            return
        thread.join(timeout)
        self._thread = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        _ = (exc_type, exc_val, exc_tb)
        self.close()
        return False

    def _offer(self, item) -> None:
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            LOG.debug("progress queue full, dropping %r", item)

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            try:
                if item is _COMPLETE:
                    self._observer.on_complete()
                else:
                    self._observer.on_progress(item)
            except Exception:  # pylint: disable=broad-except
                LOG.debug("progress observer failed", exc_info=True)

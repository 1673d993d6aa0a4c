from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Hashable, List, Optional

from .chooser import SecurityKeyChooser
from .connectors.base import Node, TreeAccessor
from .errors import InteropFailure

logger = logging.getLogger(__name__)


class WindowWatcher:
    """Dispatches every newly opened top-level window to the chooser.

    Top-level windows are polled on a background thread; a window is handed
    over once when it first appears and forgotten when it closes. Each
    dispatch runs on a worker thread so a dialog still waiting for its
    credential list does not hold up the others.
    """

    def __init__(self, accessor: TreeAccessor, chooser: SecurityKeyChooser, interval: float = 0.25, max_workers: int = 4) -> None:
        self.accessor = accessor
        self.chooser = chooser
        self.interval = max(0.01, interval)
        self.max_workers = max(1, max_workers)
        self._seen: Dict[Hashable, None] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._dispatch_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="authenticator-chooser")
        self._thread = threading.Thread(target=self._run, name="window-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=2)
            if self._thread.is_alive():
                logger.warning("Window watcher did not stop within 2s, it will exit after its current scan")
            else:
                self._thread = None
        with self._dispatch_lock:
            executor, self._executor = self._executor, None
        if executor:
            executor.shutdown(wait=True)

    def _run(self) -> None:
        with self.accessor.thread_scope():
            while not self._stop.is_set():
                start = time.monotonic()
                try:
                    self.poll_once()
                except InteropFailure:
                    logger.warning("Could not enumerate top-level windows", exc_info=True)
                except Exception:  # noqa: BLE001
                    logger.exception("Unexpected error while scanning top-level windows")
                elapsed = time.monotonic() - start
                self._stop.wait(max(0.0, self.interval - elapsed))

    def poll_once(self) -> List[Node]:
        """Dispatch windows that were not open on the previous poll and return them."""
        current: Dict[Hashable, Node] = {}
        for window in self.accessor.top_level_windows():
            try:
                current[self.accessor.window_key(window)] = window
            except InteropFailure:
                logger.debug("Window closed before it could be identified", exc_info=True)
        opened = [w for key, w in current.items() if key not in self._seen]
        self._seen = dict.fromkeys(current)
        for window in opened:
            self.dispatch(window)
        return opened

    def dispatch(self, window: Node) -> Optional["Future[None]"]:
        with self._dispatch_lock:
            if self._stop.is_set():
                logger.debug("Watcher is stopping, not handling new window")
                return None
            if self._executor is not None:
                return self._executor.submit(self._handle, window)
        self._handle(window)
        return None

    def _handle(self, window: Node) -> None:
        with self.accessor.thread_scope():
            try:
                self.chooser.on_candidate_window_opened(window)
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected error while handling a new window")

"""
Change detection for the Local Override Store.

Polls a cheap fingerprint (product count and tombstone count) and calls back
when it moves. `notify()` covers explicit storage-change events; a change
seen by both paths fires twice, which callers must tolerate.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Optional

from amanice.catalog.overrides import LocalOverrideStore

logger = logging.getLogger(__name__)


class OverrideChangeWatcher:
    def __init__(
        self,
        local_store: LocalOverrideStore,
        on_change: Callable[[], None],
        interval_seconds: float = 2.0,
    ) -> None:
        self.local = local_store
        self.on_change = on_change
        self.interval_seconds = interval_seconds
        self._last: Optional[Dict[str, int]] = local_store.fingerprint()

    def poll_once(self) -> bool:
        """Compare fingerprints and fire the callback on a change"""
        current = self.local.fingerprint()
        if current == self._last:
            return False
        logger.info("Local overrides changed: %s -> %s", self._last, current)
        self._last = current
        self.on_change()
        return True

    def notify(self) -> None:
        """Storage-change event from another writer"""
        self._last = self.local.fingerprint()
        self.on_change()

    async def watch(self, stop_event: Optional[asyncio.Event] = None) -> None:
        stop_event = stop_event or asyncio.Event()
        while not stop_event.is_set():
            try:
                # on_change may block on a Remote Store fetch
                await asyncio.to_thread(self.poll_once)
            except Exception as e:
                logger.error(f"Override watcher poll failed: {e}")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

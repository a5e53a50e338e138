"""Polling watcher that reloads a sketch when it goes stale."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sketches.sketch import Sketch

logger = logging.getLogger(__name__)


class ReloadStatus(Enum):
    """Outcome of a watcher-triggered reload."""

    SUCCESS = "success"
    UNRESOLVED = "unresolved"
    ERROR = "error"


@dataclass
class ReloadRecord:
    """A reload attempted by the watcher."""

    status: ReloadStatus
    checksum: int
    error_message: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class SketchWatcher:
    """Watches one sketch and reloads it whenever it becomes stale.

    The staleness check and the reload run under the sketch's lock, so
    another thread cannot reload in between.
    """

    def __init__(self, sketch: Sketch, poll_interval: float | None = None):
        self.sketch = sketch
        self.poll_interval = poll_interval or sketch.config.poll_interval
        self._running = False
        self._reload_history: list[ReloadRecord] = []

    @property
    def running(self) -> bool:
        return self._running

    def check(self) -> ReloadRecord | None:
        """Reload the sketch if it is stale.

        Exceptions raised by the sketch content are logged and recorded
        instead of propagating.

        Returns:
            The record of the attempted reload, or None if the sketch was
            not stale.
        """

        def check_and_reload() -> ReloadRecord | None:
            if not self.sketch.is_stale():
                return None

            try:
                loaded = self.sketch.reload()
            except Exception as e:
                logger.exception(f"Reloading sketch #{self.sketch.id} raised {type(e).__name__}")
                return ReloadRecord(
                    status=ReloadStatus.ERROR,
                    checksum=self.sketch.checksum,
                    error_message=f"{type(e).__name__}: {e}",
                )

            if loaded:
                logger.info(f"Reloaded sketch #{self.sketch.id} ({self.sketch.path})")
                status = ReloadStatus.SUCCESS
            else:
                status = ReloadStatus.UNRESOLVED

            return ReloadRecord(status=status, checksum=self.sketch.checksum)

        record = self.sketch.synchronize(check_and_reload)
        if record is not None:
            self._reload_history.append(record)
        return record

    async def watch_loop(
        self,
        callback: Callable[[ReloadRecord], Any] | None = None,
        poll_interval: float | None = None,
    ) -> None:
        """Poll the sketch until stop() is called.

        Args:
            callback: Sync or async function called with each ReloadRecord.
            poll_interval: Seconds between checks. Defaults to the
                watcher's interval.
        """
        interval = poll_interval or self.poll_interval
        self._running = True
        logger.info(f"Watching {self.sketch.path} every {interval}s")

        try:
            while self._running:
                record = await asyncio.to_thread(self.check)

                if record is not None and callback is not None:
                    result = callback(record)
                    if asyncio.iscoroutine(result):
                        await result

                if self._running:
                    await asyncio.sleep(interval)
        finally:
            self._running = False
            logger.debug(f"Stopped watching {self.sketch.path}")

    def stop(self) -> None:
        """Ask a running watch_loop to exit after its current check."""
        self._running = False

    def get_reload_history(self, limit: int = 10) -> list[ReloadRecord]:
        """Get recent reload records.

        Args:
            limit: Maximum number of records to return.

        Returns:
            List of recent ReloadRecords, oldest first.
        """
        return self._reload_history[-limit:]

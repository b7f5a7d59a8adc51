from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

from watchfiles import awatch

from fusion_index.config import DEFAULT_DEBOUNCE_MS
from fusion_index.core.ports.watcher import ChangeCallback

logger = logging.getLogger(__name__)

FUSION_SUFFIX = ".fusion"


def _is_fusion_file(path: Path) -> bool:
    return path.suffix == FUSION_SUFFIX


class WatchfilesWatcher:
    """Watch a directory for Fusion file changes and trigger a callback.

    Implements the ``FileWatcherPort`` protocol. Changes are batched by
    watchfiles for ``debounce_ms`` before the callback fires; deleted files
    are reported too, the callback tells them apart by checking existence.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: ChangeCallback,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._debounce_ms = debounce_ms
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory, debounce=self._debounce_ms):
            paths = {Path(p) for _, p in changes if _is_fusion_file(Path(p))}
            if paths:
                logger.info("Detected changes in %d Fusion file(s)", len(paths))
                try:
                    await self._on_change(paths)
                except Exception:
                    logger.exception("Error in watcher callback")

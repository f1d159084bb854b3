"""Collapses concurrent fetches for the same key into one upstream call."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger(__name__)


class InflightDeduplicator:
    """Tracks at most one pending fetch per key.

    Every caller that arrives while a fetch for the key is pending awaits the
    same task and receives its result or its exception. The entry is removed
    from a done callback, so it is cleared whether the fetch succeeds, fails
    or is cancelled.
    """

    def __init__(self):
        self._inflight: Dict[str, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    def is_inflight(self, key: str) -> bool:
        return key in self._inflight

    async def join(self, key: str) -> Any:
        """Await the pending fetch for key. Raises KeyError when none is pending."""
        task = self._inflight[key]
        logger.debug(f"Joining inflight fetch for {key}")
        # shield: one caller giving up must not cancel the fetch for the others
        return await asyncio.shield(task)

    async def run(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        """Run producer for key unless a fetch for key is already pending."""
        if key in self._inflight:
            return await self.join(key)

        task = asyncio.ensure_future(producer())
        self._inflight[key] = task
        task.add_done_callback(lambda finished: self._clear(key, finished))
        return await asyncio.shield(task)

    def _clear(self, key: str, finished: asyncio.Future) -> None:
        if self._inflight.get(key) is finished:
            del self._inflight[key]

"""
Debounce and supersede concurrent queries.

Each submit() takes a new sequence number, cancels whatever is still waiting
or in flight, sleeps for the quiet period and only then runs its request.
A call whose sequence number is no longer the latest resolves to None.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


class RequestCoalescer:
    def __init__(self, quiet_period: float):
        self.quiet_period = quiet_period
        self._sequence = 0
        self._current = None

    @property
    def sequence(self) -> int:
        return self._sequence

    def supersede(self) -> int:
        """Retire the pending or in-flight request without issuing a new one."""
        self._sequence += 1
        if self._current is not None and not self._current.done():
            self._current.cancel()
        self._current = None
        return self._sequence

    async def submit(self, request_factory):
        seq = self.supersede()
        task = asyncio.ensure_future(self._run(request_factory))
        self._current = task

        try:
            result = await task
        except asyncio.CancelledError:
            if seq != self._sequence:
                logger.debug("Query #%s superseded", seq)
                return None
            raise

        if seq != self._sequence:
            logger.debug("Dropping stale response for query #%s", seq)
            return None
        return result

    async def _run(self, request_factory):
        if self.quiet_period > 0:
            await asyncio.sleep(self.quiet_period)
        return await request_factory()

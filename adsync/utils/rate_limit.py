"""Pacing between upstream calls."""

from __future__ import annotations

import asyncio
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_SHOP_DELAY = float(os.environ.get("SHOP_DELAY_SECONDS", 65))


class ShopThrottle:
    """Fixed pause between consecutive shops within one cycle.

    Shops share the upstream rate limit, so the cycle stays sequential and
    waits ``delay`` seconds before moving to the next shop. The pause is an
    ``asyncio.sleep`` and is interrupted when the cycle task is cancelled.
    """

    def __init__(self, *, delay: float = DEFAULT_SHOP_DELAY) -> None:
        self.delay = delay

    async def pause(self) -> None:
        if self.delay <= 0:
            return
        logger.debug("Waiting %.0fs before next shop", self.delay)
        await asyncio.sleep(self.delay)

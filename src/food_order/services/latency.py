"""
Artificial per-stage latency.

Each stage sleeps for a random duration before doing its work, so a client
sees realistic progress. Ranges grow per stage and come from LatencyConfig;
``scale=0`` or ``enabled=False`` turns the delay off (tests do this).
"""

import asyncio
import logging
import random

from food_order.config import LatencyConfig
from food_order.domain.models import Stage

logger = logging.getLogger(__name__)


class LatencySimulator:
    def __init__(self, config: LatencyConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self._rng = rng or random.Random()

    def delay_for(self, stage: Stage) -> float:
        if not self.config.enabled or self.config.scale == 0:
            return 0.0
        bounds = getattr(self.config, stage.value)
        return self._rng.uniform(bounds.low, bounds.high) * self.config.scale  # noqa: S311

    async def simulate(self, stage: Stage) -> None:
        delay = self.delay_for(stage)
        if delay:
            logger.debug("Simulating %.2fs of %s latency", delay, stage.value)
            await asyncio.sleep(delay)

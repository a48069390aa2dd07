"""Calorie estimation for meal photos."""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Protocol

MIN_ESTIMATE_KCAL = 200
MAX_ESTIMATE_KCAL = 800


class Estimator(Protocol):
    """Interface for turning a meal photo into a calorie estimate."""

    async def estimate(self, image_bytes: bytes) -> int:
        """Return an estimated calorie count for the photo."""


@dataclass
class RandomEstimator(Estimator):
    """Stand-in estimator that waits, then picks a plausible number."""

    delay_seconds: float = 1.8
    rng: random.Random = field(default_factory=random.Random)

    async def estimate(self, image_bytes: bytes) -> int:
        """Return a random estimate in [200, 800) after the analysis delay."""
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return self.rng.randrange(MIN_ESTIMATE_KCAL, MAX_ESTIMATE_KCAL)

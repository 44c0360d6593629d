"""
Spinner panel - Fun Wheels.

Spins take a moment before the winner shows; exactly one option wins
per spin, drawn uniformly from the wheel.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, Sequence

from config import SPIN_DURATION_SECONDS
from .base import PanelController

logger = logging.getLogger(__name__)

WHEELS = {
    "self_care": [
        "Drink Water 💧", "5 Deep Breaths 🧘", "Text a Friend 📱",
        "Stretch 🙆", "Listen to Music 🎵", "Eat a Fruit 🍎",
    ],
    "fun": [
        "Draw a Cat 🐱", "Dance Break 💃", "Sing a Song 🎤",
        "Origami 🦢", "Write a Poem 📝", "Air Guitar 🎸",
    ],
}


class SpinnerPanel(PanelController):
    name = "spinner"

    def __init__(
        self,
        rng: random.Random = None,
        spin_seconds: float = SPIN_DURATION_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__(client=None)
        self.rng = rng or random.Random()
        self.spin_seconds = spin_seconds
        self._sleep = sleep
        self.spins = 0

    @property
    def spinning(self) -> bool:
        return self.loading

    async def spin(self, options: Sequence[str]) -> Optional[str]:
        options = list(options)
        if not options:
            raise ValueError("Cannot spin an empty wheel")

        async def pick() -> str:
            await self._sleep(self.spin_seconds)
            winner = self.rng.choice(options)
            self.spins += 1
            logger.info(f"[Panel:{self.name}] Winner: {winner}")
            return winner

        return await self.run(pick)

    async def spin_wheel(self, wheel: str) -> Optional[str]:
        if wheel not in WHEELS:
            raise ValueError(f"Unknown wheel: {wheel}. Choose from {list(WHEELS)}")
        return await self.spin(WHEELS[wheel])

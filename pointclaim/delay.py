"""
Delay Policy - randomized waits between identities and fixed cooldowns.
"""
import logging
import random
import time
from typing import Callable, Optional

from pointclaim.config import ClaimerConfig
from pointclaim.console import Console, C

log = logging.getLogger(__name__)


class DelayPolicy:
    """Picks wait durations and sleeps, showing a countdown on the console."""

    def __init__(
        self,
        config: ClaimerConfig,
        console: Optional[Console] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.console = console
        self.sleep = sleep
        self.rng = rng or random.Random()

    def random_delay(self, min_s: Optional[int] = None, max_s: Optional[int] = None) -> int:
        """Uniform integer in [min_s, max_s], bounds inclusive."""
        if min_s is None:
            min_s = self.config.delay_min
        if max_s is None:
            max_s = self.config.delay_max
        return self.rng.randint(min_s, max_s)

    def wait(self, seconds: int):
        """Block for `seconds`, one tick per second."""
        if seconds <= 0:
            return

        log.debug(f"Waiting {seconds}s")
        for remaining in range(seconds, 0, -1):
            if self.console:
                self.console.overwrite(f"⏳ Delay {remaining}s...", C.CYAN)
            self.sleep(1)

        if self.console:
            self.console.clear_line()

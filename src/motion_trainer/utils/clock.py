"""Wall-clock source, injectable so expiry can be tested deterministically."""

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that returns the current time in epoch seconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Clock backed by ``time.time()``."""

    def now(self) -> float:
        return time.time()

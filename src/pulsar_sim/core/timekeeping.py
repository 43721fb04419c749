"""Clock supplying real frame deltas and elapsed time."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`.

    ``tick`` returns ``(delta, elapsed)`` in seconds; both are real time.
    """

    clock: Callable[[], float] = time.perf_counter
    max_delta: float = 0.25
    start_time: float = field(init=False)
    last_time: float = field(init=False)

    def __post_init__(self) -> None:
        self.start_time = self.clock()
        self.last_time = self.start_time

    def tick(self) -> tuple[float, float]:
        now = self.clock()
        dt = min(max(0.0, now - self.last_time), self.max_delta)
        self.last_time = now
        return dt, now - self.start_time

    @property
    def elapsed(self) -> float:
        return self.last_time - self.start_time

    def restart(self) -> None:
        self.start_time = self.clock()
        self.last_time = self.start_time


__all__ = ["FrameTimer"]

"""
Rolling three-second impairment horizon.

Each generator's slices live in a ``SlidingWindow`` covering
``[base_time, base_time + 3s)``. The ``WindowDriver`` owns ``base_time`` and
moves every window forward one second at a time, so the future is always
synthesised at least two seconds past the packets being scheduled.
"""

import typing as tp

from loguru import logger

from impairnet.emulation.constants import (
    SLICE_ROUNDING,
    TICKS_PER_SEC,
    WINDOW_SECONDS,
    WINDOW_TICKS,
)
from impairnet.emulation.errors import DepartureOrderError
from impairnet.utils.types import SliceValue

SliceSource = tp.Callable[[int], tp.List[SliceValue]]


class SlidingWindow:
    """Fixed-length buffer of per-millisecond slices fed by a generator."""

    def __init__(self, source: SliceSource, name: str = ""):
        self.source = source
        self.name = name
        self.slices: tp.List[SliceValue] = []

    def prime(self) -> None:
        """Fill the whole window from the generator."""
        self.slices = self.source(WINDOW_TICKS)

    def advance(self) -> None:
        """Drop the oldest second and synthesise a new trailing second."""
        del self.slices[:TICKS_PER_SEC]
        self.slices.extend(self.source(TICKS_PER_SEC))

    def slice_at(self, time: float, base_time: float) -> SliceValue:
        """
        Return the slice a packet at ``time`` falls into.

        Args:
            time: Absolute time of the packet at this segment, in seconds
            base_time: Start of the window, in seconds

        Returns:
            The slice delay in seconds, or None if the slice is lost

        Raises:
            DepartureOrderError: If ``time`` precedes the window
        """
        index = int((time + SLICE_ROUNDING - base_time) * TICKS_PER_SEC)
        if index < 0:
            raise DepartureOrderError(
                f"Time {time:.6f}s precedes the {self.name or 'segment'} window "
                f"starting at {base_time:.3f}s"
            )
        if index >= len(self.slices):
            logger.debug(
                f"{self.name or 'segment'}: time {time:.6f}s is past the "
                f"{WINDOW_SECONDS}s horizon, using the last slice"
            )
            index = len(self.slices) - 1
        return self.slices[index]

    def __len__(self) -> int:
        return len(self.slices)


class WindowDriver:
    """Advances a set of windows together, one second per tick."""

    def __init__(self, windows: tp.Sequence[SlidingWindow], base_time: float = 0.0):
        self.windows = list(windows)
        self.base_time = base_time
        self.ticks = 0

    def prime(self) -> None:
        """Fill every window before any packet is accepted."""
        for window in self.windows:
            window.prime()

    def tick(self) -> float:
        """
        Move every window forward by one second.

        Returns:
            The new base time
        """
        for window in self.windows:
            window.advance()
        self.base_time += 1.0
        self.ticks += 1
        logger.debug(f"Impairment windows advanced to base time {self.base_time:.1f}s")
        return self.base_time

    def covers(self, time: float) -> bool:
        """Whether ``time`` falls in the second currently being scheduled."""
        return self.base_time <= time < self.base_time + 1.0

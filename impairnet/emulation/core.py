"""
Core network impairment generator.

The core adds a base delay with uniform jitter, a periodic route flap that
moves the base delay between two paths, flat random loss and periodic link
outages during which every packet is lost.
"""

import math
import typing as tp

from loguru import logger

from impairnet.emulation.constants import TICKS_PER_SEC
from impairnet.emulation.profiles import CoreParameters
from impairnet.emulation.random_source import RandomSource
from impairnet.emulation.window import SlidingWindow
from impairnet.utils.types import SliceValue


class CoreModel:
    """
    Impairment generator and running state for the core network.

    Args:
        parms: Core scenario parameters
        rng: Random source owned by the path model
        intercontinental: Use the intercontinental base delay instead of
            the regional one
        name: Label used in logs and statistics
    """

    def __init__(
        self,
        parms: CoreParameters,
        rng: RandomSource,
        intercontinental: bool = False,
        name: str = "core",
    ):
        self.name = name
        self.rng = rng

        self.route_flap_interval_ticks = int(parms.route_flap_interval * TICKS_PER_SEC)
        self.route_flap_delta = parms.route_flap_delay / 2.0
        # Start part way into the first interval so that independent
        # instances do not flap in lockstep
        self.route_flap_counter = self._initial_countdown(self.route_flap_interval_ticks)
        self.delay_delta = (
            -self.route_flap_delta if self.route_flap_interval_ticks > 0 else 0.0
        )

        self.link_failure_interval_ticks = int(
            parms.link_failure_interval * TICKS_PER_SEC
        )
        self.link_failure_duration_ticks = int(
            math.floor(parms.link_failure_duration * TICKS_PER_SEC)
        )
        self.link_failure_counter = self._initial_countdown(
            self.link_failure_interval_ticks
        )
        self.link_recovery_counter = self.link_failure_duration_ticks
        self.in_outage = False

        self.base_delay = (
            parms.base_intercontinental_delay
            if intercontinental
            else parms.base_regional_delay
        )
        self.max_jitter = parms.max_jitter
        self.prob_packet_loss = parms.prob_packet_loss / 100.0
        self.prob_oos = parms.prob_oos / 100.0
        self.last_arrival_time = 0.0

        self.lost_slices = 0
        self.lost_packets = 0
        self.outage_ticks = 0
        self.route_flaps = 0
        self.link_failures = 0
        self.ticks = 0

        self.window = SlidingWindow(self.generate, name=name)

    def _initial_countdown(self, interval_ticks: int) -> int:
        if interval_ticks <= 0:
            return 0
        countdown = interval_ticks - 99 - int(math.floor(interval_ticks * self.rng.uniform()))
        return max(countdown, 1)

    @property
    def route_flapping(self) -> bool:
        return self.route_flap_interval_ticks > 0 and self.route_flap_delta != 0.0

    @property
    def link_failures_enabled(self) -> bool:
        return self.link_failure_interval_ticks > 0 and self.link_failure_duration_ticks > 0

    def generate(self, count: int) -> tp.List[SliceValue]:
        """
        Synthesise ``count`` consecutive millisecond slices.

        Args:
            count: Number of slices to produce

        Returns:
            One value per slice: the delay in seconds, or None if lost
        """
        uniform = self.rng.uniform
        flapping = self.route_flapping
        failing = self.link_failures_enabled
        slices: tp.List[SliceValue] = []
        for _ in range(count):
            jitter_delay = self.base_delay + self.max_jitter * uniform()

            if flapping:
                self.route_flap_counter -= 1
                if self.route_flap_counter <= 0:
                    self.delay_delta = -self.delay_delta
                    self.route_flap_counter = self.route_flap_interval_ticks
                    self.route_flaps += 1

            lose = uniform() < self.prob_packet_loss

            if failing:
                if not self.in_outage:
                    self.link_failure_counter -= 1
                    if self.link_failure_counter <= 0:
                        self.in_outage = True
                        self.link_failures += 1
                        logger.debug(
                            f"{self.name}: link failure for "
                            f"{self.link_failure_duration_ticks}ms"
                        )
                if self.in_outage:
                    lose = True
                    self.outage_ticks += 1
                    self.link_recovery_counter -= 1
                    if self.link_recovery_counter <= 0:
                        # Onsets recur every interval, counting the outage itself
                        self.in_outage = False
                        self.link_recovery_counter = self.link_failure_duration_ticks
                        self.link_failure_counter = max(
                            self.link_failure_interval_ticks
                            - self.link_failure_duration_ticks
                            + 1,
                            1,
                        )

            self.ticks += 1
            if lose:
                slices.append(None)
                self.lost_slices += 1
            else:
                slices.append(jitter_delay + self.delay_delta)
        return slices

    def __repr__(self) -> str:
        return (
            f"CoreModel(base_delay={self.base_delay:.4f}, "
            f"max_jitter={self.max_jitter:.4f}, prob_oos={self.prob_oos:.4f})"
        )

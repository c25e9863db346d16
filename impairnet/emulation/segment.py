"""
LAN and access-link impairment generator.

Each segment synthesises one delay-or-loss value per millisecond. Bursty
loss comes from a two-state Gilbert-Elliott process; jitter comes from
random impulses passed through a one-pole low-pass filter. Both are driven
by the segment's occupancy, as laid out in G.1050 Appendix II.
"""

import typing as tp

from impairnet.emulation.constants import TICKS_PER_SEC
from impairnet.emulation.profiles import LinkType, SegmentConstants, SegmentParameters
from impairnet.emulation.random_source import RandomSource
from impairnet.emulation.window import SlidingWindow
from impairnet.utils.types import SliceValue

LOW_LOSS = 0
HIGH_LOSS = 1


def scale_probability(prob: float, scale: float) -> float:
    """Re-express a probability over a time interval ``scale`` times as long."""
    return 1.0 - (1.0 - prob) ** scale


class SegmentModel:
    """
    Impairment generator and running state for one LAN or access link.

    Args:
        name: Label used in logs and statistics
        link_type: LAN or access link
        constants: Class coefficients (shared between same-class segments)
        parms: Scenario parameters for this segment
        bit_rate: Link rate in bits per second
        multiple_access: Whether the medium is shared (collision loss)
        qos_enabled: Whether the link is protected from congestion
        packet_size: Packet size in bytes
        packet_rate: Packets per second
        rng: Random source owned by the path model
    """

    def __init__(
        self,
        name: str,
        link_type: LinkType,
        constants: SegmentConstants,
        parms: SegmentParameters,
        bit_rate: int,
        multiple_access: bool,
        qos_enabled: bool,
        packet_size: int,
        packet_rate: int,
        rng: RandomSource,
    ):
        self.name = name
        self.link_type = link_type
        self.rng = rng

        occupancy = parms.percentage_occupancy
        # Nominal values are per packet interval; slices are per millisecond
        scale = packet_rate / TICKS_PER_SEC
        low_to_high, high_to_low = constants.prob_loss_rate_change
        (impulse_low, _), (impulse_high, impulse_high_slope) = constants.prob_impulse

        self.serial_delay = packet_size * 8.0 / bit_rate
        self.prob_loss_rate_change = [
            scale_probability(low_to_high * occupancy, scale),
            0.0,
        ]
        if link_type == LinkType.LAN:
            self.prob_loss_rate_change[HIGH_LOSS] = scale_probability(high_to_low, scale)
            self.prob_impulse = [impulse_low, impulse_high]
            self.impulse_decay_coeff = constants.impulse_decay_coeff
            self.impulse_height = (
                parms.mtu
                * (8.0 / bit_rate)
                * (1.0 + occupancy / constants.impulse_height)
            )
        else:
            self.prob_loss_rate_change[HIGH_LOSS] = scale_probability(
                high_to_low / (1.0 + occupancy), scale
            )
            self.prob_impulse = [
                scale_probability(impulse_low + occupancy / 2000.0, scale),
                scale_probability(
                    impulse_high + impulse_high_slope * occupancy / 100.0, scale
                ),
            ]
            self.impulse_decay_coeff = 1.0 - scale_probability(
                1.0 - constants.impulse_decay_coeff, scale
            )
            # Keep the filtered impulse energy independent of the rescaling
            x = (1.0 - constants.impulse_decay_coeff) / (1.0 - self.impulse_decay_coeff)
            self.impulse_height = (
                x
                * parms.mtu
                * (8.0 / bit_rate)
                * (1.0 + occupancy / constants.impulse_height)
            )
        if occupancy <= 0.0:
            # No interfering traffic, so nothing to congest the link
            self.prob_impulse = [0.0, 0.0]

        self.prob_packet_loss = constants.prob_packet_loss * occupancy
        self.qos_enabled = qos_enabled
        self.multiple_access = multiple_access
        self.prob_packet_collision_loss = constants.prob_packet_collision_loss
        self.max_jitter = parms.max_jitter

        self.high_loss = False
        self.congestion_delay = 0.0
        self.last_arrival_time = 0.0

        # Slices marked lost by this generator
        self.lost_slices = 0
        # Scheduled packets lost at this stage
        self.lost_packets = 0
        self.ticks = 0
        self.high_loss_ticks = 0

        self.window = SlidingWindow(self.generate, name=name)

    def generate(self, count: int) -> tp.List[SliceValue]:
        """
        Synthesise ``count`` consecutive millisecond slices.

        Args:
            count: Number of slices to produce

        Returns:
            One value per slice: the delay in seconds, or None if lost
        """
        uniform = self.rng.uniform
        slices: tp.List[SliceValue] = []
        for _ in range(count):
            lose = False
            slice_delay = self.serial_delay + self.max_jitter * uniform()
            if not self.qos_enabled:
                # The loss and impulse draws use the state at the start of the tick
                was_high_loss = HIGH_LOSS if self.high_loss else LOW_LOSS
                if was_high_loss:
                    self.high_loss_ticks += 1
                if uniform() < self.prob_loss_rate_change[was_high_loss]:
                    self.high_loss = not self.high_loss
                impulse = 0.0
                if uniform() < self.prob_impulse[was_high_loss]:
                    impulse = self.impulse_height
                    if not was_high_loss or self.link_type == LinkType.LAN:
                        impulse *= uniform()
                if was_high_loss and uniform() < self.prob_packet_loss:
                    lose = True
                self.congestion_delay = (
                    self.congestion_delay * self.impulse_decay_coeff
                    + impulse * (1.0 - self.impulse_decay_coeff)
                )
                slice_delay += self.congestion_delay
            # Duplex mismatch on a shared medium
            if self.multiple_access and uniform() < self.prob_packet_collision_loss:
                lose = True
            self.ticks += 1
            if lose:
                slices.append(None)
                self.lost_slices += 1
            else:
                slices.append(slice_delay)
        return slices

    def __repr__(self) -> str:
        return (
            f"SegmentModel(name={self.name!r}, link_type={self.link_type.value}, "
            f"serial_delay={self.serial_delay:.6f})"
        )

"""
One direction of an emulated G.1050 IP path.

A ``PathModel`` chains five impairment generators (side A LAN, side A access
link, core, side B access link, side B LAN), keeps three seconds of their
output synthesised ahead of the packets being offered, and hands packets
back in arrival order once the caller's clock has passed their arrival time.

Example:

    with PathModel("a", speed_pattern=1, packet_size=160, packet_rate=50) as path:
        path.put(frame, seq_no=0, departure_time=0.0)
        packet = path.get(current_time=1.0)
"""

import typing as tp

from loguru import logger

from impairnet.emulation.constants import SEARCHBACK_PERIOD
from impairnet.emulation.core import CoreModel
from impairnet.emulation.errors import (
    DepartureOrderError,
    InvalidParameterError,
    ModelClosedError,
    PayloadTooLargeError,
)
from impairnet.emulation.metrics import CoreStatistics, PathStatistics, SegmentStatistics
from impairnet.emulation.profiles import (
    SEGMENT_CONSTANTS,
    LinkType,
    SegmentParameters,
    SeverityProfile,
    SpeedPattern,
    get_impairment_model,
    get_speed_pattern,
    resolve_profile,
)
from impairnet.emulation.queue import DeliveryQueue, QueuedPacket
from impairnet.emulation.random_source import RandomSource
from impairnet.emulation.scheduler import PacketScheduler
from impairnet.emulation.segment import SegmentModel
from impairnet.emulation.window import WindowDriver
from impairnet.utils.types import Payload

ProfileSelector = tp.Union[SeverityProfile, str, int]


def _require_positive_int(name: str, value: tp.Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    return value


class PathModel:
    """
    Impairment model for one direction of a path, from side A to side B.

    Args:
        profile: Severity profile (enum, name or ordinal)
        speed_pattern: Speed pattern id, 1-168
        packet_size: Packet size in bytes, used for serialisation delays
        packet_rate: Packets per second; sets the scheduling grid
        rng: Random source (an unseeded one is created if omitted)
        intercontinental: Use the core's intercontinental base delay
        max_queue_length: Delivery queue capacity (None for unbounded)
        searchback_period: Post-core search-back bound in seconds

    Raises:
        InvalidProfileError: Unknown severity profile
        InvalidSpeedPatternError: Unknown speed pattern
        InvalidParameterError: Any other argument out of range
    """

    def __init__(
        self,
        profile: ProfileSelector,
        speed_pattern: int,
        packet_size: int,
        packet_rate: int,
        rng: tp.Optional[RandomSource] = None,
        intercontinental: bool = False,
        max_queue_length: tp.Optional[int] = None,
        searchback_period: float = SEARCHBACK_PERIOD,
    ):
        self.profile = resolve_profile(profile)
        self.speed_pattern = get_speed_pattern(speed_pattern)
        self.packet_size = _require_positive_int("packet_size", packet_size)
        self.packet_rate = _require_positive_int("packet_rate", packet_rate)
        if max_queue_length is not None:
            _require_positive_int("max_queue_length", max_queue_length)
        if searchback_period < 0:
            raise InvalidParameterError(
                f"searchback_period must not be negative, got {searchback_period!r}"
            )

        self.rng = rng if rng is not None else RandomSource()
        self.rng.ensure_entropy()

        impairments = get_impairment_model(self.profile)
        sp = self.speed_pattern
        self.segments = [
            self._segment(
                "side_a_lan",
                LinkType.LAN,
                impairments.side_a_lan,
                sp.side_a_lan_bit_rate,
                sp.side_a_lan_multiple_access,
                False,
            ),
            self._segment(
                "side_a_access_link",
                LinkType.ACCESS,
                impairments.side_a_access_link,
                sp.side_a_access_link_bit_rate_ab,
                False,
                sp.side_a_access_link_qos_enabled,
            ),
            self._segment(
                "side_b_access_link",
                LinkType.ACCESS,
                impairments.side_b_access_link,
                sp.side_b_access_link_bit_rate_ba,
                False,
                sp.side_b_access_link_qos_enabled,
            ),
            self._segment(
                "side_b_lan",
                LinkType.LAN,
                impairments.side_b_lan,
                sp.side_b_lan_bit_rate,
                sp.side_b_lan_multiple_access,
                False,
            ),
        ]
        self.core = CoreModel(impairments.core, self.rng, intercontinental=intercontinental)

        side_a_lan, side_a_access, side_b_access, side_b_lan = self.segments
        self.driver = WindowDriver(
            [
                side_a_lan.window,
                side_a_access.window,
                self.core.window,
                side_b_access.window,
                side_b_lan.window,
            ]
        )
        self.scheduler = PacketScheduler(
            self.segments, self.core, self.packet_rate, self.rng, searchback_period
        )
        self.queue = DeliveryQueue(max_length=max_queue_length)

        self.packets_offered = 0
        self.packets_lost = 0
        self.packets_delivered = 0
        self._last_departure: tp.Optional[float] = None
        self._closed = False

        self.driver.prime()
        self.scheduler.prime(self.driver.base_time)

        logger.info(
            f"Created path model: profile={self.profile.name}, "
            f"speed_pattern={sp.pattern_id}, packet_size={self.packet_size}, "
            f"packet_rate={self.packet_rate}, {self.rng}"
        )

    def _segment(
        self,
        name: str,
        link_type: LinkType,
        parms: SegmentParameters,
        bit_rate: int,
        multiple_access: bool,
        qos_enabled: bool,
    ) -> SegmentModel:
        return SegmentModel(
            name=name,
            link_type=link_type,
            constants=SEGMENT_CONSTANTS[link_type],
            parms=parms,
            bit_rate=bit_rate,
            multiple_access=multiple_access,
            qos_enabled=qos_enabled,
            packet_size=self.packet_size,
            packet_rate=self.packet_rate,
            rng=self.rng,
        )

    @property
    def base_time(self) -> float:
        """Start of the second currently being scheduled."""
        return self.driver.base_time

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ModelClosedError("Path model has been closed")

    def _advance(self) -> None:
        base_time = self.driver.tick()
        self.scheduler.tick(base_time)

    def put(self, payload: Payload, seq_no: int, departure_time: float) -> int:
        """
        Offer a packet to the path.

        Simulated time is advanced one second at a time until the departure
        is covered, then the packet is queued at its computed arrival time.

        Args:
            payload: Packet contents (copied)
            seq_no: Caller's sequence number, returned with the packet
            departure_time: Time the packet leaves side A, in seconds.
                Departures must not decrease from one call to the next.

        Returns:
            Number of bytes queued, or 0 if the packet was lost

        Raises:
            DepartureOrderError: If the departure precedes the current window
            QueueCapacityError: If the delivery queue is full
            ModelClosedError: If the model has been closed
        """
        self._check_open()

        if self._last_departure is not None and departure_time < self._last_departure:
            logger.warning(
                f"Seq {seq_no} departs at {departure_time:.6f}s, before the "
                f"previous departure at {self._last_departure:.6f}s"
            )
        self._last_departure = departure_time

        while departure_time >= self.base_time and not self.driver.covers(departure_time):
            self._advance()

        slot = self.scheduler.slot_for(departure_time, self.base_time)
        if slot < 0:
            raise DepartureOrderError(
                f"Seq {seq_no} departs at {departure_time:.6f}s, before the "
                f"current window at {self.base_time:.1f}s"
            )
        if slot >= self.packet_rate:
            # Rounds onto the first slot of the next second
            self._advance()

        self.packets_offered += 1
        arrival_time = self.scheduler.arrival_for(departure_time, self.base_time)
        if arrival_time is None:
            self.packets_lost += 1
            return 0

        packet = QueuedPacket(
            payload=bytes(payload),
            seq_no=seq_no,
            departure_time=departure_time,
            arrival_time=arrival_time,
        )
        self.queue.insert(packet)
        return len(packet)

    def get(
        self, current_time: float, max_length: tp.Optional[int] = None
    ) -> tp.Optional[QueuedPacket]:
        """
        Collect the next packet if it has arrived by ``current_time``.

        Args:
            current_time: The caller's clock, in seconds
            max_length: Largest payload the caller accepts (None for any)

        Returns:
            The head packet, now owned by the caller, or None if the queue
            is empty or the head is still in flight (see ``peek``)

        Raises:
            PayloadTooLargeError: If the arrived head exceeds ``max_length``;
                it stays queued
            ModelClosedError: If the model has been closed
        """
        self._check_open()
        head = self.queue.peek()
        if head is None or head.arrival_time > current_time:
            return None
        if max_length is not None and len(head) > max_length:
            raise PayloadTooLargeError(
                f"Seq {head.seq_no} is {len(head)} bytes, larger than {max_length}"
            )
        packet = self.queue.pop_ready(current_time)
        self.packets_delivered += 1
        return packet

    def peek(self) -> tp.Optional[QueuedPacket]:
        """The next packet due, without removing it (None if the queue is empty)."""
        self._check_open()
        return self.queue.peek()

    def close(self) -> None:
        """Release every queued packet. The model cannot be used afterwards."""
        if self._closed:
            return
        if self.queue:
            logger.debug(f"Closing path model with {len(self.queue)} packets in flight")
        self.queue.clear()
        self._closed = True

    def __enter__(self) -> "PathModel":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def statistics(self) -> PathStatistics:
        """Snapshot of the model's packet and generator counters."""
        return PathStatistics(
            packets_offered=self.packets_offered,
            packets_lost=self.packets_lost,
            packets_queued=len(self.queue),
            packets_delivered=self.packets_delivered,
            base_time=self.base_time,
            segments=[
                SegmentStatistics(
                    name=segment.name,
                    ticks=segment.ticks,
                    high_loss_ticks=segment.high_loss_ticks,
                    lost_slices=segment.lost_slices,
                    lost_packets=segment.lost_packets,
                )
                for segment in self.segments
            ],
            core=CoreStatistics(
                ticks=self.core.ticks,
                lost_slices=self.core.lost_slices,
                lost_packets=self.core.lost_packets,
                outage_ticks=self.core.outage_ticks,
                link_failures=self.core.link_failures,
                route_flaps=self.core.route_flaps,
            ),
        )

    def __repr__(self) -> str:
        return (
            f"PathModel(profile={self.profile.name}, "
            f"speed_pattern={self.speed_pattern.pattern_id}, "
            f"packet_size={self.packet_size}, packet_rate={self.packet_rate})"
        )


def create_path_model(
    profile: ProfileSelector,
    speed_pattern: int,
    packet_size: int,
    packet_rate: int,
    **kwargs,
) -> PathModel:
    """Create a path model. Keyword arguments are passed to ``PathModel``."""
    return PathModel(profile, speed_pattern, packet_size, packet_rate, **kwargs)


def _format_segment(
    title: str,
    parms: SegmentParameters,
    bit_rate: int,
    multiple_access: bool,
    qos: bool,
) -> tp.List[str]:
    return [
        f"{title}",
        f"    Percentage occupancy:  {parms.percentage_occupancy:8.2f}",
        f"    MTU:                   {parms.mtu:8d}",
        f"    Maximum jitter:        {parms.max_jitter:8.4f}s",
        f"    Bit rate:              {bit_rate:8d}",
        f"    Multiple access:       {str(multiple_access):>8}",
        f"    QoS enabled:           {str(qos):>8}",
    ]


def dump_parameters(profile: ProfileSelector, speed_pattern: int) -> str:
    """
    Render the resolved parameters of a profile and speed pattern as text.

    Raises:
        InvalidProfileError: Unknown severity profile
        InvalidSpeedPatternError: Unknown speed pattern
    """
    resolved = resolve_profile(profile)
    impairments = get_impairment_model(resolved)
    sp: SpeedPattern = get_speed_pattern(speed_pattern)
    core = impairments.core

    lines = [
        f"Severity profile {resolved.name}, speed pattern {sp.pattern_id}",
        "Likelihood (scenarios A/B/C):  "
        + " / ".join(f"{value:.2f}%" for value in impairments.likelihood),
        f"Speed pattern likelihood:      {sp.likelihood:.3f}%",
    ]
    lines += _format_segment(
        "Side A LAN",
        impairments.side_a_lan,
        sp.side_a_lan_bit_rate,
        sp.side_a_lan_multiple_access,
        False,
    )
    lines += _format_segment(
        "Side A access link",
        impairments.side_a_access_link,
        sp.side_a_access_link_bit_rate_ab,
        False,
        sp.side_a_access_link_qos_enabled,
    )
    lines += [
        "Core",
        f"    Base regional delay:         {core.base_regional_delay:8.4f}s",
        f"    Base intercontinental delay: {core.base_intercontinental_delay:8.4f}s",
        f"    Percentage packet loss:      {core.percentage_packet_loss:8.4f}",
        f"    Maximum jitter:              {core.max_jitter:8.4f}s",
        f"    Route flap interval:         {core.route_flap_interval:8.2f}s",
        f"    Route flap delay:            {core.route_flap_delay:8.4f}s",
        f"    Link failure interval:       {core.link_failure_interval:8.2f}s",
        f"    Link failure duration:       {core.link_failure_duration:8.2f}s",
        f"    Packet loss probability:     {core.prob_packet_loss:8.4f}%",
        f"    Out of sequence probability: {core.prob_oos:8.4f}%",
    ]
    lines += _format_segment(
        "Side B access link",
        impairments.side_b_access_link,
        sp.side_b_access_link_bit_rate_ba,
        False,
        sp.side_b_access_link_qos_enabled,
    )
    lines += _format_segment(
        "Side B LAN",
        impairments.side_b_lan,
        sp.side_b_lan_bit_rate,
        sp.side_b_lan_multiple_access,
        False,
    )
    return "\n".join(lines)

"""
Data classes for path emulation statistics and packet traces.

Statistics are snapshots of the running counters kept by the generators
and the path model; trace records describe the fate of individual packets
as seen by a caller driving ``put``/``get``.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SegmentStatistics:
    """
    Counters for one LAN or access-link segment.
    """

    name: str
    """Segment label (e.g. 'side_a_lan')."""

    ticks: int = 0
    """Millisecond slices synthesised so far."""

    high_loss_ticks: int = 0
    """Slices that began in the HIGH_LOSS state."""

    lost_slices: int = 0
    """Slices marked lost by the generator."""

    lost_packets: int = 0
    """Scheduled packets lost at this segment."""

    @property
    def high_loss_fraction(self) -> float:
        """Fraction of time spent in the HIGH_LOSS state."""
        return self.high_loss_ticks / self.ticks if self.ticks else 0.0

    @property
    def slice_loss_fraction(self) -> float:
        """Fraction of slices marked lost."""
        return self.lost_slices / self.ticks if self.ticks else 0.0


@dataclass
class CoreStatistics:
    """
    Counters for the core network segment.
    """

    ticks: int = 0
    """Millisecond slices synthesised so far."""

    lost_slices: int = 0
    """Slices marked lost, by random loss or by an outage."""

    lost_packets: int = 0
    """Scheduled packets lost in the core."""

    outage_ticks: int = 0
    """Slices spent inside a link outage."""

    link_failures: int = 0
    """Link outages started."""

    route_flaps: int = 0
    """Route changes."""


@dataclass
class PathStatistics:
    """
    Snapshot of a path model's counters.
    """

    packets_offered: int = 0
    """Packets passed to put()."""

    packets_lost: int = 0
    """Packets lost somewhere along the path."""

    packets_queued: int = 0
    """Packets currently waiting in the delivery queue."""

    packets_delivered: int = 0
    """Packets handed back by get()."""

    base_time: float = 0.0
    """Start of the second currently being scheduled."""

    segments: List[SegmentStatistics] = field(default_factory=list)
    """Per-segment counters, in path order (core excluded)."""

    core: CoreStatistics = field(default_factory=CoreStatistics)
    """Core network counters."""

    @property
    def loss_percent(self) -> float:
        """Percentage of offered packets lost."""
        if self.packets_offered == 0:
            return 0.0
        return 100.0 * self.packets_lost / self.packets_offered


@dataclass
class DeliveryRecord:
    """
    Fate of a single packet in an emulation trace.
    """

    seq_no: int
    """Sequence number given at put()."""

    departure_time: float
    """Time the packet was offered to the path, in seconds."""

    arrival_time: Optional[float] = None
    """Computed arrival time in seconds (None if lost)."""

    delivered_time: Optional[float] = None
    """Caller time at which get() returned the packet (None if lost)."""

    delivery_index: Optional[int] = None
    """Position in delivery order (None if lost)."""

    length: int = 0
    """Payload length in bytes."""

    @property
    def lost(self) -> bool:
        return self.arrival_time is None

    @property
    def delay(self) -> Optional[float]:
        """One-way delay in seconds."""
        if self.arrival_time is None:
            return None
        return self.arrival_time - self.departure_time


@dataclass
class TraceSummary:
    """
    Aggregate view of an emulation trace.
    """

    packets_sent: int = 0
    """Packets offered to the path."""

    packets_lost: int = 0
    """Packets that never arrived."""

    packet_loss_percent: float = 0.0
    """Packet loss as a percentage of packets sent."""

    mean_delay_ms: float = 0.0
    """Mean one-way delay in milliseconds."""

    min_delay_ms: float = 0.0
    """Minimum one-way delay in milliseconds."""

    p50_delay_ms: float = 0.0
    """Median one-way delay in milliseconds."""

    p99_delay_ms: float = 0.0
    """99th percentile one-way delay in milliseconds."""

    max_delay_ms: float = 0.0
    """Maximum one-way delay in milliseconds."""

    jitter_ms: float = 0.0
    """Mean absolute delay difference between consecutive delivered packets."""

    reordered_packets: int = 0
    """Packets delivered after a packet with a higher sequence number."""

    mos: float = 0.0
    """Estimated Mean Opinion Score for voice over this path."""

    r_factor: float = 0.0
    """E-model R factor backing the MOS estimate."""


@dataclass
class VoiceQuality:
    """
    E-model voice quality estimate for a path.
    """

    mos: float = 0.0
    """Mean Opinion Score (1.0 - 4.5)."""

    r_factor: float = 0.0
    """Transmission rating factor (0 - 100)."""

    delay_impairment: float = 0.0
    """Id, impairment due to one-way delay."""

    equipment_impairment: float = 0.0
    """Ie, impairment due to packet loss."""

    effective_latency_ms: float = 0.0
    """One-way delay the estimate was computed for."""

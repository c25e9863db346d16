"""
Packet scheduling through the five path segments.

Packets are scheduled on a grid of ``packet_rate`` slots per second. Every
slot starts at its departure time and is walked through the segments in
path order, each stage adding the delay of the millisecond slice the packet
reaches it in. The stages differ only in how they treat ordering:

- before the core, packets never overtake each other (strict order);
- the core may leave a packet out of order with probability ``prob_oos``;
- after the core, delays are applied without undoing the core's order
  (search-back).

A slot holding None has been lost; loss is terminal, so later stages just
carry it through.

From the core onwards each stage also keeps an ``OrderFloor``: a packet may
overtake neighbours that departed within the search-back period, but never
a packet that departed further back than that.
"""

import math
import typing as tp
from collections import deque

from impairnet.emulation.constants import SEARCHBACK_PERIOD, WINDOW_SECONDS
from impairnet.emulation.core import CoreModel
from impairnet.emulation.random_source import RandomSource
from impairnet.emulation.segment import SegmentModel
from impairnet.emulation.window import SlidingWindow
from impairnet.utils.types import ScheduleSlot


class OrderFloor:
    """
    Earliest time a packet may leave a stage without overtaking any packet
    scheduled ``lag`` or more slots before it.

    Lookups are made in slot order. Outputs of the second being resolved are
    read from the stage's output list once the lookups have moved ``lag``
    slots past them, after which they no longer change. Whatever is left of
    a second when it is closed carries over into the next one.

    Args:
        lag: Slot distance at which packets must keep their order
    """

    def __init__(self, lag: int):
        if lag < 1:
            raise ValueError(f"lag must be at least 1, got {lag}")
        self.lag = lag
        self.level = 0.0
        self._carried: tp.Deque[tp.Tuple[int, float]] = deque()
        self._start = 0
        self._passed = 0

    @classmethod
    def for_period(cls, period: float, packet_rate: int) -> "OrderFloor":
        """Floor for packets departing more than ``period`` seconds apart."""
        return cls(int(math.floor(period * packet_rate + 1e-9)) + 1)

    def _raise(self, time: ScheduleSlot) -> None:
        if time is not None and time > self.level:
            self.level = time

    def at(self, index: int, times: tp.Sequence[ScheduleSlot]) -> float:
        """
        Latest output among the slots at least ``lag`` before ``index``.

        Args:
            index: Slot in the current second being resolved
            times: The stage's output list for the current second

        Returns:
            The floor for the slot (0.0 before any packet has left)
        """
        cutoff = index - self.lag
        while self._carried and self._carried[0][0] <= self._start + cutoff:
            self._raise(self._carried.popleft()[1])
        while self._passed <= cutoff:
            self._raise(times[self._passed])
            self._passed += 1
        return self.level

    def close(self, times: tp.Sequence[ScheduleSlot], count: int) -> None:
        """Carry the unread outputs of the current second over to the next."""
        for i in range(self._passed, count):
            if times[i] is not None:
                self._carried.append((self._start + i, times[i]))
        self._start += count
        self._passed = 0
        # Already behind every cutoff of the next second
        while self._carried and self._carried[0][0] <= self._start - self.lag:
            self._raise(self._carried.popleft()[1])


def apply_strict_order(
    segment: SegmentModel,
    window: SlidingWindow,
    base_time: float,
    times: tp.List[ScheduleSlot],
    count: int,
) -> int:
    """
    Add a segment's delays in place, never letting a packet move earlier
    than the one before it.

    Args:
        segment: Segment whose running ``last_arrival_time`` is enforced
        window: The segment's slice window
        base_time: Start of the window
        times: Schedule slots, updated in place
        count: Number of leading slots to resolve

    Returns:
        Number of packets lost at this stage
    """
    lost = 0
    for i in range(count):
        time = times[i]
        if time is None:
            continue
        delay = window.slice_at(time, base_time)
        if delay is None:
            times[i] = None
            lost += 1
            continue
        time += delay
        if time < segment.last_arrival_time:
            time = segment.last_arrival_time
        else:
            segment.last_arrival_time = time
        times[i] = time
    return lost


def apply_core_reorder(
    core: CoreModel,
    window: SlidingWindow,
    base_time: float,
    times: tp.List[ScheduleSlot],
    count: int,
    rng: RandomSource,
    floor: tp.Optional[OrderFloor] = None,
) -> int:
    """
    Add the core's delays in place, letting a packet overtake its
    predecessors with probability ``core.prob_oos``.

    Args:
        core: Core whose running ``last_arrival_time`` is enforced
        window: The core's slice window
        base_time: Start of the window
        times: Schedule slots, updated in place
        count: Number of leading slots to resolve
        rng: Source of the reorder decisions
        floor: Limits how far back a packet may overtake (None for no limit)

    Returns:
        Number of packets lost at this stage
    """
    lost = 0
    for i in range(count):
        time = times[i]
        if time is None:
            continue
        delay = window.slice_at(time, base_time)
        if delay is None:
            times[i] = None
            lost += 1
            continue
        time += delay
        if time < core.last_arrival_time:
            # Earlier than the last packet out of the core
            if rng.uniform() >= core.prob_oos:
                time = core.last_arrival_time
            elif floor is not None:
                time = max(time, floor.at(i, times))
        else:
            core.last_arrival_time = time
        times[i] = time
    if floor is not None:
        floor.close(times, count)
    return lost


def apply_search_back(
    window: SlidingWindow,
    base_time: float,
    source: tp.List[ScheduleSlot],
    target: tp.List[ScheduleSlot],
    count: int,
    searchback_period: float = SEARCHBACK_PERIOD,
    floor: tp.Optional[OrderFloor] = None,
) -> int:
    """
    Add a segment's delays while preserving the order the core produced.

    Results go to ``target`` so the scan never reads a value it has already
    rewritten. When a packet entered this segment earlier than one scheduled
    before it (the core reordered them), the earlier-scheduled packets
    within ``searchback_period`` that would now leave before it are held
    back to leave with it instead. Otherwise the packet is kept behind the
    last in-order packet. With a ``floor``, no packet leaves before one
    scheduled the floor's lag or more slots ahead of it.

    Args:
        window: The segment's slice window
        base_time: Start of the window
        source: Slot times entering the segment
        target: Slot times leaving the segment, written here
        count: Number of leading slots to resolve
        searchback_period: How far back (seconds) to look for packets to
            hold back
        floor: Keeps packets behind those scheduled well before them (None
            for no limit)

    Returns:
        Number of packets lost at this stage
    """
    lost = 0
    last_in = 0.0
    last_out = 0.0
    for i in range(count):
        time_in = source[i]
        if time_in is None:
            target[i] = None
            continue
        delay = window.slice_at(time_in, base_time)
        if delay is None:
            target[i] = None
            lost += 1
            continue
        time_out = time_in + delay
        if floor is not None:
            time_out = max(time_out, floor.at(i, target))
        target[i] = time_out
        if time_in < last_in:
            for j in range(i - 1, -1, -1):
                earlier_in = source[j]
                earlier_out = target[j]
                if earlier_in is None or earlier_out is None:
                    continue
                if time_in - earlier_in > searchback_period:
                    break
                if earlier_in > time_in and earlier_out < time_out:
                    target[j] = time_out
        else:
            last_in = time_in
            if time_out < last_out:
                target[i] = last_out
            else:
                last_out = time_out
    if floor is not None:
        floor.close(target, count)
    return lost


class PacketScheduler:
    """
    Schedule arrays for one path and the pipeline that resolves them.

    ``arrivals`` is the working array: it holds departure times for future
    seconds and resolved arrival times for the current one. ``scratch``
    receives the output of the first post-core segment.

    Args:
        segments: The four segments in path order (side A LAN, side A
            access link, side B access link, side B LAN)
        core: The core network
        packet_rate: Grid slots per second
        rng: Random source for the core's reorder decisions
        searchback_period: Search-back bound for the post-core segments
    """

    def __init__(
        self,
        segments: tp.Sequence[SegmentModel],
        core: CoreModel,
        packet_rate: int,
        rng: RandomSource,
        searchback_period: float = SEARCHBACK_PERIOD,
    ):
        if len(segments) != 4:
            raise ValueError(f"Expected 4 segments, got {len(segments)}")
        self.segments = list(segments)
        self.core = core
        self.packet_rate = packet_rate
        self.rng = rng
        self.searchback_period = searchback_period

        slots = WINDOW_SECONDS * packet_rate
        self.arrivals: tp.List[ScheduleSlot] = [0.0] * slots
        self.scratch: tp.List[ScheduleSlot] = [0.0] * slots
        self._reset_floors()

    def _reset_floors(self) -> None:
        self.floors = [
            OrderFloor.for_period(self.searchback_period, self.packet_rate)
            for _ in range(3)
        ]

    def _departures(self, start: float, count: int) -> tp.List[ScheduleSlot]:
        return [start + i / self.packet_rate for i in range(count)]

    def prime(self, base_time: float) -> None:
        """Seed the grid with departure times and resolve the first second."""
        slots = WINDOW_SECONDS * self.packet_rate
        self.arrivals = self._departures(base_time, slots)
        self.scratch = [0.0] * slots
        self._reset_floors()
        self._resolve(base_time)

    def tick(self, base_time: float) -> None:
        """
        Shift the grid by one second and resolve the new current second.

        Must be called after the windows have advanced to ``base_time``.
        """
        rate = self.packet_rate
        del self.arrivals[:rate]
        del self.scratch[:rate]
        self.arrivals.extend(self._departures(base_time + WINDOW_SECONDS - 1, rate))
        self.scratch.extend([0.0] * rate)
        self._resolve(base_time)

    def _resolve(self, base_time: float) -> None:
        rate = self.packet_rate
        side_a_lan, side_a_access, side_b_access, side_b_lan = self.segments
        core_floor, side_b_access_floor, side_b_lan_floor = self.floors

        side_a_lan.lost_packets += apply_strict_order(
            side_a_lan, side_a_lan.window, base_time, self.arrivals, rate
        )
        side_a_access.lost_packets += apply_strict_order(
            side_a_access, side_a_access.window, base_time, self.arrivals, rate
        )
        self.core.lost_packets += apply_core_reorder(
            self.core,
            self.core.window,
            base_time,
            self.arrivals,
            rate,
            self.rng,
            core_floor,
        )
        side_b_access.lost_packets += apply_search_back(
            side_b_access.window,
            base_time,
            self.arrivals,
            self.scratch,
            rate,
            self.searchback_period,
            side_b_access_floor,
        )
        side_b_lan.lost_packets += apply_search_back(
            side_b_lan.window,
            base_time,
            self.scratch,
            self.arrivals,
            rate,
            self.searchback_period,
            side_b_lan_floor,
        )

    def slot_for(self, departure_time: float, base_time: float) -> int:
        """Grid slot nearest to ``departure_time``."""
        return int(math.floor((departure_time - base_time) * self.packet_rate + 0.5))

    def arrival_for(self, departure_time: float, base_time: float) -> ScheduleSlot:
        """
        Arrival time of a packet departing in the current second.

        The slot's total path delay is applied to the packet's own
        departure time, so packets off the grid keep their offset.

        Args:
            departure_time: Departure time, within one slot of the
                current second
            base_time: Start of the current second

        Returns:
            Arrival time in seconds, or None if the packet is lost
        """
        slot = self.slot_for(departure_time, base_time)
        if not 0 <= slot < self.packet_rate:
            raise IndexError(
                f"Departure {departure_time:.6f}s maps to slot {slot}, "
                f"outside the current second at {base_time:.1f}s"
            )
        arrival = self.arrivals[slot]
        if arrival is None:
            return None
        slot_departure = base_time + slot / self.packet_rate
        # On-grid departures keep the slot's arrival exactly, so rounding
        # error cannot split packets the scheduler left tied
        if math.isclose(departure_time, slot_departure, rel_tol=0.0, abs_tol=1e-9):
            return arrival
        return arrival + (departure_time - slot_departure)

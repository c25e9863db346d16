"""
Arrival-time ordered delivery queue.

Packets leave the core possibly out of order, so they are inserted by
arrival time rather than appended. New arrivals cluster near the tail in
time, so insertion scans backwards from the tail.
"""

import typing as tp
from collections import deque
from dataclasses import dataclass

from loguru import logger

from impairnet.emulation.errors import QueueCapacityError


@dataclass
class QueuedPacket:
    """A packet waiting for (or handed over at) its arrival time."""

    payload: bytes
    seq_no: int
    departure_time: float
    arrival_time: float

    def __len__(self) -> int:
        return len(self.payload)


class DeliveryQueue:
    """
    Packets ordered by non-decreasing arrival time.

    The queue owns its packets until they are popped, at which point they
    belong to the caller.

    Args:
        max_length: Maximum number of queued packets (None for unbounded)
    """

    def __init__(self, max_length: tp.Optional[int] = None):
        self.max_length = max_length
        self._packets: tp.Deque[QueuedPacket] = deque()

    def insert(self, packet: QueuedPacket) -> None:
        """
        Insert a packet after every packet arriving no later than it.

        Raises:
            QueueCapacityError: If the queue is full. The queue is left
                unchanged.
        """
        if self.max_length is not None and len(self._packets) >= self.max_length:
            raise QueueCapacityError(
                f"Delivery queue is full ({self.max_length} packets), "
                f"cannot queue seq {packet.seq_no}"
            )

        position = len(self._packets)
        while position > 0 and self._packets[position - 1].arrival_time > packet.arrival_time:
            position -= 1

        if position == len(self._packets):
            self._packets.append(packet)
        else:
            self._packets.insert(position, packet)

    def peek(self) -> tp.Optional[QueuedPacket]:
        """Return the head of the queue without removing it."""
        if not self._packets:
            return None
        return self._packets[0]

    def pop_ready(self, current_time: float) -> tp.Optional[QueuedPacket]:
        """
        Remove and return the head if it has arrived by ``current_time``.

        Returns:
            The head packet, or None if the queue is empty or the head is
            still in flight
        """
        if not self._packets or self._packets[0].arrival_time > current_time:
            return None
        return self._packets.popleft()

    def clear(self) -> None:
        self._packets.clear()

    def dump(self) -> tp.List[str]:
        """Render the queue scanned forwards and then backwards."""
        lines = ["Queue scanned forwards"]
        for packet in self._packets:
            lines.append(
                f"Seq {packet.seq_no:5d}, arrival {packet.arrival_time:10.4f}, "
                f"len {len(packet):3d}"
            )
        lines.append("Queue scanned backwards")
        for packet in reversed(self._packets):
            lines.append(
                f"Seq {packet.seq_no:5d}, arrival {packet.arrival_time:10.4f}, "
                f"len {len(packet):3d}"
            )
        for line in lines:
            logger.debug(line)
        return lines

    def __len__(self) -> int:
        return len(self._packets)

    def __iter__(self) -> tp.Iterator[QueuedPacket]:
        return iter(self._packets)

    def __bool__(self) -> bool:
        return bool(self._packets)

"""
Packet trace recording on top of the put/get interface.

A ``TraceRecorder`` plays both ends of one direction of a path: it offers
packets to a ``PathModel`` and polls it for arrivals, keeping one
``DeliveryRecord`` per packet.
"""

import math
import typing as tp

from impairnet.emulation.metrics import DeliveryRecord
from impairnet.emulation.model import PathModel


class TraceRecorder:
    """
    Drive a path model at a constant packet rate and record every packet.

    Args:
        model: Path model for this direction
        label: Name used for this direction in logs and exports
        payload_size: Bytes per packet (defaults to the model's packet size)
    """

    def __init__(
        self,
        model: PathModel,
        label: str = "a_to_b",
        payload_size: tp.Optional[int] = None,
    ):
        self.model = model
        self.label = label
        self.payload_size = payload_size or model.packet_size
        self.records: tp.Dict[int, DeliveryRecord] = {}
        self.next_seq = 0
        self.delivered = 0

    def departure_time(self, seq_no: int) -> float:
        return seq_no / self.model.packet_rate

    def send_until(self, current_time: float) -> int:
        """
        Offer every packet due to depart by ``current_time``.

        Returns:
            Number of packets offered
        """
        sent = 0
        while self.departure_time(self.next_seq) <= current_time:
            self.send(self.next_seq, self.departure_time(self.next_seq))
            self.next_seq += 1
            sent += 1
        return sent

    def send(self, seq_no: int, departure_time: float) -> DeliveryRecord:
        payload = seq_no.to_bytes(4, "big").ljust(self.payload_size, b"\x00")
        record = DeliveryRecord(
            seq_no=seq_no,
            departure_time=departure_time,
            length=len(payload),
        )
        self.records[seq_no] = record
        self.model.put(payload, seq_no, departure_time)
        return record

    def poll(self, current_time: float) -> int:
        """
        Collect every packet that has arrived by ``current_time``.

        Returns:
            Number of packets collected
        """
        collected = 0
        while True:
            packet = self.model.get(current_time)
            if packet is None:
                return collected
            record = self.records[packet.seq_no]
            record.arrival_time = packet.arrival_time
            # Draining at the end delivers each packet at its arrival
            if math.isinf(current_time):
                record.delivered_time = packet.arrival_time
            else:
                record.delivered_time = current_time
            record.delivery_index = self.delivered
            self.delivered += 1
            collected += 1

    @property
    def in_flight(self) -> int:
        return len(self.model.queue)

    def finish(self) -> tp.List[DeliveryRecord]:
        """
        Return the trace ordered by sequence number.

        Packets still queued are collected regardless of the clock; anything
        that never reached the queue was lost.
        """
        self.poll(math.inf)
        return [self.records[seq_no] for seq_no in sorted(self.records)]

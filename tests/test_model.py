from bisect import bisect_left, bisect_right

import pytest

from impairnet.emulation.constants import SEARCHBACK_PERIOD
from impairnet.emulation.errors import (
    DepartureOrderError,
    InvalidParameterError,
    InvalidProfileError,
    InvalidSpeedPatternError,
    ModelClosedError,
    PayloadTooLargeError,
    QueueCapacityError,
)
from impairnet.emulation.model import PathModel, create_path_model, dump_parameters
from impairnet.emulation.profiles import SeverityProfile
from impairnet.emulation.random_source import RandomSource

PACKET_SIZE = 100
PACKET_RATE = 33

# Pattern 1: 4 Mbps LANs, 128 kbps up and 768 kbps down access links
PASS_THROUGH_DELAY = (
    PACKET_SIZE * 8 / 4_000_000
    + PACKET_SIZE * 8 / 128_000
    + PACKET_SIZE * 8 / 768_000
    + PACKET_SIZE * 8 / 4_000_000
)


@pytest.fixture
def clean_path(rng):
    model = PathModel(
        SeverityProfile.NO_IMPAIRMENT, 1, PACKET_SIZE, PACKET_RATE, rng=rng
    )
    yield model
    model.close()


def test_pass_through_single_packet(clean_path):
    payload = bytes(range(PACKET_SIZE))
    assert clean_path.put(payload, 1, 5.0) == PACKET_SIZE
    assert clean_path.base_time == 5.0

    assert clean_path.get(5.0) is None

    packet = clean_path.get(5.0 + PASS_THROUGH_DELAY + 1e-6)
    assert packet is not None
    assert packet.payload == payload
    assert packet.seq_no == 1
    assert packet.departure_time == 5.0
    assert packet.arrival_time == pytest.approx(5.0 + PASS_THROUGH_DELAY)


def test_pass_through_stream_has_constant_delay(clean_path):
    count = PACKET_RATE * 10
    for seq_no in range(count):
        departure = seq_no / PACKET_RATE
        assert clean_path.put(b"\x01" * PACKET_SIZE, seq_no, departure) == PACKET_SIZE

    delivered = []
    while True:
        packet = clean_path.get(1e9)
        if packet is None:
            break
        delivered.append(packet)

    assert [p.seq_no for p in delivered] == list(range(count))
    for packet in delivered:
        assert packet.arrival_time - packet.departure_time == pytest.approx(
            PASS_THROUGH_DELAY, abs=1e-9
        )

    stats = clean_path.statistics()
    assert stats.packets_offered == count
    assert stats.packets_lost == 0
    assert stats.packets_delivered == count
    assert stats.packets_queued == 0
    assert stats.core.lost_packets == 0
    assert all(s.lost_packets == 0 for s in stats.segments)


def test_off_grid_departure_keeps_its_offset(clean_path):
    departure = 2.0 + 0.2 / PACKET_RATE
    clean_path.put(b"x", 0, departure)
    packet = clean_path.get(10.0)
    assert packet.arrival_time == pytest.approx(departure + PASS_THROUGH_DELAY)


def test_departure_rounding_into_next_second(clean_path):
    departure = 3.0 - 0.2 / PACKET_RATE
    assert clean_path.put(b"x", 0, departure) == 1
    assert clean_path.base_time == 3.0
    packet = clean_path.get(10.0)
    assert packet.arrival_time == pytest.approx(departure + PASS_THROUGH_DELAY)


def test_get_is_idempotent_until_arrival(clean_path):
    clean_path.put(b"abc", 9, 5.0)

    assert clean_path.get(5.0) is None
    assert clean_path.get(5.0) is None
    assert clean_path.peek().seq_no == 9
    assert clean_path.peek().arrival_time == pytest.approx(5.0 + PASS_THROUGH_DELAY)

    assert clean_path.get(6.0).seq_no == 9
    assert clean_path.get(6.0) is None
    assert clean_path.peek() is None


def test_get_with_small_buffer_leaves_packet_queued(clean_path):
    clean_path.put(b"\x00" * 50, 0, 1.0)
    with pytest.raises(PayloadTooLargeError):
        clean_path.get(2.0, max_length=10)
    assert len(clean_path.queue) == 1
    assert len(clean_path.get(2.0, max_length=50)) == 50


def test_payload_is_copied(clean_path):
    payload = bytearray(b"hello")
    clean_path.put(payload, 0, 0.0)
    payload[0] = 0
    assert clean_path.get(1.0).payload == b"hello"


def test_departure_before_window_is_rejected(clean_path):
    clean_path.put(b"x", 0, 5.0)
    with pytest.raises(DepartureOrderError):
        clean_path.put(b"x", 1, 1.0)


def test_full_queue_is_reported(rng):
    model = PathModel(
        "no_impairment", 1, PACKET_SIZE, PACKET_RATE, rng=rng, max_queue_length=1
    )
    model.put(b"x", 0, 0.0)
    with pytest.raises(QueueCapacityError):
        model.put(b"y", 1, 1 / PACKET_RATE)
    assert len(model.queue) == 1
    assert model.get(1.0).payload == b"x"


def test_closed_model_rejects_calls(rng):
    with PathModel("a", 1, PACKET_SIZE, PACKET_RATE, rng=rng) as model:
        model.put(b"x", 0, 0.0)
    assert model.closed
    assert len(model.queue) == 0
    with pytest.raises(ModelClosedError):
        model.put(b"x", 1, 0.1)
    with pytest.raises(ModelClosedError):
        model.get(1.0)
    model.close()


@pytest.mark.parametrize(
    "kwargs, error",
    [
        (dict(profile="z"), InvalidProfileError),
        (dict(profile=12), InvalidProfileError),
        (dict(speed_pattern=0), InvalidSpeedPatternError),
        (dict(speed_pattern=169), InvalidSpeedPatternError),
        (dict(packet_size=0), InvalidParameterError),
        (dict(packet_rate=-5), InvalidParameterError),
        (dict(packet_rate=2.5), InvalidParameterError),
        (dict(max_queue_length=0), InvalidParameterError),
        (dict(searchback_period=-0.1), InvalidParameterError),
    ],
)
def test_invalid_arguments_are_rejected(kwargs, error):
    arguments = dict(profile="a", speed_pattern=1, packet_size=160, packet_rate=50)
    arguments.update(kwargs)
    with pytest.raises(error):
        create_path_model(**arguments)


def test_impaired_path_invariants():
    model = PathModel(SeverityProfile.H, 1, 200, 50, rng=RandomSource(seed=21))
    for seq_no in range(50 * 30):
        model.put(b"\x00" * 200, seq_no, seq_no / 50)

    arrivals = [p.arrival_time for p in model.queue]
    assert arrivals == sorted(arrivals)
    assert all(p.arrival_time > p.departure_time for p in model.queue)

    stats = model.statistics()
    assert stats.packets_offered == 1500
    assert stats.packets_lost + stats.packets_queued == 1500
    assert stats.loss_percent == pytest.approx(stats.packets_lost / 15)
    side_a_lan = model.segments[0]
    assert stats.segments[0].slice_loss_fraction == pytest.approx(
        side_a_lan.lost_slices / side_a_lan.ticks
    )
    # Every scheduled slot up to the last second was claimed by a put
    assert stats.packets_lost == (
        sum(s.lost_packets for s in stats.segments) + stats.core.lost_packets
    )
    assert [s.name for s in stats.segments] == [
        "side_a_lan",
        "side_a_access_link",
        "side_b_access_link",
        "side_b_lan",
    ]
    assert stats.base_time == 29.0
    model.close()


def test_seeded_models_are_reproducible():
    first = PathModel("e", 7, 200, 50, rng=RandomSource(seed=3))
    second = PathModel("e", 7, 200, 50, rng=RandomSource(seed=3))
    for seq_no in range(200):
        first.put(b"x", seq_no, seq_no / 50)
        second.put(b"x", seq_no, seq_no / 50)
    assert [p.arrival_time for p in first.queue] == [p.arrival_time for p in second.queue]


def test_dump_parameters():
    text = dump_parameters("c", 7)
    assert text.startswith("Severity profile C, speed pattern 7")
    assert "Side A LAN" in text
    assert "Core" in text
    assert "Side B LAN" in text
    with pytest.raises(InvalidSpeedPatternError):
        dump_parameters("c", 500)


def test_core_reordering_stays_within_search_back_period():
    rate = 50
    model = PathModel(SeverityProfile.H, 1, 200, rate, rng=RandomSource(seed=7))
    for seq_no in range(15000):
        model.put(b"\x00" * 200, seq_no, seq_no / rate)

    delivered = [packet.seq_no for packet in model.queue]
    in_sequence = sorted(delivered)
    overtaken = sum(1 for a, b in zip(delivered, delivered[1:]) if b < a)
    assert overtaken > 0

    # Displacement is limited to the survivors departing within the period
    reach = round(SEARCHBACK_PERIOD * rate)
    departure_position = {seq_no: i for i, seq_no in enumerate(in_sequence)}
    for position, seq_no in enumerate(delivered):
        neighbours = (
            bisect_right(in_sequence, seq_no + reach)
            - bisect_left(in_sequence, seq_no - reach)
            - 1
        )
        assert abs(position - departure_position[seq_no]) <= neighbours
    model.close()

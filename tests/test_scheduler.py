from types import SimpleNamespace

import pytest

from impairnet.emulation.random_source import RandomSource
from impairnet.emulation.scheduler import (
    OrderFloor,
    apply_core_reorder,
    apply_search_back,
    apply_strict_order,
)
from impairnet.emulation.window import SlidingWindow


def make_window(delays):
    """Window of zero delays with selected milliseconds overridden."""

    window = SlidingWindow(lambda count: [0.0] * count)
    window.prime()
    for ms, delay in delays.items():
        window.slices[ms] = delay
    return window


def test_strict_order_clamps_overtaking_packets():
    window = make_window({0: 0.010, 1: 0.001, 2: None})
    segment = SimpleNamespace(last_arrival_time=0.0)
    times = [0.000, 0.001, 0.002, 0.003]

    lost = apply_strict_order(segment, window, 0.0, times, 4)

    assert lost == 1
    assert times[0] == pytest.approx(0.010)
    assert times[1] == pytest.approx(0.010)
    assert times[2] is None
    assert times[3] == pytest.approx(0.010)
    assert segment.last_arrival_time == pytest.approx(0.010)


def test_strict_order_carries_earlier_loss():
    window = make_window({})
    segment = SimpleNamespace(last_arrival_time=0.0)
    times = [None, 0.5]
    assert apply_strict_order(segment, window, 0.0, times, 2) == 0
    assert times == [None, 0.5]


def test_strict_order_only_resolves_count_slots():
    window = make_window({0: 0.1})
    segment = SimpleNamespace(last_arrival_time=0.0)
    times = [0.0, 1.0]
    apply_strict_order(segment, window, 0.0, times, 1)
    assert times == [pytest.approx(0.1), 1.0]


def test_strict_order_persists_across_chunks():
    window = make_window({})
    segment = SimpleNamespace(last_arrival_time=1.5)
    times = [1.2]
    apply_strict_order(segment, window, 1.0, times, 1)
    assert times == [1.5]


@pytest.mark.parametrize("prob_oos, expected", [(1.0, 0.002), (0.0, 0.010)])
def test_core_reorder_probability(prob_oos, expected):
    window = make_window({0: 0.010, 1: 0.001})
    core = SimpleNamespace(last_arrival_time=0.0, prob_oos=prob_oos)
    times = [0.000, 0.001]

    lost = apply_core_reorder(core, window, 0.0, times, 2, RandomSource(seed=5))

    assert lost == 0
    assert times[0] == pytest.approx(0.010)
    assert times[1] == pytest.approx(expected)
    assert core.last_arrival_time == pytest.approx(0.010)


def test_core_reorder_counts_losses():
    window = make_window({1: None})
    core = SimpleNamespace(last_arrival_time=0.0, prob_oos=0.0)
    times = [0.000, 0.001, None]
    assert apply_core_reorder(core, window, 0.0, times, 3, RandomSource(seed=5)) == 1
    assert times[1:] == [None, None]


def test_search_back_holds_earlier_packets_with_reordered_one():
    # The core let packet 1 overtake packet 0
    window = make_window({100: 0.001, 90: 0.020})
    source = [0.100, 0.090]
    target = [0.0, 0.0]

    lost = apply_search_back(window, 0.0, source, target, 2, 0.020)

    assert lost == 0
    assert target[1] == pytest.approx(0.110)
    assert target[0] == pytest.approx(0.110)
    assert source == [0.100, 0.090]


def test_search_back_keeps_reordered_packet_that_is_still_behind():
    window = make_window({100: 0.030, 90: 0.001})
    source = [0.100, 0.090]
    target = [0.0, 0.0]

    apply_search_back(window, 0.0, source, target, 2, 0.020)

    assert target[0] == pytest.approx(0.130)
    assert target[1] == pytest.approx(0.091)


def test_search_back_is_bounded_in_time():
    # Packet 3 overtook packets 0 and 2; packet 1 entered 25ms before it
    delays = {100: 0.0, 70: 0.0, 110: 0.0, 95: 0.030}
    source = [0.100, 0.070, 0.110, 0.095]

    target = [0.0] * 4
    apply_search_back(make_window(delays), 0.0, source, target, 4, 0.020)
    assert target == [
        pytest.approx(0.100),
        pytest.approx(0.070),
        pytest.approx(0.125),
        pytest.approx(0.125),
    ]

    target = [0.0] * 4
    apply_search_back(make_window(delays), 0.0, source, target, 4, 0.030)
    assert target[0] == pytest.approx(0.125)


def test_search_back_clamps_in_order_packets():
    window = make_window({10: 0.030, 20: 0.001})
    source = [0.010, 0.020]
    target = [0.0, 0.0]

    apply_search_back(window, 0.0, source, target, 2, 0.020)

    assert target == [pytest.approx(0.040), pytest.approx(0.040)]


def test_search_back_losses():
    window = make_window({20: None})
    source = [None, 0.020, 0.030]
    target = [0.0, 0.0, 0.0]

    lost = apply_search_back(window, 0.0, source, target, 3, 0.020)

    assert lost == 1
    assert target[0] is None
    assert target[1] is None
    assert target[2] == pytest.approx(0.030)


@pytest.mark.parametrize(
    "period, packet_rate, lag",
    [(0.020, 50, 2), (0.020, 1000, 21), (0.030, 50, 2), (0.0, 50, 1)],
)
def test_order_floor_lag(period, packet_rate, lag):
    assert OrderFloor.for_period(period, packet_rate).lag == lag


def test_order_floor_carries_across_seconds():
    floor = OrderFloor(2)
    first = [0.5, 0.9]
    assert floor.at(1, first) == 0.0
    floor.close(first, 2)

    second = [0.3, 0.2]
    assert floor.at(0, second) == 0.5
    assert floor.at(1, second) == 0.9
    assert floor.at(2, second + [0.1]) == 0.9


def test_core_reorder_stays_behind_floor():
    # Packet 2 may pass packet 1 but not packet 0
    window = make_window({0: 0.030, 1: 0.040, 2: 0.001})
    core = SimpleNamespace(last_arrival_time=0.0, prob_oos=1.0)
    times = [0.000, 0.001, 0.002]

    apply_core_reorder(core, window, 0.0, times, 3, RandomSource(seed=5), OrderFloor(2))

    assert times == [
        pytest.approx(0.030),
        pytest.approx(0.041),
        pytest.approx(0.030),
    ]


def test_search_back_stays_behind_floor():
    window = make_window({100: 0.050, 110: 0.0, 105: 0.0})
    source = [0.100, 0.110, 0.105]

    target = [0.0] * 3
    apply_search_back(window, 0.0, source, target, 3, 0.020)
    assert target[2] == pytest.approx(0.105)

    target = [0.0] * 3
    apply_search_back(window, 0.0, source, target, 3, 0.020, OrderFloor(2))
    assert target == [pytest.approx(0.150)] * 3

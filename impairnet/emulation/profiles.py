"""
Static configuration catalogs for the G.1050 path model.

The catalogs hold the per-class segment coefficients, the named severity
profiles (A to H plus a no-impairment profile) and the 168 paired
LAN/access-link rate combinations. All values are immutable and are looked
up by enum or id so a bad selector fails loudly instead of misindexing.
"""

import typing as tp
from dataclasses import dataclass
from enum import Enum

from impairnet.emulation.errors import InvalidProfileError, InvalidSpeedPatternError


class LinkType(Enum):
    """Class of a non-core segment."""

    LAN = "lan"
    ACCESS = "access"


class DeploymentScenario(Enum):
    """Deployment scenarios the occurrence likelihoods are given for."""

    A = 0
    B = 1
    C = 2


class SeverityProfile(Enum):
    """Named impairment severity profiles, ordered from clean to worst."""

    NO_IMPAIRMENT = 0
    A = 1
    B = 2
    C = 3
    D = 4
    E = 5
    F = 6
    G = 7
    H = 8


@dataclass(frozen=True)
class SegmentConstants:
    """Per-class coefficients shared by every segment of the same class."""

    # Nominal loss state transition probabilities (low->high, high->low)
    prob_loss_rate_change: tp.Tuple[float, float]
    # Impulse probability per state, as (base, occupancy slope) pairs
    prob_impulse: tp.Tuple[tp.Tuple[float, float], tp.Tuple[float, float]]
    # Occupancy divisor used when scaling the impulse height
    impulse_height: float
    # One-pole filter coefficient for congestion impulses
    impulse_decay_coeff: float
    # Packet loss probability per percent of occupancy in the high loss state
    prob_packet_loss: float
    # Loss probability due to a multiple access collision
    prob_packet_collision_loss: float


LAN_CONSTANTS = SegmentConstants(
    prob_loss_rate_change=(0.004, 0.1),
    prob_impulse=((0.0, 0.0), (0.5, 0.0)),
    impulse_height=1.0,
    impulse_decay_coeff=0.0,
    prob_packet_loss=0.001,
    prob_packet_collision_loss=0.15,
)

ACCESS_LINK_CONSTANTS = SegmentConstants(
    prob_loss_rate_change=(0.0002, 0.2),
    prob_impulse=((0.001, 0.0), (0.3, 0.4)),
    impulse_height=40.0,
    impulse_decay_coeff=0.75,
    prob_packet_loss=0.0005,
    prob_packet_collision_loss=0.0,
)

SEGMENT_CONSTANTS: tp.Dict[LinkType, SegmentConstants] = {
    LinkType.LAN: LAN_CONSTANTS,
    LinkType.ACCESS: ACCESS_LINK_CONSTANTS,
}


@dataclass(frozen=True)
class SegmentParameters:
    """Scenario inputs for one LAN or access-link segment."""

    percentage_occupancy: float
    mtu: int
    # Peak uniform jitter, in seconds
    max_jitter: float


@dataclass(frozen=True)
class CoreParameters:
    """Scenario inputs for the core network. Times are in seconds."""

    base_regional_delay: float
    base_intercontinental_delay: float
    percentage_packet_loss: float
    max_jitter: float
    route_flap_interval: float
    route_flap_delay: float
    link_failure_interval: float
    link_failure_duration: float
    # Probability of packet loss in the core, in percent
    prob_packet_loss: float
    # Probability of a packet going out of sequence in the core, in percent
    prob_oos: float


@dataclass(frozen=True)
class ImpairmentModel:
    """Resolved parameters of one severity profile."""

    # Percentage likelihood of occurrence in deployment scenarios A, B and C
    likelihood: tp.Tuple[float, float, float]
    side_a_lan: SegmentParameters
    side_a_access_link: SegmentParameters
    core: CoreParameters
    side_b_access_link: SegmentParameters
    side_b_lan: SegmentParameters


def _symmetric_model(
    likelihood: tp.Tuple[float, float, float],
    lan: SegmentParameters,
    access_link: SegmentParameters,
    core: CoreParameters,
) -> ImpairmentModel:
    return ImpairmentModel(
        likelihood=likelihood,
        side_a_lan=lan,
        side_a_access_link=access_link,
        core=core,
        side_b_access_link=access_link,
        side_b_lan=lan,
    )


NO_IMPAIRMENT_MODEL = _symmetric_model(
    likelihood=(0, 0, 0),
    lan=SegmentParameters(percentage_occupancy=0.0, mtu=1508, max_jitter=0.0),
    access_link=SegmentParameters(percentage_occupancy=0.0, mtu=512, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.0,
        base_intercontinental_delay=0.0,
        percentage_packet_loss=0.0,
        max_jitter=0.0,
        route_flap_interval=0.0,
        route_flap_delay=0.0,
        link_failure_interval=0.0,
        link_failure_duration=0.0,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_A_MODEL = _symmetric_model(
    likelihood=(50, 5, 5),
    lan=SegmentParameters(percentage_occupancy=1.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=0.0, mtu=512, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.004,
        base_intercontinental_delay=0.016,
        percentage_packet_loss=0.0,
        max_jitter=0.005,
        route_flap_interval=0.0,
        route_flap_delay=0.0,
        link_failure_interval=0.0,
        link_failure_duration=0.0,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_B_MODEL = _symmetric_model(
    likelihood=(30, 25, 5),
    lan=SegmentParameters(percentage_occupancy=2.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=1.0, mtu=512, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.008,
        base_intercontinental_delay=0.032,
        percentage_packet_loss=0.01,
        max_jitter=0.01,
        route_flap_interval=3600.0,
        route_flap_delay=0.002,
        link_failure_interval=3600.0,
        link_failure_duration=0.064,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_C_MODEL = _symmetric_model(
    likelihood=(15, 30, 10),
    lan=SegmentParameters(percentage_occupancy=3.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=2.0, mtu=1508, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.016,
        base_intercontinental_delay=0.064,
        percentage_packet_loss=0.02,
        max_jitter=0.016,
        route_flap_interval=1800.0,
        route_flap_delay=0.004,
        link_failure_interval=1800.0,
        link_failure_duration=0.128,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_D_MODEL = _symmetric_model(
    likelihood=(5, 25, 15),
    lan=SegmentParameters(percentage_occupancy=5.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=4.0, mtu=1508, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.032,
        base_intercontinental_delay=0.128,
        percentage_packet_loss=0.04,
        max_jitter=0.04,
        route_flap_interval=900.0,
        route_flap_delay=0.008,
        link_failure_interval=900.0,
        link_failure_duration=0.256,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_E_MODEL = _symmetric_model(
    likelihood=(0, 10, 20),
    lan=SegmentParameters(percentage_occupancy=8.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=8.0, mtu=1508, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.064,
        base_intercontinental_delay=0.196,
        percentage_packet_loss=0.1,
        max_jitter=0.07,
        route_flap_interval=480.0,
        route_flap_delay=0.016,
        link_failure_interval=480.0,
        link_failure_duration=0.4,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_F_MODEL = _symmetric_model(
    likelihood=(0, 0, 25),
    lan=SegmentParameters(percentage_occupancy=12.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=15.0, mtu=1508, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.128,
        base_intercontinental_delay=0.256,
        percentage_packet_loss=0.2,
        max_jitter=0.1,
        route_flap_interval=240.0,
        route_flap_delay=0.032,
        link_failure_interval=240.0,
        link_failure_duration=0.8,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_G_MODEL = _symmetric_model(
    likelihood=(0, 0, 15),
    lan=SegmentParameters(percentage_occupancy=16.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=30.0, mtu=1508, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.256,
        base_intercontinental_delay=0.512,
        percentage_packet_loss=0.5,
        max_jitter=0.15,
        route_flap_interval=120.0,
        route_flap_delay=0.064,
        link_failure_interval=120.0,
        link_failure_duration=1.6,
        prob_packet_loss=0.0,
        prob_oos=0.0,
    ),
)

SEVERITY_H_MODEL = _symmetric_model(
    likelihood=(0, 0, 5),
    lan=SegmentParameters(percentage_occupancy=20.0, mtu=1508, max_jitter=0.0015),
    access_link=SegmentParameters(percentage_occupancy=50.0, mtu=1508, max_jitter=0.0),
    core=CoreParameters(
        base_regional_delay=0.512,
        base_intercontinental_delay=0.768,
        percentage_packet_loss=1.0,
        max_jitter=0.5,
        route_flap_interval=60.0,
        route_flap_delay=0.128,
        link_failure_interval=60.0,
        link_failure_duration=3.0,
        prob_packet_loss=1.0,
        prob_oos=1.0,
    ),
)

STANDARD_MODELS: tp.Dict[SeverityProfile, ImpairmentModel] = {
    SeverityProfile.NO_IMPAIRMENT: NO_IMPAIRMENT_MODEL,
    SeverityProfile.A: SEVERITY_A_MODEL,
    SeverityProfile.B: SEVERITY_B_MODEL,
    SeverityProfile.C: SEVERITY_C_MODEL,
    SeverityProfile.D: SEVERITY_D_MODEL,
    SeverityProfile.E: SEVERITY_E_MODEL,
    SeverityProfile.F: SEVERITY_F_MODEL,
    SeverityProfile.G: SEVERITY_G_MODEL,
    SeverityProfile.H: SEVERITY_H_MODEL,
}


@dataclass(frozen=True)
class SpeedPattern:
    """One paired LAN/access-link bit rate combination."""

    pattern_id: int
    side_a_lan_bit_rate: int
    side_a_lan_multiple_access: bool
    side_a_access_link_bit_rate_ab: int
    side_a_access_link_bit_rate_ba: int
    side_a_access_link_qos_enabled: bool
    side_b_lan_bit_rate: int
    side_b_lan_multiple_access: bool
    side_b_access_link_bit_rate_ab: int
    side_b_access_link_bit_rate_ba: int
    side_b_access_link_qos_enabled: bool
    # Percentage likelihood of occurrence of this combination
    likelihood: float


# Columns: side A LAN rate, MA, side A access a->b, b->a, QoS,
#          side B LAN rate, MA, side B access a->b, b->a, QoS, likelihood
_SPEED_PATTERN_ROWS = (
    (4000000, 0, 128000, 768000, 0, 4000000, 0, 128000, 768000, 0, 0.360),
    (4000000, 0, 128000, 768000, 0, 20000000, 0, 128000, 768000, 0, 0.720),
    (4000000, 0, 128000, 768000, 0, 100000000, 0, 128000, 768000, 0, 0.360),
    (20000000, 0, 128000, 768000, 0, 20000000, 0, 128000, 768000, 0, 0.360),
    (20000000, 0, 128000, 768000, 0, 100000000, 0, 128000, 768000, 0, 0.360),
    (100000000, 0, 128000, 768000, 0, 100000000, 0, 128000, 768000, 0, 0.090),
    (4000000, 0, 128000, 1536000, 0, 4000000, 0, 384000, 768000, 0, 0.720),
    (4000000, 0, 128000, 1536000, 0, 20000000, 0, 384000, 768000, 0, 1.470),
    (4000000, 0, 128000, 1536000, 0, 100000000, 0, 384000, 768000, 0, 0.840),
    (20000000, 0, 128000, 1536000, 0, 20000000, 0, 384000, 768000, 0, 0.750),
    (20000000, 0, 128000, 1536000, 0, 100000000, 0, 384000, 768000, 0, 0.855),
    (100000000, 0, 128000, 1536000, 0, 100000000, 0, 384000, 768000, 0, 0.240),
    (4000000, 0, 128000, 3000000, 0, 4000000, 0, 384000, 768000, 0, 0.120),
    (4000000, 0, 128000, 3000000, 0, 20000000, 0, 384000, 768000, 0, 0.420),
    (4000000, 0, 128000, 3000000, 0, 100000000, 0, 384000, 768000, 0, 0.840),
    (20000000, 0, 128000, 3000000, 0, 20000000, 0, 384000, 768000, 0, 0.300),
    (20000000, 0, 128000, 3000000, 0, 100000000, 0, 384000, 768000, 0, 0.930),
    (100000000, 0, 128000, 3000000, 0, 100000000, 0, 384000, 768000, 0, 0.390),
    (4000000, 0, 384000, 768000, 0, 4000000, 0, 128000, 1536000, 0, 0.720),
    (4000000, 0, 384000, 768000, 0, 20000000, 0, 128000, 1536000, 0, 1.470),
    (4000000, 0, 384000, 768000, 0, 100000000, 0, 128000, 1536000, 0, 0.840),
    (20000000, 0, 384000, 768000, 0, 20000000, 0, 128000, 1536000, 0, 0.750),
    (20000000, 0, 384000, 768000, 0, 100000000, 0, 128000, 1536000, 0, 0.855),
    (100000000, 0, 384000, 768000, 0, 100000000, 0, 128000, 1536000, 0, 0.240),
    (4000000, 0, 384000, 1536000, 0, 4000000, 0, 384000, 1536000, 0, 1.440),
    (4000000, 0, 384000, 1536000, 0, 20000000, 0, 384000, 1536000, 0, 3.000),
    (4000000, 0, 384000, 1536000, 0, 100000000, 0, 384000, 1536000, 0, 1.920),
    (20000000, 0, 384000, 1536000, 0, 20000000, 0, 384000, 1536000, 0, 1.563),
    (20000000, 0, 384000, 1536000, 0, 100000000, 0, 384000, 1536000, 0, 2.000),
    (100000000, 0, 384000, 1536000, 0, 100000000, 0, 384000, 1536000, 0, 0.640),
    (4000000, 0, 384000, 3000000, 0, 4000000, 0, 384000, 1536000, 0, 0.240),
    (4000000, 0, 384000, 3000000, 0, 20000000, 0, 384000, 1536000, 0, 0.850),
    (4000000, 0, 384000, 3000000, 0, 100000000, 0, 384000, 1536000, 0, 1.720),
    (20000000, 0, 384000, 3000000, 0, 20000000, 0, 384000, 1536000, 0, 0.625),
    (20000000, 0, 384000, 3000000, 0, 100000000, 0, 384000, 1536000, 0, 2.025),
    (100000000, 0, 384000, 3000000, 0, 100000000, 0, 384000, 1536000, 0, 1.040),
    (4000000, 0, 384000, 768000, 0, 4000000, 0, 128000, 3000000, 0, 0.120),
    (4000000, 0, 384000, 768000, 0, 20000000, 0, 128000, 3000000, 0, 0.420),
    (4000000, 0, 384000, 768000, 0, 100000000, 0, 128000, 3000000, 0, 0.840),
    (20000000, 0, 384000, 768000, 0, 20000000, 0, 128000, 3000000, 0, 0.300),
    (20000000, 0, 384000, 768000, 0, 100000000, 0, 128000, 3000000, 0, 0.930),
    (100000000, 0, 384000, 768000, 0, 100000000, 0, 128000, 3000000, 0, 0.390),
    (4000000, 0, 384000, 1536000, 0, 4000000, 0, 384000, 3000000, 0, 0.240),
    (4000000, 0, 384000, 1536000, 0, 20000000, 0, 384000, 3000000, 0, 0.850),
    (4000000, 0, 384000, 1536000, 0, 100000000, 0, 384000, 3000000, 0, 1.720),
    (20000000, 0, 384000, 1536000, 0, 20000000, 0, 384000, 3000000, 0, 0.625),
    (20000000, 0, 384000, 1536000, 0, 100000000, 0, 384000, 3000000, 0, 2.025),
    (100000000, 0, 384000, 1536000, 0, 100000000, 0, 384000, 3000000, 0, 1.040),
    (4000000, 0, 384000, 3000000, 0, 4000000, 0, 384000, 3000000, 0, 0.040),
    (4000000, 0, 384000, 3000000, 0, 20000000, 0, 384000, 3000000, 0, 0.200),
    (4000000, 0, 384000, 3000000, 0, 100000000, 0, 384000, 3000000, 0, 0.520),
    (20000000, 0, 384000, 3000000, 0, 20000000, 0, 384000, 3000000, 0, 0.250),
    (20000000, 0, 384000, 3000000, 0, 100000000, 0, 384000, 3000000, 0, 1.300),
    (100000000, 0, 384000, 3000000, 0, 100000000, 0, 384000, 3000000, 0, 1.690),
    (4000000, 0, 128000, 1536000, 0, 20000000, 0, 768000, 1536000, 0, 0.090),
    (4000000, 0, 128000, 1536000, 0, 100000000, 0, 768000, 1536000, 0, 0.360),
    (20000000, 0, 128000, 1536000, 0, 20000000, 0, 768000, 1536000, 0, 0.090),
    (20000000, 0, 128000, 1536000, 0, 100000000, 0, 768000, 1536000, 0, 0.405),
    (100000000, 0, 128000, 1536000, 0, 100000000, 0, 768000, 1536000, 0, 0.180),
    (4000000, 0, 128000, 7000000, 0, 20000000, 0, 768000, 768000, 0, 0.270),
    (4000000, 0, 128000, 7000000, 0, 100000000, 0, 768000, 768000, 0, 1.080),
    (20000000, 0, 128000, 7000000, 0, 20000000, 0, 768000, 768000, 0, 0.270),
    (20000000, 0, 128000, 7000000, 0, 100000000, 0, 768000, 768000, 0, 1.215),
    (100000000, 0, 128000, 7000000, 0, 100000000, 0, 768000, 768000, 0, 0.540),
    (4000000, 0, 128000, 13000000, 0, 20000000, 0, 768000, 13000000, 0, 0.030),
    (4000000, 0, 128000, 13000000, 0, 100000000, 0, 768000, 13000000, 0, 0.120),
    (20000000, 0, 128000, 13000000, 0, 20000000, 0, 768000, 13000000, 0, 0.030),
    (20000000, 0, 128000, 13000000, 0, 100000000, 0, 768000, 13000000, 0, 0.135),
    (100000000, 0, 128000, 13000000, 0, 100000000, 0, 768000, 13000000, 0, 0.060),
    (4000000, 0, 384000, 1536000, 0, 20000000, 0, 1536000, 1536000, 0, 0.180),
    (4000000, 0, 384000, 1536000, 0, 100000000, 0, 1536000, 1536000, 0, 0.720),
    (20000000, 0, 384000, 1536000, 0, 20000000, 0, 1536000, 1536000, 0, 0.188),
    (20000000, 0, 384000, 1536000, 0, 100000000, 0, 1536000, 1536000, 0, 0.870),
    (100000000, 0, 384000, 1536000, 0, 100000000, 0, 1536000, 1536000, 0, 0.480),
    (4000000, 0, 384000, 7000000, 0, 20000000, 0, 768000, 1536000, 0, 0.540),
    (4000000, 0, 384000, 7000000, 0, 100000000, 0, 768000, 1536000, 0, 2.160),
    (20000000, 0, 384000, 7000000, 0, 20000000, 0, 768000, 1536000, 0, 0.563),
    (20000000, 0, 384000, 7000000, 0, 100000000, 0, 768000, 1536000, 0, 2.610),
    (100000000, 0, 384000, 7000000, 0, 100000000, 0, 768000, 1536000, 0, 1.440),
    (4000000, 0, 384000, 13000000, 0, 20000000, 0, 1536000, 13000000, 0, 0.060),
    (4000000, 0, 384000, 13000000, 0, 100000000, 0, 1536000, 13000000, 0, 0.240),
    (20000000, 0, 384000, 13000000, 0, 20000000, 0, 1536000, 13000000, 0, 0.063),
    (20000000, 0, 384000, 13000000, 0, 100000000, 0, 1536000, 13000000, 0, 0.290),
    (100000000, 0, 384000, 13000000, 0, 100000000, 0, 1536000, 13000000, 0, 0.160),
    (4000000, 0, 384000, 1536000, 0, 20000000, 0, 1536000, 3000000, 0, 0.030),
    (4000000, 0, 384000, 1536000, 0, 100000000, 0, 1536000, 3000000, 0, 0.120),
    (20000000, 0, 384000, 1536000, 0, 20000000, 0, 1536000, 3000000, 0, 0.075),
    (20000000, 0, 384000, 1536000, 0, 100000000, 0, 1536000, 3000000, 0, 0.495),
    (100000000, 0, 384000, 1536000, 0, 100000000, 0, 1536000, 3000000, 0, 0.780),
    (4000000, 0, 384000, 7000000, 0, 20000000, 0, 768000, 3000000, 0, 0.090),
    (4000000, 0, 384000, 7000000, 0, 100000000, 0, 768000, 3000000, 0, 0.360),
    (20000000, 0, 384000, 7000000, 0, 20000000, 0, 768000, 3000000, 0, 0.225),
    (20000000, 0, 384000, 7000000, 0, 100000000, 0, 768000, 3000000, 0, 1.485),
    (100000000, 0, 384000, 7000000, 0, 100000000, 0, 768000, 3000000, 0, 2.340),
    (4000000, 0, 384000, 13000000, 0, 20000000, 0, 3000000, 13000000, 0, 0.010),
    (4000000, 0, 384000, 13000000, 0, 100000000, 0, 3000000, 13000000, 0, 0.040),
    (20000000, 0, 384000, 13000000, 0, 20000000, 0, 3000000, 13000000, 0, 0.025),
    (20000000, 0, 384000, 13000000, 0, 100000000, 0, 3000000, 13000000, 0, 0.165),
    (100000000, 0, 384000, 13000000, 0, 100000000, 0, 3000000, 13000000, 0, 0.260),
    (4000000, 0, 768000, 1536000, 0, 20000000, 0, 128000, 1536000, 0, 0.090),
    (20000000, 0, 768000, 1536000, 0, 20000000, 0, 128000, 1536000, 0, 0.090),
    (20000000, 0, 768000, 1536000, 0, 100000000, 0, 128000, 1536000, 0, 0.405),
    (4000000, 0, 768000, 1536000, 0, 100000000, 0, 128000, 1536000, 0, 0.360),
    (100000000, 0, 768000, 1536000, 0, 100000000, 0, 128000, 1536000, 0, 0.180),
    (4000000, 0, 1536000, 1536000, 0, 20000000, 0, 384000, 1536000, 0, 0.180),
    (20000000, 0, 1536000, 1536000, 0, 20000000, 0, 384000, 1536000, 0, 0.188),
    (20000000, 0, 1536000, 1536000, 0, 100000000, 0, 384000, 1536000, 0, 0.870),
    (4000000, 0, 1536000, 1536000, 0, 100000000, 0, 384000, 1536000, 0, 0.720),
    (100000000, 0, 1536000, 1536000, 0, 100000000, 0, 384000, 1536000, 0, 0.480),
    (4000000, 0, 1536000, 3000000, 0, 20000000, 0, 384000, 1536000, 0, 0.030),
    (20000000, 0, 1536000, 3000000, 0, 20000000, 0, 384000, 1536000, 0, 0.075),
    (20000000, 0, 1536000, 3000000, 0, 100000000, 0, 384000, 1536000, 0, 0.495),
    (4000000, 0, 1536000, 3000000, 0, 100000000, 0, 384000, 1536000, 0, 0.120),
    (100000000, 0, 1536000, 3000000, 0, 100000000, 0, 384000, 1536000, 0, 0.780),
    (4000000, 0, 768000, 768000, 0, 20000000, 0, 128000, 7000000, 0, 0.270),
    (20000000, 0, 768000, 768000, 0, 20000000, 0, 128000, 7000000, 0, 0.270),
    (20000000, 0, 768000, 768000, 0, 100000000, 0, 128000, 7000000, 0, 1.215),
    (4000000, 0, 768000, 768000, 0, 100000000, 0, 128000, 7000000, 0, 1.080),
    (100000000, 0, 768000, 768000, 0, 100000000, 0, 128000, 7000000, 0, 0.540),
    (4000000, 0, 768000, 1536000, 0, 20000000, 0, 384000, 7000000, 0, 0.540),
    (20000000, 0, 768000, 1536000, 0, 20000000, 0, 384000, 7000000, 0, 0.563),
    (20000000, 0, 768000, 1536000, 0, 100000000, 0, 384000, 7000000, 0, 2.610),
    (4000000, 0, 768000, 1536000, 0, 100000000, 0, 384000, 7000000, 0, 2.160),
    (100000000, 0, 768000, 1536000, 0, 100000000, 0, 384000, 7000000, 0, 1.440),
    (4000000, 0, 768000, 3000000, 0, 20000000, 0, 384000, 7000000, 0, 0.090),
    (20000000, 0, 768000, 3000000, 0, 20000000, 0, 384000, 7000000, 0, 0.225),
    (20000000, 0, 768000, 3000000, 0, 100000000, 0, 384000, 7000000, 0, 1.485),
    (4000000, 0, 768000, 3000000, 0, 100000000, 0, 384000, 7000000, 0, 0.360),
    (100000000, 0, 768000, 3000000, 0, 100000000, 0, 384000, 7000000, 0, 2.340),
    (4000000, 0, 768000, 13000000, 0, 20000000, 0, 128000, 13000000, 0, 0.030),
    (20000000, 0, 768000, 13000000, 0, 20000000, 0, 128000, 13000000, 0, 0.030),
    (20000000, 0, 768000, 13000000, 0, 100000000, 0, 128000, 13000000, 0, 0.135),
    (4000000, 0, 768000, 13000000, 0, 100000000, 0, 128000, 13000000, 0, 0.120),
    (100000000, 0, 768000, 13000000, 0, 100000000, 0, 128000, 13000000, 0, 0.060),
    (4000000, 0, 1536000, 13000000, 0, 20000000, 0, 384000, 13000000, 0, 0.060),
    (20000000, 0, 1536000, 13000000, 0, 20000000, 0, 384000, 13000000, 0, 0.063),
    (20000000, 0, 1536000, 13000000, 0, 100000000, 0, 384000, 13000000, 0, 0.290),
    (4000000, 0, 1536000, 13000000, 0, 100000000, 0, 384000, 13000000, 0, 0.240),
    (100000000, 0, 1536000, 13000000, 0, 100000000, 0, 384000, 13000000, 0, 0.160),
    (4000000, 0, 3000000, 13000000, 0, 20000000, 0, 384000, 13000000, 0, 0.010),
    (20000000, 0, 3000000, 13000000, 0, 20000000, 0, 384000, 13000000, 0, 0.025),
    (20000000, 0, 3000000, 13000000, 0, 100000000, 0, 384000, 13000000, 0, 0.165),
    (4000000, 0, 3000000, 13000000, 0, 100000000, 0, 384000, 13000000, 0, 0.040),
    (100000000, 0, 3000000, 13000000, 0, 100000000, 0, 384000, 13000000, 0, 0.260),
    (20000000, 0, 1536000, 1536000, 0, 20000000, 0, 1536000, 1536000, 0, 0.023),
    (20000000, 0, 1536000, 1536000, 0, 100000000, 0, 1536000, 1536000, 0, 0.180),
    (100000000, 0, 1536000, 1536000, 0, 100000000, 0, 1536000, 1536000, 0, 0.360),
    (20000000, 0, 1536000, 7000000, 0, 20000000, 0, 768000, 1536000, 0, 0.068),
    (20000000, 0, 1536000, 7000000, 0, 100000000, 0, 768000, 1536000, 0, 0.540),
    (100000000, 0, 1536000, 7000000, 0, 100000000, 0, 768000, 1536000, 0, 1.080),
    (20000000, 0, 1536000, 13000000, 0, 20000000, 0, 1536000, 13000000, 0, 0.015),
    (20000000, 0, 1536000, 13000000, 0, 100000000, 0, 1536000, 13000000, 0, 0.120),
    (100000000, 0, 1536000, 13000000, 0, 100000000, 0, 1536000, 13000000, 0, 0.240),
    (20000000, 0, 768000, 1536000, 0, 20000000, 0, 1536000, 7000000, 0, 0.068),
    (20000000, 0, 768000, 1536000, 0, 100000000, 0, 1536000, 7000000, 0, 0.540),
    (100000000, 0, 768000, 1536000, 0, 100000000, 0, 1536000, 7000000, 0, 1.080),
    (20000000, 0, 768000, 7000000, 0, 20000000, 0, 768000, 7000000, 0, 0.203),
    (20000000, 0, 768000, 7000000, 0, 100000000, 0, 768000, 7000000, 0, 1.620),
    (100000000, 0, 768000, 7000000, 0, 100000000, 0, 768000, 7000000, 0, 3.240),
    (20000000, 0, 768000, 13000000, 0, 20000000, 0, 7000000, 13000000, 0, 0.023),
    (20000000, 0, 768000, 13000000, 0, 100000000, 0, 7000000, 13000000, 0, 0.180),
    (100000000, 0, 768000, 13000000, 0, 100000000, 0, 7000000, 13000000, 0, 0.360),
    (20000000, 0, 7000000, 13000000, 0, 20000000, 0, 768000, 13000000, 0, 0.023),
    (20000000, 0, 7000000, 13000000, 0, 100000000, 0, 768000, 13000000, 0, 0.180),
    (100000000, 0, 7000000, 13000000, 0, 100000000, 0, 768000, 13000000, 0, 0.360),
    (20000000, 0, 13000000, 13000000, 0, 20000000, 0, 13000000, 13000000, 0, 0.003),
    (20000000, 0, 13000000, 13000000, 0, 100000000, 0, 13000000, 13000000, 0, 0.020),
    (100000000, 0, 13000000, 13000000, 0, 100000000, 0, 13000000, 13000000, 0, 0.040),
)

SPEED_PATTERNS: tp.Dict[int, SpeedPattern] = {
    pattern_id: SpeedPattern(
        pattern_id,
        row[0],
        bool(row[1]),
        row[2],
        row[3],
        bool(row[4]),
        row[5],
        bool(row[6]),
        row[7],
        row[8],
        bool(row[9]),
        row[10],
    )
    for pattern_id, row in enumerate(_SPEED_PATTERN_ROWS, start=1)
}


def resolve_profile(
    profile: tp.Union[SeverityProfile, str, int],
) -> SeverityProfile:
    """
    Resolve a severity profile from its enum, name or ordinal.

    Args:
        profile: ``SeverityProfile`` member, its name (case-insensitive,
            e.g. "a" or "no_impairment") or its ordinal 0-8

    Returns:
        The matching SeverityProfile

    Raises:
        InvalidProfileError: If no profile matches
    """
    if isinstance(profile, SeverityProfile):
        return profile
    if isinstance(profile, str):
        try:
            return SeverityProfile[profile.strip().upper()]
        except KeyError:
            pass
    elif isinstance(profile, int) and not isinstance(profile, bool):
        try:
            return SeverityProfile(profile)
        except ValueError:
            pass

    valid = ", ".join(p.name for p in SeverityProfile)
    raise InvalidProfileError(f"Unknown severity profile {profile!r} (valid: {valid})")


def get_impairment_model(
    profile: tp.Union[SeverityProfile, str, int],
) -> ImpairmentModel:
    """Return the resolved parameters of a severity profile."""
    return STANDARD_MODELS[resolve_profile(profile)]


def get_speed_pattern(pattern_id: int) -> SpeedPattern:
    """
    Look up a speed pattern by its 1-based id.

    Raises:
        InvalidSpeedPatternError: If the id is not in the catalog
    """
    if isinstance(pattern_id, bool) or not isinstance(pattern_id, int):
        raise InvalidSpeedPatternError(
            f"Speed pattern id must be an integer, got {pattern_id!r}"
        )
    try:
        return SPEED_PATTERNS[pattern_id]
    except KeyError:
        raise InvalidSpeedPatternError(
            f"Unknown speed pattern {pattern_id} (valid: 1-{len(SPEED_PATTERNS)})"
        ) from None


def occurrence_likelihood(
    profile: tp.Union[SeverityProfile, str, int],
    pattern_id: int,
    scenario: DeploymentScenario,
) -> float:
    """
    Percentage likelihood of a profile/speed pattern pair in a scenario.

    Args:
        profile: Severity profile selector
        pattern_id: Speed pattern id
        scenario: Deployment scenario

    Returns:
        Likelihood in percent
    """
    model = get_impairment_model(profile)
    pattern = get_speed_pattern(pattern_id)
    return model.likelihood[scenario.value] * pattern.likelihood / 100.0

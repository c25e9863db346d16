"""
Analytical and trace-level calculations for path emulation.

This module provides the stationary loss figures implied by a segment's
Gilbert-Elliott parameters, a voice quality estimate, and the aggregate
statistics of a packet trace collected from a path model.
"""

import math
import typing as tp

import numpy as np

from impairnet.emulation.metrics import DeliveryRecord, TraceSummary, VoiceQuality
from impairnet.emulation.segment import HIGH_LOSS, LOW_LOSS, SegmentModel
from impairnet.utils.types import LoguruLogger


def stationary_high_loss_probability(
    prob_low_to_high: float, prob_high_to_low: float
) -> float:
    """
    Long-run fraction of time a two-state Markov chain spends in HIGH_LOSS.

    Args:
        prob_low_to_high: Per-tick probability of leaving LOW_LOSS
        prob_high_to_low: Per-tick probability of leaving HIGH_LOSS

    Returns:
        The stationary probability of the HIGH_LOSS state (0.0 if the chain
        never leaves LOW_LOSS)
    """
    total = prob_low_to_high + prob_high_to_low
    if total <= 0.0:
        return 0.0
    return prob_low_to_high / total


def expected_segment_loss_rate(segment: SegmentModel) -> float:
    """
    Long-run fraction of a segment's slices that are lost.

    Congestion loss only happens in HIGH_LOSS and only without QoS;
    collision loss applies in either state on a shared medium.
    """
    congestion = 0.0
    if not segment.qos_enabled:
        high = stationary_high_loss_probability(
            segment.prob_loss_rate_change[LOW_LOSS],
            segment.prob_loss_rate_change[HIGH_LOSS],
        )
        congestion = high * segment.prob_packet_loss
    collision = segment.prob_packet_collision_loss if segment.multiple_access else 0.0
    return 1.0 - (1.0 - congestion) * (1.0 - collision)


# E-model defaults for a G.711 call with no impairment besides the path
_BASIC_R_FACTOR = 93.2
# One-way delay beyond which interactivity degrades sharply
_DELAY_KNEE_MS = 177.3


def _delay_impairment(delay_ms: float) -> float:
    return 0.024 * delay_ms + 0.11 * max(0.0, delay_ms - _DELAY_KNEE_MS)


def _loss_impairment(loss_fraction: float) -> float:
    return 30.0 * math.log1p(15.0 * loss_fraction)


def _r_to_mos(r_factor: float) -> float:
    mos = 1.0 + 0.035 * r_factor + 7e-6 * r_factor * (r_factor - 60.0) * (100.0 - r_factor)
    return min(4.5, max(1.0, mos))


def calculate_mos(latency_ms: float, packet_loss_percent: float) -> VoiceQuality:
    """
    Voice quality of a call carried over a path with the given delay and
    loss, following the ITU-T G.107 E-model.

    Args:
        latency_ms: Mean one-way delay in milliseconds
        packet_loss_percent: Packet loss percentage

    Returns:
        VoiceQuality with the R factor, its impairment terms and the MOS
    """
    delay_impairment = _delay_impairment(latency_ms)
    loss_impairment = _loss_impairment(packet_loss_percent / 100.0)
    r_factor = min(100.0, max(0.0, _BASIC_R_FACTOR - delay_impairment - loss_impairment))
    return VoiceQuality(
        mos=_r_to_mos(r_factor),
        r_factor=r_factor,
        delay_impairment=delay_impairment,
        equipment_impairment=loss_impairment,
        effective_latency_ms=latency_ms,
    )


def _delivery_order(records: tp.Sequence[DeliveryRecord]) -> tp.List[DeliveryRecord]:
    delivered = [r for r in records if not r.lost]
    return sorted(
        delivered,
        key=lambda r: (
            r.delivery_index if r.delivery_index is not None else math.inf,
            r.arrival_time,
        ),
    )


def summarize_trace(records: tp.Sequence[DeliveryRecord]) -> TraceSummary:
    """
    Aggregate a packet trace into delay, jitter, loss and reordering figures.

    Args:
        records: One record per packet offered to the path, lost or not

    Returns:
        TraceSummary for the trace (all zero for an empty trace)
    """
    summary = TraceSummary()
    if not records:
        return summary

    summary.packets_sent = len(records)
    summary.packets_lost = sum(1 for r in records if r.lost)
    summary.packet_loss_percent = 100.0 * summary.packets_lost / summary.packets_sent

    ordered = _delivery_order(records)
    if ordered:
        delays = np.array([r.delay for r in ordered], dtype=np.float64) * 1000.0
        summary.mean_delay_ms = float(np.mean(delays))
        summary.min_delay_ms = float(np.min(delays))
        summary.p50_delay_ms = float(np.percentile(delays, 50))
        summary.p99_delay_ms = float(np.percentile(delays, 99))
        summary.max_delay_ms = float(np.max(delays))
        if len(delays) > 1:
            summary.jitter_ms = float(np.mean(np.abs(np.diff(delays))))

        highest_seq = -math.inf
        for record in ordered:
            if record.seq_no < highest_seq:
                summary.reordered_packets += 1
            else:
                highest_seq = record.seq_no

    quality = calculate_mos(summary.mean_delay_ms, summary.packet_loss_percent)
    summary.mos = quality.mos
    summary.r_factor = quality.r_factor
    return summary


def log_trace_summary(
    summary: TraceSummary, logger: LoguruLogger, label: str = "path"
) -> None:
    logger.info(
        f"[{label}] sent={summary.packets_sent} lost={summary.packets_lost} "
        f"({summary.packet_loss_percent:.2f}%) reordered={summary.reordered_packets}"
    )
    logger.info(
        f"[{label}] delay ms: mean={summary.mean_delay_ms:.2f} "
        f"min={summary.min_delay_ms:.2f} p50={summary.p50_delay_ms:.2f} "
        f"p99={summary.p99_delay_ms:.2f} max={summary.max_delay_ms:.2f} "
        f"jitter={summary.jitter_ms:.2f}"
    )
    logger.info(f"[{label}] MOS={summary.mos:.2f} R={summary.r_factor:.1f}")

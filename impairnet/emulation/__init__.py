"""
IP path impairment emulation following the ITU-T G.1050 / TIA-921 model.

This package provides components for:
- Per-millisecond impairment generators for LANs, access links and the core
- Sliding three-second impairment windows and their tick driver
- Packet scheduling through the five path segments
- An arrival-ordered delivery queue behind the put/get packet interface
- Severity profile and speed pattern catalogs
- Trace statistics and voice quality estimates
"""

from impairnet.emulation.calculations import (
    calculate_mos,
    expected_segment_loss_rate,
    log_trace_summary,
    stationary_high_loss_probability,
    summarize_trace,
)
from impairnet.emulation.core import CoreModel
from impairnet.emulation.errors import (
    DepartureOrderError,
    EmulationError,
    InvalidParameterError,
    InvalidProfileError,
    InvalidSpeedPatternError,
    ModelClosedError,
    PayloadTooLargeError,
    QueueCapacityError,
)
from impairnet.emulation.metrics import (
    CoreStatistics,
    DeliveryRecord,
    PathStatistics,
    SegmentStatistics,
    TraceSummary,
    VoiceQuality,
)
from impairnet.emulation.model import PathModel, create_path_model, dump_parameters
from impairnet.emulation.profiles import (
    SPEED_PATTERNS,
    STANDARD_MODELS,
    DeploymentScenario,
    ImpairmentModel,
    LinkType,
    SeverityProfile,
    SpeedPattern,
    get_impairment_model,
    get_speed_pattern,
    occurrence_likelihood,
    resolve_profile,
)
from impairnet.emulation.queue import DeliveryQueue, QueuedPacket
from impairnet.emulation.random_source import RandomSource
from impairnet.emulation.segment import SegmentModel, scale_probability
from impairnet.emulation.trace import TraceRecorder

__all__ = [
    "CoreModel",
    "CoreStatistics",
    "DeliveryQueue",
    "DeliveryRecord",
    "DepartureOrderError",
    "DeploymentScenario",
    "EmulationError",
    "ImpairmentModel",
    "InvalidParameterError",
    "InvalidProfileError",
    "InvalidSpeedPatternError",
    "LinkType",
    "ModelClosedError",
    "PathModel",
    "PathStatistics",
    "PayloadTooLargeError",
    "QueueCapacityError",
    "QueuedPacket",
    "RandomSource",
    "SegmentModel",
    "SegmentStatistics",
    "SeverityProfile",
    "SpeedPattern",
    "SPEED_PATTERNS",
    "STANDARD_MODELS",
    "TraceRecorder",
    "TraceSummary",
    "VoiceQuality",
    "calculate_mos",
    "create_path_model",
    "dump_parameters",
    "expected_segment_loss_rate",
    "get_impairment_model",
    "get_speed_pattern",
    "log_trace_summary",
    "occurrence_likelihood",
    "resolve_profile",
    "scale_probability",
    "stationary_high_loss_probability",
    "summarize_trace",
]

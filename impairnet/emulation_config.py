"""
Dataclass configuration for path emulation runs.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PathConfig:
    """Configuration for the emulated path."""

    # Severity profile name: no_impairment, a, b, ... h
    profile: str = "a"
    # Speed pattern id (1-168)
    speed_pattern: int = 1
    # Packet size in bytes (G.711 20ms frame + RTP/UDP/IP headers)
    packet_size: int = 200
    # Packets per second offered in each direction
    packet_rate: int = 50
    # Use the intercontinental core base delay
    intercontinental: bool = False
    # How far back (seconds) post-core segments look to keep core ordering
    searchback_period: float = 0.020
    # Delivery queue capacity per direction (None for unbounded)
    max_queue_length: Optional[int] = None


@dataclass
class RunConfig:
    """Configuration for the emulation run."""

    # Emulated duration in seconds
    duration: float = 60.0
    # Random seed for reproducibility (None for random)
    seed: Optional[int] = None
    # Output directory for the exported traces
    output_dir: str = "dumps"
    # Interval at which the receiving side polls for arrived packets (seconds)
    poll_interval: float = 0.001
    # Log the resolved profile and speed pattern parameters before running
    dump_parameters: bool = False


@dataclass
class PathEmulationConfig:
    """Complete configuration for a duplex path emulation."""

    path: PathConfig = field(default_factory=PathConfig)
    run: RunConfig = field(default_factory=RunConfig)

"""
Duplex G.1050 path emulation with Hydra configuration.

This script offers a constant-rate packet stream in both directions of an
emulated IP path and records what comes out the far end:
- One-way delay and jitter per packet
- Packet loss and reordering
- Per-segment generator counters
- An E-model voice quality estimate

Each direction is an independently seeded path model; traces are exported
to CSV in the configured output directory.
"""

import csv
import os
import typing as tp
from dataclasses import asdict

import hydra
from hydra.core.config_store import ConfigStore
from loguru import logger
from omegaconf import DictConfig, OmegaConf
from tqdm import tqdm

from impairnet.emulation import (
    DeliveryRecord,
    EmulationError,
    PathModel,
    RandomSource,
    TraceRecorder,
    dump_parameters,
    log_trace_summary,
    summarize_trace,
)
from impairnet.emulation_config import PathConfig, PathEmulationConfig, RunConfig

# Register the config with Hydra
cs = ConfigStore.instance()
cs.store(name="path_emulation_config", node=PathEmulationConfig)


def ensure_dir(directory: str) -> None:
    if not os.path.exists(directory):
        os.makedirs(directory)


def build_model(path: PathConfig, rng: RandomSource) -> PathModel:
    return PathModel(
        path.profile,
        path.speed_pattern,
        path.packet_size,
        path.packet_rate,
        rng=rng,
        intercontinental=path.intercontinental,
        max_queue_length=path.max_queue_length,
        searchback_period=path.searchback_period,
    )


def export_to_csv(records: tp.List[DeliveryRecord], output_path: str) -> None:
    """
    Export a packet trace to a CSV file.

    Args:
        records: Trace records, one per packet
        output_path: Path for output CSV file
    """
    if not records:
        logger.warning("No packets to export")
        return

    rows = []
    for record in records:
        row = asdict(record)
        row["lost"] = record.lost
        row["delay"] = record.delay
        rows.append(row)

    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys())
        writer.writeheader()
        writer.writerows(rows)

    logger.info(f"Exported {len(rows)} records to {output_path}")


def run_emulation(path: PathConfig, run: RunConfig) -> None:
    """
    Run a duplex emulation and export both directions.

    Args:
        path: Path configuration
        run: Run configuration
    """
    ensure_dir(run.output_dir)

    if run.dump_parameters:
        parameters = dump_parameters(path.profile, path.speed_pattern)
        logger.info(f"Resolved path parameters:\n{parameters}")

    # Both directions derive from one seed but share no random state
    root = RandomSource(seed=run.seed)
    recorders = [
        TraceRecorder(build_model(path, root.spawn()), label="a_to_b"),
        TraceRecorder(build_model(path, root.spawn()), label="b_to_a"),
    ]

    steps = int(round(run.duration / run.poll_interval))
    try:
        for step in tqdm(range(steps + 1), desc="Emulating", unit="poll"):
            now = step * run.poll_interval
            for recorder in recorders:
                if now < run.duration:
                    recorder.send_until(now)
                recorder.poll(now)

        for recorder in recorders:
            records = recorder.finish()
            stats = recorder.model.statistics()
            logger.info(
                f"[{recorder.label}] offered={stats.packets_offered} "
                f"lost={stats.packets_lost} ({stats.loss_percent:.2f}%) "
                f"delivered={stats.packets_delivered}"
            )
            for segment in stats.segments:
                logger.info(
                    f"[{recorder.label}] {segment.name}: "
                    f"high loss {100 * segment.high_loss_fraction:.2f}% of time, "
                    f"{100 * segment.slice_loss_fraction:.2f}% of slices lost, "
                    f"{segment.lost_packets} packets lost"
                )
            logger.info(
                f"[{recorder.label}] core: {stats.core.route_flaps} route flaps, "
                f"{stats.core.link_failures} link failures, "
                f"{stats.core.lost_packets} packets lost"
            )

            log_trace_summary(summarize_trace(records), logger, label=recorder.label)
            export_to_csv(
                records, os.path.join(run.output_dir, f"trace_{recorder.label}.csv")
            )
    except EmulationError as e:
        logger.error(f"Emulation failed: {e}")
        raise
    finally:
        for recorder in recorders:
            recorder.model.close()

    logger.info(f"Emulation complete. Traces written to {run.output_dir}")


@hydra.main(
    version_base="1.2",
    config_path="../config",
    config_name="path_emulation",
)
def main(cfg: DictConfig) -> None:
    """Main entry point with Hydra configuration."""
    # Convert OmegaConf to the dataclass
    schema = OmegaConf.structured(PathEmulationConfig)
    cfg = OmegaConf.merge(schema, cfg)

    logger.info("Configuration:")
    logger.info(OmegaConf.to_yaml(cfg))

    config: PathEmulationConfig = OmegaConf.to_object(cfg)
    run_emulation(config.path, config.run)


if __name__ == "__main__":
    main()

"""Monitoring and metrics instrumentation for the HTM inference layer.

Exports custom Prometheus metrics for the stage pipeline.
"""

from htm_inference.monitoring.metrics import (
    anomaly_score_distribution,
    records_processed_total,
    stage_failures_total,
    stage_latency_seconds,
)

__all__ = [
    "records_processed_total",
    "stage_latency_seconds",
    "stage_failures_total",
    "anomaly_score_distribution",
]

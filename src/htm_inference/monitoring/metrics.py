"""Custom Prometheus metrics for the HTM inference layer.

Alert rules worth configuring:
- stage_failures_total (collaborator errors)
- anomaly_score_distribution (shift towards 1.0 means the input stream changed)
"""

from prometheus_client import Counter, Histogram

# === Pipeline Metrics ===

records_processed_total = Counter(
    "records_processed_total",
    "Total inference records threaded through a pipeline",
    ["terminal_stage"],
)
"""
Records processed counter.

Labels:
- terminal_stage: name of the last stage in the pipeline (encoder, spatial_pooler,
  temporal_memory, classifier, anomaly, or none)
"""

stage_latency_seconds = Histogram(
    "stage_latency_seconds",
    "Time spent in a single pipeline stage",
    ["stage"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)
"""
Stage latency histogram.

Buckets cover in-memory algorithms (sub-millisecond to one second).
"""

stage_failures_total = Counter(
    "stage_failures_total",
    "Total stage failures by stage and error type",
    ["stage", "error_type"],
)
"""
Stage failures counter.

Labels:
- stage: stage name
- error_type: stage_input_error, precondition_violation, or the collaborator's exception class
"""

# === Anomaly Metrics ===

anomaly_score_distribution = Histogram(
    "anomaly_score_distribution",
    "Distribution of anomaly scores written to records",
    buckets=[0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)

"""
Stage pipeline driving inference records through a layer.

- collaborators.py: Protocols of the learning algorithms (encoder, SP, TM, classifier, anomaly)
- anomaly.py: Raw anomaly score
- stages.py: Stage adapters writing into the record
- layer.py: RecordPipeline orchestrator
"""

from .anomaly import RawAnomalyScorer, compute_raw_anomaly_score
from .layer import RecordPipeline
from .stages import (
    AnomalyStage,
    ClassifierStage,
    EncoderStage,
    SpatialPoolerStage,
    Stage,
    TemporalMemoryStage,
)

__all__ = [
    # Orchestrator
    "RecordPipeline",
    # Stages
    "Stage",
    "EncoderStage",
    "SpatialPoolerStage",
    "TemporalMemoryStage",
    "ClassifierStage",
    "AnomalyStage",
    # Anomaly
    "RawAnomalyScorer",
    "compute_raw_anomaly_score",
]

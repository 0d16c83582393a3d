"""Integration test fixtures: a fully configured pipeline."""

import pytest

from htm_inference.pipeline.layer import RecordPipeline
from htm_inference.pipeline.stages import (
    AnomalyStage,
    ClassifierStage,
    EncoderStage,
    SpatialPoolerStage,
    TemporalMemoryStage,
)


@pytest.fixture
def full_pipeline(test_settings, scalar_encoder, identity_pooler, shifting_memory, counting_classifier):
    """Encoder -> SP -> TM -> classifier -> anomaly over the 'temp' field."""
    return RecordPipeline(
        [
            EncoderStage({"temp": scalar_encoder}),
            SpatialPoolerStage(identity_pooler),
            TemporalMemoryStage(shifting_memory),
            ClassifierStage(),
            AnomalyStage(),
        ],
        classifiers={"temp": counting_classifier},
        settings=test_settings,
    )

"""Shared test fixtures and configuration for all tests.

Provides settings, deterministic stand-ins for the learning algorithms
and sample classification results.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import pytest

from htm_inference.config import Settings
from htm_inference.models.classification import ClassificationResult
from htm_inference.models.classifier_input import ClassifierInput
from htm_inference.record.record import InferenceRecord


class FakeScalarEncoder:
    """Scalar encoder: `buckets` contiguous buckets, `width` active bits each."""

    def __init__(self, min_val: float = 0.0, max_val: float = 100.0, buckets: int = 10, width: int = 3):
        self.min_val = min_val
        self.max_val = max_val
        self.buckets = buckets
        self.width = width

    def get_bucket_index(self, value: Any) -> int:
        clipped = min(max(float(value), self.min_val), self.max_val)
        span = self.max_val - self.min_val
        return min(int((clipped - self.min_val) / span * self.buckets), self.buckets - 1)

    def encode(self, value: Any) -> list[int]:
        bits = [0] * (self.buckets + self.width - 1)
        start = self.get_bucket_index(value)
        for i in range(start, start + self.width):
            bits[i] = 1
        return bits


class IdentityPooler:
    """Spatial pooler stand-in: active columns are the set bits of the input."""

    def __init__(self):
        self.calls: list[tuple[list[int], bool]] = []

    def compute(self, input_vector: Sequence[int], learn: bool) -> list[int]:
        self.calls.append((list(input_vector), learn))
        return [i for i, bit in enumerate(input_vector) if bit]


class ShiftingMemory:
    """Temporal memory stand-in: shifts every active column by `offset`."""

    def __init__(self, offset: int = 100):
        self.offset = offset

    def compute(self, active_columns: Sequence[int], learn: bool) -> list[int]:
        return [c + self.offset for c in active_columns]


class CountingClassifier:
    """
    Classifier stand-in predicting the bucket frequencies seen so far (step 1).
    """

    def __init__(self):
        self.counts: dict[int, int] = {}
        self.actual_values: dict[int, Any] = {}
        self.calls: list[dict[str, Any]] = []

    def compute(
        self,
        record_num: int,
        classification: Mapping[str, Any],
        pattern: Sequence[int],
        learn: bool,
        infer: bool,
    ) -> ClassificationResult:
        self.calls.append({
            "record_num": record_num,
            "classification": dict(classification),
            "pattern": list(pattern),
            "learn": learn,
            "infer": infer,
        })
        bucket = classification["bucketIdx"]
        if learn:
            self.counts[bucket] = self.counts.get(bucket, 0) + 1
            self.actual_values[bucket] = classification["actValue"]
        size = max(self.counts, default=-1) + 1
        actual_values = [self.actual_values.get(i) for i in range(size)]
        total = sum(self.counts.values()) or 1
        distribution = [self.counts.get(i, 0) / total for i in range(size)]
        return ClassificationResult(actual_values=actual_values, probabilities={1: distribution})


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with metrics disabled.

    Override specific settings in individual tests as needed.
    """
    return Settings(
        APP_NAME="HTM Inference Layer (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        ANOMALY_SCORE_MIN=0.0,
        ANOMALY_SCORE_MAX=1.0,
        LEARN=True,
        INFER=True,
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def record() -> InferenceRecord:
    """Fresh, empty record."""
    return InferenceRecord()


@pytest.fixture
def result_a() -> ClassificationResult:
    return ClassificationResult(
        actual_values=[10.0, 20.0, 30.0],
        probabilities={1: [0.1, 0.7, 0.2]},
    )


@pytest.fixture
def result_b() -> ClassificationResult:
    return ClassificationResult(
        actual_values=[10.0, 20.0, 30.0],
        probabilities={1: [0.6, 0.3, 0.1], 5: [0.0, 0.0, 1.0]},
    )


@pytest.fixture
def temp_input() -> ClassifierInput:
    return ClassifierInput(name="temp", input_value=21.5, bucket_idx=2, encoding=(0, 0, 1, 1, 0))


@pytest.fixture
def create_classifier_input():
    """Factory fixture to create ClassifierInput for a field.

    Usage:
        def test_something(create_classifier_input):
            descriptor = create_classifier_input("humidity", 40.0, bucket_idx=4)
    """
    def _create(
        name: str = "temp",
        input_value: Any = 21.5,
        bucket_idx: int = 2,
        encoding: tuple[int, ...] = (0, 0, 1, 1, 0),
    ) -> ClassifierInput:
        return ClassifierInput(
            name=name,
            input_value=input_value,
            bucket_idx=bucket_idx,
            encoding=encoding,
        )
    return _create


@pytest.fixture
def scalar_encoder() -> FakeScalarEncoder:
    return FakeScalarEncoder()


@pytest.fixture
def identity_pooler() -> IdentityPooler:
    return IdentityPooler()


@pytest.fixture
def shifting_memory() -> ShiftingMemory:
    return ShiftingMemory()


@pytest.fixture
def counting_classifier() -> CountingClassifier:
    return CountingClassifier()

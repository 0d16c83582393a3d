"""
Interfaces of the learning algorithms a layer drives.

The algorithms themselves live elsewhere; stages only need these methods.
Any object with matching methods can be plugged in (structural typing).
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ..models.classification import ClassificationResult


class Encoder(Protocol):
    """Turns a raw field value into a dense binary encoding."""

    def encode(self, value: Any) -> Sequence[int]:
        """Dense 0/1 encoding of `value`."""
        ...

    def get_bucket_index(self, value: Any) -> int:
        """Bucket `value` falls into (the classification target)."""
        ...


class SpatialPooler(Protocol):
    """Maps a dense input vector to a set of active columns."""

    def compute(self, input_vector: Sequence[int], learn: bool) -> Sequence[int]:
        ...


class TemporalMemory(Protocol):
    """Learns sequences of active columns."""

    def compute(self, active_columns: Sequence[int], learn: bool) -> Sequence[int]:
        ...


class Classifier(Protocol):
    """
    Stateful learner mapping an SDR to predicted values for one field.
    
    `classification` is the {"bucketIdx", "actValue"} dict built from the
    field's ClassifierInput.
    """

    def compute(
        self,
        record_num: int,
        classification: Mapping[str, Any],
        pattern: Sequence[int],
        learn: bool,
        infer: bool,
    ) -> ClassificationResult:
        ...


class AnomalyScorer(Protocol):
    """Scores how unexpected the current SDR is given the previous one."""

    def compute(self, active_columns: Sequence[int], previous_columns: Sequence[int]) -> float:
        ...

"""
Stage adapters between the inference record and the learning algorithms.

Each stage reads the fields written by earlier stages and writes its own:
- EncoderStage: layer_input -> classifier_input
- SpatialPoolerStage: classifier_input (or layer_input) -> sdr
- TemporalMemoryStage: sdr -> sdr
- ClassifierStage: classifiers + classifier_input + sdr -> classification
- AnomalyStage: sdr (current and previous) -> anomaly_score

A stage that finds a required field absent raises StageInputError; the
pipeline is then wired in the wrong order or missing a stage.
"""

from collections.abc import Mapping, Sequence
from typing import Optional, Protocol

import structlog

from ..config import settings
from ..exceptions import StageInputError
from ..models.classifier_input import ClassifierInput
from ..record.record import InferenceRecord
from .anomaly import RawAnomalyScorer
from .collaborators import AnomalyScorer, Encoder, SpatialPooler, TemporalMemory

logger = structlog.get_logger(__name__)


class Stage(Protocol):
    """
    Protocol for pipeline stages.
    
    `process` mutates the record in place and returns it. Stages that keep
    per-stream history (AnomalyStage) only advance it when `update_history`
    is true, so branch records can be processed without disturbing it.
    """

    name: str

    def process(self, record: InferenceRecord, update_history: bool = True) -> InferenceRecord:
        ...

    def reset(self) -> None:
        ...


class EncoderStage:
    """Encodes every configured field of a mapping-valued layer input."""

    name = "encoder"

    def __init__(self, encoders: Mapping[str, Encoder]):
        """
        Args:
            encoders: Field name -> encoder. Field order is kept and defines
                the order in which encodings are concatenated downstream.
        """
        if not encoders:
            raise ValueError("EncoderStage needs at least one encoder")
        self.encoders = dict(encoders)

    def process(self, record: InferenceRecord, update_history: bool = True) -> InferenceRecord:
        layer_input = record.layer_input
        if not isinstance(layer_input, Mapping):
            raise StageInputError(
                "Encoder stage expects a mapping of field name to value as layer input",
                stage=self.name,
                missing_field="layer_input",
            )
        
        classifier_input: dict[str, ClassifierInput] = {}
        for field_name, encoder in self.encoders.items():
            if field_name not in layer_input:
                raise StageInputError(
                    f"Layer input has no value for encoded field '{field_name}'",
                    stage=self.name,
                    missing_field=f"layer_input.{field_name}",
                )
            value = layer_input[field_name]
            classifier_input[field_name] = ClassifierInput(
                name=field_name,
                input_value=value,
                bucket_idx=int(encoder.get_bucket_index(value)),
                encoding=tuple(int(bit) for bit in encoder.encode(value)),
            )
        
        logger.debug("Encoded layer input", fields=list(classifier_input))
        return record.set_classifier_input(classifier_input)

    def reset(self) -> None:
        pass


class SpatialPoolerStage:
    """Runs the spatial pooler over the encoded input and stores the active columns."""

    name = "spatial_pooler"

    def __init__(self, spatial_pooler: SpatialPooler, learn: Optional[bool] = None):
        self.spatial_pooler = spatial_pooler
        self.learn = settings.LEARN if learn is None else learn

    def _input_vector(self, record: InferenceRecord) -> Sequence[int]:
        if record.classifier_input is not None:
            vector: list[int] = []
            for descriptor in record.classifier_input.values():
                vector.extend(descriptor.encoding)
            return vector
        # No encoder configured: the layer input already is a dense vector
        if record.layer_input is None:
            raise StageInputError(
                "Spatial pooler has neither classifier input nor layer input",
                stage=self.name,
                missing_field="layer_input",
            )
        return record.layer_input

    def process(self, record: InferenceRecord, update_history: bool = True) -> InferenceRecord:
        active_columns = self.spatial_pooler.compute(self._input_vector(record), self.learn)
        return record.set_sdr(list(active_columns))

    def reset(self) -> None:
        pass


class TemporalMemoryStage:
    """Feeds the current SDR to temporal memory and replaces it with the TM output."""

    name = "temporal_memory"

    def __init__(self, temporal_memory: TemporalMemory, learn: Optional[bool] = None):
        self.temporal_memory = temporal_memory
        self.learn = settings.LEARN if learn is None else learn

    def process(self, record: InferenceRecord, update_history: bool = True) -> InferenceRecord:
        if record.sdr is None:
            raise StageInputError(
                "Temporal memory needs an SDR from an earlier stage",
                stage=self.name,
                missing_field="sdr",
            )
        output = self.temporal_memory.compute(record.sdr, self.learn)
        return record.set_sdr(list(output))

    def reset(self) -> None:
        pass


class ClassifierStage:
    """
    Classifies every field that has both a classifier and a classifier input.
    
    Classifiers come from the record (set once at configuration time by
    the pipeline); results are written back one field at a time.
    """

    name = "classifier"

    def __init__(self, learn: Optional[bool] = None, infer: Optional[bool] = None):
        self.learn = settings.LEARN if learn is None else learn
        self.infer = settings.INFER if infer is None else infer

    def process(self, record: InferenceRecord, update_history: bool = True) -> InferenceRecord:
        if record.classifiers is None:
            raise StageInputError(
                "Classifier stage configured but no classifiers were set",
                stage=self.name,
                missing_field="classifiers",
            )
        if record.classifier_input is None:
            raise StageInputError(
                "Classifier stage needs classifier input from an encoder stage",
                stage=self.name,
                missing_field="classifier_input",
            )
        if record.sdr is None:
            raise StageInputError(
                "Classifier stage needs an SDR from an earlier stage",
                stage=self.name,
                missing_field="sdr",
            )
        
        for field_name, classifier in record.classifiers.items():
            descriptor = record.classifier_input.get(field_name)
            if descriptor is None:
                logger.warning(
                    "No classifier input for classified field, skipping",
                    field=field_name,
                    sequence_number=record.sequence_number,
                )
                continue
            result = classifier.compute(
                record_num=record.sequence_number,
                classification=descriptor.as_classification_dict(),
                pattern=record.sdr,
                learn=self.learn,
                infer=self.infer,
            )
            record.set_classification(field_name, result)
        
        return record

    def reset(self) -> None:
        pass


class AnomalyStage:
    """
    Scores the current SDR against the SDR of the previous pass.
    
    The previous SDR is kept by the stage, so one stage instance must
    serve exactly one input stream.
    """

    name = "anomaly"

    def __init__(self, scorer: Optional[AnomalyScorer] = None):
        self.scorer = scorer or RawAnomalyScorer()
        self._previous_sdr: tuple[int, ...] = ()

    def process(self, record: InferenceRecord, update_history: bool = True) -> InferenceRecord:
        if record.sdr is None:
            raise StageInputError(
                "Anomaly stage needs an SDR from an earlier stage",
                stage=self.name,
                missing_field="sdr",
            )
        score = self.scorer.compute(record.sdr, self._previous_sdr)
        if update_history:
            self._previous_sdr = tuple(record.sdr)
        return record.set_anomaly_score(score)

    def reset(self) -> None:
        self._previous_sdr = ()

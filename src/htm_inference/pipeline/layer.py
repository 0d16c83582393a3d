"""
RecordPipeline: threads one InferenceRecord per input event through an
ordered list of stages.

Usage:
    pipeline = RecordPipeline(
        [EncoderStage(encoders), SpatialPoolerStage(sp), ClassifierStage()],
        classifiers={"temp": temp_classifier},
    )
    inference = pipeline.compute({"temp": 21.5})
    inference.get_classification("temp").most_probable_value(1)

Errors raised by our own code (PreconditionViolation, StageInputError)
propagate unchanged. Anything else raised inside a stage is wrapped in
StageError with the stage name attached.
"""

import time
from collections.abc import Mapping, Sequence
from typing import Any, Optional

import structlog

from ..config import Settings, settings as default_settings
from ..exceptions import InferenceError, PreconditionViolation, StageError, StageInputError
from ..monitoring.metrics import (
    anomaly_score_distribution,
    records_processed_total,
    stage_failures_total,
    stage_latency_seconds,
)
from ..record.inference import InferenceView
from ..record.record import InferenceRecord
from .collaborators import Classifier
from .stages import Stage

logger = structlog.get_logger(__name__)


class RecordPipeline:
    """
    Driving pipeline for one input stream.

    Attributes:
        stages: Stages in execution order
        classifiers: Field name -> classifier, shared by every record
        settings: Application settings
    """

    def __init__(
        self,
        stages: Sequence[Stage],
        classifiers: Optional[Mapping[str, Classifier]] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            stages: Stages in execution order (may be empty)
            classifiers: Classifiers per field; set on every record by reference
            settings: Application settings (defaults to the global instance)
        """
        self.stages = list(stages)
        self.classifiers = classifiers
        self.settings = settings or default_settings
        self._sequence_number = 0

        names = [stage.name for stage in self.stages]
        if len(set(names)) != len(names):
            raise ValueError(f"Stage names must be unique, got {names}")

        logger.info(
            "RecordPipeline initialized",
            stages=names,
            classified_fields=sorted(classifiers) if classifiers else [],
        )

    @property
    def terminal_stage(self) -> str:
        """Name of the last stage, or 'none' for an empty pipeline."""
        return self.stages[-1].name if self.stages else "none"

    def new_record(self) -> InferenceRecord:
        """Empty record carrying the configured anomaly range and classifiers."""
        record = InferenceRecord(
            anomaly_score_range=(
                self.settings.ANOMALY_SCORE_MIN,
                self.settings.ANOMALY_SCORE_MAX,
            )
        )
        if self.classifiers is not None:
            record.set_classifiers(self.classifiers)
        return record

    def compute(self, input_value: Any) -> InferenceView:
        """
        Run one input event through every stage.

        Args:
            input_value: Raw layer input (a field -> value mapping when an
                encoder stage is configured, a dense vector otherwise)

        Returns:
            Read-only view of the populated record

        Raises:
            StageInputError: A stage found a required field absent
            PreconditionViolation: A stage wrote malformed data into the record
            StageError: A collaborator raised
        """
        record = (
            self.new_record()
            .set_sequence_number(self._sequence_number)
            .set_layer_input(input_value)
        )
        self._sequence_number += 1
        return self.process(record, update_history=True).as_inference()

    def process(self, record: InferenceRecord, update_history: bool = False) -> InferenceRecord:
        """
        Thread an existing record through every stage, in order.

        Per-stream stage history (the previous SDR of the anomaly stage) is
        left alone unless `update_history` is true, so branch records can be
        processed between two compute() calls.
        """
        log = logger.bind(sequence_number=record.sequence_number)

        for stage in self.stages:
            log.debug("Running stage", stage=stage.name)
            started = time.perf_counter()
            try:
                stage.process(record, update_history=update_history)
            except InferenceError as e:
                self._record_failure(stage.name, _error_type(e))
                log.warning("Stage rejected record", stage=stage.name, error=str(e))
                raise
            except Exception as e:
                self._record_failure(stage.name, type(e).__name__)
                log.exception("Collaborator failed", stage=stage.name)
                raise StageError(
                    f"Stage '{stage.name}' failed: {e}",
                    stage=stage.name,
                    error_type=type(e).__name__,
                ) from e
            finally:
                if self.settings.PROMETHEUS_ENABLED:
                    stage_latency_seconds.labels(stage=stage.name).observe(
                        time.perf_counter() - started
                    )

        if self.settings.PROMETHEUS_ENABLED:
            records_processed_total.labels(terminal_stage=self.terminal_stage).inc()
            if record.anomaly_score is not None:
                anomaly_score_distribution.observe(record.anomaly_score)

        log.debug(
            "Record processed",
            sdr_size=None if record.sdr is None else len(record.sdr),
            anomaly_score=record.anomaly_score,
        )
        return record

    def branch(self, record: InferenceRecord) -> InferenceRecord:
        """
        Independent record to seed a branch, leaving `record` untouched.

        Run the branch with process(); it does not advance stream history.
        """
        return record.copy()

    def reset(self) -> None:
        """Restart the sequence counter and clear per-stream stage history."""
        self._sequence_number = 0
        for stage in self.stages:
            stage.reset()
        logger.info("RecordPipeline reset", stages=[stage.name for stage in self.stages])

    def _record_failure(self, stage: str, error_type: str) -> None:
        if self.settings.PROMETHEUS_ENABLED:
            stage_failures_total.labels(stage=stage, error_type=error_type).inc()


def _error_type(error: InferenceError) -> str:
    if isinstance(error, StageInputError):
        return "stage_input_error"
    if isinstance(error, PreconditionViolation):
        return "precondition_violation"
    return "inference_error"

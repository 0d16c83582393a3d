"""
InferenceRecord: the carrier threaded through a layer's stage pipeline.

One record is created per input event. Each stage reads the fields set by
earlier stages and writes its own:

| Field            | Written by                         |
|------------------|------------------------------------|
| sequence_number  | driving pipeline                   |
| layer_input      | driving pipeline / first stage     |
| classifier_input | encoding stage                     |
| classifiers      | configuration (once, shared)       |
| sdr              | spatial pooler / temporal memory   |
| classification   | classification stage (per field)   |
| anomaly_score    | anomaly stage                      |

Every optional field is None until written. None means "the producing
stage was never configured", which is distinct from an empty mapping,
an empty SDR or a score of 0.0.
"""

import math
from collections.abc import Mapping, Sequence
from numbers import Integral, Real
from typing import Any, Optional

from ..config import settings
from ..exceptions import PreconditionViolation
from ..models.classification import ClassificationResult
from ..models.classifier_input import ClassifierInput
from .inference import InferenceView


class InferenceRecord:
    """
    Read-write inference record used by stage implementations.

    Mutators return the record itself so pipeline code can chain them:

        record.set_sequence_number(7).set_layer_input({"temp": 21.5})

    Consumers outside the pipeline should receive `as_inference()` instead.
    Not thread-safe: one record is mutated by one pipeline pass at a time.
    """

    def __init__(self, anomaly_score_range: Optional[tuple[float, float]] = None):
        """
        Create an empty record.

        Args:
            anomaly_score_range: Inclusive (min, max) accepted by
                set_anomaly_score. Defaults to the configured range.
        """
        if anomaly_score_range is None:
            anomaly_score_range = (settings.ANOMALY_SCORE_MIN, settings.ANOMALY_SCORE_MAX)
        low, high = anomaly_score_range
        if low > high:
            raise PreconditionViolation(
                "Anomaly score range is empty",
                field="anomaly_score_range",
                invalid_value=anomaly_score_range,
                expected="min <= max",
            )
        self._anomaly_score_range = (low, high)

        self._sequence_number: int = 0
        self._layer_input: Any = None
        self._classifier_input: Optional[Mapping[str, ClassifierInput]] = None
        self._classifiers: Optional[Mapping[str, Any]] = None
        self._sdr: Optional[Sequence[int]] = None
        self._classification: Optional[dict[str, ClassificationResult]] = None
        # False while the classification dict is shared with a copy
        self._owns_classification: bool = True
        self._anomaly_score: Optional[float] = None

    # === Accessors ===

    @property
    def sequence_number(self) -> int:
        """Sequence number of the input event (0 until set)."""
        return self._sequence_number

    @property
    def layer_input(self) -> Any:
        """Raw input of this pass, opaque to the record."""
        return self._layer_input

    @property
    def classifier_input(self) -> Optional[Mapping[str, ClassifierInput]]:
        """Field name -> ClassifierInput, or None if no encoder ran."""
        return self._classifier_input

    @property
    def classifiers(self) -> Optional[Mapping[str, Any]]:
        """Field name -> classifier, or None if classification is not configured."""
        return self._classifiers

    @property
    def sdr(self) -> Optional[Sequence[int]]:
        """Active bit indices written by the most recent SP/TM stage."""
        return self._sdr

    @property
    def classification(self) -> Optional[dict[str, ClassificationResult]]:
        """Field name -> latest ClassificationResult, or None if never classified."""
        return self._classification

    @property
    def anomaly_score(self) -> Optional[float]:
        """Most recent anomaly score, or None if no anomaly stage ran."""
        return self._anomaly_score

    def get_classification(self, field_name: str) -> Optional[ClassificationResult]:
        """
        Latest classification for `field_name`.

        Returns None when the field was never classified, including when no
        classification was written at all.
        """
        if self._classification is None:
            return None
        return self._classification.get(field_name)

    def has_classification(self, field_name: str) -> bool:
        return self._classification is not None and field_name in self._classification

    # === Mutators ===

    def set_sequence_number(self, num: int) -> "InferenceRecord":
        if isinstance(num, bool) or not isinstance(num, Integral):
            raise PreconditionViolation(
                "Sequence number must be an integer",
                field="sequence_number",
                invalid_value=num,
                expected="int",
            )
        self._sequence_number = num
        return self

    def set_layer_input(self, value: Any) -> "InferenceRecord":
        self._layer_input = value
        return self

    def set_classifier_input(self, classifier_input: Mapping[str, ClassifierInput]) -> "InferenceRecord":
        """
        Replace the whole classifier input mapping.

        The encoding stage calls this once per pass. Each key must match
        the `name` of its descriptor. The mapping is stored by reference,
        without conversion to dict; copy() is what duplicates it.
        """
        if not isinstance(classifier_input, Mapping):
            raise PreconditionViolation(
                "Classifier input must be a mapping of field name to ClassifierInput",
                field="classifier_input",
                invalid_value=classifier_input,
                expected="Mapping[str, ClassifierInput]",
            )
        for name, descriptor in classifier_input.items():
            if not isinstance(descriptor, ClassifierInput):
                raise PreconditionViolation(
                    f"Classifier input for field '{name}' is not a ClassifierInput",
                    field="classifier_input",
                    invalid_value=descriptor,
                    expected="ClassifierInput",
                )
            if descriptor.name != name:
                raise PreconditionViolation(
                    f"Classifier input key '{name}' does not match descriptor name '{descriptor.name}'",
                    field="classifier_input",
                    invalid_value=name,
                    expected=descriptor.name,
                )
        self._classifier_input = classifier_input
        return self

    def set_classifiers(self, classifiers: Mapping[str, Any]) -> "InferenceRecord":
        """
        Set the field name -> classifier mapping.

        Classifiers are long-lived learners owned by the layer; the mapping
        is stored by reference and never duplicated.
        """
        if not isinstance(classifiers, Mapping):
            raise PreconditionViolation(
                "Classifiers must be a mapping of field name to classifier",
                field="classifiers",
                invalid_value=classifiers,
                expected="Mapping[str, Classifier]",
            )
        self._classifiers = classifiers
        return self

    def set_sdr(self, sdr: Sequence[int]) -> "InferenceRecord":
        """Replace the SDR. Stored by reference, without coercion."""
        # numpy arrays are not registered Sequences, so check the protocol
        is_sequence = hasattr(sdr, "__len__") and hasattr(sdr, "__getitem__")
        if not is_sequence or isinstance(sdr, (str, bytes, Mapping)):
            raise PreconditionViolation(
                "SDR must be a sequence of active bit indices",
                field="sdr",
                invalid_value=sdr,
                expected="Sequence[int]",
            )
        for idx in sdr:
            if isinstance(idx, bool) or not isinstance(idx, Integral) or idx < 0:
                raise PreconditionViolation(
                    "SDR indices must be non-negative integers",
                    field="sdr",
                    invalid_value=idx,
                    expected="int >= 0",
                )
        self._sdr = sdr
        return self

    def set_classification(self, field_name: str, result: ClassificationResult) -> "InferenceRecord":
        """
        Insert or overwrite the classification for exactly one field.

        Other fields' entries are left untouched. After copy() the first
        write on either record detaches it from the shared mapping.
        """
        if not isinstance(field_name, str) or not field_name:
            raise PreconditionViolation(
                "Field name must be a non-empty string",
                field="classification",
                invalid_value=field_name,
                expected="non-empty str",
            )
        if result is None:
            raise PreconditionViolation(
                f"Classification result for field '{field_name}' is None",
                field="classification",
                expected="ClassificationResult",
            )
        if self._classification is None:
            self._classification = {}
            self._owns_classification = True
        elif not self._owns_classification:
            self._classification = dict(self._classification)
            self._owns_classification = True
        self._classification[field_name] = result
        return self

    def set_anomaly_score(self, score: float) -> "InferenceRecord":
        low, high = self._anomaly_score_range
        if isinstance(score, bool) or not isinstance(score, Real) or math.isnan(score):
            raise PreconditionViolation(
                "Anomaly score must be a real number",
                field="anomaly_score",
                invalid_value=score,
                expected="float",
            )
        if not low <= score <= high:
            raise PreconditionViolation(
                f"Anomaly score {score} outside [{low}, {high}]",
                field="anomaly_score",
                invalid_value=score,
                expected=f"{low} <= score <= {high}",
            )
        self._anomaly_score = score
        return self

    # === Copy / views ===

    def copy(self) -> "InferenceRecord":
        """
        Template a new, independent record from this one.

        The copy gets:
        - a new classifier input dict holding the same descriptors
          (or no classifier input at all if this record has none)
        - the same classifiers, layer input, SDR and classification
          references; the classification mapping is copied on the first
          set_classification of either record
        - the same anomaly score
        - sequence number 0, since it stands for a new event

        The SDR and layer input stay read-shared by convention: callers must
        not mutate them in place while the copy is processed on another
        branch.
        """
        ret_val = InferenceRecord(anomaly_score_range=self._anomaly_score_range)
        if self._classifier_input is not None:
            ret_val._classifier_input = dict(self._classifier_input)
        ret_val._classifiers = self._classifiers
        ret_val._layer_input = self._layer_input
        ret_val._sdr = self._sdr
        ret_val._classification = self._classification
        if self._classification is not None:
            self._owns_classification = False
            ret_val._owns_classification = False
        ret_val._anomaly_score = self._anomaly_score
        return ret_val

    def as_inference(self) -> InferenceView:
        """Read-only view to hand to output sinks."""
        return InferenceView(self)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict snapshot for output sinks (absent fields are None)."""
        classifier_input = None
        if self._classifier_input is not None:
            classifier_input = {
                name: descriptor.model_dump()
                for name, descriptor in self._classifier_input.items()
            }
        classification = None
        if self._classification is not None:
            classification = {
                name: result.model_dump() if hasattr(result, "model_dump") else result
                for name, result in self._classification.items()
            }
        return {
            "sequence_number": self._sequence_number,
            "layer_input": self._layer_input,
            "classifier_input": classifier_input,
            "classifiers": None if self._classifiers is None else sorted(self._classifiers),
            "sdr": None if self._sdr is None else list(self._sdr),
            "classification": classification,
            "anomaly_score": self._anomaly_score,
        }

    def __repr__(self) -> str:
        return (
            f"InferenceRecord("
            f"seq={self._sequence_number}, "
            f"sdr={'unset' if self._sdr is None else len(self._sdr)}, "
            f"classified={[] if self._classification is None else sorted(self._classification)}, "
            f"anomaly={self._anomaly_score})"
        )

"""
Read-only side of the inference record.

Output sinks and other consumers receive an `Inference`: they can read any
field but cannot write one. Absent fields read as None.
"""

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

from ..models.classification import ClassificationResult
from ..models.classifier_input import ClassifierInput

if TYPE_CHECKING:
    from .record import InferenceRecord


@runtime_checkable
class Inference(Protocol):
    """Read-only view of the results of one pass through a layer."""
    
    @property
    def sequence_number(self) -> int: ...
    
    @property
    def layer_input(self) -> Any: ...
    
    @property
    def classifier_input(self) -> Optional[Mapping[str, ClassifierInput]]: ...
    
    @property
    def classifiers(self) -> Optional[Mapping[str, Any]]: ...
    
    @property
    def sdr(self) -> Optional[Sequence[int]]: ...
    
    @property
    def classification(self) -> Optional[Mapping[str, ClassificationResult]]: ...
    
    @property
    def anomaly_score(self) -> Optional[float]: ...
    
    def get_classification(self, field_name: str) -> Optional[ClassificationResult]: ...
    
    def has_classification(self, field_name: str) -> bool: ...


def _frozen(mapping: Optional[Mapping]) -> Optional[Mapping]:
    if mapping is None:
        return None
    return MappingProxyType(mapping)


class InferenceView:
    """
    Concrete read-only wrapper around an InferenceRecord.
    
    Mappings are exposed through MappingProxyType, so a sink holding the
    view cannot mutate the record. The view is live: it reflects later
    writes to the underlying record.
    """
    
    __slots__ = ("_record",)
    
    def __init__(self, record: "InferenceRecord"):
        self._record = record
    
    @property
    def sequence_number(self) -> int:
        return self._record.sequence_number
    
    @property
    def layer_input(self) -> Any:
        return self._record.layer_input
    
    @property
    def classifier_input(self) -> Optional[Mapping[str, ClassifierInput]]:
        return _frozen(self._record.classifier_input)
    
    @property
    def classifiers(self) -> Optional[Mapping[str, Any]]:
        return _frozen(self._record.classifiers)
    
    @property
    def sdr(self) -> Optional[Sequence[int]]:
        sdr = self._record.sdr
        if sdr is None:
            return None
        return tuple(sdr)
    
    @property
    def classification(self) -> Optional[Mapping[str, ClassificationResult]]:
        return _frozen(self._record.classification)
    
    @property
    def anomaly_score(self) -> Optional[float]:
        return self._record.anomaly_score
    
    def get_classification(self, field_name: str) -> Optional[ClassificationResult]:
        return self._record.get_classification(field_name)
    
    def has_classification(self, field_name: str) -> bool:
        return self._record.has_classification(field_name)
    
    def to_dict(self) -> dict[str, Any]:
        return self._record.to_dict()
    
    def __repr__(self) -> str:
        return f"InferenceView({self._record!r})"

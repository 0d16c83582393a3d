"""
Pydantic value types carried by the inference record.

Includes:
- ClassifierInput (per-field encoder output, consumed by classifiers)
- ClassificationResult (per-field classifier output)
"""

from htm_inference.models.classifier_input import ClassifierInput
from htm_inference.models.classification import ClassificationResult

__all__ = [
    "ClassifierInput",
    "ClassificationResult",
]

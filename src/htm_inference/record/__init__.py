"""
The inference record and its read-only view.

- inference.py: Inference protocol + InferenceView (exposed to output sinks)
- record.py: InferenceRecord (read-write, used by stage implementations)
"""

from .inference import Inference, InferenceView
from .record import InferenceRecord

__all__ = [
    "Inference",
    "InferenceView",
    "InferenceRecord",
]

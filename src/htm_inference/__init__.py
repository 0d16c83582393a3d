"""
Inference record carrier for streaming HTM layers.

One InferenceRecord is created per input event and threaded through the
stage pipeline of a layer:
- Encoding (classifier input per field)
- Spatial pooling / temporal memory (SDR)
- Classification (one result per field)
- Anomaly scoring

Architecture: read-only Inference view for sinks + read-write record for stages
"""

__version__ = "0.1.0"

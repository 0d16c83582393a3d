"""
Unit tests for the HTM inference layer.

Test individual components in isolation:
- Value types (ClassifierInput, ClassificationResult)
- InferenceRecord (absence, set/get, overwrite, copy policy, read-only view)
- Stage adapters (each stage with positive/negative cases)
- RecordPipeline (ordering, error wrapping, metrics)
- Exceptions and configuration
"""

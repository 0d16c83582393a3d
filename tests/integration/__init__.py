"""
Integration tests for the HTM inference layer.

Run full pipelines (encoder -> spatial pooler -> temporal memory ->
classifier -> anomaly) over deterministic stand-in algorithms and check
the records delivered to an output sink.
"""

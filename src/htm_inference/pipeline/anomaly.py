"""
Raw anomaly score.

The raw score is the fraction of currently active columns that were not
predicted: 0.0 when everything was predicted, 1.0 when nothing was.
"""

from collections.abc import Iterable, Sequence


def compute_raw_anomaly_score(
    active_columns: Iterable[int],
    prev_predicted_columns: Iterable[int],
) -> float:
    """
    Compute the raw anomaly score.
    
    Args:
        active_columns: Columns active at this timestep
        prev_predicted_columns: Columns predicted at the previous timestep
        
    Returns:
        Score in [0.0, 1.0]; 0.0 when no column is active
    """
    active = set(active_columns)
    if not active:
        return 0.0
    predicted = set(prev_predicted_columns)
    unpredicted = len(active - predicted)
    return unpredicted / len(active)


class RawAnomalyScorer:
    """AnomalyScorer backed by compute_raw_anomaly_score."""

    def compute(self, active_columns: Sequence[int], previous_columns: Sequence[int]) -> float:
        return compute_raw_anomaly_score(active_columns, previous_columns)

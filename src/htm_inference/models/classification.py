"""
Result of a single classifier invocation for one field.

Holds the value each bucket stands for plus, for every prediction step,
the probability distribution over buckets. Written into the record with
set_classification and replaced wholesale on the next call for that field.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ClassificationResult(BaseModel):
    """
    Predicted value distributions for one field.
    
    Attributes:
        actual_values: Value represented by each bucket (index = bucket index)
        probabilities: Prediction step -> probability per bucket
    """
    
    model_config = ConfigDict(frozen=True)
    
    actual_values: list[Any] = Field(
        default_factory=list,
        description="Actual value for each bucket index"
    )
    probabilities: dict[int, list[float]] = Field(
        default_factory=dict,
        description="Step -> distribution over bucket indices"
    )
    
    @model_validator(mode="after")
    def _check_distributions(self) -> "ClassificationResult":
        for step, distribution in self.probabilities.items():
            if step < 0:
                raise ValueError(f"prediction step must be >= 0, got {step}")
            if any(p < 0.0 for p in distribution):
                raise ValueError(f"step {step} has negative probabilities")
            if len(distribution) > len(self.actual_values):
                raise ValueError(
                    f"step {step} distribution covers {len(distribution)} buckets "
                    f"but only {len(self.actual_values)} actual values are known"
                )
        return self
    
    def step_set(self) -> list[int]:
        """Prediction steps present in this result, ascending."""
        return sorted(self.probabilities)
    
    def stats(self, step: int) -> Optional[list[float]]:
        """Probability distribution for `step`, or None if not predicted."""
        return self.probabilities.get(step)
    
    def actual_value(self, bucket_idx: int) -> Any:
        """Value represented by `bucket_idx`, or None if unknown."""
        if 0 <= bucket_idx < len(self.actual_values):
            return self.actual_values[bucket_idx]
        return None
    
    def most_probable_bucket_index(self, step: int) -> Optional[int]:
        """
        Bucket with the highest probability for `step`.
        
        Ties resolve to the lowest bucket index. Returns None when the
        step was not predicted or its distribution is empty.
        """
        distribution = self.probabilities.get(step)
        if not distribution:
            return None
        best = 0
        for idx, p in enumerate(distribution):
            if p > distribution[best]:
                best = idx
        return best
    
    def most_probable_value(self, step: int) -> Any:
        """Actual value of the most probable bucket for `step`."""
        idx = self.most_probable_bucket_index(step)
        if idx is None:
            return None
        return self.actual_value(idx)

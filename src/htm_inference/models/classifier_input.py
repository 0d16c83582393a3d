"""
Classifier input descriptor produced by the encoding stage.

One descriptor per encoded field: the raw value, the bucket the encoder
assigned to it and the dense encoding. The classification stage turns it
into the bucketIdx/actValue dict a classifier expects.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClassifierInput(BaseModel):
    """
    Tuple of {name, input_value, bucket_idx, encoding} for one input field.
    
    Immutable: the record shares descriptor instances between copies.
    """
    
    model_config = ConfigDict(frozen=True)
    
    name: str = Field(..., min_length=1, description="Input field name")
    input_value: Any = Field(..., description="Raw value fed to the encoder")
    bucket_idx: int = Field(..., ge=0, description="Bucket index assigned by the encoder")
    encoding: tuple[int, ...] = Field(
        default=(),
        description="Dense binary encoding of input_value (0/1 per bit)"
    )
    
    @field_validator("encoding")
    @classmethod
    def _check_binary(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        for bit in value:
            if bit not in (0, 1):
                raise ValueError(f"encoding must contain only 0/1 bits, got {bit}")
        return value
    
    def as_classification_dict(self) -> dict[str, Any]:
        """Classification target in the form classifiers consume."""
        return {"bucketIdx": self.bucket_idx, "actValue": self.input_value}
    
    def active_bits(self) -> list[int]:
        """Indices of the set bits in the encoding."""
        return [i for i, bit in enumerate(self.encoding) if bit]

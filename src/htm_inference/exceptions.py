"""
Exceptions raised by the inference record and the stage pipeline.

A field that was never populated is not an error: it reads as None.
These exceptions cover caller misuse (fail fast at the call site) and
collaborator failures surfaced by the pipeline.
"""

from typing import Any


class InferenceError(Exception):
    """
    Base exception for all inference layer errors.
    """
    
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize inference error.
        
        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PreconditionViolation(InferenceError):
    """
    A record mutator was called with malformed input.
    
    Raised instead of storing invalid state (e.g. a None mapping, an
    SDR with negative indices, an anomaly score outside its range).
    """
    
    def __init__(
        self,
        message: str,
        field: str | None = None,
        invalid_value: Any | None = None,
        expected: str | None = None,
    ):
        """
        Initialize precondition violation.
        
        Args:
            message: Error description
            field: Record field the caller tried to write
            invalid_value: The rejected value
            expected: Short description of what is accepted
        """
        details = {}
        if field:
            details["field"] = field
        if invalid_value is not None:
            # Limit size of reprs for huge SDRs
            details["invalid_value"] = repr(invalid_value)[:200]
        if expected:
            details["expected"] = expected
        
        super().__init__(message, details)
        self.field = field


class StageInputError(InferenceError):
    """
    A stage needs a record field that no earlier stage populated.
    
    Usually means the pipeline is configured in the wrong order
    (e.g. classification before encoding).
    """
    
    def __init__(self, message: str, stage: str | None = None, missing_field: str | None = None):
        details = {}
        if stage:
            details["stage"] = stage
        if missing_field:
            details["missing_field"] = missing_field
        
        super().__init__(message, details)
        self.stage = stage
        self.missing_field = missing_field


class StageError(InferenceError):
    """
    A collaborator (encoder, pooler, classifier, ...) failed inside a stage.
    
    The original exception is chained as __cause__.
    """
    
    def __init__(self, message: str, stage: str, error_type: str | None = None):
        details = {"stage": stage}
        if error_type:
            details["error_type"] = error_type
        
        super().__init__(message, details)
        self.stage = stage
        self.error_type = error_type

"""
Custom exceptions for the imagematrix engine.
Provides consistent error reporting across all operators and the pipeline.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# Custom exception classes
class ImageMatrixException(Exception):
    """Base exception for the imagematrix engine."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for host-side error reporting."""
        return {"error": self.message, "details": self.details, "type": self.__class__.__name__}


class InvalidBufferException(ImageMatrixException):
    """Exception raised when a pixel buffer is malformed."""

    def __init__(self, reason: str, shape: Optional[tuple] = None):
        super().__init__(
            message=f"Invalid pixel buffer: {reason}",
            details={"reason": reason, "shape": shape},
        )


class InvalidParameterException(ImageMatrixException, ValueError):
    """Exception raised when an operator parameter is outside its domain."""

    def __init__(self, param: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid parameter {param}={value!r}: {reason}",
            details={"param": param, "value": value, "reason": reason},
        )


class PipelineStepNotFoundException(ImageMatrixException, IndexError):
    """Exception raised when a pipeline step index does not exist."""

    def __init__(self, index: int, length: int):
        super().__init__(
            message=f"Pipeline step not found: {index} (pipeline has {length} steps)",
            details={"index": index, "length": length},
        )


class ProcessingException(ImageMatrixException):
    """Exception raised when an operator fails inside the pipeline."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Processing failed for {operation}: {reason}",
            details={"operation": operation, "reason": reason},
        )


def require(condition: bool, param: str, value: Any, reason: str) -> None:
    """
    Reject a parameter that violates its domain.

    Args:
        condition: Domain check result (True means valid)
        param: Parameter name
        value: Offending value
        reason: Human readable domain description

    Raises:
        InvalidParameterException: If condition is False
    """
    if not condition:
        logger.warning(f"Rejected parameter {param}={value!r}: {reason}")
        raise InvalidParameterException(param, value, reason)


# Standard Messages
class ErrorMessages:
    """Standard error messages."""

    OUT_OF_RANGE = "must be within [{min}, {max}]"
    NON_NEGATIVE = "must be >= 0"
    NOT_FINITE = "must be a finite number"
    LOW_ABOVE_HIGH = "low threshold must not exceed high threshold ({high})"
    OUT_OF_BOUNDS = "coordinate outside {width}x{height} buffer"
    PIPELINE_FULL = "pipeline already holds the maximum of {max} steps"

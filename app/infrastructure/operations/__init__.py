"""Operation result types and status enums.

This module contains standardized result types for calls to external
collaborators, including status enums, result dataclasses, and error
classifiers for HTTP backend exceptions.
"""

from infrastructure.operations.classifiers import classify_http_error
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
]

"""Outcome of a single call to an external collaborator.

Translator backends never raise past their own boundary: every call ends in
an ``OperationResult`` that the gateway inspects to decide between
returning, retrying and failing the job.
"""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass(frozen=True)
class OperationResult:
    """Status plus either a payload or an error description.

    ``retry_after`` is the collaborator's own hint, in seconds, of when a
    transient failure is worth retrying (e.g. an HTTP Retry-After header).
    """

    status: OperationStatus
    message: str = ""
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[float] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_transient(self) -> bool:
        """True when the same call may succeed if repeated."""
        return self.status == OperationStatus.TRANSIENT_ERROR

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> "OperationResult":
        if status == OperationStatus.SUCCESS:
            raise ValueError("error() needs a failure status")
        return cls(status, message=message, error_code=error_code, retry_after=retry_after)

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> "OperationResult":
        """Retryable failure: timeouts, throttling, 5xx, open connections."""
        return cls.error(OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after)

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Failure that repeats identically on retry (bad input, credentials)."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)

    @classmethod
    def not_found(cls, message: str, error_code: str = "NOT_FOUND") -> "OperationResult":
        return cls.error(OperationStatus.NOT_FOUND, message, error_code)

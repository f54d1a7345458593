"""Error classifiers for HTTP backend exceptions.

Converts exceptions raised by the ``requests`` library into standardized
OperationResult objects so every HTTP-based translator backend shares one
mapping of status codes to retry semantics.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = session.post(url, json=body, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

from typing import Optional

import requests

from infrastructure.operations.result import OperationResult

DEFAULT_RETRY_AFTER_SECONDS = 60


def _retry_after(response: Optional[requests.Response]) -> int:
    if response is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    header_value = response.headers.get("Retry-After")
    if header_value:
        try:
            return int(header_value)
        except (ValueError, TypeError):
            pass
    return DEFAULT_RETRY_AFTER_SECONDS


def classify_http_error(exc: Exception, service: str = "HTTP backend") -> OperationResult:
    """Classify ``requests`` exceptions into OperationResult.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Credentials rejected → PERMANENT_ERROR
    - 404: Endpoint not found → NOT_FOUND
    - 413: Payload too large → PERMANENT_ERROR (CONTENT_REJECTED)
    - 5xx: Server error → TRANSIENT_ERROR
    - Other 4xx → PERMANENT_ERROR
    - Timeouts and connection failures → TRANSIENT_ERROR

    Args:
        exc: Exception raised while calling the backend
        service: Name used in the human-friendly message

    Returns:
        OperationResult with appropriate status, message, error_code, and
        retry_after (if applicable)
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"{service} request timed out", error_code="TIMEOUT"
        )

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"{service} connection error: {exc}", error_code="CONNECTION_ERROR"
        )

    if not isinstance(exc, requests.HTTPError):
        # Anything else coming out of the transport is treated as transient
        return OperationResult.transient_error(
            f"{service} error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    response = exc.response
    status_code: Optional[int] = response.status_code if response is not None else None

    if status_code == 429:
        return OperationResult.transient_error(
            f"{service} rate limited",
            error_code="RATE_LIMITED",
            retry_after=_retry_after(response),
        )

    if status_code in (401, 403):
        return OperationResult.permanent_error(
            f"{service} rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code == 404:
        return OperationResult.not_found(f"{service} endpoint not found")

    if status_code == 413:
        return OperationResult.permanent_error(
            f"{service} rejected the payload as too large",
            error_code="CONTENT_REJECTED",
        )

    if status_code and 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"{service} server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    if status_code and 400 <= status_code < 500:
        return OperationResult.permanent_error(
            f"{service} client error ({status_code}): {exc}",
            error_code="HTTP_ERROR",
        )

    return OperationResult.permanent_error(
        f"{service} error: {exc}",
        error_code="UNKNOWN_ERROR",
    )

"""Infrastructure modules for the translation engine.

Centralized infrastructure components:
- configuration: Settings management (settings, RetrySettings, RateLimitSettings)
- logging: Structured logging (get_module_logger, bind_request_context)
- operations: Operation results and error classification
- resilience: Circuit breakers for external translator backends
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Configuration
    "settings",
    # Logging
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]

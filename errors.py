"""
Exception types and failure classification for provisioning runs.

The Azure SDK already retries transport-level hiccups inside its pipeline.
What reaches this code is the failure the pipeline gave up on, or a
long-running operation that ended in a failed state, so the categories
below decide whether another attempt of the whole step is worthwhile.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    ServiceRequestError,
    ServiceResponseError,
)

logger = logging.getLogger("EventHubProvisioner")

T = TypeVar("T")

RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

# 409s that mean "try again later", not "name already taken"
RETRYABLE_CONFLICT_CODES = {
    "AnotherOperationInProgress",
    "OperationInProgress",
    "ResourceGroupBeingDeleted",
    "StorageAccountOperationInProgress",
}


class ConfigurationError(ValueError):
    """Invalid or missing settings, raised before any remote call"""


class ProvisioningStepError(Exception):
    """A provisioning step failed after all allowed attempts"""

    def __init__(self, step: str, cause: Exception, attempts: int = 1):
        self.step = step
        self.cause = cause
        self.attempts = attempts
        super().__init__(f"Step '{step}' failed after {attempts} attempt(s): {cause}")


def _error_code(exc: HttpResponseError) -> Optional[str]:
    error = getattr(exc, 'error', None)
    code = getattr(error, 'code', None)
    return code


def is_retryable(exc: BaseException) -> bool:
    """
    Decide whether a failed remote call is worth another attempt

    Retryable: connection/response failures, throttling, timeouts, 5xx and
    409s caused by another operation still running on the same resource.
    Fatal: authentication, name collisions, missing resources, other 4xx
    and anything that is not an Azure SDK error.
    """
    # Management clients map every 409 to ResourceExistsError, so the code
    # has to be checked before the exception type
    if isinstance(exc, HttpResponseError) and exc.status_code == 409:
        return _error_code(exc) in RETRYABLE_CONFLICT_CODES
    if isinstance(exc, (ClientAuthenticationError, ResourceExistsError, ResourceNotFoundError)):
        return False
    if isinstance(exc, (ServiceRequestError, ServiceResponseError)):
        return True
    if isinstance(exc, HttpResponseError):
        return exc.status_code in RETRYABLE_STATUS_CODES
    return False


def run_step(step: str,
             operation: Callable[[], T],
             max_retries: int = 0,
             backoff_seconds: float = 0.0,
             sleep: Callable[[float], None] = time.sleep) -> T:
    """
    Run one provisioning step, retrying retryable failures

    Args:
        step: Human readable step name used in logs and errors
        operation: Zero-argument callable doing the remote work
        max_retries: Extra attempts allowed for retryable failures
        backoff_seconds: Base delay, doubled after every failed attempt
        sleep: Injected for tests

    Returns:
        Whatever ``operation`` returns

    Raises:
        ProvisioningStepError: wrapping the last failure
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except Exception as e:
            if attempt > max_retries or not is_retryable(e):
                raise ProvisioningStepError(step, e, attempts=attempt) from e

            delay = backoff_seconds * (2 ** (attempt - 1))
            logger.warning(f"Step '{step}' failed with a retryable error "
                           f"(attempt {attempt}/{max_retries + 1}), retrying in {delay:.1f}s: {e}")
            sleep(delay)

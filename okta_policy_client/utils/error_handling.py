"""
Error Handling Module

Provides a unified approach to error handling across the client with:
- Hierarchical exception classes
- Error context enrichment
- Okta API error parsing and classification by HTTP status
- Integration with logging
"""

import logging
import traceback
import json
from enum import Enum
from typing import Optional, Dict, Any, List, Union, Type

from okta_policy_client.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorSeverity(Enum):
    """Classification of error severity."""
    INFO = "info"           # Informational, not a true error
    WARNING = "warning"     # Operation continued but with issues
    ERROR = "error"         # Operation failed, caller can continue
    CRITICAL = "critical"   # Client cannot be used as configured


class BaseError(Exception):
    """
    Base exception for all client errors.

    Provides common functionality for error handling, context enrichment,
    and standardized formatting.
    """

    def __init__(
        self,
        message: str,
        original_exception: Optional[Exception] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error message
            original_exception: Original exception if this wraps another error
            severity: Error severity level
            context: Additional context information
        """
        self.message = message
        self.original_exception = original_exception
        self.severity = severity
        self.context = context or {}
        self.traceback = traceback.format_exc() if original_exception else None

        super().__init__(self.message)

    def add_context(self, **kwargs) -> 'BaseError':
        """
        Add additional context to the error.

        Args:
            **kwargs: Key-value pairs to add to context

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the error to a dictionary representation.

        Returns:
            Dictionary representation of the error
        """
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value
        }

        if self.context:
            result["context"] = self.context

        if self.original_exception:
            result["original_error"] = str(self.original_exception)
            result["original_error_type"] = self.original_exception.__class__.__name__

        return result

    def to_json(self) -> str:
        """Convert the error to a JSON string."""
        return json.dumps(self.to_dict())

    def log(self, logger: Optional[logging.Logger] = None) -> None:
        """
        Log the error with appropriate severity.

        Args:
            logger: Logger to use, defaults to module logger
        """
        log = logger or globals()["logger"]

        if self.severity == ErrorSeverity.INFO:
            log_method = log.info
        elif self.severity == ErrorSeverity.WARNING:
            log_method = log.warning
        elif self.severity == ErrorSeverity.ERROR:
            log_method = log.error
        else:
            log_method = log.critical

        context_str = f" Context: {self.context}" if self.context else ""
        log_method(f"{self.__class__.__name__}: {self.message}{context_str}")

        if self.traceback and self.severity != ErrorSeverity.INFO:
            log.debug(f"Traceback for {self.__class__.__name__}:\n{self.traceback}")


class ValidationError(BaseError):
    """Error raised when a request is rejected locally, before any HTTP call."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field that failed validation
            value: Invalid value (will be safely stringified)
            **kwargs: Additional context
        """
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            if isinstance(value, (str, int, float, bool)):
                context["value"] = str(value)
            else:
                context["value"] = f"{type(value).__name__} instance"

        super().__init__(
            message,
            severity=ErrorSeverity.WARNING,
            context=context,
            **kwargs
        )


class ConfigurationError(BaseError):
    """Error raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            **kwargs
        )


class OktaApiError(BaseError):
    """
    Any failed call against the Okta API.

    Subclasses narrow the failure by HTTP status, but callers that only need to
    tell success from failure can catch this class alone.
    """

    default_error_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        error_summary: Optional[str] = None,
        error_id: Optional[str] = None,
        error_causes: Optional[List[str]] = None,
        endpoint: Optional[str] = None,
        method: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code, None for transport failures
            error_code: Okta error code (e.g. E0000007)
            error_summary: Okta errorSummary
            error_id: Okta errorId, useful when contacting support
            error_causes: errorSummary of each entry in errorCauses
            endpoint: API endpoint that was called
            method: HTTP method used
            **kwargs: Additional arguments
        """
        self.status_code = status_code
        self.error_code = error_code or self.default_error_code
        self.error_summary = error_summary or message
        self.error_id = error_id
        self.error_causes = error_causes or []
        self.endpoint = endpoint
        self.method = method

        context = kwargs.pop("context", {})
        if status_code:
            context["status_code"] = status_code
        if self.error_code:
            context["error_code"] = self.error_code
        if endpoint:
            context["endpoint"] = endpoint
        if method:
            context["method"] = method
        if error_id:
            context["error_id"] = error_id

        super().__init__(
            message,
            context=context,
            **kwargs
        )


class AuthenticationError(OktaApiError):
    """Error raised for API authentication failures (HTTP 401)."""
    default_error_code = "E0000011"


class AuthorizationError(OktaApiError):
    """Error raised when the token lacks permission (HTTP 403)."""
    default_error_code = "E0000006"


class ResourceNotFoundError(OktaApiError):
    """Error raised when a resource is absent or already deleted (HTTP 404)."""
    default_error_code = "E0000007"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("severity", ErrorSeverity.WARNING)
        super().__init__(message, **kwargs)


class RateLimitError(OktaApiError):
    """Error raised when an API rate limit is hit (HTTP 429). Never retried."""
    default_error_code = "E0000047"

    def __init__(
        self,
        message: str,
        retry_after: Optional[int] = None,
        **kwargs
    ):
        self.retry_after = retry_after
        context = kwargs.pop("context", {})
        if retry_after is not None:
            context["retry_after"] = retry_after
        super().__init__(message, context=context, **kwargs)


class ServerError(OktaApiError):
    """Error raised when Okta answers with HTTP 5xx."""
    default_error_code = "E0000009"


class PolicyTypeMismatchError(OktaApiError):
    """A typed fetch returned a policy of a different type than requested."""

    def __init__(
        self,
        message: str,
        expected_type: Optional[str] = None,
        actual_type: Optional[str] = None,
        **kwargs
    ):
        self.expected_type = expected_type
        self.actual_type = actual_type
        context = kwargs.pop("context", {})
        context["expected_type"] = expected_type
        context["actual_type"] = actual_type
        super().__init__(message, context=context, **kwargs)


class UnsupportedResponseError(OktaApiError):
    """
    Okta answered successfully but the body could not be read as the expected
    resource: malformed JSON, or a policy/rule of a type this client does not
    model (e.g. ACCESS_POLICY).
    """
    default_error_code = "INVALID_RESPONSE"


_STATUS_ERRORS: Dict[int, Type[OktaApiError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: ResourceNotFoundError,
    429: RateLimitError,
}


def error_class_for_status(status_code: int) -> Type[OktaApiError]:
    """Pick the OktaApiError subclass matching an HTTP status."""
    if status_code >= 500:
        return ServerError
    return _STATUS_ERRORS.get(status_code, OktaApiError)


def build_api_error(
    status_code: int,
    body: Any,
    endpoint: Optional[str] = None,
    method: Optional[str] = None,
    retry_after: Optional[str] = None,
) -> OktaApiError:
    """
    Turn a failed Okta response into the matching OktaApiError.

    Args:
        status_code: HTTP status of the response
        body: Decoded JSON body (Okta error format) or raw text
        endpoint: API endpoint that was called
        method: HTTP method used
        retry_after: Retry-After header value, for 429 responses

    Returns:
        The error to raise
    """
    error_class = error_class_for_status(status_code)

    error_code = None
    error_summary = None
    error_id = None
    causes: List[str] = []

    # Okta error format: errorCode, errorSummary, errorId, errorCauses
    if isinstance(body, dict):
        error_code = body.get('errorCode')
        error_summary = body.get('errorSummary')
        error_id = body.get('errorId')
        causes = [
            cause.get('errorSummary', str(cause)) if isinstance(cause, dict) else str(cause)
            for cause in body.get('errorCauses') or []
        ]
    elif body:
        error_summary = str(body)

    message = error_summary or f"HTTP {status_code} error"
    if causes:
        message += f" Causes: {', '.join(causes)}"

    kwargs: Dict[str, Any] = dict(
        status_code=status_code,
        error_code=error_code,
        error_summary=error_summary,
        error_id=error_id,
        error_causes=causes,
        endpoint=endpoint,
        method=method,
    )
    if error_class is RateLimitError:
        kwargs["retry_after"] = int(retry_after) if retry_after and retry_after.isdigit() else None

    return error_class(message, **kwargs)


def format_error_for_user(error: Union[BaseError, Exception]) -> str:
    """
    Format an error into a user-friendly message.

    Args:
        error: The error to format

    Returns:
        User-friendly error message
    """
    if isinstance(error, OktaApiError) and error.error_code:
        return f"{error.message} ({error.error_code})"
    if isinstance(error, BaseError):
        return error.message
    return f"An unexpected error occurred: {str(error)}"

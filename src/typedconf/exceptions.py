"""
Structured Exception Hierarchy

Exceptions raised by the accessor pipeline and the introspector, carrying
error codes and contextual data for diagnostics.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class TypedConfException(Exception):
    """
    Base exception class for all typedconf exceptions.

    Provides structured error information including an error code,
    context data and the underlying cause.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(TypedConfException):
    """Raised when configuration-related errors occur."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        value: Any = None,
        error_code: str = "CONFIG_ERROR",
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if key is not None:
            context['key'] = key
        if value is not None:
            context['value'] = str(value)

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            **kwargs
        )
        self.key = key
        self.value = value


class ConfigurationValidationError(ConfigurationError, ValueError):
    """
    Raised when a configuration value violates a constraint.

    Raised on read or write the moment an assertion fails, so callers
    loading configuration at start-up abort instead of running with an
    invalid value.
    """

    def __init__(
        self,
        message: str,
        key: str,
        value: Any,
        constraint: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if constraint:
            context['constraint'] = constraint

        super().__init__(
            message,
            key=key,
            value=value,
            error_code="CONFIG_VALIDATION_ERROR",
            context=context,
            **kwargs
        )
        self.constraint = constraint


class FieldAccessError(TypedConfException):
    """Raised when the introspector cannot read a declared field."""

    def __init__(
        self,
        message: str,
        field_name: str,
        owner: Optional[type] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        context['field_name'] = field_name
        if owner is not None:
            context['owner'] = owner.__qualname__

        super().__init__(
            message=message,
            error_code="FIELD_ACCESS_ERROR",
            context=context,
            **kwargs
        )
        self.field_name = field_name
        self.owner = owner

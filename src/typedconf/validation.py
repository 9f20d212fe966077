"""
Configuration validation utilities.

Assertion factories return callables taking ``(key, value)`` that raise
``ConfigurationValidationError`` on violation, so they can be passed
positionally to any accessor.
"""

from typing import Any, Callable, Collection, Iterable, TypeVar

from .exceptions import ConfigurationValidationError
from .units import SizeInBytes, TimeDuration

T = TypeVar("T")

Assertion = Callable[[str, T], None]

INT_MIN = -(1 << 31)
INT_MAX = (1 << 31) - 1


def require_min(minimum: int) -> Assertion:
    """Require ``value >= minimum``."""
    def assertion(key: str, value: int) -> None:
        if value < minimum:
            raise ConfigurationValidationError(
                f"{key} = {value} < min = {minimum}", key, value, f"min = {minimum}")
    return assertion


def require_max(maximum: int) -> Assertion:
    """Require ``value <= maximum``."""
    def assertion(key: str, value: int) -> None:
        if value > maximum:
            raise ConfigurationValidationError(
                f"{key} = {value} > max = {maximum}", key, value, f"max = {maximum}")
    return assertion


def require_non_negative_time_duration() -> Assertion:
    def assertion(key: str, value: TimeDuration) -> None:
        if value.is_negative():
            raise ConfigurationValidationError(
                f"{key} = {value} is negative.", key, value, "non-negative duration")
    return assertion


def require_min_size(minimum: int) -> Assertion:
    """Require the numeric size of a ``SizeInBytes`` to be at least ``minimum`` bytes."""
    at_least = require_min(minimum)

    def assertion(key: str, value: SizeInBytes) -> None:
        at_least(key, value.size)
    return assertion


def require_non_negative_size() -> Assertion:
    return require_min_size(0)


def require_subclass(base: type) -> Assertion:
    def assertion(key: str, value: type) -> None:
        if not issubclass(value, base):
            raise ConfigurationValidationError(
                f"{key} = {value.__module__}.{value.__qualname__} is not a subclass of "
                f"{base.__module__}.{base.__qualname__}", key, value, f"subclass of {base.__qualname__}")
    return assertion


def require_one_of(choices: Collection[Any]) -> Assertion:
    def assertion(key: str, value: Any) -> None:
        if value not in choices:
            allowed = ", ".join(str(c) for c in choices)
            raise ConfigurationValidationError(
                f"{key} = {value} is not one of [{allowed}]", key, value, f"one of [{allowed}]")
    return assertion


def _to_int_exact(value: int) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise OverflowError("integer overflow")
    return value


def require_int() -> Callable[[str, int], int]:
    """
    Narrow a 64-bit value to a signed 32-bit int.

    Returns:
        A function of ``(key, value)`` returning the narrowed value

    Raises (from the returned function):
        ConfigurationValidationError: If the value does not fit in 32 bits
    """
    def narrow(key: str, value: int) -> int:
        try:
            return _to_int_exact(value)
        except OverflowError as e:
            raise ConfigurationValidationError(
                f"Failed to cast {key} = {value} to int.", key, value,
                f"{INT_MIN} <= value <= {INT_MAX}", cause=e) from e
    return narrow


def apply_assertions(key: str, value: T, assertions: Iterable[Assertion]) -> None:
    """Apply assertions in order; the first failure propagates."""
    for assertion in assertions:
        assertion(key, value)

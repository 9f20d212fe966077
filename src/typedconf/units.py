"""
Semantic value types for configuration.

Byte sizes and time durations parsed from their human-readable text forms.
"""

import re
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Tuple, Union


_BINARY_PREFIXES = {
    "k": 1 << 10,
    "m": 1 << 20,
    "g": 1 << 30,
    "t": 1 << 40,
    "p": 1 << 50,
    "e": 1 << 60,
}

_SIZE_PATTERN = re.compile(r"^([+-]?\d+)\s*([kmgtpe]?)b?$", re.IGNORECASE)
_DURATION_PATTERN = re.compile(r"^([+-]?\d+)\s*([a-zμ]*)$", re.IGNORECASE)


@dataclass(frozen=True)
class SizeInBytes:
    """A size in bytes that remembers the text it was parsed from."""
    size: int
    input: str = field(compare=False)

    @classmethod
    def value_of(cls, value: Union[int, str]) -> "SizeInBytes":
        """
        Parse a size such as ``"10MB"``, ``"512k"`` or ``4096``.

        Prefixes are binary (``k`` is 1024) and a trailing ``b`` is optional.

        Raises:
            ValueError: If the text is not a valid size
        """
        if isinstance(value, int):
            return cls(value, str(value))

        text = value.strip()
        match = _SIZE_PATTERN.match(text)
        if match is None:
            raise ValueError(f"Failed to parse input {value!r} as a size in bytes")

        number, prefix = match.groups()
        multiplier = _BINARY_PREFIXES[prefix.lower()] if prefix else 1
        return cls(int(number) * multiplier, text)

    def __str__(self) -> str:
        return self.input


class TimeUnit(Enum):
    """Time units with their nanosecond factor and accepted symbols."""
    NANOSECONDS = (1, ("ns", "nanos", "nanosecond", "nanoseconds"))
    MICROSECONDS = (1_000, ("us", "μs", "micros", "microsecond", "microseconds"))
    MILLISECONDS = (1_000_000, ("ms", "millis", "millisecond", "milliseconds"))
    SECONDS = (1_000_000_000, ("s", "sec", "secs", "second", "seconds"))
    MINUTES = (60 * 1_000_000_000, ("min", "mins", "m", "minute", "minutes"))
    HOURS = (3600 * 1_000_000_000, ("h", "hr", "hrs", "hour", "hours"))
    DAYS = (86400 * 1_000_000_000, ("d", "day", "days"))

    def __init__(self, nanos: int, symbols: Tuple[str, ...]):
        self.nanos = nanos
        self.symbols = symbols

    @property
    def symbol(self) -> str:
        return self.symbols[0]

    @classmethod
    def from_symbol(cls, symbol: str) -> "TimeUnit":
        lowered = symbol.lower()
        for unit in cls:
            if lowered in unit.symbols:
                return unit
        raise ValueError(f"Unknown time unit: {symbol!r}")


@dataclass(frozen=True, eq=False)
class TimeDuration:
    """A duration expressed as an integral amount of a time unit."""
    duration: int
    unit: TimeUnit = TimeUnit.MILLISECONDS

    @classmethod
    def value_of(
        cls,
        value: Union[int, str],
        default_unit: TimeUnit = TimeUnit.MILLISECONDS
    ) -> "TimeDuration":
        """
        Parse a duration such as ``"10s"``, ``"100ms"`` or ``"5 min"``.

        A bare number is interpreted in ``default_unit``.

        Raises:
            ValueError: If the text is not a valid duration
        """
        if isinstance(value, int):
            return cls(value, default_unit)

        match = _DURATION_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f"Failed to parse input {value!r} as a time duration")

        number, symbol = match.groups()
        unit = TimeUnit.from_symbol(symbol) if symbol else default_unit
        return cls(int(number), unit)

    def is_negative(self) -> bool:
        return self.duration < 0

    def to_nanos(self) -> int:
        return self.duration * self.unit.nanos

    def to_seconds(self) -> float:
        return self.to_nanos() / TimeUnit.SECONDS.nanos

    def to_timedelta(self) -> timedelta:
        return timedelta(microseconds=self.to_nanos() / TimeUnit.MICROSECONDS.nanos)

    def to(self, unit: TimeUnit) -> "TimeDuration":
        """Convert to another unit, truncating toward zero."""
        nanos = self.to_nanos()
        converted = abs(nanos) // unit.nanos
        return TimeDuration(-converted if nanos < 0 else converted, unit)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeDuration):
            return NotImplemented
        return self.to_nanos() == other.to_nanos()

    def __hash__(self) -> int:
        return hash(self.to_nanos())

    def __str__(self) -> str:
        return f"{self.duration}{self.unit.symbol}"

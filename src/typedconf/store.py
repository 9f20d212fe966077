"""
Raw configuration store contract.

The typed accessors never read or write storage themselves; callers pass
bound methods of a store implementing this interface as raw getters and
setters. Each getter returns the configured value for the key, or the
supplied default when the key is unset.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .units import SizeInBytes, TimeDuration


class RawConfigurationStore(ABC):
    """Abstract untyped key-value store consumed by the typed accessors."""

    @abstractmethod
    def get_boolean(self, key: str, default: bool) -> bool:
        pass

    @abstractmethod
    def get_int(self, key: str, default: int) -> int:
        pass

    @abstractmethod
    def get_long(self, key: str, default: int) -> int:
        pass

    @abstractmethod
    def get_file(self, key: str, default: Path) -> Path:
        pass

    @abstractmethod
    def get(self, key: str, default: str) -> str:
        """Get the raw string value."""
        pass

    @abstractmethod
    def get_size_in_bytes(self, key: str, default: SizeInBytes) -> SizeInBytes:
        pass

    @abstractmethod
    def get_time_duration(self, key: str, default: TimeDuration) -> TimeDuration:
        pass

    @abstractmethod
    def set_boolean(self, key: str, value: bool) -> None:
        pass

    @abstractmethod
    def set_int(self, key: str, value: int) -> None:
        pass

    @abstractmethod
    def set_long(self, key: str, value: int) -> None:
        pass

    @abstractmethod
    def set_file(self, key: str, value: Path) -> None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set the raw string value."""
        pass

    @abstractmethod
    def set_time_duration(self, key: str, value: TimeDuration) -> None:
        pass

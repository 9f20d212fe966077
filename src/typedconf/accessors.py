"""
Typed Configuration Accessors

Generic read/write wrappers around raw getter and setter callables bound to
a key-value store. Reads fetch (or default), log and validate; writes
validate, store and log. Type-specific wrappers prepend the implicit
assertions of their value type.
"""

import importlib
import inspect
import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .exceptions import ConfigurationValidationError
from .net import SocketAddress, create_socket_address
from .units import SizeInBytes, TimeDuration
from .validation import (
    Assertion,
    apply_assertions,
    require_min,
    require_non_negative_size,
    require_non_negative_time_duration
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Getter = Callable[[str, T], T]
Setter = Callable[[str, T], None]
Resolver = Callable[[str], SocketAddress]
ClassLoader = Callable[[str], type]


def log_get(key: str, value, default_value, log: Optional[logging.Logger] = None) -> None:
    # classified by equality; a custom value equal to the default reads as "default"
    source = "default" if value == default_value else "custom"
    (log or logger).info(
        f"{key} = {value} ({source})",
        extra={"config_key": key, "config_value": str(value), "config_source": source}
    )


def log_set(key: str, value, log: Optional[logging.Logger] = None) -> None:
    (log or logger).debug(
        f"set {key} = {value}",
        extra={"config_key": key, "config_value": str(value)}
    )


def get_value(
    getter: Getter,
    key: str,
    default_value: T,
    *assertions: Assertion,
    logger: Optional[logging.Logger] = None
) -> T:
    """
    Read a value through a raw getter.

    Args:
        getter: Raw getter returning the stored value or the default
        key: Configuration key
        default_value: Value used when the key is unset
        *assertions: Validations applied in order to the resolved value
        logger: Logger for the read line, the module logger if omitted

    Returns:
        The resolved value

    Raises:
        ConfigurationValidationError: On the first failing assertion
    """
    value = getter(key, default_value)
    log_get(key, value, default_value, logger)
    apply_assertions(key, value, assertions)
    return value


def set_value(
    setter: Setter,
    key: str,
    value: T,
    *assertions: Assertion,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Validate a value and write it through a raw setter.

    Raises:
        ConfigurationValidationError: On the first failing assertion, before
            anything is stored
    """
    apply_assertions(key, value, assertions)
    setter(key, value)
    log_set(key, value, logger)


def get_boolean(getter: Getter, key: str, default_value: bool, *assertions: Assertion,
                logger: Optional[logging.Logger] = None) -> bool:
    return get_value(getter, key, default_value, *assertions, logger=logger)


def get_int(getter: Getter, key: str, default_value: int, *assertions: Assertion,
            logger: Optional[logging.Logger] = None) -> int:
    return get_value(getter, key, default_value, *assertions, logger=logger)


def get_long(getter: Getter, key: str, default_value: int, *assertions: Assertion,
             logger: Optional[logging.Logger] = None) -> int:
    return get_value(getter, key, default_value, *assertions, logger=logger)


def get_file(getter: Getter, key: str, default_value: Path, *assertions: Assertion,
             logger: Optional[logging.Logger] = None) -> Path:
    return get_value(getter, key, default_value, *assertions, logger=logger)


def get_string(getter: Getter, key: str, default_value: str, *assertions: Assertion,
               logger: Optional[logging.Logger] = None) -> str:
    return get_value(getter, key, default_value, *assertions, logger=logger)


def get_size_in_bytes(getter: Getter, key: str, default_value: SizeInBytes, *assertions: Assertion,
                      logger: Optional[logging.Logger] = None) -> SizeInBytes:
    """Read a size; negative sizes are always rejected."""
    return get_value(getter, key, default_value, require_non_negative_size(), *assertions,
                     logger=logger)


def get_time_duration(getter: Getter, key: str, default_value: TimeDuration, *assertions: Assertion,
                      logger: Optional[logging.Logger] = None) -> TimeDuration:
    """Read a duration; negative durations are always rejected."""
    return get_value(getter, key, default_value, require_non_negative_time_duration(), *assertions,
                     logger=logger)


def get_socket_address(
    string_getter: Getter,
    key: str,
    default_value: str,
    *assertions: Assertion,
    resolver: Resolver = create_socket_address,
    logger: Optional[logging.Logger] = None
) -> SocketAddress:
    """
    Read an address string and resolve it into a socket address.

    Raises:
        ConfigurationValidationError: If an assertion fails or the resolver
            rejects the address text
    """
    text = get_value(string_getter, key, default_value, *assertions, logger=logger)
    try:
        return resolver(text)
    except ValueError as e:
        raise ConfigurationValidationError(
            f"Failed to resolve {key} = {text} to a socket address.", key, text,
            "host:port address", cause=e) from e


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def load_class(path: str) -> type:
    """
    Load a class from its dotted ``module.QualName`` path, e.g.
    ``typedconf.logging_setup.JsonFormatter`` or ``pkg.mod.Outer.Inner``.

    Raises:
        ValueError: If no importable module prefix names a class
        ImportError: If a matching module fails to import
    """
    parts = path.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # only a missing prefix means "try a shorter module name"
            if e.name is None or not (module_name == e.name or module_name.startswith(e.name + ".")):
                raise
            continue
        for part in parts[split:]:
            try:
                obj = getattr(obj, part)
            except AttributeError as e:
                raise ValueError(f"{module_name} has no attribute {part!r} in {path!r}") from e
        if not inspect.isclass(obj):
            raise ValueError(f"{path!r} is not a class")
        return obj
    raise ValueError(f"No importable module in {path!r}")


def get_class(
    string_getter: Getter,
    key: str,
    default_value: type,
    *assertions: Assertion,
    loader: ClassLoader = load_class,
    logger: Optional[logging.Logger] = None
) -> type:
    """
    Read a dotted class path and load the class it names.

    The default is stored and logged as its qualified name. Assertions act on
    the loaded class.

    Raises:
        ConfigurationValidationError: If the class cannot be loaded or an
            assertion fails
    """
    text = get_value(string_getter, key, qualified_name(default_value), logger=logger)
    try:
        cls = loader(text)
    except (ImportError, ValueError) as e:
        raise ConfigurationValidationError(
            f"Failed to load class {key} = {text}.", key, text, "module.ClassName", cause=e) from e
    apply_assertions(key, cls, assertions)
    return cls


def set_boolean(setter: Setter, key: str, value: bool, *assertions: Assertion,
                logger: Optional[logging.Logger] = None) -> None:
    set_value(setter, key, value, *assertions, logger=logger)


def set_int(setter: Setter, key: str, value: int, *assertions: Assertion,
            logger: Optional[logging.Logger] = None) -> None:
    set_value(setter, key, value, *assertions, logger=logger)


def set_long(setter: Setter, key: str, value: int, *assertions: Assertion,
             logger: Optional[logging.Logger] = None) -> None:
    set_value(setter, key, value, *assertions, logger=logger)


def set_file(setter: Setter, key: str, value: Path, *assertions: Assertion,
             logger: Optional[logging.Logger] = None) -> None:
    set_value(setter, key, value, *assertions, logger=logger)


def set_string(setter: Setter, key: str, value: str, *assertions: Assertion,
               logger: Optional[logging.Logger] = None) -> None:
    set_value(setter, key, value, *assertions, logger=logger)


def set_size_in_bytes(string_setter: Setter, key: str, value: SizeInBytes, *assertions: Assertion,
                      logger: Optional[logging.Logger] = None) -> None:
    """
    Validate the numeric size and store the original text, so ``"10MB"``
    is written back as ``"10MB"`` rather than its byte count.

    The assertions receive ``value.size``.
    """
    apply_assertions(key, value.size, (require_min(0),) + assertions)
    set_value(string_setter, key, value.input, logger=logger)


def set_time_duration(setter: Setter, key: str, value: TimeDuration, *assertions: Assertion,
                      logger: Optional[logging.Logger] = None) -> None:
    set_value(setter, key, value, require_non_negative_time_duration(), *assertions,
              logger=logger)

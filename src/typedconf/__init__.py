"""
typedconf - typed accessors over an untyped key-value configuration store

Converts raw stored values into semantic types, validates them on every
read and write, and dumps configuration-key classes as documentation.
"""

__version__ = "0.1.0"

from .accessors import (
    get_value,
    set_value,
    get_boolean,
    get_int,
    get_long,
    get_file,
    get_string,
    get_size_in_bytes,
    get_time_duration,
    get_socket_address,
    get_class,
    load_class,
    set_boolean,
    set_int,
    set_long,
    set_file,
    set_string,
    set_size_in_bytes,
    set_time_duration
)

from .validation import (
    require_min,
    require_max,
    require_int,
    require_one_of,
    require_non_negative_size,
    require_min_size,
    require_subclass,
    require_non_negative_time_duration
)

from .exceptions import (
    TypedConfException,
    ConfigurationError,
    ConfigurationValidationError,
    FieldAccessError
)

from .units import SizeInBytes, TimeDuration, TimeUnit
from .net import SocketAddress, create_socket_address
from .store import RawConfigurationStore
from .introspection import print_all

__all__ = [
    # Accessors
    'get_value',
    'set_value',
    'get_boolean',
    'get_int',
    'get_long',
    'get_file',
    'get_string',
    'get_size_in_bytes',
    'get_time_duration',
    'get_socket_address',
    'get_class',
    'load_class',
    'set_boolean',
    'set_int',
    'set_long',
    'set_file',
    'set_string',
    'set_size_in_bytes',
    'set_time_duration',

    # Validation
    'require_min',
    'require_max',
    'require_int',
    'require_one_of',
    'require_non_negative_size',
    'require_min_size',
    'require_subclass',
    'require_non_negative_time_duration',

    # Exceptions
    'TypedConfException',
    'ConfigurationError',
    'ConfigurationValidationError',
    'FieldAccessError',

    # Types
    'SizeInBytes',
    'TimeDuration',
    'TimeUnit',
    'SocketAddress',
    'create_socket_address',
    'RawConfigurationStore',

    # Introspection
    'print_all',
]

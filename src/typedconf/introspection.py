"""
Convention-Based Configuration Introspection

Renders the configuration surface of a class as indented text by reading
its declared fields. Fields are paired purely by name suffix:

- ``FOO_KEY`` with ``FOO_DEFAULT`` becomes ``key: <key> (<type>, default=<default>)``
- ``FOO_PARAMETER`` with ``FOO_CLASS`` becomes ``parameter: <name> (<class>)``
- any other field becomes ``constant: <name> = <value>``

The dump is best-effort: a missing sibling or an unreadable field becomes a
``WARNING:`` line and processing continues.
"""

import dataclasses
import inspect
import logging
from typing import Any, Callable, ClassVar, List, Set, Tuple, get_origin

from .exceptions import FieldAccessError

logger = logging.getLogger(__name__)

Sink = Callable[[str], None]

INDENT = "  "
WARNING = "WARNING: "

KEY, DEFAULT = "KEY", "DEFAULT"
PARAMETER, CLASS = "PARAMETER", "CLASS"


def print_all(conf_class: type, out: Sink = print) -> None:
    """
    Print every configuration field of ``conf_class`` and its nested classes.

    Args:
        conf_class: Class whose fields describe configuration
        out: Line sink, ``print`` by default
    """
    _print_class(conf_class, out, out)


def _print_class(conf_class: type, banner_out: Sink, field_out: Sink) -> None:
    banner_out("")
    banner_out(f"******* {conf_class.__qualname__} *******")

    for name, is_static in declared_fields(conf_class):
        print_field(conf_class, field_out, name, is_static)

    nested_out = _indented(banner_out)
    for nested in nested_classes(conf_class):
        _print_class(nested, nested_out, _indented(nested_out))


def _indented(out: Sink) -> Sink:
    def indented(line: str) -> None:
        out(INDENT + line if line else line)
    return indented


def print_field(conf_class: type, out: Sink, name: str, is_static: bool = True) -> None:
    """Print a single declared field of ``conf_class``."""
    if not is_static:
        logger.debug(f"Skipping non-static field {_describe(conf_class, name)}")
        out(f"{WARNING}Found non-static field {_describe(conf_class, name)}")
        return

    if print_key(conf_class, out, name, KEY, DEFAULT, _describe_default):
        return
    if print_key(conf_class, out, name, PARAMETER, CLASS, _describe_class):
        return

    try:
        out(f"constant: {name} = {render_field(conf_class, name)}")
    except FieldAccessError as e:
        logger.debug(f"Skipping constant {name}: {e}")
        out(f"{WARNING}Failed to access {_describe(conf_class, name)}")


def print_key(
    conf_class: type,
    out: Sink,
    name: str,
    key_suffix: str,
    default_suffix: str,
    describe_default: Callable[[type, str], str]
) -> bool:
    """
    Print a ``<key_suffix>``/``<default_suffix>`` pair if ``name`` belongs to one.

    Returns:
        True if the field was handled, including silently skipped
        ``<default_suffix>`` fields, False if it is not part of such a pair
    """
    if name.endswith("_" + default_suffix):
        return True
    if not name.endswith("_" + key_suffix):
        return False

    try:
        line = f"{key_suffix.lower()}: {render_field(conf_class, name)}"
    except FieldAccessError as e:
        logger.debug(f"Cannot read {name}: {e}")
        out(f"{WARNING}Failed to access {name}")
        line = f"{key_suffix.lower()}: {name} is not public"

    default_name = name[:-len(key_suffix)] + default_suffix
    if default_name not in _static_field_names(conf_class):
        logger.debug(f"No {default_suffix} sibling {default_name} for {_describe(conf_class, name)}")
        out(f"{WARNING}{default_suffix} not found for field {_describe(conf_class, name)}")
        detail = f"{default_suffix} not found"
    else:
        try:
            detail = describe_default(conf_class, default_name)
        except FieldAccessError as e:
            logger.debug(f"Cannot read {default_name}: {e}")
            out(f"{WARNING}Failed to access {default_name}")
            detail = f"{default_name} is not public"

    out(f"{line} ({detail})")
    return True


def _describe_default(conf_class: type, default_name: str) -> str:
    value = read_field(conf_class, default_name)
    return f"{type(value).__name__}, default={_render_value(conf_class, default_name, value)}"


def _describe_class(conf_class: type, class_name: str) -> str:
    return render_field(conf_class, class_name)


def render_field(conf_class: type, name: str) -> str:
    """
    Read a class-level field and render it as dump text.

    Raises:
        FieldAccessError: If the field cannot be read or rendered
    """
    return _render_value(conf_class, name, read_field(conf_class, name))


def _render_value(conf_class: type, name: str, value: Any) -> str:
    try:
        return _render(value)
    except Exception as e:
        # any failure inside a user __str__ downgrades to a warning line
        raise FieldAccessError(f"Failed to render {name}", name, conf_class, cause=e) from e


def read_field(conf_class: type, name: str) -> Any:
    """
    Read a class-level field.

    Raises:
        FieldAccessError: If the field is non-public or cannot be read
    """
    if name.startswith("_"):
        raise FieldAccessError(f"{name} is not public", name, conf_class)
    try:
        return getattr(conf_class, name)
    except AttributeError as e:
        raise FieldAccessError(f"Failed to read {name}", name, conf_class, cause=e) from e


def declared_fields(conf_class: type) -> List[Tuple[str, bool]]:
    """
    List the fields declared directly on ``conf_class`` as ``(name, is_static)``.

    Annotation-only declarations have no class attribute to order them by;
    they are placed ahead of the next annotated class attribute. Slots are
    instance fields.

    Functions, static and class methods and properties are not fields, so a
    ``FOO_CLASS`` holding a factory function is skipped and ``FOO_PARAMETER``
    reports its ``CLASS`` sibling as not found.
    """
    annotations = inspect.get_annotations(conf_class)
    instance_names = _instance_field_names(conf_class, annotations)
    attributes = [name for name, attr in vars(conf_class).items() if _is_field(conf_class, name, attr)]

    ordered: List[Tuple[str, bool]] = []
    pending: List[str] = []
    emitted = 0
    for name in annotations:
        if name in attributes:
            index = attributes.index(name)
            ordered.extend((n, n not in instance_names) for n in attributes[emitted:index])
            ordered.extend((n, False) for n in pending)
            pending.clear()
            emitted = max(emitted, index)
        elif name in instance_names:
            pending.append(name)

    ordered.extend((n, n not in instance_names) for n in attributes[emitted:])
    ordered.extend((n, False) for n in pending)
    return ordered


def nested_classes(conf_class: type) -> List[type]:
    """Public classes defined inside ``conf_class``, in declaration order."""
    return [
        attr for name, attr in vars(conf_class).items()
        if _is_nested_class(conf_class, name, attr) and not name.startswith("_")
    ]


def _is_nested_class(conf_class: type, name: str, attr: Any) -> bool:
    return inspect.isclass(attr) and attr.__qualname__ == f"{conf_class.__qualname__}.{name}"


def _is_field(conf_class: type, name: str, attr: Any) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return False
    # class-valued fields such as FOO_CLASS are fields; classes defined inside are not
    if _is_nested_class(conf_class, name, attr):
        return False
    if inspect.isclass(attr) or inspect.ismemberdescriptor(attr):
        return True
    # methods, static/class methods and properties
    return not hasattr(type(attr), "__get__")


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _instance_field_names(conf_class: type, annotations: dict) -> Set[str]:
    names = {
        name for name, annotation in annotations.items()
        if name not in vars(conf_class) and not _is_class_var(annotation)
    }
    names.update(name for name, attr in vars(conf_class).items() if inspect.ismemberdescriptor(attr))
    if dataclasses.is_dataclass(conf_class):
        names.update(f.name for f in dataclasses.fields(conf_class))
    return names


def _static_field_names(conf_class: type) -> Set[str]:
    return {name for name, is_static in declared_fields(conf_class) if is_static}


def _describe(conf_class: type, name: str) -> str:
    return f"{conf_class.__qualname__}.{name}"


def _render(value: Any) -> str:
    if inspect.isclass(value):
        return f"{value.__module__}.{value.__qualname__}"
    return str(value)

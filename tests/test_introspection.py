"""
Tests for the convention-based configuration dump.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, List

import pytest

from typedconf.introspection import declared_fields, nested_classes, print_all, read_field, render_field
from typedconf.exceptions import FieldAccessError
from typedconf.units import SizeInBytes


def dump(conf_class) -> List[str]:
    lines: List[str] = []
    print_all(conf_class, lines.append)
    return lines


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


class FooKeys:
    FOO_KEY = "foo.bar"
    FOO_DEFAULT = 42


class MissingDefaultKeys:
    FOO_KEY = "foo.bar"


class ParameterKeys:
    CODEC_PARAMETER = "server.codec"
    CODEC_CLASS = SizeInBytes


class Outer:
    NAME = "outer"

    class Inner:
        BAZ = "qux"

        class Deepest:
            LEVEL = 3


class WithInstanceField:
    PORT_KEY = "server.port"
    PORT_DEFAULT = 8080
    name: str
    shared: ClassVar[int] = 1


@dataclass
class DataclassKeys:
    port: int = 8080
    host: str = "localhost"


class PrivateKeys:
    _SECRET_KEY = "server.secret"
    _SECRET_DEFAULT = "changeme"
    TOKEN_KEY = "server.token"
    _TOKEN_DEFAULT = "abc"
    _HIDDEN = 1


class DefaultFirstKeys:
    SIZE_DEFAULT = SizeInBytes.value_of("4MB")
    SIZE_KEY = "server.size"


class SlottedKeys:
    __slots__ = ("port",)
    NAME = "slotted"


class Unprintable:
    def __str__(self):
        raise RuntimeError("no text form")


class BadValueKeys:
    BROKEN = Unprintable()
    COUNT_KEY = "server.count"
    COUNT_DEFAULT = Unprintable()
    AFTER = "still dumped"


class WithMethods:
    LIMIT = 10

    @staticmethod
    def limit(store):
        return store

    @property
    def value(self):
        return 1

    def method(self):
        return 2


class TestPrintAll:
    """Test the rendered dump."""

    def test_banner(self):
        """Test that the dump opens with an empty line and a banner."""
        lines = dump(FooKeys)
        assert lines[0] == ""
        assert lines[1] == "******* FooKeys *******"

    def test_key_default_pair(self):
        """Test that a KEY/DEFAULT pair renders with the default's type."""
        lines = dump(FooKeys)
        assert "key: foo.bar (int, default=42)" in lines
        assert not any("FOO_DEFAULT" in line for line in lines)

    def test_missing_default_warns_without_raising(self):
        """Test that a KEY without DEFAULT degrades to a warning and placeholder."""
        lines = dump(MissingDefaultKeys)

        index = lines.index("key: foo.bar (DEFAULT not found)")
        assert lines[index - 1] == "WARNING: DEFAULT not found for field MissingDefaultKeys.FOO_KEY"

    def test_parameter_class_pair(self):
        """Test that a PARAMETER/CLASS pair renders the class by qualified name."""
        lines = dump(ParameterKeys)
        assert "parameter: server.codec (typedconf.units.SizeInBytes)" in lines
        assert not any(line.startswith("constant:") for line in lines)

    def test_missing_class(self):
        """Test that a PARAMETER without CLASS degrades like a missing default."""
        class Orphan:
            CODEC_PARAMETER = "server.codec"

        lines = dump(Orphan)
        assert lines[-2].startswith("WARNING: CLASS not found for field")
        assert lines[-1] == "parameter: server.codec (CLASS not found)"

    def test_constant(self):
        """Test that an unpaired field renders as a constant."""
        assert "constant: NAME = outer" in dump(Outer)

    def test_default_declared_before_key(self):
        """Test that pairing does not depend on which sibling comes first."""
        lines = dump(DefaultFirstKeys)
        assert lines[2:] == ["key: server.size (SizeInBytes, default=4MB)"]

    def test_nested_indentation(self):
        """Test that nested banners and their fields are indented."""
        lines = dump(Outer)

        outer_banner = lines.index("******* Outer *******")
        inner_banner = lines.index("  ******* Outer.Inner *******")
        constant = lines.index("    constant: BAZ = qux")

        assert indent_of(lines[outer_banner]) == 0
        assert indent_of(lines[inner_banner]) == indent_of(lines[outer_banner]) + 2
        assert indent_of(lines[constant]) == indent_of(lines[inner_banner]) + 2
        assert lines[inner_banner - 1] == ""

    def test_doubly_nested_indentation(self):
        """Test that indentation applies recursively."""
        lines = dump(Outer)
        assert "    ******* Outer.Inner.Deepest *******" in lines
        assert "      constant: LEVEL = 3" in lines

    def test_nested_output_follows_fields(self):
        """Test that nested classes are dumped after the parent's fields."""
        lines = dump(Outer)
        assert lines.index("constant: NAME = outer") < lines.index("  ******* Outer.Inner *******")

    def test_non_static_field_warns(self):
        """Test that annotation-only fields are reported and excluded."""
        lines = dump(WithInstanceField)

        assert "WARNING: Found non-static field WithInstanceField.name" in lines
        assert "key: server.port (int, default=8080)" in lines
        assert "constant: shared = 1" in lines
        assert not any("constant: name" in line for line in lines)

    def test_dataclass_fields_are_non_static(self):
        """Test that dataclass fields with defaults are still instance fields."""
        lines = dump(DataclassKeys)

        assert lines[2:] == [
            "WARNING: Found non-static field DataclassKeys.port",
            "WARNING: Found non-static field DataclassKeys.host",
        ]

    def test_private_fields_are_not_public(self):
        """Test that underscore fields are reported as not accessible."""
        lines = dump(PrivateKeys)

        assert "WARNING: Failed to access _SECRET_KEY" in lines
        assert "key: _SECRET_KEY is not public (str, default=changeme)" not in lines
        assert "WARNING: Failed to access _SECRET_DEFAULT" in lines
        assert "key: _SECRET_KEY is not public (_SECRET_DEFAULT is not public)" in lines
        assert "key: server.token (DEFAULT not found)" in lines
        assert "WARNING: Failed to access PrivateKeys._HIDDEN" in lines
        assert not any("constant: _HIDDEN" in line for line in lines)

    def test_methods_are_ignored(self):
        """Test that methods and properties are not treated as fields."""
        assert dump(WithMethods)[2:] == ["constant: LIMIT = 10"]

    def test_slots_are_non_static(self):
        """Test that slot-declared fields are reported as non-static."""
        lines = dump(SlottedKeys)

        assert "WARNING: Found non-static field SlottedKeys.port" in lines
        assert "constant: NAME = slotted" in lines
        assert not any("constant: port" in line for line in lines)

    def test_unrenderable_values_do_not_abort(self):
        """Test that a value whose str() raises degrades to a warning."""
        lines = dump(BadValueKeys)

        assert "WARNING: Failed to access BadValueKeys.BROKEN" in lines
        assert "WARNING: Failed to access COUNT_DEFAULT" in lines
        assert "key: server.count (COUNT_DEFAULT is not public)" in lines
        assert lines[-1] == "constant: AFTER = still dumped"

    def test_downgraded_failures_logged_at_debug(self, caplog, reset_typedconf_logger):
        """Test that every warning line is mirrored by a DEBUG record."""
        caplog.set_level(logging.DEBUG, logger="typedconf.introspection")

        dump(MissingDefaultKeys)
        dump(WithInstanceField)

        messages = [r.getMessage() for r in caplog.records if r.name == "typedconf.introspection"]
        assert all(r.levelno == logging.DEBUG for r in caplog.records if r.name == "typedconf.introspection")
        assert any("FOO_DEFAULT" in m and "MissingDefaultKeys.FOO_KEY" in m for m in messages)
        assert any("WithInstanceField.name" in m for m in messages)

    def test_missing_class_logged_at_debug(self, caplog, reset_typedconf_logger):
        caplog.set_level(logging.DEBUG, logger="typedconf.introspection")

        class Orphan:
            CODEC_PARAMETER = "server.codec"

        dump(Orphan)
        assert any("CODEC_CLASS" in r.getMessage() for r in caplog.records)

    def test_default_sink_is_stdout(self, capsys):
        """Test that the dump prints to standard output by default."""
        print_all(FooKeys)
        assert "key: foo.bar (int, default=42)" in capsys.readouterr().out.splitlines()


class TestFieldDiscovery:
    """Test field and nested class discovery."""

    def test_declaration_order(self):
        """Test that fields keep their declaration order."""
        assert declared_fields(WithInstanceField) == [
            ("PORT_KEY", True),
            ("PORT_DEFAULT", True),
            ("name", False),
            ("shared", True),
        ]

    def test_nested_classes_exclude_aliases(self):
        """Test that only classes defined inside are recursed into."""
        class Holder:
            Alias = SizeInBytes

            class Own:
                pass

        assert nested_classes(Holder) == [Holder.Own]

    def test_read_field(self):
        assert read_field(FooKeys, "FOO_DEFAULT") == 42

    def test_read_private_field(self):
        with pytest.raises(FieldAccessError) as exc_info:
            read_field(PrivateKeys, "_HIDDEN")
        assert exc_info.value.field_name == "_HIDDEN"

    def test_read_missing_field(self):
        with pytest.raises(FieldAccessError):
            read_field(FooKeys, "NOPE")

    def test_slot_declaration_order(self):
        assert ("port", False) in declared_fields(SlottedKeys)

    def test_render_field_failure(self):
        with pytest.raises(FieldAccessError) as exc_info:
            render_field(BadValueKeys, "BROKEN")
        assert isinstance(exc_info.value.cause, RuntimeError)

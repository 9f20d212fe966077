"""
Tests for the typedconf command line.
"""

import pytest

from typedconf.cli import build_parser, main, resolve_target
from typedconf.logging_setup import LoggingConfigKeys


class TestResolveTarget:
    """Test resolution of module:Class targets."""

    def test_top_level_class(self):
        assert resolve_target("typedconf.logging_setup:LoggingConfigKeys") is LoggingConfigKeys

    def test_nested_class(self):
        assert resolve_target("typedconf.logging_setup:LoggingConfigKeys.File") is LoggingConfigKeys.File

    @pytest.mark.parametrize("target", [
        "typedconf.logging_setup",
        "typedconf.logging_setup:",
        ":LoggingConfigKeys",
        "typedconf.logging_setup:Missing",
        "typedconf.logging_setup:LOG_LEVELS",
    ])
    def test_invalid(self, target):
        with pytest.raises(ValueError):
            resolve_target(target)

    def test_missing_module(self):
        with pytest.raises(ImportError):
            resolve_target("typedconf.no_such_module:Keys")


class TestMain:
    """Test the dump command end to end."""

    def test_dump(self, capsys, reset_typedconf_logger):
        """Test that the dump is written to standard output."""
        exit_code = main(["dump", "typedconf.logging_setup:LoggingConfigKeys"])

        out = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert "******* LoggingConfigKeys *******" in out
        assert "key: typedconf.logging.output (str, default=console)" in out

    def test_unresolvable_target(self, capsys, reset_typedconf_logger):
        """Test that a bad target exits with status 2 and a message."""
        exit_code = main(["dump", "typedconf.no_such_module:Keys"])

        captured = capsys.readouterr()
        assert exit_code == 2
        assert "cannot resolve typedconf.no_such_module:Keys" in captured.err
        assert captured.out == ""

    def test_log_options(self, reset_typedconf_logger):
        main(["dump", "typedconf.logging_setup:LoggingConfigKeys", "--log-level", "DEBUG"])
        assert reset_typedconf_logger.level == 10

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

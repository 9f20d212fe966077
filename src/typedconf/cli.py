"""
Command line entry point.

Usage examples:

  # Dump the configuration keys of a class
  typedconf dump typedconf.logging_setup:LoggingConfigKeys

  # Dump a nested class, logging at DEBUG in JSON
  python -m typedconf dump mypkg.conf:ServerKeys.Rpc --log-level DEBUG --log-format json

Exit codes:
  0 = dump written
  2 = target could not be imported or resolved
"""

import argparse
import importlib
import inspect
import sys
from typing import List, Optional

from .introspection import print_all
from .logging_setup import LOG_LEVELS, LogFormat, LoggingConfiguration, configure_logging


def resolve_target(target: str) -> type:
    """
    Resolve ``package.module:Class`` or ``package.module:Outer.Inner``.

    Raises:
        ValueError: If the target is malformed or does not name a class
        ImportError: If the module cannot be imported
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Target must look like 'package.module:Class', got {target!r}")

    obj = importlib.import_module(module_name)
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ValueError(f"{target!r} has no attribute {part!r}") from e

    if not inspect.isclass(obj):
        raise ValueError(f"{target!r} is not a class")
    return obj


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typedconf",
        description="Typed configuration key utilities"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    dump = subparsers.add_parser("dump", help="Print the configuration keys declared by a class")
    dump.add_argument("target", help="Class to dump, as package.module:Class")
    dump.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS)
    dump.add_argument("--log-format", default=LogFormat.PRETTY.value,
                      choices=[f.value for f in LogFormat])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(LoggingConfiguration(level=args.log_level, format=args.log_format))

    try:
        conf_class = resolve_target(args.target)
    except (ImportError, ValueError) as e:
        print(f"typedconf: cannot resolve {args.target}: {e}", file=sys.stderr)
        return 2

    print_all(conf_class)
    return 0

"""Main entry point for the affordance CLI."""
from __future__ import annotations

import asyncio
import importlib
import logging
import os
import sys
from typing import Any

from affordance.cli import __version__
from affordance.config import settings
from affordance.kernel.codegen import to_code
from affordance.kernel.collection import CollectionDefinition, define_collection
from affordance.kernel.types import CodegenOptions
from affordance.kernel.writer import generate_and_write

logger = logging.getLogger(__name__)


class CliError(Exception):
    """A user-facing error: printed to stderr, exit status 1."""


def print_help():
    """Print help message."""
    print(f"""
affordance v{__version__}

Usage:
  affordance [options] <command> <module:Target>

Commands:
  codegen           Print (or write) the resolved config as Python source
  describe          Print a plain-text summary of the collection

Target:
  module:Target     A pydantic model class, an ObjectNode, or a
                    CollectionDefinition, e.g. myapp.models:Product

Codegen options:
  --out PATH        Write to PATH, only if the content changed
  --diff-only       Emit only what differs from inference
  --export-name N   Name of the exported config (default: {settings.AFFORDANCE_EXPORT_NAME})
  --indent N        Spaces per indent level (default: {settings.AFFORDANCE_CODEGEN_INDENT})
  --no-header       Omit the module docstring
  --no-imports      Omit the CollectionConfig import

Options:
  -h, --help        Show this help
  -v, --version     Show version

Environment:
  AFFORDANCE_CODEGEN_INDENT   Default indent
  AFFORDANCE_INLINE_WIDTH     Max width of a one-line collection literal
  AFFORDANCE_EXPORT_NAME      Default export name
  AFFORDANCE_LOG_LEVEL        Log level (default: WARNING)

Examples:
  affordance describe myapp.models:Product
  affordance codegen myapp.models:Product --out myapp/product_config.py
  affordance codegen myapp.models:Product --diff-only --no-header
""")


def parse_args(args: list[str]) -> dict:
    """
    Parse command line arguments.

    Returns dict with:
        command: str | None (codegen, describe)
        target: str | None
        out: str | None
        diff_only: bool
        export_name: str | None
        indent: int | None
        header: bool
        imports: bool
        show_help: bool
        show_version: bool
    """
    result = {
        "command": None,
        "target": None,
        "out": None,
        "diff_only": False,
        "export_name": None,
        "indent": None,
        "header": True,
        "imports": True,
        "show_help": False,
        "show_version": False,
    }

    def value_for(option: str, i: int) -> str:
        if i + 1 >= len(args):
            raise CliError(f"{option} requires a value")
        return args[i + 1]

    i = 0
    while i < len(args):
        arg = args[i]

        if arg in ("codegen", "describe") and result["command"] is None:
            result["command"] = arg
        elif arg == "--out":
            result["out"] = value_for(arg, i)
            i += 1
        elif arg == "--export-name":
            result["export_name"] = value_for(arg, i)
            i += 1
        elif arg == "--indent":
            raw = value_for(arg, i)
            try:
                result["indent"] = int(raw)
            except ValueError:
                raise CliError(f"--indent expects an integer, got {raw!r}") from None
            i += 1
        elif arg == "--diff-only":
            result["diff_only"] = True
        elif arg == "--no-header":
            result["header"] = False
        elif arg == "--no-imports":
            result["imports"] = False
        elif arg in ("--help", "-h"):
            result["show_help"] = True
        elif arg in ("--version", "-v"):
            result["show_version"] = True
        elif arg.startswith("-"):
            raise CliError(f"Unknown option: {arg}")
        elif result["command"] is not None and result["target"] is None:
            result["target"] = arg
        else:
            raise CliError(f"Unknown command: {arg}")

        i += 1

    return result


def load_collection(target: str) -> CollectionDefinition:
    """Import `module:Target` and turn it into a CollectionDefinition."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise CliError(f"Target must look like module:Target, got {target!r}")

    # Targets are usually project modules, importable from the working directory.
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise CliError(f"Cannot import {module_name}: {e}") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise CliError(f"{module_name} has no attribute {attr}") from None

    if isinstance(obj, CollectionDefinition):
        return obj
    try:
        return define_collection(obj)
    except TypeError as e:
        raise CliError(str(e)) from e


def run(args: dict) -> int:
    """Execute a parsed command. Returns the exit status."""
    if args["command"] is None:
        raise CliError("No command given")
    if args["target"] is None:
        raise CliError(f"{args['command']} requires a module:Target")

    collection = load_collection(args["target"])

    if args["command"] == "describe":
        print(collection.describe())
        return 0

    options = CodegenOptions(
        header=args["header"],
        imports=args["imports"],
        export_name=args["export_name"],
        indent=args["indent"],
        diff_only=args["diff_only"],
    )

    try:
        if args["out"] is None:
            sys.stdout.write(to_code(collection, options))
            return 0

        result = asyncio.run(generate_and_write(collection, args["out"], options))
    except ValueError as e:
        raise CliError(str(e)) from e
    print(f"{result.reason}: {result.file_path}")
    return 0


def main():
    """Main entry point."""
    logging.basicConfig(
        level=settings.AFFORDANCE_LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args = parse_args(sys.argv[1:])

        if args["show_help"]:
            print_help()
            return

        if args["show_version"]:
            print(f"affordance {__version__}")
            return

        sys.exit(run(args))
    except CliError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Run 'affordance --help' for usage.", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        logger.debug("Write failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

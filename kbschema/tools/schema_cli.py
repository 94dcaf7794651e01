"""
Schema CLI tool for kbschema.

This tool inspects a schema and formats records against it:
- levels: Print the dependency-ordered class levels
- snapshot: Export the schema to JSON with its fingerprint
- format: Format a JSON record against a class
- routes: Print the route of every exposed class

Usage:
    kbschema levels
    kbschema snapshot > schema.lock.json
    kbschema format PositionalVariant '{"reference1": "#1:2", ...}' --ignore-missing
    kbschema routes

Invariants:
    - Output is deterministic (sorted JSON)
    - Invalid records and unknown classes cause a non-zero exit code

How to change safely:
    - Add new commands, don't modify existing ones
    - Keep output format stable for CI parsing
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from typing import Any, Optional

from ..config import Settings
from ..definitions import load_default_schema
from ..errors import KbSchemaError
from ..logging_utils import configure_logging
from ..schema import SchemaRegistry

logger = logging.getLogger(__name__)


class SchemaCLI:
    """CLI commands over a schema registry.

    Example:
        >>> cli = SchemaCLI(load_default_schema())
        >>> print(cli.levels())  # Prints JSON levels
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self.registry = registry

    def levels(self) -> str:
        return json.dumps(self.registry.split_class_levels(), indent=2)

    def snapshot(self) -> str:
        """Export schema to JSON.

        Returns:
            JSON string holding the schema and its fingerprint
        """
        output = {
            "version": 1,
            "fingerprint": self.registry.fingerprint,
            "schema": self.registry.to_dict(),
        }
        return json.dumps(output, indent=2, sort_keys=True, default=str)

    def format(self, class_name: str, record_json: str, **options: Any) -> str:
        """Format a JSON record against a class.

        Raises:
            KbSchemaError: If the record does not fit the class
            ValueError: If the record is not a JSON object
        """
        record = json.loads(record_json)
        if not isinstance(record, dict):
            raise ValueError("The record must be a JSON object")
        formatted = self.registry.format_record(class_name, record, **options)
        return json.dumps(formatted, indent=2, sort_keys=True, default=str)

    def routes(self) -> str:
        routes = {
            model.route_name: model.name
            for model in self.registry.get_models()
            if not model.embedded
        }
        return json.dumps(routes, indent=2, sort_keys=True)


def _load_registry(module_path: Optional[str], settings: Settings) -> SchemaRegistry:
    """Load a schema registry from a module or the default catalogue.

    Args:
        module_path: Python module exposing 'registry' or 'get_registry()'
        settings: Settings used for the default catalogue
    """
    if module_path:
        module = importlib.import_module(module_path)
        if hasattr(module, "registry"):
            return module.registry
        if hasattr(module, "get_registry"):
            return module.get_registry()
        raise ValueError(f"Module {module_path} has no 'registry' or 'get_registry()'")
    return load_default_schema(settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kbschema", description="kbschema schema tool")
    parser.add_argument("--module", help="Python module containing the schema registry")
    parser.add_argument("--log-level", help="Log level (default from KBSCHEMA_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("levels", help="Print dependency-ordered class levels")
    subparsers.add_parser("snapshot", help="Export schema to JSON")
    subparsers.add_parser("routes", help="Print route to class mapping")

    format_parser = subparsers.add_parser("format", help="Format a JSON record against a class")
    format_parser.add_argument("class_name", help="Class to format the record as")
    format_parser.add_argument("record", help="Record as a JSON object")
    format_parser.add_argument(
        "--ignore-missing", action="store_true", help="Allow missing mandatory attributes"
    )
    format_parser.add_argument(
        "--ignore-extra", action="store_true", help="Allow undeclared attributes"
    )
    format_parser.add_argument(
        "--keep-extra", action="store_true", help="Keep undeclared attributes in the output"
    )
    format_parser.add_argument(
        "--no-defaults", action="store_true", help="Do not fill default or generated values"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for schema tool."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        cli = SchemaCLI(_load_registry(args.module, settings))
        if args.command == "levels":
            print(cli.levels())
        elif args.command == "snapshot":
            print(cli.snapshot())
        elif args.command == "routes":
            print(cli.routes())
        elif args.command == "format":
            print(
                cli.format(
                    args.class_name,
                    args.record,
                    drop_extra=not args.keep_extra,
                    add_defaults=not args.no_defaults,
                    ignore_missing=args.ignore_missing,
                    ignore_extra=args.ignore_extra,
                )
            )
    except (KbSchemaError, ValueError) as err:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
